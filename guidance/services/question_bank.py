import logging

from guidance.constants import (
    HIGHLIGHT_DURATION_MS,
    OPTION_LETTERS,
    QUESTION_BANK_PER_PAGE_DEFAULT,
    QUESTION_BANK_PER_PAGE_OPTIONS,
    QUESTION_BANK_SORT_DEFAULT,
    SEARCH_DEBOUNCE_MS,
    SHOW_ALL,
)
from guidance.state import PageState, Preferences
from guidance.utils.query_state import QueryState
from guidance.utils.selection import Selection

from .admission_api import unwrap_list

logger = logging.getLogger(__name__)

PAGE = "question-bank"
PAGE_PATH = "/guidance/question-bank"
TABLE_MINIMIZED_PREFERENCE = "question_bank_table_minimized"
FILTER_KEYS = ("category", "sort", "per_page", "search", "page")

OPTION_A_REQUIRED = "Option A is required"
INVALID_CORRECT_ANSWER = "Please select a valid correct answer from the available options"
NOTHING_TO_ARCHIVE = "Please select questions to archive"
ARCHIVE_PROMPT = "Are you sure you want to archive {count} questions?"
ARCHIVE_ONE_PROMPT = "Are you sure you want to archive this question?"


class QuestionGuardError(Exception):
    pass


def page_state(session) -> PageState:
    return PageState(session, PAGE)


def available_option_letters(question: dict) -> list:
    """Letters (A-E) of the options that actually carry text."""
    letters = []
    for index, letter in enumerate(OPTION_LETTERS, start=1):
        value = question.get(f"option{index}")
        if value and str(value).strip():
            letters.append(letter)
    return letters


def check_question(question: dict) -> None:
    option_a = question.get("option1")
    if not option_a or not str(option_a).strip():
        raise QuestionGuardError(OPTION_A_REQUIRED)
    if question.get("correct_answer") not in available_option_letters(question):
        raise QuestionGuardError(INVALID_CORRECT_ANSWER)


def items_per_page_options(count: int) -> list:
    options = [o for o in QUESTION_BANK_PER_PAGE_OPTIONS if o <= count or o == 50]
    if not options:
        options = [5]
    if count > 0:
        options.append(SHOW_ALL)
    return options


def category_count(category: str, category_counts: dict, total: int) -> int:
    if not category:
        return total
    return int((category_counts or {}).get(category) or 0)


def current_filters(query_state: QueryState) -> dict:
    return {
        "category": query_state.get("category", ""),
        "sort": query_state.get("sort", QUESTION_BANK_SORT_DEFAULT),
        "search": query_state.get("search", ""),
        "per_page": _int_or(query_state.get("per_page"), QUESTION_BANK_PER_PAGE_DEFAULT),
        "page": _int_or(query_state.get("page"), 1),
    }


def _int_or(raw, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def has_active_filters(filters: dict) -> bool:
    return bool(
        filters["category"]
        or filters["sort"] != QUESTION_BANK_SORT_DEFAULT
        or filters["per_page"] != QUESTION_BANK_PER_PAGE_DEFAULT
        or filters["search"]
    )


def navigate(query_state: QueryState, **updates) -> QueryState:
    """Apply filter changes; every change goes back to page 1."""
    return query_state.without("questionId").with_updates(page=1, **updates)


def clear_filters(query_state: QueryState) -> QueryState:
    return navigate(
        query_state,
        category=None,
        sort=QUESTION_BANK_SORT_DEFAULT,
        per_page=QUESTION_BANK_PER_PAGE_DEFAULT,
        search=None,
    )


def table_minimized(session) -> bool:
    return bool(Preferences(session).get(TABLE_MINIMIZED_PREFERENCE, False))


def set_table_minimized(session, value: bool) -> bool:
    Preferences(session).set(TABLE_MINIMIZED_PREFERENCE, bool(value))
    return bool(value)


def build_page(client, session, query_state: QueryState) -> dict:
    highlight_id = query_state.get("questionId")
    echoed = query_state.without("questionId")
    filters = current_filters(echoed)

    params = {k: v for k, v in echoed.as_dict().items() if k in FILTER_KEYS}
    payload = client.get("/guidance/questions", params=params) or {}
    questions_page = payload.get("questions", {}) if isinstance(payload, dict) else payload
    rows = unwrap_list(questions_page)
    meta = questions_page if isinstance(questions_page, dict) else {}
    total = int(meta.get("total", len(rows)) or 0)
    category_counts = payload.get("categoryCounts", {}) if isinstance(payload, dict) else {}

    highlight = None
    if highlight_id:
        # Deep links always open the table.
        set_table_minimized(session, False)
        on_page = any(str(q.get("questionId")) == str(highlight_id) for q in rows)
        if on_page:
            highlight = {"question_id": _int_or(highlight_id, highlight_id), "duration_ms": HIGHLIGHT_DURATION_MS}
        else:
            logger.info("Question %s not found on current page", highlight_id)

    selection = page_state(session).selection()
    row_ids = [q.get("questionId") for q in rows]
    for row in rows:
        row["selected"] = row.get("questionId") in selection
        row["available_options"] = available_option_letters(row)

    count = category_count(filters["category"], category_counts, total)
    return {
        "questions": rows,
        "pagination": {
            key: meta.get(key)
            for key in ("total", "current_page", "last_page", "per_page", "from", "to")
            if key in meta
        },
        "categories": unwrap_list(payload, "categories") if isinstance(payload, dict) else [],
        "category_counts": category_counts,
        "filters": filters,
        "query": echoed.as_dict(),
        "has_active_filters": has_active_filters(filters),
        "items_per_page_options": items_per_page_options(count),
        "category_count": count,
        "highlight": highlight,
        "table_minimized": table_minimized(session),
        "search_debounce_ms": SEARCH_DEBOUNCE_MS,
        "selection": {
            "ids": selection.ids,
            "all_selected": bool(row_ids) and selection.is_fully_selected(row_ids),
        },
    }


def apply_selection(session, action: str, question_id=None, page_ids=()) -> Selection:
    state = page_state(session)
    selection = state.selection()
    if action == "toggle":
        selection.toggle(question_id)
    elif action == "all":
        selection.toggle_all(page_ids)
    elif action == "clear":
        selection.clear()
    else:
        raise ValueError(action)
    state.save_selection(selection)
    return selection


def update_question(client, question_id, data: dict):
    check_question(data)
    return client.put(f"/guidance/questions/{question_id}", data)


def archive_question(client, session, question_id):
    client.put(f"/guidance/questions/{question_id}/archive")
    state = page_state(session)
    selection = state.selection()
    selection.remove_many([question_id])
    state.save_selection(selection)


def bulk_archive(client, session, question_ids) -> int:
    ids = list(question_ids)
    client.post("/guidance/questions/bulk-archive", {"questionIds": ids})
    page_state(session).save_selection(Selection())
    return len(ids)


def upload_questions(client, upload):
    return client.upload("/guidance/questions/upload", upload)
