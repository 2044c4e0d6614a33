import logging

from guidance.constants import DEFAULT_ARCHIVE_PER_PAGE, DEFAULT_PAGE
from guidance.state import PageState
from guidance.utils.grouping import (
    filter_archived_registrations,
    filter_closed_schedules,
    find_month,
    find_session,
    group_archived_registrations,
    group_schedules_by_year_month,
    month_registration_ids,
)
from guidance.utils.pagination import paginate, parse_positive_int
from guidance.utils.selection import Selection

from .admission_api import unwrap_list

logger = logging.getLogger(__name__)

PAGE = "closed-exam-schedules"
EXPANSION_GROUPS = ("years", "months", "sessions")

NOTHING_TO_RESTORE = "Please select at least one registration to restore."
RESTORE_ALL_PROMPT = (
    "Are you sure you want to restore {count} archived registration(s)? "
    "They will appear in the main registration list as \"cancelled\"."
)
RESTORE_ONE_PROMPT = (
    "Are you sure you want to unarchive this registration? "
    "It will appear in the main registration list as \"cancelled\"."
)


def page_state(session) -> PageState:
    return PageState(session, PAGE)


def load_page_data(client) -> dict:
    payload = client.get("/guidance/closed-exam-schedules") or {}
    return {
        "schedules": unwrap_list(payload, "closedSchedules"),
        "archived": unwrap_list(payload, "archivedRegistrations"),
    }


def _annotate_schedule_tree(years, expansion):
    for year in years:
        year["expanded"] = expansion["years"].is_expanded(year["key"])
        for month in year["months"]:
            month["expanded"] = expansion["months"].is_expanded(month["key"])
    return years


def _annotate_archive_tree(years, expansion, selection: Selection, page: int, per_page: int):
    for year in years:
        year["expanded"] = expansion["years"].is_expanded(f"archive:{year['key']}")
        for month in year["months"]:
            ids = month_registration_ids(month)
            month["expanded"] = expansion["months"].is_expanded(f"archive:{month['key']}")
            month["fully_selected"] = bool(ids) and selection.is_fully_selected(ids)
            for session in month["sessions"]:
                session_ids = [r.get("id") for r in session["registrations"]]
                session["expanded"] = expansion["sessions"].is_expanded(session["key"])
                session["fully_selected"] = bool(session_ids) and selection.is_fully_selected(session_ids)
                session["page"] = paginate(session.pop("registrations"), page, per_page)
                for row in session["page"]["data"]:
                    row["selected"] = row.get("id") in selection
    return years


def build_page(client, session, query) -> dict:
    """Filtered, grouped and paginated view-model for the closed schedules page."""
    data = load_page_data(client)
    state = page_state(session)
    expansion = {name: state.expansion(name) for name in EXPANSION_GROUPS}
    selection = state.selection()

    search = query.get("search", "")
    session_filter = query.get("session", "all") or "all"
    archive_search = query.get("archive_search", "")
    page = parse_positive_int(query.get("page"), DEFAULT_PAGE)
    per_page = parse_positive_int(query.get("per_page"), DEFAULT_ARCHIVE_PER_PAGE)

    schedules = filter_closed_schedules(data["schedules"], search, session_filter)
    archived = filter_archived_registrations(data["archived"], archive_search)
    all_ids = [r.get("id") for r in data["archived"]]

    return {
        "filters": {
            "search": search,
            "session": session_filter,
            "archive_search": archive_search,
            "page": page,
            "per_page": per_page,
        },
        "schedules": {
            "total": len(schedules),
            "years": _annotate_schedule_tree(group_schedules_by_year_month(schedules), expansion),
        },
        "archived": {
            "total": len(archived),
            "years": _annotate_archive_tree(group_archived_registrations(archived), expansion, selection, page, per_page),
        },
        "selection": {
            "ids": selection.ids,
            "count": len(selection),
            "all_selected": bool(all_ids) and selection.is_fully_selected(all_ids),
        },
    }


def toggle_expansion(session, group: str, key: str) -> bool:
    state = page_state(session)
    expansion = state.expansion(group)
    expanded = expansion.toggle(key)
    state.save_expansion(expansion, group)
    return expanded


def apply_selection(client, session, action: str, target=None) -> Selection:
    """
    Selection changes for the archive: one row (``toggle``), a month or
    session bucket (``month`` / ``session``), everything (``all``) or
    ``clear``.
    """
    state = page_state(session)
    selection = state.selection()

    if action == "toggle":
        selection.toggle(target)
    elif action == "clear":
        selection.clear()
    else:
        archived = load_page_data(client)["archived"]
        years = group_archived_registrations(archived)
        if action == "all":
            selection.toggle_all([r.get("id") for r in archived])
        elif action == "month":
            month = find_month(years, target)
            if month is None:
                raise KeyError(target)
            selection.toggle_bucket(month_registration_ids(month))
        elif action == "session":
            bucket = find_session(years, target)
            if bucket is None:
                raise KeyError(target)
            selection.toggle_bucket([r.get("id") for r in bucket["registrations"]])
        else:
            raise ValueError(action)

    state.save_selection(selection)
    return selection


def restore_selected(client, session, registration_ids) -> int:
    ids = list(registration_ids)
    client.post("/guidance/bulk-unarchive-registrations", {"registration_ids": ids})
    state = page_state(session)
    state.save_selection(Selection())
    logger.info("Restored %s archived registrations", len(ids))
    return len(ids)


def restore_one(client, session, registration_id) -> None:
    client.post(f"/guidance/unarchive-registration/{registration_id}")
    state = page_state(session)
    selection = state.selection()
    selection.remove_many([registration_id])
    state.save_selection(selection)
