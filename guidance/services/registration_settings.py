import logging
from typing import List

from guidance.constants import DEFAULT_REGISTRATION_SETTINGS, REGISTRATION_MANAGEMENT_URL
from guidance.state import PageState
from guidance.utils.calendar import build_month_grids
from guidance.utils.dates import (
    current_academic_year,
    format_date,
    generate_date_range,
    is_weekend,
    normalize_date,
    weekdays_only,
)

logger = logging.getLogger(__name__)

PAGE = "registration-settings"

FIELDS = (
    "registration_open",
    "academic_year",
    "semester",
    "exam_start_date",
    "exam_end_date",
    "selected_exam_dates",
    "students_per_day",
    "registration_message",
    "delete_previous_schedules",
    "morning_start_time",
    "morning_end_time",
    "afternoon_start_time",
    "afternoon_end_time",
)

MISSING_WINDOW = "Please set both exam start and end dates"
NO_DATES = "Please select at least one exam date"
OUTSIDE_WINDOW = "Selected dates must be within the exam window ({start} - {end})"

# Results of ``RegistrationDraft.toggle``.
TOGGLE_INVALID = "invalid"
TOGGLE_WEEKEND = "weekend"
TOGGLE_EXISTING = "existing"
TOGGLE_ADDED = "added"
TOGGLE_REMOVED = "removed"


class DraftValidationError(Exception):
    pass


def normalize_dates(values) -> List[str]:
    if not isinstance(values, (list, tuple)):
        return []
    return [d for d in (normalize_date(v) for v in values) if d]


def _unique(values) -> List[str]:
    return list(dict.fromkeys(values))


class RegistrationDraft:
    """
    Unsaved edits to the registration settings.

    ``existing`` are the exam dates that already have schedules; they start
    selected and can never be dropped. ``stored`` is the saved settings, used
    as the fallback window when the draft has no dates of its own.
    """

    def __init__(self, data: dict, existing: List[str], stored: dict):
        self.data = data
        self.existing = existing
        self.stored = stored

    @classmethod
    def from_settings(cls, settings: dict) -> "RegistrationDraft":
        settings = settings or {}
        existing = normalize_dates(settings.get("existing_exam_dates"))
        data = dict(DEFAULT_REGISTRATION_SETTINGS)
        data.update(
            {
                "registration_open": bool(settings.get("registration_open") or False),
                "academic_year": settings.get("academic_year") or current_academic_year(),
                "semester": settings.get("semester") or DEFAULT_REGISTRATION_SETTINGS["semester"],
                "exam_start_date": normalize_date(settings.get("exam_start_date")),
                "exam_end_date": normalize_date(settings.get("exam_end_date")),
                "selected_exam_dates": list(existing),
                "students_per_day": settings.get("students_per_day")
                or DEFAULT_REGISTRATION_SETTINGS["students_per_day"],
                "registration_message": settings.get("registration_message") or "",
            }
        )
        stored = {
            "registration_open": bool(settings.get("registration_open") or False),
            "exam_start_date": normalize_date(settings.get("exam_start_date")),
            "exam_end_date": normalize_date(settings.get("exam_end_date")),
        }
        return cls(data, existing, stored)

    @classmethod
    def from_session(cls, saved: dict) -> "RegistrationDraft":
        return cls(dict(saved["data"]), list(saved["existing"]), dict(saved["stored"]))

    def to_session(self) -> dict:
        return {"data": self.data, "existing": self.existing, "stored": self.stored}

    @property
    def selected(self) -> List[str]:
        return list(self.data.get("selected_exam_dates") or [])

    def _set_selected(self, dates) -> None:
        self.data["selected_exam_dates"] = _unique(dates)

    def window(self):
        start = self.data.get("exam_start_date") or self.stored.get("exam_start_date")
        end = self.data.get("exam_end_date") or self.stored.get("exam_end_date")
        return start, end

    def available_dates(self) -> List[str]:
        return generate_date_range(*self.window())

    def update(self, **fields) -> None:
        for name, value in fields.items():
            if name not in FIELDS or name == "selected_exam_dates":
                continue
            if name in ("exam_start_date", "exam_end_date"):
                value = normalize_date(value)
            self.data[name] = value

    def toggle(self, value) -> str:
        date = normalize_date(value)
        if not date:
            return TOGGLE_INVALID
        if is_weekend(date):
            return TOGGLE_WEEKEND
        selected = self.selected
        if date in self.existing:
            if date not in selected:
                self._set_selected(selected + [date])
            return TOGGLE_EXISTING
        if date in selected:
            selected.remove(date)
            self._set_selected(selected)
            return TOGGLE_REMOVED
        self._set_selected(selected + [date])
        return TOGGLE_ADDED

    def select_all(self) -> None:
        start, end = self.window()
        if not start or not end:
            return
        self._set_selected(self.existing + weekdays_only(generate_date_range(start, end)))

    def select_weekdays(self) -> None:
        # select_all already skips weekends.
        self.select_all()

    def clear(self) -> None:
        self._set_selected(self.existing)

    def calendar_visible(self) -> bool:
        if self.data.get("delete_previous_schedules"):
            return False
        draft_ready = self.data.get("exam_start_date") and self.data.get("exam_end_date") and self.data.get(
            "registration_open"
        )
        stored_ready = (
            self.stored.get("exam_start_date")
            and self.stored.get("exam_end_date")
            and self.stored.get("registration_open")
        )
        return bool(draft_ready or stored_ready)

    def validate(self) -> None:
        """Raise ``DraftValidationError`` with the dashboard's alert text."""
        if not self.data.get("registration_open"):
            return
        start = self.data.get("exam_start_date")
        end = self.data.get("exam_end_date")
        if not start or not end:
            raise DraftValidationError(MISSING_WINDOW)
        selected = self.selected
        if not selected:
            raise DraftValidationError(NO_DATES)
        if any(d < start or d > end for d in selected):
            raise DraftValidationError(
                OUTSIDE_WINDOW.format(start=format_date(start, "Not set"), end=format_date(end, "Not set"))
            )

    def rebase(self, current: "RegistrationDraft") -> None:
        """
        Pick up the server's existing exam dates and stored window. Dates that
        gained schedules since the draft was made stay selected.
        """
        self.existing = list(current.existing)
        self.stored = dict(current.stored)
        self._set_selected(self.existing + self.selected)

    def payload(self) -> dict:
        return {name: self.data.get(name) for name in FIELDS}


def page_state(session) -> PageState:
    return PageState(session, PAGE)


def fetch_settings(client) -> dict:
    payload = client.get("/guidance/registration-settings") or {}
    if isinstance(payload, dict) and isinstance(payload.get("settings"), dict):
        return payload["settings"]
    return payload if isinstance(payload, dict) else {}


def load_draft(client, session) -> RegistrationDraft:
    """The session draft rebased on the current settings, or a fresh one."""
    current = RegistrationDraft.from_settings(fetch_settings(client))
    saved = page_state(session).get("draft")
    if saved:
        draft = RegistrationDraft.from_session(saved)
        draft.rebase(current)
    else:
        draft = current
    store_draft(session, draft)
    return draft


def reset_draft(client, session) -> RegistrationDraft:
    """Start over from the server's settings, as every page load does."""
    draft = RegistrationDraft.from_settings(fetch_settings(client))
    store_draft(session, draft)
    return draft


def store_draft(session, draft: RegistrationDraft) -> None:
    page_state(session).set("draft", draft.to_session())


def discard_draft(session) -> None:
    page_state(session).pop("draft")


def build_page(client, session) -> dict:
    draft = reset_draft(client, session)
    visible = draft.calendar_visible()
    available = draft.available_dates()
    return {
        "settings": draft.payload(),
        "existing_exam_dates": draft.existing,
        "selected_count": len(draft.selected),
        "available_count": len(weekdays_only(available)),
        "calendar_visible": visible,
        "calendar": build_month_grids(available, draft.selected, draft.existing) if visible else [],
    }


def save(client, session) -> str:
    """Validate and PUT the draft; returns the page to navigate to."""
    draft = load_draft(client, session)
    draft.validate()
    client.put("/guidance/registration-settings", draft.payload())
    discard_draft(session)
    logger.info("Registration settings saved with %s exam dates", len(draft.selected))
    return REGISTRATION_MANAGEMENT_URL
