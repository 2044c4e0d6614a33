# guidance/utils/grouping.py

from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, List, Optional

from guidance.constants import (
    NO_SESSION,
    SESSION_LABELS,
    SESSION_ORDER,
    UNKNOWN_MONTH,
    UNKNOWN_YEAR,
)

from .dates import format_date, format_time, month_key, month_label, parse_iso_date

UNKNOWN_KEY = "unknown"


def _matches(query: str, *fields) -> bool:
    return any(query in (field or "").lower() for field in fields)


def filter_closed_schedules(schedules: Iterable[dict], query: str = "", session: str = "all") -> List[dict]:
    """
    Free-text match on the displayed date, session and start time, then an
    exact session filter unless ``session`` is ``all``.
    """
    filtered = list(schedules)
    needle = (query or "").strip().lower()
    if needle:
        filtered = [
            s
            for s in filtered
            if _matches(
                needle,
                format_date(s.get("exam_date")).lower(),
                (s.get("session") or "").lower(),
                format_time(s.get("start_time")).lower(),
            )
        ]
    if session and session != "all":
        filtered = [s for s in filtered if s.get("session") == session]
    return filtered


def filter_archived_registrations(registrations: Iterable[dict], query: str = "") -> List[dict]:
    filtered = list(registrations)
    needle = (query or "").strip().lower()
    if not needle:
        return filtered
    return [
        r
        for r in filtered
        if _matches(
            needle,
            (r.get("examinee_name") or "").lower(),
            (r.get("school_name") or "").lower(),
            format_date(r.get("assigned_exam_date"), default="").lower(),
            (r.get("assigned_session") or "").lower(),
            (r.get("status") or "").lower(),
        )
    ]


def registration_bucket_date(registration: dict) -> Optional[date]:
    """The assigned exam date, falling back to the registration date."""
    return parse_iso_date(registration.get("assigned_exam_date")) or parse_iso_date(
        registration.get("registration_date")
    )


def _year_month(value: Optional[date]):
    if value is None:
        return UNKNOWN_YEAR, UNKNOWN_KEY, UNKNOWN_MONTH
    return str(value.year), month_key(value), month_label(value)


def _year_sort_key(year: str):
    # Newest first; the unknown bucket always last.
    return (1, 0) if year == UNKNOWN_YEAR else (0, -int(year))


def _ordered_years(by_year: Dict[str, dict], month_builder) -> List[dict]:
    result = []
    for year in sorted(by_year, key=_year_sort_key):
        months = by_year[year]
        known = sorted((k for k in months if k != UNKNOWN_KEY), reverse=True)
        ordered_keys = known + ([UNKNOWN_KEY] if UNKNOWN_KEY in months else [])
        month_buckets = [month_builder(months[k]) for k in ordered_keys]
        result.append(
            {
                "year": year,
                "key": year,
                "count": sum(m["count"] for m in month_buckets),
                "months": month_buckets,
            }
        )
    return result


def group_schedules_by_year_month(schedules: Iterable[dict]) -> List[dict]:
    """
    Year -> Month buckets, newest year and month first. Schedules keep their
    incoming order inside a month.
    """
    by_year: Dict[str, "OrderedDict[str, dict]"] = {}
    for schedule in schedules:
        year, key, label = _year_month(parse_iso_date(schedule.get("exam_date")))
        months = by_year.setdefault(year, OrderedDict())
        bucket = months.setdefault(key, {"month": label, "key": key, "schedules": []})
        bucket["schedules"].append(schedule)

    def build(bucket):
        return {**bucket, "count": len(bucket["schedules"])}

    return _ordered_years(by_year, build)


def session_key(month_bucket_key: str, session: str) -> str:
    return f"{month_bucket_key}:{session}"


def group_archived_registrations(registrations: Iterable[dict]) -> List[dict]:
    """
    Year -> Month -> Session buckets keyed on ``assigned_exam_date`` (or
    ``registration_date`` when unassigned). Sessions run morning, afternoon,
    then no_session.
    """
    by_year: Dict[str, "OrderedDict[str, dict]"] = {}
    for registration in registrations:
        year, key, label = _year_month(registration_bucket_date(registration))
        session = registration.get("assigned_session") or NO_SESSION
        months = by_year.setdefault(year, OrderedDict())
        month = months.setdefault(key, {"month": label, "key": key, "sessions": OrderedDict()})
        bucket = month["sessions"].setdefault(
            session,
            {
                "session": session,
                "label": SESSION_LABELS.get(session, session.capitalize()),
                "key": session_key(key, session),
                "registrations": [],
            },
        )
        bucket["registrations"].append(registration)

    def build(month):
        sessions = sorted(
            month["sessions"].values(),
            key=lambda s: SESSION_ORDER.get(s["session"], SESSION_ORDER[NO_SESSION]),
        )
        sessions = [{**s, "count": len(s["registrations"])} for s in sessions]
        return {
            "month": month["month"],
            "key": month["key"],
            "count": sum(s["count"] for s in sessions),
            "sessions": sessions,
        }

    return _ordered_years(by_year, build)


def month_registration_ids(month_bucket: dict) -> list:
    return [r.get("id") for s in month_bucket["sessions"] for r in s["registrations"]]


def find_month(years: List[dict], key: str) -> Optional[dict]:
    for year in years:
        for month in year["months"]:
            if month["key"] == key:
                return month
    return None


def find_session(years: List[dict], key: str) -> Optional[dict]:
    for year in years:
        for month in year["months"]:
            for session in month.get("sessions", []):
                if session["key"] == key:
                    return session
    return None
