"""
Per-user dashboard state kept in the Django session.

Everything the dashboard used to hold in component state or browser local
storage (expanded buckets, checkbox selections, the registration settings
draft, the items-per-page preference, the rule-count snapshot) lives here,
namespaced per page.
"""

from typing import Dict, Optional

from guidance.constants import (
    PERSONALITY_PER_PAGE_DEFAULT,
    PERSONALITY_PER_PAGE_MAX,
    PERSONALITY_PER_PAGE_MIN,
)

from .utils.selection import ExpansionState, Selection

SESSION_PREFIX = "guidance"


def clamp_items_per_page(
    raw,
    default: int = PERSONALITY_PER_PAGE_DEFAULT,
    minimum: int = PERSONALITY_PER_PAGE_MIN,
    maximum: int = PERSONALITY_PER_PAGE_MAX,
) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        value = default
    return max(minimum, min(maximum, value))


class PageState:
    """Session-backed key/value store for one dashboard page."""

    def __init__(self, session, page: str):
        self.session = session
        self.key = f"{SESSION_PREFIX}:{page}"

    def _data(self) -> dict:
        return dict(self.session.get(self.key) or {})

    def get(self, name: str, default=None):
        return self._data().get(name, default)

    def set(self, name: str, value) -> None:
        data = self._data()
        data[name] = value
        # Reassign so the session backend sees the change.
        self.session[self.key] = data

    def pop(self, name: str, default=None):
        data = self._data()
        value = data.pop(name, default)
        self.session[self.key] = data
        return value

    def selection(self, name: str = "selected") -> Selection:
        return Selection(self.get(name, []))

    def save_selection(self, selection: Selection, name: str = "selected") -> None:
        self.set(name, selection.ids)

    def expansion(self, name: str = "expanded") -> ExpansionState:
        return ExpansionState(self.get(name, []))

    def save_expansion(self, expansion: ExpansionState, name: str = "expanded") -> None:
        self.set(name, expansion.keys())


class Preferences:
    """Cross-page user preferences (the local storage stand-in)."""

    def __init__(self, session):
        self._state = PageState(session, "preferences")

    def get(self, name: str, default=None):
        return self._state.get(name, default)

    def set(self, name: str, value) -> None:
        self._state.set(name, value)

    def items_per_page(self, name: str) -> Optional[int]:
        value = self.get(name)
        return clamp_items_per_page(value) if value is not None else None


class RuleSnapshot:
    """
    Per-type rule counts taken just before auto-generation. ``pending`` marks
    that the next page load should diff against them.
    """

    def __init__(self, session):
        self._state = PageState(session, "recommendation-rules")

    def take(self, counts: Dict[str, int], total: int) -> None:
        self._state.set("snapshot", {"counts": dict(counts), "total": int(total)})
        self._state.set("pending", False)

    def mark_pending(self) -> None:
        self._state.set("pending", True)

    @property
    def pending(self) -> bool:
        return bool(self._state.get("pending", False))

    @property
    def counts(self) -> Dict[str, int]:
        return dict((self._state.get("snapshot") or {}).get("counts") or {})

    def settle(self, counts: Dict[str, int]) -> None:
        """Store the counts just seen and drop the pending flag."""
        self._state.set("snapshot", {"counts": dict(counts), "total": sum(counts.values())})
        self._state.set("pending", False)
