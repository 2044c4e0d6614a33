from typing import Hashable, Iterable, List


class Selection:
    """
    Ordered set of selected record ids (checkbox state).

    Bucket-level checkboxes (all, per-month, per-session) are not stored; they
    are derived from ``is_fully_selected`` so they can never drift from the ids.
    """

    def __init__(self, ids: Iterable[Hashable] = ()):
        self._ids = list(dict.fromkeys(ids))

    @property
    def ids(self) -> List[Hashable]:
        return list(self._ids)

    def __contains__(self, item) -> bool:
        return item in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def toggle(self, item: Hashable) -> None:
        if item in self._ids:
            self._ids.remove(item)
        else:
            self._ids.append(item)

    def add_many(self, items: Iterable[Hashable]) -> None:
        for item in items:
            if item not in self._ids:
                self._ids.append(item)

    def remove_many(self, items: Iterable[Hashable]) -> None:
        drop = set(items)
        self._ids = [i for i in self._ids if i not in drop]

    def clear(self) -> None:
        self._ids = []

    def is_fully_selected(self, items: Iterable[Hashable]) -> bool:
        chosen = set(self._ids)
        return all(item in chosen for item in items)

    def toggle_bucket(self, items: Iterable[Hashable]) -> None:
        """Select every id in the bucket, or deselect them if all already are."""
        items = list(items)
        if items and self.is_fully_selected(items):
            self.remove_many(items)
        else:
            self.add_many(items)

    def toggle_all(self, items: Iterable[Hashable]) -> None:
        items = list(items)
        if items and self.is_fully_selected(items):
            self.clear()
        else:
            self._ids = list(dict.fromkeys(items))


class ExpansionState:
    """Expand/collapse flags keyed by bucket key (year, month, session, ...)."""

    def __init__(self, expanded: Iterable[str] = ()):
        self._expanded = set(expanded)

    def toggle(self, key: str) -> bool:
        if key in self._expanded:
            self._expanded.discard(key)
            return False
        self._expanded.add(key)
        return True

    def is_expanded(self, key: str) -> bool:
        return key in self._expanded

    def keys(self) -> List[str]:
        return sorted(self._expanded)
