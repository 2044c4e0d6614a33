from typing import Dict, Optional
from urllib.parse import urlencode


class QueryState:
    """
    A page's configuration as serialized in its URL query string
    (``page``, ``per_page``, ``category``, ``sort``, ``search``, ``questionId``).

    Updates never mutate in place; each returns a new state whose ``url()`` is
    the navigation target for the dashboard.
    """

    def __init__(self, path: str, params: Optional[Dict[str, str]] = None):
        self.path = path
        self.params = dict(params or {})

    @classmethod
    def from_query(cls, path: str, query) -> "QueryState":
        params = {}
        for key in query.keys():
            value = query.get(key)
            if value is not None:
                params[key] = value
        return cls(path, params)

    def get(self, key: str, default=None):
        return self.params.get(key, default)

    def with_updates(self, **updates) -> "QueryState":
        params = dict(self.params)
        for key, value in updates.items():
            if value is None or value == "":
                params.pop(key, None)
            else:
                params[key] = str(value)
        return QueryState(self.path, params)

    def without(self, *keys: str) -> "QueryState":
        params = {k: v for k, v in self.params.items() if k not in keys}
        return QueryState(self.path, params)

    def url(self) -> str:
        if not self.params:
            return self.path
        return f"{self.path}?{urlencode(self.params)}"

    def as_dict(self) -> Dict[str, str]:
        return dict(self.params)

    def __eq__(self, other):
        return isinstance(other, QueryState) and self.path == other.path and self.params == other.params

    def __repr__(self):
        return f"QueryState({self.url()!r})"
