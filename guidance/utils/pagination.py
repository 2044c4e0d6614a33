import math
from typing import Any, Dict, Sequence


def parse_positive_int(raw, default: int) -> int:
    """parseInt-or-default: anything non-numeric or below 1 falls back."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def paginate(items: Sequence[Any], page: int, per_page: int) -> Dict[str, Any]:
    """
    Slice one page out of an already-fetched list.

    Page ``k`` of size ``S`` is ``items[(k-1)*S : k*S]``; ``from``/``to`` are
    1-indexed bounds of that slice, and ``from`` is 0 when the list is empty.
    """
    page = max(int(page), 1)
    per_page = max(int(per_page), 1)
    total = len(items)
    start = (page - 1) * per_page
    end = start + per_page
    return {
        "data": list(items[start:end]),
        "total": total,
        "current_page": page,
        "per_page": per_page,
        "total_pages": math.ceil(total / per_page),
        "from": start + 1 if total > 0 else 0,
        "to": min(end, total),
    }
