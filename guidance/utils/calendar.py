from collections import OrderedDict
from typing import Iterable, List

from guidance.constants import WEEKDAY_HEADERS

from .dates import is_weekend, month_key, month_label, normalize_date, parse_iso_date, sunday_first_column


def build_month_grids(available_dates: Iterable[str], selected: Iterable[str] = (), existing: Iterable[str] = ()) -> List[dict]:
    """
    Lay the available dates out as Sunday-first month grids.

    Each month is a list of 7-cell weeks. Leading ``None`` cells line the
    first date up under its weekday; trailing ``None`` cells close the last
    week.
    """
    selected_set = {normalize_date(d) for d in selected}
    existing_set = {normalize_date(d) for d in existing}

    by_month: "OrderedDict[str, dict]" = OrderedDict()
    for value in sorted(filter(None, (normalize_date(d) for d in available_dates))):
        parsed = parse_iso_date(value)
        month = by_month.setdefault(
            month_key(parsed), {"key": month_key(parsed), "month": month_label(parsed), "dates": []}
        )
        month["dates"].append(parsed)

    grids = []
    for month in by_month.values():
        days = month["dates"]
        cells = [None] * sunday_first_column(days[0])
        for day in days:
            iso = day.isoformat()
            weekend = is_weekend(iso)
            cells.append(
                {
                    "date": iso,
                    "day": day.day,
                    "is_weekend": weekend,
                    "disabled": weekend,
                    "selected": iso in selected_set,
                    "existing": iso in existing_set,
                }
            )
        if len(cells) % 7:
            cells.extend([None] * (7 - len(cells) % 7))

        grids.append(
            {
                "key": month["key"],
                "month": month["month"],
                "headers": list(WEEKDAY_HEADERS),
                "count": len(days),
                "weeks": [cells[i:i + 7] for i in range(0, len(cells), 7)],
            }
        )
    return grids
