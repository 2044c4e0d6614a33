# guidance/utils/recommendations.py

from collections import Counter, OrderedDict
from typing import Dict, Iterable, List, Optional

from guidance.constants import DEFAULT_PASSING_RATE


def _number(value) -> float:
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        return 0
    return int(number) if number.is_integer() else number


def personality_type_code(value) -> str:
    if isinstance(value, dict):
        return str(value.get("type") or "")
    return str(value or "")


def sanitize_rule(rule: dict) -> dict:
    """
    Coerce one rule from the API into the shape the page works with: the
    personality type as its code, numeric scores and string course labels.
    """
    course = rule.get("recommended_course")
    if course:
        course = {
            **course,
            "course_code": str(course.get("course_code") or ""),
            "course_name": str(course.get("course_name") or ""),
        }
    return {
        **rule,
        "id": rule.get("id") or 0,
        "personality_type": personality_type_code(rule.get("personality_type")),
        "min_score": _number(rule.get("min_score")),
        "max_score": _number(rule.get("max_score")),
        "academic_year": rule.get("academic_year") or None,
        "created_at": rule.get("created_at") or None,
        "recommended_course": course or None,
    }


def sanitize_personality_type(value: dict) -> dict:
    return {
        **value,
        "type": str(value.get("type") or ""),
        "title": str(value.get("title") or ""),
        "description": str(value.get("description") or ""),
    }


def passing_rate(course: Optional[dict]) -> float:
    if not course:
        return DEFAULT_PASSING_RATE
    return _number(course.get("passing_rate")) or DEFAULT_PASSING_RATE


def is_course_compatible(course_passing_rate, min_score) -> bool:
    """A course is reachable when the range floor meets its passing rate."""
    rate = _number(course_passing_rate) or DEFAULT_PASSING_RATE
    return _number(min_score) >= rate


def score_bounds(rule: dict):
    low = min(rule["min_score"], rule["max_score"])
    high = max(rule["min_score"], rule["max_score"])
    return low, high


def is_rule_visible(rule: dict) -> bool:
    course = rule.get("recommended_course")
    if not course:
        return False
    low, _ = score_bounds(rule)
    return is_course_compatible(passing_rate(course), low)


def score_range_label(rule: dict) -> str:
    low, high = score_bounds(rule)
    return f"{low}%-{high}%"


def academic_years(rules: Iterable[dict]) -> List[str]:
    return list(dict.fromkeys(r["academic_year"] for r in rules if r.get("academic_year")))


def group_rules(rules: Iterable[dict], personality_types: Iterable[dict] = ()) -> List[dict]:
    """
    Personality type -> score range buckets. Types keep first-seen order;
    ranges with no compatible course are dropped from ``ranges``.
    """
    info = {t["type"]: t for t in personality_types}
    by_type: "OrderedDict[str, List[dict]]" = OrderedDict()
    for rule in rules:
        by_type.setdefault(rule["personality_type"], []).append(rule)

    groups = []
    for code, type_rules in by_type.items():
        by_range: "OrderedDict[str, List[dict]]" = OrderedDict()
        for rule in type_rules:
            by_range.setdefault(score_range_label(rule), []).append(rule)

        ranges = []
        for label, range_rules in by_range.items():
            compatible = [r for r in range_rules if is_rule_visible(r)]
            if not compatible:
                continue
            ranges.append(
                {
                    "range": label,
                    "min_score": score_bounds(compatible[0])[0],
                    "rules": compatible,
                    "count": len(compatible),
                }
            )

        type_info = info.get(code, {})
        groups.append(
            {
                "personality_type": code,
                "title": type_info.get("title") or "Unknown Type",
                "description": type_info.get("description", ""),
                "academic_years": academic_years(type_rules),
                "total_rules": len(type_rules),
                "total_visible": sum(r["count"] for r in ranges),
                "ranges": ranges,
            }
        )
    return groups


def missing_personality_types(rules: Iterable[dict], personality_types: Iterable[dict]) -> List[dict]:
    covered = {r["personality_type"] for r in rules}
    return [t for t in personality_types if t["type"] not in covered]


def count_rules_by_type(rules: Iterable[dict]) -> Dict[str, int]:
    return dict(Counter(r["personality_type"] for r in rules))


def diff_rule_counts(previous: Dict[str, int], current: Dict[str, int]) -> List[dict]:
    """Types that gained rules since ``previous``, most new rules first."""
    gained = []
    for code, count in current.items():
        new_count = count - int(previous.get(code, 0))
        if new_count > 0:
            gained.append({"type": code, "new_count": new_count, "total_count": count})
    gained.sort(key=lambda item: item["new_count"], reverse=True)
    return gained


def expand_rule_form(form: dict) -> List[dict]:
    """One rule per selected course, sharing the type and score range."""
    return [
        {
            "personality_type": form["personality_type"],
            "min_score": form["min_score"],
            "max_score": form["max_score"],
            "recommended_course_id": course_id,
        }
        for course_id in form.get("recommended_course_ids") or []
    ]
