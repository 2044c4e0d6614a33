import logging
from typing import Optional

from guidance.constants import RULE_NOTIFICATION_AUTO_CLOSE_MS
from guidance.state import PageState, RuleSnapshot
from guidance.utils.recommendations import (
    count_rules_by_type,
    diff_rule_counts,
    group_rules,
    missing_personality_types,
    sanitize_personality_type,
    sanitize_rule,
)

from .admission_api import unwrap_list

logger = logging.getLogger(__name__)

PAGE = "recommendation-rules"
NEW_RULES_MESSAGE = "New recommendation rules have been generated!"
DELETE_PROMPT = "Are you sure you want to delete this recommendation rule?"

DEFAULT_FORM = {
    "personality_type": "",
    "min_score": 75,
    "max_score": 100,
    "recommended_course_ids": [],
}


def page_state(session) -> PageState:
    return PageState(session, PAGE)


def load_page_data(client) -> dict:
    payload = client.get("/guidance/recommendation-rules") or {}
    if not isinstance(payload, dict):
        payload = {"rules": payload}
    courses = [
        {
            **course,
            "id": course.get("id") or 0,
            "course_code": str(course.get("course_code") or ""),
            "course_name": str(course.get("course_name") or ""),
        }
        for course in unwrap_list(payload, "courses")
    ]
    return {
        "rules": [sanitize_rule(r) for r in unwrap_list(payload, "rules")],
        "personality_types": [sanitize_personality_type(t) for t in unwrap_list(payload, "personalityTypes")],
        "courses": courses,
    }


def pending_notification(session, rules) -> Optional[dict]:
    """
    After an auto-generate, compare the fresh per-type counts with the
    snapshot taken before it. The pending flag is cleared either way.
    """
    snapshot = RuleSnapshot(session)
    if not snapshot.pending:
        return None

    counts = count_rules_by_type(rules)
    gained = diff_rule_counts(snapshot.counts, counts)
    snapshot.settle(counts)
    if not gained:
        return None

    return {
        "message": NEW_RULES_MESSAGE,
        "personality_types": [g["type"] for g in gained],
        "course_count": sum(g["new_count"] for g in gained),
        "details": gained,
        "auto_close_ms": RULE_NOTIFICATION_AUTO_CLOSE_MS,
    }


def rule_notification(personality_type: str, message: str) -> dict:
    return {
        "message": message,
        "personality_types": [personality_type],
        "course_count": 1,
        "auto_close_ms": RULE_NOTIFICATION_AUTO_CLOSE_MS,
    }


def build_page(client, session) -> dict:
    data = load_page_data(client)
    rules = data["rules"]
    expansion = page_state(session).expansion()

    groups = group_rules(rules, data["personality_types"])
    for group in groups:
        group["expanded"] = expansion.is_expanded(group["personality_type"])

    return {
        "stats": {
            "total_rules": len(rules),
            "active_types": len({r["personality_type"] for r in rules}),
            "available_courses": len(data["courses"]),
            "personality_types": len(data["personality_types"]),
        },
        "groups": groups,
        "missing_types": missing_personality_types(rules, data["personality_types"]),
        "personality_types": data["personality_types"],
        "courses": data["courses"],
        "form": dict(DEFAULT_FORM),
        "notification": pending_notification(session, rules),
    }


def toggle_expansion(session, personality_type: str) -> bool:
    state = page_state(session)
    expansion = state.expansion()
    expanded = expansion.toggle(personality_type)
    state.save_expansion(expansion)
    return expanded


def generate_all(client, session):
    """Snapshot the current counts, then ask the API to generate rules."""
    rules = load_page_data(client)["rules"]
    snapshot = RuleSnapshot(session)
    snapshot.take(count_rules_by_type(rules), len(rules))
    result = client.post("/guidance/generate-all-rules")
    snapshot.mark_pending()
    logger.info("Requested rule generation with %s existing rules", len(rules))
    return result


def create_rule(client, form: dict):
    return client.post("/guidance/recommendation-rules", form)


def update_rule(client, rule_id, form: dict):
    return client.put(f"/guidance/recommendation-rules/{rule_id}", form)


def delete_rule(client, rule_id):
    return client.delete(f"/guidance/recommendation-rules/{rule_id}")
