from typing import Dict, List

from guidance.choices import ErrorKind

FIELD_MESSAGES = {
    ("email", ErrorKind.UNIQUE): "This email address is already registered. Please use a different email address.",
    ("username", ErrorKind.UNIQUE): "This username is already taken. Please choose a different username.",
    ("password", ErrorKind.CONFIRMATION_MISMATCH): (
        "Password confirmation does not match. Please make sure both passwords are identical."
    ),
    ("password", ErrorKind.TOO_SHORT): "Password must be at least 8 characters long.",
}

# Legacy APIs only send human-readable text; fall back to keyword matching there.
_KEYWORDS = (
    ("unique", ErrorKind.UNIQUE),
    ("already been taken", ErrorKind.UNIQUE),
    ("confirmed", ErrorKind.CONFIRMATION_MISMATCH),
    ("confirmation", ErrorKind.CONFIRMATION_MISMATCH),
    ("min", ErrorKind.TOO_SHORT),
    ("at least", ErrorKind.TOO_SHORT),
)


def _error_text(error) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error.get("detail") or "")
    return str(error or "")


def classify_error(error) -> ErrorKind:
    """
    Map one server error to an ``ErrorKind``. Structured errors carry a
    ``code``; plain strings are matched on keywords.
    """
    if isinstance(error, dict) and error.get("code"):
        try:
            return ErrorKind(str(error["code"]).lower())
        except ValueError:
            return ErrorKind.OTHER

    text = _error_text(error).lower()
    for keyword, kind in _KEYWORDS:
        if keyword in text:
            return kind
    return ErrorKind.OTHER


def display_message(field: str, error) -> str:
    kind = classify_error(error)
    return FIELD_MESSAGES.get((field, kind), _error_text(error))


def remap_field_errors(errors: Dict[str, object]) -> Dict[str, List[str]]:
    """Turn a server ``errors`` mapping into display strings per field."""
    remapped = {}
    for field, value in (errors or {}).items():
        items = value if isinstance(value, list) else [value]
        remapped[field] = [display_message(field, item) for item in items if item]
    return remapped
