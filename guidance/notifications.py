import logging

from django.contrib import messages

from guidance.choices import Severity
from guidance.constants import BANNER_DISMISS_MS

logger = logging.getLogger(__name__)

LEVELS = {
    Severity.SUCCESS: messages.SUCCESS,
    Severity.INFO: messages.INFO,
    Severity.WARNING: messages.WARNING,
    Severity.ERROR: messages.ERROR,
}


class Notifier:
    """
    Dashboard alerts. ``alert`` builds a banner returned with the current
    response; ``flash`` queues one for the next page load (used when the
    action ends in a navigation or reload).
    """

    def __init__(self, request):
        # DRF wraps the HttpRequest; the message storage hangs off the wrapped one.
        self.request = getattr(request, "_request", request)

    def alert(self, message: str, severity: str = Severity.INFO, **extra) -> dict:
        payload = {"message": str(message), "severity": Severity(severity).value}
        payload.update(extra)
        return payload

    def banner(self, message: str, severity: str = Severity.SUCCESS) -> dict:
        return self.alert(message, severity, dismiss_after_ms=BANNER_DISMISS_MS)

    def flash(self, message: str, severity: str = Severity.SUCCESS) -> None:
        severity = Severity(severity)
        try:
            messages.add_message(self.request, LEVELS[severity], str(message), extra_tags=severity.value)
        except messages.MessageFailure:
            logger.warning("Message storage unavailable; dropped alert %r", message)

    def drain(self) -> list:
        alerts = []
        for item in messages.get_messages(self.request):
            severity = (item.extra_tags or item.level_tag or Severity.INFO).split()[0]
            alerts.append({"message": str(item.message), "severity": severity})
        return alerts
