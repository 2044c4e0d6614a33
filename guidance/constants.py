from datetime import time

from guidance.choices import ExamSession

SESSION_MORNING = ExamSession.MORNING.value
SESSION_AFTERNOON = ExamSession.AFTERNOON.value
NO_SESSION = "no_session"

# Morning first, then afternoon; anything unrecognised sorts with no_session.
SESSION_ORDER = {
    SESSION_MORNING: 0,
    SESSION_AFTERNOON: 1,
    NO_SESSION: 2,
}

SESSION_LABELS = {
    SESSION_MORNING: ExamSession.MORNING.label,
    SESSION_AFTERNOON: ExamSession.AFTERNOON.label,
    NO_SESSION: "No Session",
}

UNKNOWN_YEAR = "Unknown"
UNKNOWN_MONTH = "Unknown Date"

DEFAULT_PAGE = 1
DEFAULT_ARCHIVE_PER_PAGE = 10

DEFAULT_REGISTRATION_SETTINGS = {
    "registration_open": False,
    "semester": "1st",
    "students_per_day": 40,
    "registration_message": "",
    "delete_previous_schedules": False,
    "morning_start_time": time(8, 0).strftime("%H:%M"),
    "morning_end_time": time(11, 0).strftime("%H:%M"),
    "afternoon_start_time": time(13, 0).strftime("%H:%M"),
    "afternoon_end_time": time(16, 0).strftime("%H:%M"),
}

REGISTRATION_MANAGEMENT_URL = "/guidance/exam-registration-management"

WEEKDAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

PERSONALITY_PER_PAGE_DEFAULT = 20
PERSONALITY_PER_PAGE_MIN = 5
PERSONALITY_PER_PAGE_MAX = 500

QUESTION_BANK_PER_PAGE_DEFAULT = 20
QUESTION_BANK_SORT_DEFAULT = "latest"
QUESTION_BANK_PER_PAGE_OPTIONS = [5, 20, 30, 40, 50]
SHOW_ALL = -1
OPTION_LETTERS = "ABCDE"

DEFAULT_PASSING_RATE = 80

# Timings published to the dashboard (milliseconds).
SEARCH_DEBOUNCE_MS = 400
HIGHLIGHT_DURATION_MS = 3000
BANNER_DISMISS_MS = 5000
RULE_NOTIFICATION_AUTO_CLOSE_MS = 30000
