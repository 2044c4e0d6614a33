from django.db import models


class Severity(models.TextChoices):
    SUCCESS = 'success', 'Success'
    INFO = 'info', 'Info'
    WARNING = 'warning', 'Warning'
    ERROR = 'error', 'Error'


class ErrorKind(models.TextChoices):
    UNIQUE = 'unique', 'Already in use'
    CONFIRMATION_MISMATCH = 'confirmed', 'Confirmation mismatch'
    TOO_SHORT = 'min', 'Too short'
    OTHER = 'other', 'Other'


class Dichotomy(models.TextChoices):
    EI = 'E/I', 'E/I - Extraversion/Introversion'
    SN = 'S/N', 'S/N - Sensing/Intuition'
    TF = 'T/F', 'T/F - Thinking/Feeling'
    JP = 'J/P', 'J/P - Judging/Perceiving'


class ExamSession(models.TextChoices):
    MORNING = 'morning', 'Morning'
    AFTERNOON = 'afternoon', 'Afternoon'


class QuestionSort(models.TextChoices):
    LATEST = 'latest', 'Latest'
    OLDEST = 'oldest', 'Oldest'
    CATEGORY = 'category', 'Category'
