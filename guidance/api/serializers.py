from rest_framework import serializers

from guidance.choices import Dichotomy, QuestionSort
from guidance.services.registration_settings import FIELDS as SETTINGS_FIELDS

PASSWORD_MISMATCH = "The passwords you entered do not match. Please make sure both passwords are identical."


class ConfirmSerializer(serializers.Serializer):
    confirm = serializers.BooleanField(default=False)


class EvaluatorCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)
    password_confirmation = serializers.CharField(trim_whitespace=False)
    name = serializers.CharField(max_length=255)
    department = serializers.CharField(max_length=255)

    def validate(self, attrs):
        if attrs["password"] != attrs["password_confirmation"]:
            raise serializers.ValidationError({"password_confirmation": [PASSWORD_MISMATCH]})
        return attrs


class RegistrationSettingsSerializer(serializers.Serializer):
    """Partial edits to the registration settings draft."""

    registration_open = serializers.BooleanField(required=False)
    academic_year = serializers.CharField(required=False, allow_blank=True)
    semester = serializers.CharField(required=False, allow_blank=True)
    exam_start_date = serializers.CharField(required=False, allow_blank=True)
    exam_end_date = serializers.CharField(required=False, allow_blank=True)
    students_per_day = serializers.IntegerField(required=False, min_value=1)
    registration_message = serializers.CharField(required=False, allow_blank=True)
    delete_previous_schedules = serializers.BooleanField(required=False)
    morning_start_time = serializers.CharField(required=False)
    morning_end_time = serializers.CharField(required=False)
    afternoon_start_time = serializers.CharField(required=False)
    afternoon_end_time = serializers.CharField(required=False)

    def validate(self, attrs):
        return {k: v for k, v in attrs.items() if k in SETTINGS_FIELDS}


class DateSelectionSerializer(serializers.Serializer):
    ACTIONS = ("toggle", "select_all", "weekdays", "clear")

    action = serializers.ChoiceField(choices=ACTIONS)
    date = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs["action"] == "toggle" and not attrs.get("date"):
            raise serializers.ValidationError({"date": ["This field is required."]})
        return attrs


class PersonalityQuestionSerializer(serializers.Serializer):
    question = serializers.CharField()
    dichotomy = serializers.ChoiceField(choices=Dichotomy.choices)
    positive_side = serializers.CharField(max_length=1)
    negative_side = serializers.CharField(max_length=1)


class ItemsPerPageSerializer(serializers.Serializer):
    # Parsed and clamped by the view; anything non-numeric means the default.
    items_per_page = serializers.CharField(allow_blank=True)
    query = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False, default=dict)


class UploadSerializer(serializers.Serializer):
    csv_file = serializers.FileField()


class QuestionUpdateSerializer(serializers.Serializer):
    question = serializers.CharField(allow_blank=True, required=False, default="")
    option1 = serializers.CharField(allow_blank=True, allow_null=True, required=False, default="")
    option2 = serializers.CharField(allow_blank=True, allow_null=True, required=False, default="")
    option3 = serializers.CharField(allow_blank=True, allow_null=True, required=False, default="")
    option4 = serializers.CharField(allow_blank=True, allow_null=True, required=False, default="")
    option5 = serializers.CharField(allow_blank=True, allow_null=True, required=False, default="")
    option1_image = serializers.CharField(allow_blank=True, allow_null=True, required=False, default=None)
    option2_image = serializers.CharField(allow_blank=True, allow_null=True, required=False, default=None)
    option3_image = serializers.CharField(allow_blank=True, allow_null=True, required=False, default=None)
    option4_image = serializers.CharField(allow_blank=True, allow_null=True, required=False, default=None)
    option5_image = serializers.CharField(allow_blank=True, allow_null=True, required=False, default=None)
    correct_answer = serializers.CharField(allow_blank=True, required=False, default="")
    category = serializers.CharField(allow_blank=True, required=False, default="")
    direction = serializers.CharField(allow_blank=True, allow_null=True, required=False, default="")
    image = serializers.CharField(allow_blank=True, allow_null=True, required=False, default=None)


class QuestionBankNavigateSerializer(serializers.Serializer):
    query = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False, default=dict)
    category = serializers.CharField(required=False, allow_blank=True)
    sort = serializers.ChoiceField(choices=QuestionSort.choices, required=False)
    per_page = serializers.IntegerField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)
    clear = serializers.BooleanField(default=False)


class QuestionSelectionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=("toggle", "all", "clear"))
    question_id = serializers.IntegerField(required=False)
    page_ids = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)

    def validate(self, attrs):
        if attrs["action"] == "toggle" and attrs.get("question_id") is None:
            raise serializers.ValidationError({"question_id": ["This field is required."]})
        return attrs


class BulkArchiveSerializer(ConfirmSerializer):
    question_ids = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    query = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False, default=dict)


class TableMinimizedSerializer(serializers.Serializer):
    minimized = serializers.BooleanField()


class ArchiveSelectionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=("toggle", "month", "session", "all", "clear"))
    target = serializers.CharField(required=False, allow_blank=True)
    registration_id = serializers.IntegerField(required=False)

    def validate(self, attrs):
        action = attrs["action"]
        if action == "toggle" and attrs.get("registration_id") is None:
            raise serializers.ValidationError({"registration_id": ["This field is required."]})
        if action in ("month", "session") and not attrs.get("target"):
            raise serializers.ValidationError({"target": ["This field is required."]})
        return attrs


class ExpansionSerializer(serializers.Serializer):
    group = serializers.ChoiceField(choices=("years", "months", "sessions"))
    key = serializers.CharField()


class BulkRestoreSerializer(ConfirmSerializer):
    registration_ids = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)


class RecommendationRuleSerializer(serializers.Serializer):
    personality_type = serializers.CharField()
    min_score = serializers.IntegerField(min_value=0, max_value=100)
    max_score = serializers.IntegerField(min_value=0, max_value=100)
    recommended_course_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    academic_year = serializers.CharField(required=False, allow_blank=True)
