from django.urls import path

from .views import (
    BulkUnarchiveView,
    ClosedSchedulesExpansionView,
    ClosedSchedulesPageView,
    ClosedSchedulesSelectionView,
    EvaluatorDetailView,
    EvaluatorListView,
    GenerateAllRulesView,
    PersonalityItemsPerPageView,
    PersonalityQuestionDetailView,
    PersonalityQuestionListView,
    PersonalityQuestionUploadView,
    QuestionArchiveView,
    QuestionBankNavigateView,
    QuestionBankPageView,
    QuestionBulkArchiveView,
    QuestionDetailView,
    QuestionSelectionView,
    QuestionTableMinimizedView,
    QuestionUploadView,
    RecommendationRuleDetailView,
    RecommendationRuleExpansionView,
    RecommendationRuleListView,
    RegistrationDateSelectionView,
    RegistrationSettingsView,
    UnarchiveRegistrationView,
)

urlpatterns = [
    path("guidance/closed-exam-schedules", ClosedSchedulesPageView.as_view(), name="api-closed-schedules"),
    path("guidance/closed-exam-schedules/expansion", ClosedSchedulesExpansionView.as_view(), name="api-closed-schedules-expansion"),
    path("guidance/closed-exam-schedules/selection", ClosedSchedulesSelectionView.as_view(), name="api-closed-schedules-selection"),
    path("guidance/bulk-unarchive-registrations", BulkUnarchiveView.as_view(), name="api-bulk-unarchive"),
    path("guidance/unarchive-registration/<int:registration_id>", UnarchiveRegistrationView.as_view(), name="api-unarchive-registration"),
    path("guidance/evaluators", EvaluatorListView.as_view(), name="api-evaluators"),
    path("guidance/evaluators/<int:evaluator_id>", EvaluatorDetailView.as_view(), name="api-evaluator-detail"),
    path("guidance/registration-settings", RegistrationSettingsView.as_view(), name="api-registration-settings"),
    path("guidance/registration-settings/dates", RegistrationDateSelectionView.as_view(), name="api-registration-dates"),
    path("guidance/personality-questions", PersonalityQuestionListView.as_view(), name="api-personality-questions"),
    path("guidance/personality-questions/upload", PersonalityQuestionUploadView.as_view(), name="api-personality-upload"),
    path("guidance/personality-questions/per-page", PersonalityItemsPerPageView.as_view(), name="api-personality-per-page"),
    path("guidance/personality-questions/<int:question_id>", PersonalityQuestionDetailView.as_view(), name="api-personality-question-detail"),
    path("guidance/questions", QuestionBankPageView.as_view(), name="api-questions"),
    path("guidance/questions/upload", QuestionUploadView.as_view(), name="api-questions-upload"),
    path("guidance/questions/bulk-archive", QuestionBulkArchiveView.as_view(), name="api-questions-bulk-archive"),
    path("guidance/questions/selection", QuestionSelectionView.as_view(), name="api-questions-selection"),
    path("guidance/questions/table-minimized", QuestionTableMinimizedView.as_view(), name="api-questions-table-minimized"),
    path("guidance/questions/navigate", QuestionBankNavigateView.as_view(), name="api-questions-navigate"),
    path("guidance/questions/<int:question_id>", QuestionDetailView.as_view(), name="api-question-detail"),
    path("guidance/questions/<int:question_id>/archive", QuestionArchiveView.as_view(), name="api-question-archive"),
    path("guidance/recommendation-rules", RecommendationRuleListView.as_view(), name="api-recommendation-rules"),
    path("guidance/recommendation-rules/expansion", RecommendationRuleExpansionView.as_view(), name="api-recommendation-rules-expansion"),
    path("guidance/recommendation-rules/<int:rule_id>", RecommendationRuleDetailView.as_view(), name="api-recommendation-rule-detail"),
    path("guidance/generate-all-rules", GenerateAllRulesView.as_view(), name="api-generate-all-rules"),
]
