import logging

from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from guidance.choices import Severity
from guidance.notifications import Notifier
from guidance.services import closed_schedules, evaluators, personality_tests, question_bank, recommendation_rules
from guidance.services import registration_settings as settings_service
from guidance.services.admission_api import AdmissionApiError, get_admission_client
from guidance.utils.error_messages import remap_field_errors
from guidance.utils.query_state import QueryState
from guidance.utils.recommendations import expand_rule_form

from .serializers import (
    ArchiveSelectionSerializer,
    BulkArchiveSerializer,
    BulkRestoreSerializer,
    ConfirmSerializer,
    DateSelectionSerializer,
    EvaluatorCreateSerializer,
    ExpansionSerializer,
    ItemsPerPageSerializer,
    PersonalityQuestionSerializer,
    QuestionBankNavigateSerializer,
    QuestionSelectionSerializer,
    QuestionUpdateSerializer,
    RecommendationRuleSerializer,
    RegistrationSettingsSerializer,
    TableMinimizedSerializer,
    UploadSerializer,
)

logger = logging.getLogger(__name__)


def upstream_error(exc: AdmissionApiError, action: str) -> Response:
    return Response(
        {
            "detail": f"{action}: {exc.message}",
            "severity": Severity.ERROR.value,
            "errors": remap_field_errors(exc.errors),
        },
        status=exc.response_status,
    )


def guard_failed(detail: str, severity: str = Severity.ERROR, errors=None) -> Response:
    payload = {"detail": detail, "severity": Severity(severity).value}
    if errors:
        payload["errors"] = errors
    return Response(payload, status=status.HTTP_400_BAD_REQUEST)


def invalid(serializer) -> Response:
    errors = serializer.errors
    first = next(iter(errors.values()), ["Invalid request."])
    detail = first[0] if isinstance(first, list) and first else str(first)
    return guard_failed(str(detail), errors=errors)


def needs_confirmation(prompt: str) -> Response:
    return Response({"status": "confirm", "detail": prompt}, status=status.HTTP_428_PRECONDITION_REQUIRED)


def confirmed(request) -> bool:
    serializer = ConfirmSerializer(data=request.data if hasattr(request.data, "get") else {})
    if serializer.is_valid() and serializer.validated_data["confirm"]:
        return True
    return str(request.query_params.get("confirm", "")).lower() in ("1", "true", "yes")


def ok(message: str, severity: str = Severity.SUCCESS, http_status=status.HTTP_200_OK, **extra) -> Response:
    payload = {"status": "ok", "message": message, "severity": Severity(severity).value}
    payload.update(extra)
    return Response(payload, status=http_status)


def flashed(request, message: str, severity: str = Severity.SUCCESS, **extra) -> Response:
    """Queue the alert for the page the client reloads or navigates to."""
    Notifier(request).flash(message, severity)
    payload = {"status": "ok"}
    payload.update(extra)
    return Response(payload)


class GuidanceAPIView(APIView):
    parser_classes = [JSONParser, FormParser, MultiPartParser]

    def get_client(self):
        return get_admission_client()

    def page(self, request, payload: dict) -> Response:
        payload["alerts"] = Notifier(request).drain()
        return Response(payload)


# Closed schedules and archived registrations


class ClosedSchedulesPageView(GuidanceAPIView):
    def get(self, request, *args, **kwargs):
        try:
            payload = closed_schedules.build_page(self.get_client(), request.session, request.query_params)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to load closed exam schedules")
        return self.page(request, payload)


class ClosedSchedulesExpansionView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        serializer = ExpansionSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = serializer.validated_data
        expanded = closed_schedules.toggle_expansion(request.session, data["group"], data["key"])
        return Response({"group": data["group"], "key": data["key"], "expanded": expanded})


class ClosedSchedulesSelectionView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        serializer = ArchiveSelectionSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = serializer.validated_data
        target = data.get("registration_id") if data["action"] == "toggle" else data.get("target")
        try:
            selection = closed_schedules.apply_selection(self.get_client(), request.session, data["action"], target)
        except KeyError:
            return Response({"detail": "Bucket not found."}, status=status.HTTP_404_NOT_FOUND)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to load archived registrations")
        return Response({"ids": selection.ids, "count": len(selection)})


class BulkUnarchiveView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        serializer = BulkRestoreSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = serializer.validated_data
        ids = data["registration_ids"] or closed_schedules.page_state(request.session).selection().ids
        if not ids:
            return guard_failed(closed_schedules.NOTHING_TO_RESTORE)
        if not data["confirm"]:
            return needs_confirmation(closed_schedules.RESTORE_ALL_PROMPT.format(count=len(ids)))

        try:
            count = closed_schedules.restore_selected(self.get_client(), request.session, ids)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to restore selected registrations")
        return flashed(request, f"Successfully restored {count} archived registrations", restored=count, reload=True)


class UnarchiveRegistrationView(GuidanceAPIView):
    def post(self, request, registration_id, *args, **kwargs):
        if not confirmed(request):
            return needs_confirmation(closed_schedules.RESTORE_ONE_PROMPT)
        try:
            closed_schedules.restore_one(self.get_client(), request.session, registration_id)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to unarchive registration")
        return flashed(request, "Registration unarchived successfully", reload=True)


# Evaluators


class EvaluatorListView(GuidanceAPIView):
    def get(self, request, *args, **kwargs):
        try:
            rows = evaluators.list_evaluators(self.get_client())
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to load evaluators")
        return self.page(request, {"evaluators": rows, "total": len(rows)})

    def post(self, request, *args, **kwargs):
        serializer = EvaluatorCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        try:
            evaluators.create_evaluator(self.get_client(), serializer.validated_data)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to create evaluator")
        notice = Notifier(request).banner(evaluators.CREATED)
        return ok(evaluators.CREATED, http_status=status.HTTP_201_CREATED, banner=notice)


class EvaluatorDetailView(GuidanceAPIView):
    def delete(self, request, evaluator_id, *args, **kwargs):
        if not confirmed(request):
            return needs_confirmation(evaluators.DELETE_PROMPT)
        try:
            evaluators.delete_evaluator(self.get_client(), evaluator_id)
        except AdmissionApiError as exc:
            logger.warning("Failed to delete evaluator %s: %s", evaluator_id, exc.message)
            response = upstream_error(exc, "Failed to delete evaluator")
            response.data["banner"] = Notifier(request).banner(response.data["detail"], Severity.ERROR)
            return response
        notice = Notifier(request).banner(evaluators.DELETED)
        return ok(evaluators.DELETED, banner=notice)


# Registration settings / exam date selection


class RegistrationSettingsView(GuidanceAPIView):
    def get(self, request, *args, **kwargs):
        try:
            payload = settings_service.build_page(self.get_client(), request.session)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to load registration settings")
        return self.page(request, payload)

    def patch(self, request, *args, **kwargs):
        serializer = RegistrationSettingsSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return invalid(serializer)
        try:
            draft = settings_service.load_draft(self.get_client(), request.session)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to load registration settings")
        draft.update(**serializer.validated_data)
        settings_service.store_draft(request.session, draft)
        return Response({"settings": draft.payload(), "calendar_visible": draft.calendar_visible()})

    def put(self, request, *args, **kwargs):
        client = self.get_client()
        try:
            next_url = settings_service.save(client, request.session)
        except settings_service.DraftValidationError as exc:
            return guard_failed(str(exc))
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to update settings")
        return flashed(request, "Registration settings updated successfully", next_url=next_url)

    def delete(self, request, *args, **kwargs):
        settings_service.discard_draft(request.session)
        return Response(status=status.HTTP_204_NO_CONTENT)


class RegistrationDateSelectionView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        serializer = DateSelectionSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = serializer.validated_data
        try:
            draft = settings_service.load_draft(self.get_client(), request.session)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to load registration settings")

        result = None
        if data["action"] == "toggle":
            result = draft.toggle(data["date"])
        elif data["action"] == "select_all":
            draft.select_all()
        elif data["action"] == "weekdays":
            draft.select_weekdays()
        else:
            draft.clear()
        settings_service.store_draft(request.session, draft)

        return Response(
            {
                "result": result,
                "selected_exam_dates": draft.selected,
                "selected_count": len(draft.selected),
            }
        )


# Personality test management


class PersonalityQuestionListView(GuidanceAPIView):
    def get(self, request, *args, **kwargs):
        try:
            payload = personality_tests.build_page(self.get_client(), request.session, request.query_params)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to load personality test management")
        return self.page(request, payload)

    def post(self, request, *args, **kwargs):
        serializer = PersonalityQuestionSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        try:
            personality_tests.save_question(self.get_client(), serializer.validated_data)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to create personality question")
        return ok("Personality question created successfully", http_status=status.HTTP_201_CREATED)


class PersonalityQuestionDetailView(GuidanceAPIView):
    def put(self, request, question_id, *args, **kwargs):
        serializer = PersonalityQuestionSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        try:
            personality_tests.save_question(self.get_client(), serializer.validated_data, question_id)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to update personality question")
        return ok("Personality question updated successfully")

    def delete(self, request, question_id, *args, **kwargs):
        if not confirmed(request):
            return needs_confirmation(personality_tests.DELETE_PROMPT)
        try:
            personality_tests.delete_question(self.get_client(), question_id)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to delete personality question")
        return ok("Personality question deleted successfully")


class PersonalityQuestionUploadView(GuidanceAPIView):
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, *args, **kwargs):
        serializer = UploadSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        try:
            personality_tests.upload_questions(self.get_client(), serializer.validated_data["csv_file"])
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to upload CSV file")
        return ok("CSV file uploaded successfully")


class PersonalityItemsPerPageView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        serializer = ItemsPerPageSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = serializer.validated_data
        query_state = QueryState(personality_tests.PAGE_PATH, data["query"])
        return Response(personality_tests.set_items_per_page(request.session, query_state, data["items_per_page"]))


# Question bank


class QuestionBankPageView(GuidanceAPIView):
    def get(self, request, *args, **kwargs):
        query_state = QueryState.from_query(question_bank.PAGE_PATH, request.query_params)
        try:
            payload = question_bank.build_page(self.get_client(), request.session, query_state)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to load question bank")
        return self.page(request, payload)


class QuestionDetailView(GuidanceAPIView):
    def put(self, request, question_id, *args, **kwargs):
        serializer = QuestionUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        try:
            question_bank.update_question(self.get_client(), question_id, serializer.validated_data)
        except question_bank.QuestionGuardError as exc:
            return guard_failed(str(exc), Severity.WARNING)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to update question")
        return ok("Question updated successfully", question_id=question_id)


class QuestionArchiveView(GuidanceAPIView):
    def put(self, request, question_id, *args, **kwargs):
        if not confirmed(request):
            return needs_confirmation(question_bank.ARCHIVE_ONE_PROMPT)
        try:
            question_bank.archive_question(self.get_client(), request.session, question_id)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to archive question")
        return ok("Question archived successfully")


class QuestionBulkArchiveView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        serializer = BulkArchiveSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = serializer.validated_data
        ids = data["question_ids"] or question_bank.page_state(request.session).selection().ids
        if not ids:
            return guard_failed(question_bank.NOTHING_TO_ARCHIVE, Severity.WARNING)
        if not data["confirm"]:
            return needs_confirmation(question_bank.ARCHIVE_PROMPT.format(count=len(ids)))

        try:
            count = question_bank.bulk_archive(self.get_client(), request.session, ids)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to archive questions")
        next_url = QueryState(question_bank.PAGE_PATH, data.get("query") or {}).url()
        return flashed(request, f"{count} questions archived successfully", archived=count, next_url=next_url)


class QuestionUploadView(GuidanceAPIView):
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, *args, **kwargs):
        serializer = UploadSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        try:
            question_bank.upload_questions(self.get_client(), serializer.validated_data["csv_file"])
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to upload questions")
        return ok("Questions uploaded successfully")


class QuestionSelectionView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        serializer = QuestionSelectionSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = serializer.validated_data
        selection = question_bank.apply_selection(
            request.session, data["action"], data.get("question_id"), data["page_ids"]
        )
        page_ids = data["page_ids"]
        return Response(
            {
                "ids": selection.ids,
                "all_selected": bool(page_ids) and selection.is_fully_selected(page_ids),
            }
        )


class QuestionTableMinimizedView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        serializer = TableMinimizedSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        value = question_bank.set_table_minimized(request.session, serializer.validated_data["minimized"])
        return Response({"table_minimized": value})


class QuestionBankNavigateView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        serializer = QuestionBankNavigateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        data = dict(serializer.validated_data)
        current = QueryState(question_bank.PAGE_PATH, data.pop("query"))
        if data.pop("clear"):
            next_state = question_bank.clear_filters(current)
        else:
            next_state = question_bank.navigate(current, **data)
        return Response({"next_url": next_state.url(), "query": next_state.as_dict()})


# Recommendation rules


class RecommendationRuleListView(GuidanceAPIView):
    def get(self, request, *args, **kwargs):
        try:
            payload = recommendation_rules.build_page(self.get_client(), request.session)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to load recommendation rules")
        return self.page(request, payload)

    def post(self, request, *args, **kwargs):
        serializer = RecommendationRuleSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        form = serializer.validated_data
        try:
            recommendation_rules.create_rule(self.get_client(), form)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to create recommendation rule")
        notification = recommendation_rules.rule_notification(
            form["personality_type"], f"New recommendation rule created for {form['personality_type']}!"
        )
        return ok(
            "Recommendation rule created successfully",
            http_status=status.HTTP_201_CREATED,
            rules=expand_rule_form(form),
            notification=notification,
        )


class RecommendationRuleDetailView(GuidanceAPIView):
    def put(self, request, rule_id, *args, **kwargs):
        serializer = RecommendationRuleSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        form = serializer.validated_data
        try:
            recommendation_rules.update_rule(self.get_client(), rule_id, form)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to update recommendation rule")
        notification = recommendation_rules.rule_notification(
            form["personality_type"], f"Recommendation rule updated for {form['personality_type']}!"
        )
        return ok("Recommendation rule updated successfully", notification=notification)

    def delete(self, request, rule_id, *args, **kwargs):
        if not confirmed(request):
            return needs_confirmation(recommendation_rules.DELETE_PROMPT)
        try:
            recommendation_rules.delete_rule(self.get_client(), rule_id)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to delete recommendation rule")
        return ok("Recommendation rule deleted successfully")


class RecommendationRuleExpansionView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        personality_type = str(request.data.get("personality_type") or "").strip()
        if not personality_type:
            return guard_failed("personality_type is required.")
        expanded = recommendation_rules.toggle_expansion(request.session, personality_type)
        return Response({"personality_type": personality_type, "expanded": expanded})


class GenerateAllRulesView(GuidanceAPIView):
    def post(self, request, *args, **kwargs):
        try:
            recommendation_rules.generate_all(self.get_client(), request.session)
        except AdmissionApiError as exc:
            return upstream_error(exc, "Failed to generate rules")
        return ok("New recommendation rules added successfully", reload=True)
