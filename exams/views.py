# exams/views.py
from django.db import transaction
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdmin, IsAdminOrReadOnly
from exams.apps import get_engine
from exams.models import Question
from exams.serializers import (
    HistoryQuerySerializer,
    MockExamCreateSerializer,
    QuestionCreateSerializer,
    QuestionSerializer,
    SaveAnswerSerializer,
    ToggleFlagSerializer,
)
from exams.services.mock_exam import ExamConfig


class SmallPage(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 200


# ---------- Question bank ----------
class QuestionViewSet(viewsets.ModelViewSet):
    """
    /api/questions/  read for any signed-in user, write for admins.
    Filter with ?category=...&difficulty=...&is_active=...
    """
    queryset = Question.objects.all().prefetch_related("options").order_by("-created_at")
    permission_classes = [IsAdminOrReadOnly]
    serializer_class = QuestionSerializer
    pagination_class = SmallPage
    filterset_fields = ["category", "difficulty", "is_active"]

    def get_serializer_class(self):
        if self.action in ["create", "bulk"]:
            return QuestionCreateSerializer
        return super().get_serializer_class()

    def create(self, request, *args, **kwargs):
        ser = QuestionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        q = ser.save()
        return Response(QuestionSerializer(q).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="bulk")
    def bulk(self, request):
        if not IsAdmin().has_permission(request, self):
            raise PermissionDenied("Only admin can bulk-create questions.")
        if not isinstance(request.data, list):
            return Response({"detail": "Expected list payload"}, status=400)
        ser = QuestionCreateSerializer(data=request.data, many=True)
        ser.is_valid(raise_exception=True)
        with transaction.atomic():
            created = [QuestionCreateSerializer().create(item).id for item in ser.validated_data]
        qs = Question.objects.filter(id__in=created).prefetch_related("options")
        return Response({"created": len(created), "questions": QuestionSerializer(qs, many=True).data}, status=201)


# ---------- Mock exams ----------
class MockExamCreateView(APIView):
    """
    POST /api/mock-exams/
    Body: { "total_questions": 10, "time_limit_minutes": 5, "passing_score": 70,
            "categories": "MIXED" | ["VERBAL_ABILITY", ...], "difficulty"?: "EASY" }
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        ser = MockExamCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        payload = get_engine().create_session(request.user, ExamConfig(**ser.validated_data))
        return Response(payload, status=status.HTTP_201_CREATED)


class MockExamHistoryView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        ser = HistoryQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        return Response(get_engine().history(
            request.user,
            status=ser.validated_data.get("status"),
            limit=ser.validated_data["limit"],
        ))


class MockExamInProgressView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_engine().check_in_progress(request.user))


class MockExamLimitsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_engine().limits(request.user))


class MockExamStateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, exam_id):
        return Response(get_engine().get_state(request.user, exam_id))


class MockExamAnswerView(APIView):
    """
    POST /api/mock-exams/<id>/answers/
    Body: { "question_id": "<uuid>", "selected_option_id": "<uuid>" }
    Re-answering a question overwrites the previous choice.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, exam_id):
        ser = SaveAnswerSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response(get_engine().save_answer(
            request.user, exam_id,
            ser.validated_data["question_id"],
            ser.validated_data["selected_option_id"],
        ))


class MockExamFlagView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, exam_id):
        ser = ToggleFlagSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response(get_engine().toggle_flag(
            request.user, exam_id,
            ser.validated_data["question_id"],
            ser.validated_data["flagged"],
        ))


class MockExamSubmitView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, exam_id):
        return Response(get_engine().submit(request.user, exam_id))


class MockExamResultsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, exam_id):
        return Response(get_engine().get_results(request.user, exam_id))


class MockExamAbandonView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, exam_id):
        return Response(get_engine().abandon(request.user, exam_id))
