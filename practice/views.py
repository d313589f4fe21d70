# practice/views.py
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from common.enums import UsageKind
from practice.apps import get_practice, get_quota
from practice.serializers import PracticeSubmitSerializer


class PracticeSubmitView(APIView):
    """
    POST /api/practice/submit/
    Body: { "question_id", "selected_option_id", "time_spent_seconds"? }
    Free users are limited per UTC+8 day; the answer also counts toward the streak.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        ser = PracticeSubmitSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        result = get_practice().submit_practice_answer(
            request.user, data["question_id"], data["selected_option_id"], data["time_spent_seconds"],
        )
        return Response(result, status=status.HTTP_200_OK)


class PracticeLimitsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_quota().usage(request.user, UsageKind.PRACTICE))


class PracticeStatsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_practice().user_stats(request.user))


class CategoryProgressView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_practice().category_progress(request.user))


class ExplanationViewRecordView(APIView):
    """POST /api/practice/explanation-view/ counts one explanation view against today's quota."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        return Response(get_practice().record_explanation_view(request.user))


class ExplanationLimitsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_quota().usage(request.user, UsageKind.EXPLANATION_VIEW))
