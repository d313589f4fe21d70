# analytics/views.py
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from analytics.apps import get_analytics
from practice.apps import get_streaks


class AnalyticsView(APIView):
    """GET /api/analytics/ returns every dashboard section in one payload."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_analytics().all(request.user))


class DashboardView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_analytics().dashboard(request.user))


class WeeklyActivityView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_analytics().weekly_activity(request.user))


class PerformanceByCategoryView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_analytics().performance_by_category(request.user))


class StrengthsWeaknessesView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_analytics().strengths_weaknesses(request.user))


class TimeTrackingView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_analytics().time_tracking(request.user))


class StreakView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(get_analytics().streak(request.user))


class StreakRepairView(APIView):
    """
    POST /api/analytics/streak/repair/
    Restores a streak broken by exactly one missed day. 400 otherwise.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        return Response(get_streaks().repair_streak(request.user))


class InsightsView(APIView):
    """GET /api/analytics/insights/ rule-based study advice; rate limited per user."""
    permission_classes = [permissions.IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "analytics_insights"

    def get(self, request):
        return Response(get_analytics().insights(request.user))
