from django.urls import path

from .views import (
    AnalyticsView, DashboardView, InsightsView, PerformanceByCategoryView, StreakRepairView,
    StreakView, StrengthsWeaknessesView, TimeTrackingView, WeeklyActivityView,
)

urlpatterns = [
    path("analytics/",                         AnalyticsView.as_view(),             name="analytics"),
    path("analytics/dashboard/",               DashboardView.as_view(),             name="analytics-dashboard"),
    path("analytics/weekly-activity/",         WeeklyActivityView.as_view(),        name="analytics-weekly-activity"),
    path("analytics/performance-by-category/", PerformanceByCategoryView.as_view(), name="analytics-performance"),
    path("analytics/strengths-weaknesses/",    StrengthsWeaknessesView.as_view(),   name="analytics-strengths-weaknesses"),
    path("analytics/time-tracking/",           TimeTrackingView.as_view(),          name="analytics-time-tracking"),
    path("analytics/streak/",                  StreakView.as_view(),                name="analytics-streak"),
    path("analytics/streak/repair/",           StreakRepairView.as_view(),          name="analytics-streak-repair"),
    path("analytics/insights/",                InsightsView.as_view(),              name="analytics-insights"),
]
