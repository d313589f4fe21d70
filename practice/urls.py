from django.urls import path

from .views import (
    CategoryProgressView, ExplanationLimitsView, ExplanationViewRecordView,
    PracticeLimitsView, PracticeStatsView, PracticeSubmitView,
)

urlpatterns = [
    path("practice/submit/",              PracticeSubmitView.as_view(),        name="practice-submit"),
    path("practice/limits/",              PracticeLimitsView.as_view(),        name="practice-limits"),
    path("practice/stats/",               PracticeStatsView.as_view(),         name="practice-stats"),
    path("practice/progress/categories/", CategoryProgressView.as_view(),      name="practice-category-progress"),
    path("practice/explanation-view/",    ExplanationViewRecordView.as_view(), name="practice-explanation-view"),
    path("practice/explanation-limits/",  ExplanationLimitsView.as_view(),     name="practice-explanation-limits"),
]
