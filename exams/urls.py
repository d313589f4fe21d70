from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    MockExamAbandonView, MockExamAnswerView, MockExamCreateView, MockExamFlagView,
    MockExamHistoryView, MockExamInProgressView, MockExamLimitsView, MockExamResultsView,
    MockExamStateView, MockExamSubmitView, QuestionViewSet,
)

router = DefaultRouter()
router.register(r"questions", QuestionViewSet, basename="question")

urlpatterns = [
    path("mock-exams/",             MockExamCreateView.as_view(),     name="mock-exam-create"),
    path("mock-exams/history/",     MockExamHistoryView.as_view(),    name="mock-exam-history"),
    path("mock-exams/in-progress/", MockExamInProgressView.as_view(), name="mock-exam-in-progress"),
    path("mock-exams/limits/",      MockExamLimitsView.as_view(),     name="mock-exam-limits"),

    path("mock-exams/<uuid:exam_id>/",          MockExamStateView.as_view(),   name="mock-exam-state"),
    path("mock-exams/<uuid:exam_id>/answers/",  MockExamAnswerView.as_view(),  name="mock-exam-answer"),
    path("mock-exams/<uuid:exam_id>/flag/",     MockExamFlagView.as_view(),    name="mock-exam-flag"),
    path("mock-exams/<uuid:exam_id>/submit/",   MockExamSubmitView.as_view(),  name="mock-exam-submit"),
    path("mock-exams/<uuid:exam_id>/results/",  MockExamResultsView.as_view(), name="mock-exam-results"),
    path("mock-exams/<uuid:exam_id>/abandon/",  MockExamAbandonView.as_view(), name="mock-exam-abandon"),
] + router.urls
