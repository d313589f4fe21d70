# practice/services/submission.py
import logging

from django.db import transaction
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from rest_framework.exceptions import ValidationError

from common.enums import POINTS_BY_DIFFICULTY, QuestionCategory, UsageKind
from common.numbers import percent
from exams.models import Question
from practice.models import UserProgress
from practice.services.quota import QuotaService
from practice.services.streak import StreakTracker

logger = logging.getLogger(__name__)


class PracticeService:
    def __init__(self, quota: QuotaService, streaks: StreakTracker):
        self.quota = quota
        self.streaks = streaks

    @transaction.atomic
    def submit_practice_answer(self, user, question_id, option_id, time_spent_seconds: int = 0) -> dict:
        """
        Grade one practice answer. Consumes a PRACTICE quota unit first so a
        denied user learns nothing about the question; any later failure
        rolls the unit back.
        """
        self.quota.consume(user, UsageKind.PRACTICE)

        question = get_object_or_404(
            Question.objects.filter(is_active=True).prefetch_related("options"), pk=question_id,
        )
        options = {str(o.id): o for o in question.options.all()}
        selected = options.get(str(option_id))
        if selected is None:
            raise ValidationError("Invalid option selected.")

        correct = question.correct_option()
        is_correct = bool(selected.is_correct)
        points = POINTS_BY_DIFFICULTY[question.difficulty] if is_correct else 0

        UserProgress.objects.update_or_create(
            user=user, question=question,
            defaults={
                "selected_option": selected,
                "is_correct": is_correct,
                "time_spent_seconds": time_spent_seconds or 0,
                "points_earned": points,
                "answered_at": self.quota.access.clock(),
            },
        )
        streak = self.streaks.update_streak(user)

        return {
            "is_correct": is_correct,
            "selected_option_id": str(selected.id),
            "correct_option_id": str(correct.id) if correct else None,
            "explanation": question.explanation_text,
            "points_earned": points,
            "streak": streak,
        }

    def record_explanation_view(self, user) -> dict:
        self.quota.consume(user, UsageKind.EXPLANATION_VIEW)
        return {"success": True, **self.quota.usage(user, UsageKind.EXPLANATION_VIEW)}

    def user_stats(self, user) -> dict:
        agg = UserProgress.objects.filter(user=user).aggregate(
            total=Count("id"), correct=Count("id", filter=Q(is_correct=True)),
        )
        return {
            "total_attempts": agg["total"],
            "correct_answers": agg["correct"],
            "accuracy": percent(agg["correct"], agg["total"]),
        }

    def category_progress(self, user) -> dict:
        attempted = {
            row["question__category"]: row
            for row in (
                UserProgress.objects.filter(user=user)
                .values("question__category")
                .annotate(attempted=Count("id"), correct=Count("id", filter=Q(is_correct=True)))
            )
        }
        available = dict(
            Question.objects.filter(is_active=True)
            .values("category")
            .annotate(n=Count("id"))
            .values_list("category", "n")
        )

        categories = []
        for category in QuestionCategory.values:
            row = attempted.get(category, {})
            tried, right = row.get("attempted", 0), row.get("correct", 0)
            categories.append({
                "category": category,
                "attempted_questions": tried,
                "correct_answers": right,
                "accuracy": percent(right, tried),
                "questions_available": available.get(category, 0),
            })
        return {"categories": categories, "overall_stats": self.user_stats(user)}
