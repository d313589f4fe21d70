from __future__ import annotations

import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from common.enums import MIXED_CATEGORIES, Difficulty, ExamStatus, QuestionCategory


class TimeStampedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Question(TimeStampedModel):
    category   = models.CharField(max_length=24, choices=QuestionCategory.choices)
    difficulty = models.CharField(max_length=16, choices=Difficulty.choices, default=Difficulty.MEDIUM)
    text = models.TextField()
    explanation    = models.TextField(blank=True)
    ai_explanation = models.TextField(blank=True)

    is_active = models.BooleanField(default=True)
    tags = models.JSONField(blank=True, default=list)

    class Meta:
        indexes = [
            models.Index(fields=["category"], name="question_category_idx"),
            models.Index(fields=["difficulty"], name="question_difficulty_idx"),
            models.Index(fields=["is_active", "category", "difficulty"], name="question_pool_idx"),
        ]

    def __str__(self):
        return f"Q{self.pk}: {self.text[:60]}"

    @property
    def explanation_text(self) -> str:
        """Authored explanation, falling back to the generated one."""
        return self.explanation or self.ai_explanation

    def correct_option(self) -> QuestionOption | None:
        # works off the prefetch cache when options were prefetched
        for opt in self.options.all():
            if opt.is_correct:
                return opt
        return None


class QuestionOption(TimeStampedModel):
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name="options")
    label = models.CharField(max_length=1, blank=True)   # A-E
    text = models.TextField()
    is_correct = models.BooleanField(default=False)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ("question", "order", "created_at")
        indexes  = [models.Index(fields=["question", "order"], name="option_question_order_idx")]

    def __str__(self):
        return f"{self.label or self.order}. {self.text[:40]}"


class MockExamSession(TimeStampedModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="mock_exams")

    total_questions    = models.PositiveIntegerField(validators=[MinValueValidator(1), MaxValueValidator(170)])
    time_limit_minutes = models.PositiveIntegerField(validators=[MinValueValidator(1), MaxValueValidator(180)])
    passing_score      = models.PositiveIntegerField(default=70, validators=[MaxValueValidator(100)])
    categories = models.JSONField(default=MIXED_CATEGORIES)   # list of categories, or "MIXED"
    difficulty = models.CharField(max_length=16, choices=Difficulty.choices, null=True, blank=True)

    # fixed at creation; answers/flags may only reference these ids
    question_ids      = models.JSONField(default=list)
    answers           = models.JSONField(default=dict, blank=True)   # {question_id: option_id}
    flagged_questions = models.JSONField(default=list, blank=True)

    status = models.CharField(max_length=16, choices=ExamStatus.choices, default=ExamStatus.IN_PROGRESS)
    score  = models.PositiveIntegerField(null=True, blank=True)
    passed = models.BooleanField(null=True, blank=True)

    started_at   = models.DateTimeField(default=timezone.now)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ("-started_at",)
        indexes = [
            models.Index(fields=["user", "status"], name="mockexam_user_status_idx"),
            models.Index(fields=["user", "completed_at"], name="mockexam_user_completed_idx"),
        ]

    def __str__(self):
        return f"MockExam {self.pk} • {self.user_id} • {self.status}"

    def elapsed_seconds(self, now) -> int:
        return int((now - self.started_at).total_seconds())

    def remaining_seconds(self, now) -> int:
        return max(0, self.time_limit_minutes * 60 - self.elapsed_seconds(now))

    def is_expired(self, now) -> bool:
        return self.elapsed_seconds(now) >= self.time_limit_minutes * 60
