from django.conf import settings
from django.db import models
from django.utils import timezone

from common.enums import UsageKind
from exams.models import Question, QuestionOption, TimeStampedModel


class UserProgress(TimeStampedModel):
    """Latest practice answer per (user, question); re-answering overwrites."""
    user     = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="progress")
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name="progress")
    selected_option = models.ForeignKey(QuestionOption, on_delete=models.SET_NULL, null=True, blank=True)

    is_correct = models.BooleanField(default=False)
    time_spent_seconds = models.PositiveIntegerField(default=0)
    points_earned = models.PositiveIntegerField(default=0)
    answered_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "question"], name="uq_progress_user_question"),
        ]
        indexes = [models.Index(fields=["user", "answered_at"], name="progress_user_answered_idx")]


class DailyUsageCounter(models.Model):
    """Quota-consuming actions per user per UTC+8 calendar day."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="usage_counters")
    date = models.DateField()
    kind = models.CharField(max_length=20, choices=UsageKind.choices)
    count = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "date", "kind"], name="uq_usage_user_date_kind"),
        ]

    def __str__(self):
        return f"{self.user_id} • {self.date} • {self.kind}={self.count}"


class StreakRecord(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="streak")
    current_streak = models.PositiveIntegerField(default=0)
    longest_streak = models.PositiveIntegerField(default=0)
    last_activity_date = models.DateField(null=True, blank=True)   # local (UTC+8) date
    streak_repaired_at = models.DateField(null=True, blank=True)   # local date of last repair
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user_id} • {self.current_streak} (best {self.longest_streak})"
