from django.conf import settings
from django.db import models
from django.utils import timezone


def default_duration_days():
    return settings.SEASON_PASS_DAYS


class SeasonPassCode(models.Model):
    """One-time activation code; ``redeemed_by`` is set at most once."""
    code = models.CharField(max_length=14, unique=True)
    duration_days = models.PositiveIntegerField(default=default_duration_days)
    batch = models.CharField(max_length=64, blank=True, default="")
    expires_at = models.DateTimeField(null=True, blank=True)

    redeemed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="season_pass_codes",
    )
    redeemed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["batch"], name="seasonpass_batch_idx")]

    def __str__(self):
        return self.code

    @property
    def is_redeemed(self) -> bool:
        return self.redeemed_by_id is not None

    def is_expired(self, now=None) -> bool:
        return bool(self.expires_at and self.expires_at <= (now or timezone.now()))
