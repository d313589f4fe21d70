from datetime import timedelta

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from common.enums import Theme


class User(AbstractUser):
    class Roles(models.TextChoices):
        ADMIN   = "ADMIN",   "Admin"
        STUDENT = "STUDENT", "Student"

    role = models.CharField(max_length=20, choices=Roles.choices, default=Roles.STUDENT)
    email = models.EmailField(unique=True)

    # Season Pass entitlement; a past premium_expiry means free tier
    is_premium = models.BooleanField(default=False)
    premium_expiry = models.DateTimeField(null=True, blank=True)

    daily_goal = models.PositiveIntegerField(default=20)
    theme = models.CharField(max_length=8, choices=Theme.choices, default=Theme.SYSTEM)
    exam_date = models.DateField(null=True, blank=True)

    def __str__(self):
        return f"{self.email} • {self.role}{' • premium' if self.is_premium else ''}"

    def grant_season_pass(self, days: int, now=None):
        """
        Extend (or start) premium for ``days`` from the later of now / current expiry.
        Open-ended premium (no expiry) stays open-ended.
        """
        now = now or timezone.now()
        if self.is_premium and self.premium_expiry is None:
            return
        base = self.premium_expiry if (self.is_premium and self.premium_expiry > now) else now
        self.is_premium = True
        self.premium_expiry = base + timedelta(days=days)
        self.save(update_fields=["is_premium", "premium_expiry"])
