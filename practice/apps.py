# practice/apps.py
from django.apps import AppConfig, apps


class PracticeConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "practice"

    def ready(self):
        from practice.services.quota import QuotaService
        from practice.services.streak import StreakTracker
        from practice.services.submission import PracticeService

        access = apps.get_app_config("accounts").access
        self.quota = QuotaService(access=access)
        self.streaks = StreakTracker(access=access)
        self.practice = PracticeService(quota=self.quota, streaks=self.streaks)


def get_quota():
    return apps.get_app_config("practice").quota


def get_streaks():
    return apps.get_app_config("practice").streaks


def get_practice():
    return apps.get_app_config("practice").practice
