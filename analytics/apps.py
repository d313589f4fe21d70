# analytics/apps.py
from django.apps import AppConfig, apps


class AnalyticsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "analytics"

    def ready(self):
        from analytics.services import AnalyticsService

        self.service = AnalyticsService(streaks=apps.get_app_config("practice").streaks)


def get_analytics():
    return apps.get_app_config("analytics").service
