# exams/apps.py
from django.apps import AppConfig, apps


class ExamsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "exams"

    def ready(self):
        from exams.services.mock_exam import MockExamEngine
        from exams.services.sampler import QuestionSampler

        # one shared engine per process; views reach it through get_engine()
        self.sampler = QuestionSampler()
        self.engine = MockExamEngine(
            sampler=self.sampler,
            access=apps.get_app_config("accounts").access,
        )


def get_engine():
    return apps.get_app_config("exams").engine
