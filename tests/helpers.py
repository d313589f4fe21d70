from datetime import datetime, timedelta

from rest_framework.test import APIClient


class FrozenClock:
    """Callable clock the services accept in place of ``timezone.now``."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def correct_option_id(question) -> str:
    return str(question.options.get(is_correct=True).id)


def wrong_option_id(question) -> str:
    return str(question.options.filter(is_correct=False).first().id)


def client_for(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client
