"""Question bank API."""
import pytest

from common.enums import Difficulty, QuestionCategory
from exams.models import Question
from tests.helpers import client_for

pytestmark = pytest.mark.django_db

PAYLOAD = {
    "category": QuestionCategory.NUMERICAL_ABILITY,
    "difficulty": Difficulty.EASY,
    "text": "What is 12 x 12?",
    "explanation": "12 x 12 = 144.",
    "options": [
        {"text": "124"},
        {"text": "144", "is_correct": True},
        {"text": "154"},
    ],
}


def test_admin_creates_question_with_labelled_options(admin_user):
    resp = client_for(admin_user).post("/api/questions/", PAYLOAD, format="json")
    assert resp.status_code == 201
    options = resp.json()["options"]
    assert [o["label"] for o in options] == ["A", "B", "C"]
    assert [o["is_correct"] for o in options] == [False, True, False]


def test_question_needs_exactly_one_correct_option(admin_user):
    bad = dict(PAYLOAD, options=[{"text": "1", "is_correct": True}, {"text": "2", "is_correct": True}])
    assert client_for(admin_user).post("/api/questions/", bad, format="json").status_code == 400
    assert not Question.objects.exists()


def test_students_read_but_cannot_write(api, make_question):
    make_question(category=QuestionCategory.VERBAL_ABILITY)
    make_question(category=QuestionCategory.CLERICAL_ABILITY)
    assert api.post("/api/questions/", PAYLOAD, format="json").status_code == 403

    body = api.get("/api/questions/", {"category": QuestionCategory.CLERICAL_ABILITY}).json()
    assert body["count"] == 1
    assert body["results"][0]["category"] == QuestionCategory.CLERICAL_ABILITY


def test_bulk_create(admin_user):
    resp = client_for(admin_user).post("/api/questions/bulk/", [PAYLOAD, PAYLOAD], format="json")
    assert resp.status_code == 201
    assert resp.json()["created"] == 2
    assert Question.objects.count() == 2
