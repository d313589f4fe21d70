"""Mock exam lifecycle through the HTTP API and the engine."""
import uuid

import pytest

from common.enums import ExamStatus, QuestionCategory
from exams.apps import get_engine
from exams.models import MockExamSession, Question
from exams.services.mock_exam import ExamConfig
from tests.helpers import client_for, correct_option_id, wrong_option_id

pytestmark = pytest.mark.django_db

CREATE_URL = "/api/mock-exams/"


def _create(api, **overrides):
    body = {"total_questions": 10, "time_limit_minutes": 5, "passing_score": 70, "categories": "MIXED"}
    body.update(overrides)
    return api.post(CREATE_URL, body, format="json")


def _questions(exam):
    by_id = {str(q.id): q for q in Question.objects.filter(id__in=[q["id"] for q in exam["questions"]])}
    return [by_id[q["id"]] for q in exam["questions"]]


def test_ten_question_exam_scores_seventy_and_passes(api, question_bank, clock):
    assert _create(api, total_questions=25).status_code == 403

    resp = _create(api)
    assert resp.status_code == 201
    exam = resp.json()
    assert exam["status"] == ExamStatus.IN_PROGRESS
    assert len(exam["questions"]) == 10
    # answers are never revealed while the exam runs
    assert "correct_option_id" not in exam["questions"][0]

    questions = _questions(exam)
    for i, q in enumerate(questions):
        option = correct_option_id(q) if i < 7 else wrong_option_id(q)
        r = api.post(f"{CREATE_URL}{exam['exam_id']}/answers/",
                     {"question_id": str(q.id), "selected_option_id": option}, format="json")
        assert r.status_code == 200

    clock.advance(minutes=3)
    submitted = api.post(f"{CREATE_URL}{exam['exam_id']}/submit/").json()
    assert submitted["score"] == 70
    assert submitted["passed"] is True
    assert submitted["correct_answers"] == 7
    assert submitted["incorrect_answers"] == 3
    assert submitted["unanswered_questions"] == 0
    assert submitted["time_spent_seconds"] == 180

    results = api.get(f"{CREATE_URL}{exam['exam_id']}/results/").json()
    assert results["score"] == submitted["score"]
    assert results["passed"] == submitted["passed"]
    assert all("correct_option_id" in q for q in results["questions"])


def test_quota_denial_body_explains_limit(api, question_bank):
    body = _create(api, total_questions=25).json()
    assert body["code"] == "quota_exceeded"
    assert body["limit"] == 20
    assert body["used"] == 25
    assert "Season Pass" in body["upgrade"]


def test_premium_user_may_exceed_free_question_cap(premium_user, question_bank):
    resp = _create(client_for(premium_user), total_questions=40)
    assert resp.status_code == 201
    assert len(resp.json()["questions"]) == 40


def test_invalid_config_is_rejected(api, question_bank):
    assert _create(api, total_questions=0).status_code == 400
    assert _create(api, time_limit_minutes=181).status_code == 400
    assert _create(api, passing_score=101).status_code == 400
    assert _create(api, categories=["ASTROLOGY"]).status_code == 400
    assert MockExamSession.objects.count() == 0


def test_not_enough_questions(api, make_question):
    for _ in range(3):
        make_question(category=QuestionCategory.CLERICAL_ABILITY)
    resp = _create(api, total_questions=5, categories=[QuestionCategory.CLERICAL_ABILITY])
    assert resp.status_code == 400
    assert "Not enough questions" in str(resp.json())
    assert MockExamSession.objects.count() == 0


def test_monthly_cap_counts_completed_exams(user, question_bank, clock):
    engine = get_engine()
    config = ExamConfig(total_questions=5, time_limit_minutes=10)
    for _ in range(3):
        exam = engine.create_session(user, config)
        engine.submit(user, exam["exam_id"])

    resp = _create(client_for(user), total_questions=5)
    assert resp.status_code == 403
    assert resp.json()["limit"] == 3

    limits = engine.limits(user)
    assert limits["exams_used_this_month"] == 3
    assert limits["remaining_exams_this_month"] == 0


def test_answered_plus_unanswered_is_total(user, question_bank, clock):
    engine = get_engine()
    exam = engine.create_session(user, ExamConfig(total_questions=10, time_limit_minutes=5))
    q = _questions(exam)
    engine.save_answer(user, exam["exam_id"], q[0].id, correct_option_id(q[0]))
    engine.save_answer(user, exam["exam_id"], q[1].id, wrong_option_id(q[1]))

    progress = engine.get_state(user, exam["exam_id"])["progress"]
    assert progress["answered"] == 2
    assert progress["answered"] + progress["unanswered"] == 10


def test_reanswering_overwrites(user, question_bank, clock):
    engine = get_engine()
    exam = engine.create_session(user, ExamConfig(total_questions=3, time_limit_minutes=5))
    q = _questions(exam)[0]
    engine.save_answer(user, exam["exam_id"], q.id, wrong_option_id(q))
    engine.save_answer(user, exam["exam_id"], q.id, correct_option_id(q))

    state = engine.get_state(user, exam["exam_id"])
    assert state["answers"] == {str(q.id): correct_option_id(q)}
    assert state["progress"]["answered"] == 1


def test_flag_toggle_is_idempotent(api, question_bank, clock):
    exam = _create(api, total_questions=3).json()
    qid = exam["questions"][0]["id"]
    url = f"{CREATE_URL}{exam['exam_id']}/flag/"

    api.patch(url, {"question_id": qid, "flagged": True}, format="json")
    body = api.patch(url, {"question_id": qid, "flagged": True}, format="json").json()
    assert body["flagged_questions"] == [qid]
    assert body["progress"]["flagged"] == 1

    body = api.patch(url, {"question_id": qid, "flagged": False}, format="json").json()
    assert body["flagged_questions"] == []


def test_answer_must_belong_to_exam_and_question(user, question_bank, make_question, clock):
    engine = get_engine()
    exam = engine.create_session(user, ExamConfig(total_questions=3, time_limit_minutes=5))
    q1, q2 = _questions(exam)[:2]
    stranger = make_question()
    client = client_for(user)
    url = f"{CREATE_URL}{exam['exam_id']}/answers/"

    r = client.post(url, {"question_id": str(stranger.id), "selected_option_id": correct_option_id(stranger)},
                    format="json")
    assert r.status_code == 400
    r = client.post(url, {"question_id": str(q1.id), "selected_option_id": correct_option_id(q2)}, format="json")
    assert r.status_code == 400
    assert engine.get_state(user, exam["exam_id"])["answers"] == {}


def test_time_limit_boundary(user, question_bank, clock):
    engine = get_engine()
    exam = engine.create_session(user, ExamConfig(total_questions=3, time_limit_minutes=5))
    q = _questions(exam)[0]
    client = client_for(user)
    url = f"{CREATE_URL}{exam['exam_id']}/answers/"
    body = {"question_id": str(q.id), "selected_option_id": correct_option_id(q)}

    clock.advance(seconds=5 * 60 - 1)
    assert client.post(url, body, format="json").status_code == 200
    assert engine.get_state(user, exam["exam_id"])["time_remaining_seconds"] == 1

    clock.advance(seconds=1)
    resp = client.post(url, body, format="json")
    assert resp.status_code == 409
    assert resp.json()["code"] == "state_conflict"

    state = engine.get_state(user, exam["exam_id"])
    assert state["is_expired"] is True
    assert state["time_remaining_seconds"] == 0

    # an expired exam can still be handed in
    assert engine.submit(user, exam["exam_id"])["correct_answers"] == 1


def test_double_submit_conflicts(api, question_bank, clock):
    exam = _create(api, total_questions=3).json()
    url = f"{CREATE_URL}{exam['exam_id']}/submit/"
    first = api.post(url)
    assert first.status_code == 200
    assert first.json()["score"] == 0
    assert api.post(url).status_code == 409
    assert MockExamSession.objects.get().score == 0


def test_finished_exam_is_read_only(api, question_bank, clock):
    exam = _create(api, total_questions=3).json()
    qid = exam["questions"][0]["id"]
    api.post(f"{CREATE_URL}{exam['exam_id']}/submit/")

    r = api.patch(f"{CREATE_URL}{exam['exam_id']}/flag/", {"question_id": qid, "flagged": True}, format="json")
    assert r.status_code == 409
    assert api.post(f"{CREATE_URL}{exam['exam_id']}/abandon/").status_code == 409


def test_abandoned_exam_cannot_be_submitted(api, question_bank, clock):
    exam = _create(api, total_questions=3).json()
    resp = api.post(f"{CREATE_URL}{exam['exam_id']}/abandon/")
    assert resp.json()["status"] == ExamStatus.ABANDONED
    assert api.post(f"{CREATE_URL}{exam['exam_id']}/submit/").status_code == 409
    assert api.get(f"{CREATE_URL}{exam['exam_id']}/results/").status_code == 409


def test_results_require_completion(api, question_bank, clock):
    exam = _create(api, total_questions=3).json()
    assert api.get(f"{CREATE_URL}{exam['exam_id']}/results/").status_code == 409


def test_other_users_exam_is_not_found(api, other_user, question_bank, clock):
    exam = _create(api, total_questions=3).json()
    intruder = client_for(other_user)
    qid = exam["questions"][0]["id"]

    assert intruder.get(f"{CREATE_URL}{exam['exam_id']}/").status_code == 404
    assert intruder.post(f"{CREATE_URL}{exam['exam_id']}/submit/").status_code == 404
    r = intruder.patch(f"{CREATE_URL}{exam['exam_id']}/flag/", {"question_id": qid, "flagged": True}, format="json")
    assert r.status_code == 404
    assert api.get(f"{CREATE_URL}{uuid.uuid4()}/").status_code == 404


def test_in_progress_check_reaps_expired_session(user, question_bank, clock):
    engine = get_engine()
    exam = engine.create_session(user, ExamConfig(total_questions=3, time_limit_minutes=5))

    current = engine.check_in_progress(user)
    assert current["has_in_progress_exam"] is True
    assert current["exam_id"] == exam["exam_id"]
    assert current["time_remaining_seconds"] == 300

    clock.advance(minutes=5)
    assert engine.check_in_progress(user) == {"has_in_progress_exam": False}
    assert MockExamSession.objects.get(pk=exam["exam_id"]).status == ExamStatus.ABANDONED


def test_history_lists_exams_with_stats(api, question_bank, clock):
    first = _create(api, total_questions=2).json()
    for q in _questions(first):
        api.post(f"{CREATE_URL}{first['exam_id']}/answers/",
                 {"question_id": str(q.id), "selected_option_id": correct_option_id(q)}, format="json")
    api.post(f"{CREATE_URL}{first['exam_id']}/submit/")

    second = _create(api, total_questions=2).json()
    api.post(f"{CREATE_URL}{second['exam_id']}/submit/")
    _create(api, total_questions=2)

    body = api.get(f"{CREATE_URL}history/").json()
    assert len(body["exams"]) == 3
    assert body["total_completed"] == 2
    assert body["average_score"] == 50
    assert body["pass_rate"] == 50

    completed = api.get(f"{CREATE_URL}history/", {"status": ExamStatus.COMPLETED, "limit": 1}).json()
    assert len(completed["exams"]) == 1
    assert completed["exams"][0]["status"] == ExamStatus.COMPLETED


def test_limits_endpoint(api, premium_user):
    free = api.get(f"{CREATE_URL}limits/").json()
    assert free["is_premium"] is False
    assert free["max_questions_per_exam"] == 20
    assert free["max_exams_per_month"] == 3

    premium = client_for(premium_user).get(f"{CREATE_URL}limits/").json()
    assert premium["max_questions_per_exam"] == 170
    assert premium["max_exams_per_month"] == -1
    assert premium["remaining_exams_this_month"] == -1
