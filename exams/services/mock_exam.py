# exams/services/mock_exam.py
"""
Mock exam session lifecycle: IN_PROGRESS -> COMPLETED | ABANDONED.

The session row is the single source of truth. The timer is never driven
by a background job: an expired IN_PROGRESS session refuses answer and flag
changes, may still be submitted, and is reaped to ABANDONED by
``check_in_progress``. Terminal transitions are conditional UPDATEs filtered
on ``status=IN_PROGRESS`` so two concurrent finalizations cannot both win.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from accounts.access import AccessService, Unlimited, above_cap, exceeds_limit, limit_value, remaining
from common.enums import MIXED_CATEGORIES, ExamStatus, QuestionCategory
from common.exceptions import QuotaExceeded, StateConflict
from common.localtime import start_of_local_month
from common.numbers import percent, round_half_up
from exams.models import MockExamSession, Question, QuestionOption
from exams.services.sampler import QuestionSampler

logger = logging.getLogger(__name__)

MAX_QUESTIONS = 170
MAX_TIME_LIMIT_MINUTES = 180


@dataclass(frozen=True)
class ExamConfig:
    total_questions: int
    time_limit_minutes: int
    passing_score: int = 70
    categories: list[str] | str = MIXED_CATEGORIES
    difficulty: str | None = None

    def validate(self):
        if not 1 <= self.total_questions <= MAX_QUESTIONS:
            raise ValidationError(f"Total questions must be between 1 and {MAX_QUESTIONS}.")
        if not 1 <= self.time_limit_minutes <= MAX_TIME_LIMIT_MINUTES:
            raise ValidationError(f"Time limit must be between 1 and {MAX_TIME_LIMIT_MINUTES} minutes.")
        if not 0 <= self.passing_score <= 100:
            raise ValidationError("Passing score must be between 0 and 100.")
        if self.categories != MIXED_CATEGORIES:
            if not self.categories:
                raise ValidationError("Choose at least one category or MIXED.")
            unknown = set(self.categories) - set(QuestionCategory.values)
            if unknown:
                raise ValidationError(f"Unknown categories: {', '.join(sorted(unknown))}.")


def _progress(session: MockExamSession) -> dict:
    answered = len(session.answers)
    return {
        "answered": answered,
        "flagged": len(session.flagged_questions),
        "unanswered": session.total_questions - answered,
    }


def _question_payload(q: Question, reveal: bool = False) -> dict:
    data = {
        "id": str(q.id),
        "category": q.category,
        "difficulty": q.difficulty,
        "text": q.text,
        "options": [
            {"id": str(o.id), "label": o.label, "text": o.text}
            for o in q.options.all()
        ],
    }
    if reveal:
        correct = q.correct_option()
        data["correct_option_id"] = str(correct.id) if correct else None
        data["explanation"] = q.explanation_text
    return data


def completed_exam_stats(user) -> dict:
    stats = MockExamSession.objects.filter(user=user, status=ExamStatus.COMPLETED).aggregate(
        total=Count("id"),
        score_sum=Sum("score"),
        passed=Count("id", filter=Q(passed=True)),
    )
    total = stats["total"] or 0
    return {
        "total_completed": total,
        "average_score": round_half_up(Decimal(stats["score_sum"]) / total) if total else 0,
        "pass_rate": percent(stats["passed"], total),
    }


def _as_uuid(value, what: str) -> str:
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise ValidationError(f"Invalid {what} id.")


class MockExamEngine:
    def __init__(
        self,
        sampler: QuestionSampler,
        access: AccessService,
        clock: Callable[[], datetime] = timezone.now,
    ):
        self.sampler = sampler
        self.access = access
        self.clock = clock

    # ── helpers ───────────────────────────────────────────────────────────────
    def _get_session(self, user, session_id, for_update=False) -> MockExamSession:
        # owner-filtered so another user's session is indistinguishable from a missing one
        qs = MockExamSession.objects.filter(user=user)
        if for_update:
            qs = qs.select_for_update()
        return get_object_or_404(qs, pk=session_id)

    def _ordered_questions(self, session: MockExamSession) -> list[Question]:
        by_id = {
            str(q.id): q
            for q in Question.objects.filter(id__in=session.question_ids).prefetch_related("options")
        }
        return [by_id[qid] for qid in session.question_ids if qid in by_id]

    def _ensure_mutable(self, session: MockExamSession, now: datetime):
        if session.status != ExamStatus.IN_PROGRESS:
            raise StateConflict("Cannot modify a finished exam.")
        if session.is_expired(now):
            raise StateConflict("Exam time has expired.")

    def _ensure_member(self, session: MockExamSession, question_id) -> str:
        qid = _as_uuid(question_id, "question")
        if qid not in session.question_ids:
            raise ValidationError("Question does not belong to this exam.")
        return qid

    def _completed_this_month(self, user, now: datetime) -> int:
        return MockExamSession.objects.filter(
            user=user,
            status=ExamStatus.COMPLETED,
            completed_at__gte=start_of_local_month(now),
        ).count()

    def _breakdown(self, session: MockExamSession, questions: list[Question]) -> dict:
        correct = incorrect = unanswered = 0
        details = []
        for q in questions:
            qid = str(q.id)
            selected = session.answers.get(qid)
            right = q.correct_option()
            right_id = str(right.id) if right else None
            is_correct = selected is not None and selected == right_id
            if selected is None:
                unanswered += 1
            elif is_correct:
                correct += 1
            else:
                incorrect += 1
            details.append({
                **_question_payload(q, reveal=True),
                "selected_option_id": selected,
                "is_correct": is_correct,
                "flagged": qid in session.flagged_questions,
            })
        # questions removed from the bank since creation count as unanswered
        unanswered += session.total_questions - len(questions)
        return {
            "correct_answers": correct,
            "incorrect_answers": incorrect,
            "unanswered_questions": unanswered,
            "questions": details,
        }

    def _results_payload(self, session: MockExamSession, breakdown: dict) -> dict:
        spent = int((session.completed_at - session.started_at).total_seconds())
        return {
            "exam_id": str(session.id),
            "score": session.score,
            "passed": session.passed,
            "passing_score": session.passing_score,
            "total_questions": session.total_questions,
            "time_spent_seconds": spent,
            "time_spent_minutes": round_half_up(spent / 60),
            "completed_at": session.completed_at.isoformat(),
            **breakdown,
        }

    # ── operations ────────────────────────────────────────────────────────────
    def create_session(self, user, config: ExamConfig) -> dict:
        config.validate()
        now = self.clock()
        limits = self.access.limits(user)

        if above_cap(config.total_questions, limits.mock_exam_questions_limit):
            cap = limit_value(limits.mock_exam_questions_limit)
            logger.info("Mock exam denied for user %s: %s questions over cap %s",
                        user.pk, config.total_questions, cap)
            raise QuotaExceeded(
                f"Free users can create mock exams with up to {cap} questions. "
                f"Season Pass allows up to {MAX_QUESTIONS}.",
                limit=cap, used=config.total_questions,
            )

        if not isinstance(limits.mock_exams_per_month, Unlimited):
            used = self._completed_this_month(user, now)
            if exceeds_limit(used, limits.mock_exams_per_month):
                cap = limit_value(limits.mock_exams_per_month)
                logger.info("Mock exam denied for user %s: monthly cap %s reached", user.pk, cap)
                raise QuotaExceeded(
                    f"Monthly mock exam limit reached. Free users can take up to {cap} mock exams per month.",
                    limit=cap, used=used,
                )

        categories = None if config.categories == MIXED_CATEGORIES else config.categories
        questions = self.sampler.sample(config.total_questions, categories, config.difficulty)
        if len(questions) < config.total_questions:
            raise ValidationError(
                f"Not enough questions available. Found {len(questions)}, requested {config.total_questions}."
            )

        session = MockExamSession.objects.create(
            user=user,
            total_questions=config.total_questions,
            time_limit_minutes=config.time_limit_minutes,
            passing_score=config.passing_score,
            categories=config.categories if categories is None else list(categories),
            difficulty=config.difficulty,
            question_ids=[str(q.id) for q in questions],
            answers={},
            flagged_questions=[],
            status=ExamStatus.IN_PROGRESS,
            started_at=now,
        )
        logger.info("Mock exam %s started by user %s (%s questions, %s min)",
                    session.pk, user.pk, session.total_questions, session.time_limit_minutes)

        return {
            "exam_id": str(session.id),
            "total_questions": session.total_questions,
            "time_limit_minutes": session.time_limit_minutes,
            "passing_score": session.passing_score,
            "status": session.status,
            "started_at": session.started_at.isoformat(),
            "questions": [_question_payload(q) for q in questions],
        }

    def get_state(self, user, session_id) -> dict:
        session = self._get_session(user, session_id)
        now = self.clock()
        in_progress = session.status == ExamStatus.IN_PROGRESS
        return {
            "exam_id": str(session.id),
            "status": session.status,
            "total_questions": session.total_questions,
            "time_limit_minutes": session.time_limit_minutes,
            "passing_score": session.passing_score,
            "started_at": session.started_at.isoformat(),
            "time_remaining_seconds": session.remaining_seconds(now) if in_progress else 0,
            "is_expired": in_progress and session.is_expired(now),
            "questions": [_question_payload(q) for q in self._ordered_questions(session)],
            "answers": session.answers,
            "flagged_questions": session.flagged_questions,
            "progress": _progress(session),
        }

    @transaction.atomic
    def save_answer(self, user, session_id, question_id, option_id) -> dict:
        session = self._get_session(user, session_id, for_update=True)
        self._ensure_mutable(session, self.clock())
        qid = self._ensure_member(session, question_id)
        oid = _as_uuid(option_id, "option")
        if not QuestionOption.objects.filter(pk=oid, question_id=qid).exists():
            raise ValidationError("Option does not belong to this question.")

        session.answers[qid] = oid
        session.save(update_fields=["answers", "updated_at"])
        return {
            "exam_id": str(session.id),
            "question_id": qid,
            "selected_option_id": oid,
            "progress": _progress(session),
        }

    @transaction.atomic
    def toggle_flag(self, user, session_id, question_id, flagged: bool) -> dict:
        session = self._get_session(user, session_id, for_update=True)
        self._ensure_mutable(session, self.clock())
        qid = self._ensure_member(session, question_id)

        flags = [f for f in session.flagged_questions if f != qid]
        if flagged:
            flags.append(qid)
        if flags != session.flagged_questions:
            session.flagged_questions = flags
            session.save(update_fields=["flagged_questions", "updated_at"])
        return {
            "exam_id": str(session.id),
            "question_id": qid,
            "flagged": flagged,
            "flagged_questions": session.flagged_questions,
            "progress": _progress(session),
        }

    @transaction.atomic
    def submit(self, user, session_id) -> dict:
        session = self._get_session(user, session_id, for_update=True)
        if session.status == ExamStatus.COMPLETED:
            raise StateConflict("Exam already completed.")
        if session.status == ExamStatus.ABANDONED:
            raise StateConflict("Cannot submit an abandoned exam.")

        now = self.clock()
        breakdown = self._breakdown(session, self._ordered_questions(session))
        score = percent(breakdown["correct_answers"], session.total_questions)
        passed = score >= session.passing_score

        updated = MockExamSession.objects.filter(pk=session.pk, status=ExamStatus.IN_PROGRESS).update(
            status=ExamStatus.COMPLETED, score=score, passed=passed, completed_at=now, updated_at=now,
        )
        if not updated:
            raise StateConflict("Exam was already finalized.")

        session.status, session.score, session.passed, session.completed_at = ExamStatus.COMPLETED, score, passed, now
        logger.info("Mock exam %s completed by user %s: score=%s passed=%s",
                    session.pk, user.pk, score, passed)
        return self._results_payload(session, breakdown)

    def get_results(self, user, session_id) -> dict:
        session = self._get_session(user, session_id)
        if session.status != ExamStatus.COMPLETED:
            raise StateConflict("Exam is not completed yet.")
        breakdown = self._breakdown(session, self._ordered_questions(session))
        return self._results_payload(session, breakdown)

    def abandon(self, user, session_id) -> dict:
        session = self._get_session(user, session_id)
        updated = MockExamSession.objects.filter(pk=session.pk, status=ExamStatus.IN_PROGRESS).update(
            status=ExamStatus.ABANDONED, updated_at=self.clock(),
        )
        if not updated:
            raise StateConflict("Only in-progress exams can be abandoned.")
        logger.info("Mock exam %s abandoned by user %s", session.pk, user.pk)
        return {"exam_id": str(session.id), "status": ExamStatus.ABANDONED}

    def check_in_progress(self, user) -> dict:
        session = (
            MockExamSession.objects
            .filter(user=user, status=ExamStatus.IN_PROGRESS)
            .order_by("-started_at")
            .first()
        )
        if session is None:
            return {"has_in_progress_exam": False}

        now = self.clock()
        if session.is_expired(now):
            MockExamSession.objects.filter(pk=session.pk, status=ExamStatus.IN_PROGRESS).update(
                status=ExamStatus.ABANDONED, updated_at=now,
            )
            logger.info("Mock exam %s expired; marked abandoned", session.pk)
            return {"has_in_progress_exam": False}

        return {
            "has_in_progress_exam": True,
            "exam_id": str(session.id),
            "started_at": session.started_at.isoformat(),
            "time_remaining_seconds": session.remaining_seconds(now),
        }

    def limits(self, user) -> dict:
        now = self.clock()
        limits = self.access.limits(user)
        used = self._completed_this_month(user, now)
        question_cap = limits.mock_exam_questions_limit
        return {
            "is_premium": limits.can_access_premium_features,
            "max_questions_per_exam": MAX_QUESTIONS if isinstance(question_cap, Unlimited) else question_cap.value,
            "max_exams_per_month": limit_value(limits.mock_exams_per_month),
            "exams_used_this_month": used,
            "remaining_exams_this_month": remaining(used, limits.mock_exams_per_month),
        }

    def history(self, user, status: str | None = None, limit: int = 10) -> dict:
        qs = MockExamSession.objects.filter(user=user).order_by("-started_at")
        if status:
            qs = qs.filter(status=status)

        exams = [
            {
                "exam_id": str(s.id),
                "total_questions": s.total_questions,
                "time_limit_minutes": s.time_limit_minutes,
                "passing_score": s.passing_score,
                "categories": s.categories,
                "status": s.status,
                "score": s.score,
                "passed": s.passed,
                "started_at": s.started_at.isoformat(),
                "completed_at": s.completed_at.isoformat() if s.completed_at else None,
            }
            for s in qs[:limit]
        ]

        return {"exams": exams, **completed_exam_stats(user)}
