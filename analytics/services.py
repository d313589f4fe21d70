# analytics/services.py
"""
Read-only progress statistics for the dashboard.

Everything here is derived from ``UserProgress`` rows (latest answer per
question), completed mock exams and the streak record; nothing is written.
Study time is an estimate of 1.5 minutes per answered question.
"""
from collections import defaultdict
from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, Q

from common.enums import POINTS_BY_DIFFICULTY, Difficulty, QuestionCategory
from common.localtime import days_between, local_date_of, start_of_local_day
from common.numbers import percent, round_half_up
from exams.models import MockExamSession
from exams.services.mock_exam import completed_exam_stats
from practice.models import UserProgress
from practice.services.streak import StreakTracker

MINUTES_PER_QUESTION = Decimal("1.5")
MIN_ATTEMPTS_FOR_RANKING = 5
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def study_minutes(questions: int) -> int:
    return round_half_up(questions * MINUTES_PER_QUESTION)


def performance_status(accuracy: int) -> str:
    if accuracy >= 80:
        return "excellent"
    if accuracy >= 60:
        return "good"
    return "needs_improvement"


def average_difficulty(counts: dict) -> str:
    """Map a {difficulty: n} histogram to the difficulty nearest its mean."""
    n = sum(counts.values())
    if not n:
        return Difficulty.MEDIUM
    avg = Decimal(sum(POINTS_BY_DIFFICULTY[d] * c for d, c in counts.items())) / n
    if avg <= Decimal("1.5"):
        return Difficulty.EASY
    if avg <= Decimal("2.5"):
        return Difficulty.MEDIUM
    return Difficulty.HARD


def recommendation(category: str, accuracy: int) -> str:
    name = QuestionCategory(category).label
    if accuracy < 50:
        return f"Focus on {name} fundamentals. Start with easier questions to build confidence."
    if accuracy < 70:
        return f"Review {name} concepts and practice more medium-difficulty questions."
    return f"You're close to mastering {name}. Focus on harder questions to reach excellence."


def build_insights(dashboard: dict, performance: list[dict]) -> dict:
    """Rule-based study advice from the dashboard numbers and per-category accuracy."""
    accuracy = dashboard["accuracy"]
    total = dashboard["total_questions"]
    streak = dashboard["streak"]["current"]
    exams = dashboard["mock_exams"]

    if accuracy >= 80:
        assessment = (f"Excellent work! You're performing at a high level with {accuracy}% accuracy "
                      f"across {total} questions.")
    elif accuracy >= 60:
        assessment = f"Good progress! You have {accuracy}% accuracy. With focused practice, you can reach excellence."
    else:
        assessment = (f"You're building your foundation with {total} questions attempted. "
                      f"Consistent practice will improve your {accuracy}% accuracy.")

    tips = []
    if streak == 0:
        tips.append("Start a study streak today! Daily practice builds momentum.")
    elif streak < 7:
        tips.append(f"Keep your {streak}-day streak going! Aim for 7 consecutive days.")
    if total < 50:
        tips.append("Try to complete at least 10 questions per day to build mastery.")
    if exams["completed"] == 0:
        tips.append("Take your first mock exam to simulate real test conditions.")
    elif exams["pass_rate"] < 70:
        tips.append("Focus on weak areas before taking more mock exams to improve your pass rate.")

    focus = [p["category"] for p in sorted(performance, key=lambda p: p["accuracy"])[:2]]
    if focus:
        names = " and ".join(QuestionCategory(c).label for c in focus)
        tips.append(f"Dedicate more time to {names}.")

    if streak >= 7:
        encouragement = f"Amazing {streak}-day streak! Your consistency is paying off."
    elif accuracy >= 80:
        encouragement = "Your high accuracy shows strong understanding. Keep it up!"
    elif total >= 100:
        encouragement = f"You've practiced {total} questions! Your dedication is impressive."
    else:
        encouragement = "Every question brings you closer to your goal. Stay consistent!"

    return {
        "overall_assessment": assessment,
        "recommendations": tips[:4],
        "focus_areas": focus,
        "encouragement": encouragement,
    }


class AnalyticsService:
    def __init__(self, streaks: StreakTracker):
        self.streaks = streaks

    def _category_rows(self, user) -> dict:
        """{category: {total, correct, difficulties: {difficulty: n}}} over attempted categories."""
        rows = (
            UserProgress.objects.filter(user=user)
            .values("question__category", "question__difficulty")
            .annotate(total=Count("id"), correct=Count("id", filter=Q(is_correct=True)))
        )
        out = defaultdict(lambda: {"total": 0, "correct": 0, "difficulties": {}})
        for r in rows:
            bucket = out[r["question__category"]]
            bucket["total"] += r["total"]
            bucket["correct"] += r["correct"]
            bucket["difficulties"][r["question__difficulty"]] = r["total"]
        return out

    def dashboard(self, user) -> dict:
        agg = UserProgress.objects.filter(user=user).aggregate(
            total=Count("id"), correct=Count("id", filter=Q(is_correct=True)),
        )
        minutes = study_minutes(agg["total"])
        streak = self.streaks.get_streak_status(user)
        exams = completed_exam_stats(user)
        return {
            "total_questions": agg["total"],
            "accuracy": percent(agg["correct"], agg["total"]),
            "study_time": {"hours": minutes // 60, "minutes": minutes % 60, "total_minutes": minutes},
            "streak": {"current": streak.current_streak, "longest": streak.longest_streak},
            "mock_exams": {
                "total": MockExamSession.objects.filter(user=user).count(),
                "completed": exams["total_completed"],
                "average_score": exams["average_score"],
                "pass_rate": exams["pass_rate"],
            },
        }

    def weekly_activity(self, user) -> dict:
        """Answers per local day over the last 7 days, today included."""
        today = self.streaks.today()
        days = [today - timedelta(days=i) for i in range(6, -1, -1)]
        buckets = {d: [0, 0] for d in days}

        rows = UserProgress.objects.filter(
            user=user, answered_at__gte=start_of_local_day(days[0]),
        ).values_list("answered_at", "is_correct")
        for answered_at, is_correct in rows:
            bucket = buckets.get(local_date_of(answered_at))
            if bucket is not None:
                bucket[0] += 1
                bucket[1] += int(is_correct)

        data = [
            {
                "date": d.isoformat(),
                "day": DAY_NAMES[d.weekday()],
                "questions_attempted": total,
                "correct_answers": correct,
                "accuracy": percent(correct, total),
            }
            for d, (total, correct) in buckets.items()
        ]
        return {"labels": [d["day"] for d in data], "data": data}

    def performance_by_category(self, user) -> list[dict]:
        out = []
        for category, stats in self._category_rows(user).items():
            accuracy = percent(stats["correct"], stats["total"])
            out.append({
                "category": category,
                "total_attempted": stats["total"],
                "correct_answers": stats["correct"],
                "accuracy": accuracy,
                "average_difficulty": average_difficulty(stats["difficulties"]),
                "status": performance_status(accuracy),
            })
        return out

    def strengths_weaknesses(self, user) -> dict:
        ranked = sorted(
            (p for p in self.performance_by_category(user) if p["total_attempted"] >= MIN_ATTEMPTS_FOR_RANKING),
            key=lambda p: p["accuracy"],
            reverse=True,
        )
        strengths = [
            {"category": p["category"], "accuracy": p["accuracy"], "total_attempted": p["total_attempted"]}
            for p in ranked[:3]
        ]
        weaknesses = [
            {
                "category": p["category"],
                "accuracy": p["accuracy"],
                "total_attempted": p["total_attempted"],
                "recommendation": recommendation(p["category"], p["accuracy"]),
            }
            for p in reversed(ranked[-3:])
        ]
        return {"strengths": strengths, "weaknesses": weaknesses}

    def streak(self, user) -> dict:
        status = self.streaks.get_streak_status(user)
        state, days_until_break = "broken", 0
        if status.last_activity_date:
            since = days_between(status.last_activity_date, self.streaks.today())
            if since <= 0:
                state, days_until_break = "active", 1
            elif since == 1:
                state = "at_risk"
        return {**status.as_dict(), "streak_status": state, "days_until_break": days_until_break}

    def time_tracking(self, user) -> dict:
        rows = self._category_rows(user)
        total_questions = sum(s["total"] for s in rows.values())
        total_minutes = study_minutes(total_questions)
        return {
            "total_minutes": total_minutes,
            "hours": total_minutes // 60,
            "breakdown": [
                {
                    "category": category,
                    "time_spent_minutes": study_minutes(s["total"]),
                    "percentage": percent(s["total"], total_questions),
                }
                for category, s in rows.items()
            ],
        }

    def insights(self, user) -> dict:
        return build_insights(self.dashboard(user), self.performance_by_category(user))

    def all(self, user) -> dict:
        dashboard = self.dashboard(user)
        performance = self.performance_by_category(user)
        return {
            "dashboard": dashboard,
            "weekly_activity": self.weekly_activity(user),
            "strengths_weaknesses": self.strengths_weaknesses(user),
            "performance": performance,
            "streak": self.streak(user),
            "time_tracking": self.time_tracking(user),
            "insights": build_insights(dashboard, performance),
        }
