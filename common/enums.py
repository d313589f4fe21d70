from django.db import models


class QuestionCategory(models.TextChoices):
    VERBAL_ABILITY      = "VERBAL_ABILITY",      "Verbal Ability"
    NUMERICAL_ABILITY   = "NUMERICAL_ABILITY",   "Numerical Ability"
    ANALYTICAL_ABILITY  = "ANALYTICAL_ABILITY",  "Analytical Ability"
    GENERAL_INFORMATION = "GENERAL_INFORMATION", "General Information"
    CLERICAL_ABILITY    = "CLERICAL_ABILITY",    "Clerical Ability"


class Difficulty(models.TextChoices):
    EASY   = "EASY",   "Easy"
    MEDIUM = "MEDIUM", "Medium"
    HARD   = "HARD",   "Hard"


class ExamStatus(models.TextChoices):
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    COMPLETED   = "COMPLETED",   "Completed"
    ABANDONED   = "ABANDONED",   "Abandoned"


class UsageKind(models.TextChoices):
    PRACTICE         = "PRACTICE",         "Practice answer"
    EXPLANATION_VIEW = "EXPLANATION_VIEW", "Explanation view"


class Theme(models.TextChoices):
    LIGHT  = "LIGHT",  "Light"
    DARK   = "DARK",   "Dark"
    SYSTEM = "SYSTEM", "System"


MIXED_CATEGORIES = "MIXED"

POINTS_BY_DIFFICULTY = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
}
