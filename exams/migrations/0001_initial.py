import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


CATEGORY_CHOICES = [
    ("VERBAL_ABILITY", "Verbal Ability"),
    ("NUMERICAL_ABILITY", "Numerical Ability"),
    ("ANALYTICAL_ABILITY", "Analytical Ability"),
    ("GENERAL_INFORMATION", "General Information"),
    ("CLERICAL_ABILITY", "Clerical Ability"),
]
DIFFICULTY_CHOICES = [("EASY", "Easy"), ("MEDIUM", "Medium"), ("HARD", "Hard")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Question",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("category", models.CharField(choices=CATEGORY_CHOICES, max_length=24)),
                ("difficulty", models.CharField(choices=DIFFICULTY_CHOICES, default="MEDIUM", max_length=16)),
                ("text", models.TextField()),
                ("explanation", models.TextField(blank=True)),
                ("ai_explanation", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                ("tags", models.JSONField(blank=True, default=list)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["category"], name="question_category_idx"),
                    models.Index(fields=["difficulty"], name="question_difficulty_idx"),
                    models.Index(fields=["is_active", "category", "difficulty"], name="question_pool_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="QuestionOption",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("label", models.CharField(blank=True, max_length=1)),
                ("text", models.TextField()),
                ("is_correct", models.BooleanField(default=False)),
                ("order", models.PositiveIntegerField(default=0)),
                ("question", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="options", to="exams.question")),
            ],
            options={
                "ordering": ("question", "order", "created_at"),
                "indexes": [models.Index(fields=["question", "order"], name="option_question_order_idx")],
            },
        ),
        migrations.CreateModel(
            name="MockExamSession",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("total_questions", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(170)])),
                ("time_limit_minutes", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(180)])),
                ("passing_score", models.PositiveIntegerField(default=70, validators=[django.core.validators.MaxValueValidator(100)])),
                ("categories", models.JSONField(default="MIXED")),
                ("difficulty", models.CharField(blank=True, choices=DIFFICULTY_CHOICES, max_length=16, null=True)),
                ("question_ids", models.JSONField(default=list)),
                ("answers", models.JSONField(blank=True, default=dict)),
                ("flagged_questions", models.JSONField(blank=True, default=list)),
                ("status", models.CharField(choices=[("IN_PROGRESS", "In progress"), ("COMPLETED", "Completed"), ("ABANDONED", "Abandoned")], default="IN_PROGRESS", max_length=16)),
                ("score", models.PositiveIntegerField(blank=True, null=True)),
                ("passed", models.BooleanField(blank=True, null=True)),
                ("started_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="mock_exams", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-started_at",),
                "indexes": [
                    models.Index(fields=["user", "status"], name="mockexam_user_status_idx"),
                    models.Index(fields=["user", "completed_at"], name="mockexam_user_completed_idx"),
                ],
            },
        ),
    ]
