from rest_framework import serializers

from common.enums import MIXED_CATEGORIES, Difficulty, ExamStatus, QuestionCategory
from exams.models import Question, QuestionOption


# ---------- Question bank ----------
class QuestionOptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuestionOption
        fields = ["id", "label", "text", "is_correct", "order"]


class QuestionOptionCreateIn(serializers.Serializer):
    label = serializers.CharField(max_length=1, required=False, allow_blank=True)
    text = serializers.CharField()
    is_correct = serializers.BooleanField(default=False)
    order = serializers.IntegerField(required=False, allow_null=True)

    def validate_text(self, v):
        v = (v or "").strip()
        if not v:
            raise serializers.ValidationError("Option text cannot be empty.")
        return v


class QuestionCreateSerializer(serializers.ModelSerializer):
    options = QuestionOptionCreateIn(many=True)

    class Meta:
        model = Question
        fields = [
            "id", "category", "difficulty", "text", "explanation",
            "ai_explanation", "is_active", "tags", "options",
        ]

    def validate_options(self, options):
        if not 2 <= len(options) <= 5:
            raise serializers.ValidationError("A question needs between 2 and 5 options.")
        if sum(1 for o in options if o.get("is_correct")) != 1:
            raise serializers.ValidationError("Exactly one option must be correct.")
        return options

    def create(self, validated):
        options = validated.pop("options", [])
        q = Question.objects.create(**validated)
        QuestionOption.objects.bulk_create([
            QuestionOption(
                question=q,
                label=opt.get("label") or "ABCDE"[i],
                text=opt["text"],
                is_correct=opt.get("is_correct", False),
                order=opt["order"] if opt.get("order") is not None else i + 1,
            )
            for i, opt in enumerate(options)
        ])
        return q


class QuestionSerializer(serializers.ModelSerializer):
    options = QuestionOptionSerializer(many=True, read_only=True)

    class Meta:
        model = Question
        fields = [
            "id", "category", "difficulty", "text", "explanation",
            "ai_explanation", "is_active", "tags", "options",
        ]


# ---------- Mock exams ----------
class CategoriesField(serializers.Field):
    """Accepts the literal "MIXED" or a non-empty list of categories."""

    default_error_messages = {
        "invalid": 'Expected "MIXED" or a list of categories.',
    }

    def to_internal_value(self, data):
        if data == MIXED_CATEGORIES:
            return MIXED_CATEGORIES
        if not isinstance(data, list) or not data:
            self.fail("invalid")
        choice = serializers.ChoiceField(choices=QuestionCategory.choices)
        # dedupe, keep order
        return list(dict.fromkeys(choice.to_internal_value(c) for c in data))

    def to_representation(self, value):
        return value


class MockExamCreateSerializer(serializers.Serializer):
    total_questions = serializers.IntegerField()
    time_limit_minutes = serializers.IntegerField()
    passing_score = serializers.IntegerField(default=70)
    categories = CategoriesField(default=MIXED_CATEGORIES)
    difficulty = serializers.ChoiceField(choices=Difficulty.choices, required=False, allow_null=True)


class SaveAnswerSerializer(serializers.Serializer):
    question_id = serializers.UUIDField()
    selected_option_id = serializers.UUIDField()


class ToggleFlagSerializer(serializers.Serializer):
    question_id = serializers.UUIDField()
    flagged = serializers.BooleanField()


class HistoryQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ExamStatus.choices, required=False)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)
