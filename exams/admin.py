from django.contrib import admin

from .models import MockExamSession, Question, QuestionOption


# ----- Inlines -----
class QuestionOptionInline(admin.TabularInline):
    model = QuestionOption
    extra = 4
    fields = ("label", "text", "is_correct", "order")
    ordering = ("order",)


# ----- ModelAdmins -----
@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("id", "short_text", "category", "difficulty", "is_active", "created_at")
    list_filter = ("is_active", "category", "difficulty")
    search_fields = ("text", "explanation")
    inlines = [QuestionOptionInline]
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-created_at",)

    def short_text(self, obj):
        return (obj.text or "")[:80]


@admin.register(MockExamSession)
class MockExamSessionAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "status", "total_questions", "time_limit_minutes",
                    "score", "passed", "started_at", "completed_at")
    list_filter = ("status", "passed")
    search_fields = ("user__email", "user__username")
    raw_id_fields = ("user",)
    # session content is engine-owned; admins inspect, never edit
    readonly_fields = ("question_ids", "answers", "flagged_questions", "score", "passed",
                       "started_at", "completed_at", "created_at", "updated_at")
    ordering = ("-started_at",)
