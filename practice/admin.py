from django.contrib import admin

from .models import DailyUsageCounter, StreakRecord, UserProgress


@admin.register(UserProgress)
class UserProgressAdmin(admin.ModelAdmin):
    list_display = ("user", "question", "is_correct", "points_earned", "time_spent_seconds", "answered_at")
    list_filter = ("is_correct", "question__category")
    search_fields = ("user__email",)
    raw_id_fields = ("user", "question", "selected_option")


@admin.register(DailyUsageCounter)
class DailyUsageCounterAdmin(admin.ModelAdmin):
    list_display = ("user", "date", "kind", "count")
    list_filter = ("kind", "date")
    search_fields = ("user__email",)
    raw_id_fields = ("user",)


@admin.register(StreakRecord)
class StreakRecordAdmin(admin.ModelAdmin):
    list_display = ("user", "current_streak", "longest_streak", "last_activity_date", "streak_repaired_at")
    search_fields = ("user__email",)
    raw_id_fields = ("user",)
