from django.contrib import admin

from .models import SeasonPassCode


@admin.register(SeasonPassCode)
class SeasonPassCodeAdmin(admin.ModelAdmin):
    list_display = ("code", "batch", "duration_days", "expires_at", "redeemed_by", "redeemed_at", "created_at")
    list_filter = ("batch",)
    search_fields = ("code", "redeemed_by__email")
    raw_id_fields = ("redeemed_by",)
    readonly_fields = ("redeemed_by", "redeemed_at", "created_at")
