from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = (
        "username", "email", "role", "is_premium", "premium_expiry",
        "is_staff", "is_active", "date_joined",
    )
    list_filter = ("role", "is_premium", "theme", "is_staff", "is_superuser", "is_active")
    search_fields = ("username", "email", "first_name", "last_name")
    ordering = ("-date_joined",)

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Profile", {"fields": ("role", "daily_goal", "theme", "exam_date")}),
        ("Season Pass", {"fields": ("is_premium", "premium_expiry")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Profile", {
            "classes": ("wide",),
            "fields": ("email", "role"),
        }),
    )
