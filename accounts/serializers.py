from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers

from accounts.access import is_premium
from accounts.models import User
from accounts.utils import username_from_email


class UserSerializer(serializers.ModelSerializer):
    has_season_pass = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id", "username", "email", "first_name", "last_name", "role",
            "is_premium", "premium_expiry", "has_season_pass",
            "daily_goal", "theme", "exam_date", "date_joined",
        ]
        read_only_fields = fields

    def get_has_season_pass(self, obj):
        return is_premium(obj)


class LoginEmailPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class RegisterSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(required=True)
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    class Meta:
        model = User
        fields = ["email", "password", "first_name", "last_name"]

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already in use.")
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

    @transaction.atomic
    def create(self, validated):
        password = validated.pop("password")
        validated["username"] = username_from_email(validated["email"])
        return User.objects.create_user(password=password, **validated)


class SettingsSerializer(serializers.ModelSerializer):
    daily_goal = serializers.IntegerField(min_value=1, max_value=500, required=False)

    class Meta:
        model = User
        fields = ["daily_goal", "theme"]


class ProfileSerializer(serializers.ModelSerializer):
    first_name = serializers.CharField(max_length=150, allow_blank=True, required=False)
    last_name = serializers.CharField(max_length=150, allow_blank=True, required=False)

    class Meta:
        model = User
        fields = ["first_name", "last_name", "exam_date"]
