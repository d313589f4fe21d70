# accounts/views.py
import logging

from django.contrib.auth import authenticate
from rest_framework import permissions, status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import User
from .serializers import (
    LoginEmailPasswordSerializer,
    ProfileSerializer,
    RegisterSerializer,
    SettingsSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


def _token_payload(user):
    refresh = RefreshToken.for_user(user)
    return {
        "user": UserSerializer(user).data,
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


class RegisterView(APIView):
    """
    POST /api/auth/register/
    Body: { "email", "password", "first_name"?, "last_name"? }
    Creates a free-tier student and returns JWT access/refresh.
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        ser = RegisterSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = ser.save()
        logger.info("Registered user %s", user.pk)
        return Response(_token_payload(user), status=status.HTTP_201_CREATED)


class LoginEmailPasswordView(APIView):
    """
    POST /api/auth/login/
    Body: { "email": "user@example.com", "password": "secret" }

    Returns JWT access/refresh on success.
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        ser = LoginEmailPasswordSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        email = ser.validated_data["email"].strip().lower()
        password = ser.validated_data["password"]

        user = User.objects.filter(email__iexact=email).first()
        if not user:
            raise ValidationError("Invalid email or password.")

        if not user.is_active:
            raise ValidationError("This account is inactive.")

        # authenticate using the user's username + provided password
        auth_user = authenticate(request, username=user.username, password=password)
        if not auth_user:
            raise ValidationError("Invalid email or password.")

        return Response(_token_payload(auth_user), status=status.HTTP_200_OK)


class MeView(APIView):
    def get(self, request):
        return Response(UserSerializer(request.user).data)


class SettingsView(APIView):
    """GET/PATCH /api/users/settings/ (daily goal, theme)."""

    def get(self, request):
        return Response(SettingsSerializer(request.user).data)

    def patch(self, request):
        ser = SettingsSerializer(request.user, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response(ser.data)


class ProfileView(APIView):
    """GET/PATCH /api/users/profile/ (first/last name, target exam date)."""

    def get(self, request):
        return Response(ProfileSerializer(request.user).data)

    def patch(self, request):
        ser = ProfileSerializer(request.user, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        logger.info("User %s updated profile fields %s", request.user.pk, sorted(ser.validated_data))
        return Response(UserSerializer(request.user).data)
