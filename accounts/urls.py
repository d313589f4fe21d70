from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import LoginEmailPasswordView, MeView, ProfileView, RegisterView, SettingsView

urlpatterns = [
    path("auth/register/", RegisterView.as_view(), name="auth-register"),
    path("auth/login/",    LoginEmailPasswordView.as_view(), name="auth-login"),
    path("auth/refresh/",  TokenRefreshView.as_view(), name="auth-refresh"),
    path("auth/me/",       MeView.as_view(), name="auth-me"),
    path("users/settings/", SettingsView.as_view(), name="user-settings"),
    path("users/profile/",  ProfileView.as_view(), name="user-profile"),
]
