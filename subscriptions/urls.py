from django.urls import path

from .views import SeasonPassRedeemView, SeasonPassVerifyView, SubscriptionView

urlpatterns = [
    path("season-pass-codes/verify/", SeasonPassVerifyView.as_view(), name="season-pass-verify"),
    path("season-pass-codes/redeem/", SeasonPassRedeemView.as_view(), name="season-pass-redeem"),
    path("subscription/",             SubscriptionView.as_view(),     name="subscription"),
]
