# subscriptions/views.py
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from subscriptions import services
from subscriptions.serializers import SeasonPassCodeSerializer


class SeasonPassVerifyView(APIView):
    """POST /api/season-pass-codes/verify/ checks a code without redeeming it."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        ser = SeasonPassCodeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response(services.verify_code(ser.validated_data["code"]))


class SeasonPassRedeemView(APIView):
    """
    POST /api/season-pass-codes/redeem/
    Body: { "code": "RGSP-XXXX-XXXX" }
    Extends premium by the code's duration from the later of now / current expiry.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        ser = SeasonPassCodeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response(services.redeem_code(request.user, ser.validated_data["code"]))


class SubscriptionView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(services.subscription_status(request.user))
