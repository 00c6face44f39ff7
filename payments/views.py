"""
Views for the payments app.

This module exposes the checkout endpoint, which turns a tier selection
into a hosted Stripe Checkout session, and the backer's own
contribution history.  Both require authentication.  The Stripe
webhook lives in ``payments.webhooks`` because it authenticates by
signature rather than by user.
"""
from __future__ import annotations

import logging

import stripe
from rest_framework import generics, permissions, status, views
from rest_framework.response import Response

from .checkout import create_checkout_session
from .models import Contribution
from .serializers import CheckoutRequestSerializer, ContributionSerializer

logger = logging.getLogger(__name__)


class CheckoutView(views.APIView):
    """Create a Stripe Checkout session for a tier purchase."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = CheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tier = serializer.validated_data["tier"]
        project = serializer.validated_data["project"]
        try:
            session = create_checkout_session(
                tier=tier,
                project=project,
                user=request.user,
                origin=request.headers.get("Origin"),
            )
        except stripe.StripeError as e:
            logger.error("Stripe checkout session creation failed for tier %s: %s", tier.pk, e)
            return Response(
                {"error": "Error creating checkout session"},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        return Response(
            {
                "sessionId": session.session_id,
                "url": session.url,
                "amount": session.fees.price_cents,
                "processingFee": session.fees.fee_cents,
                "total": session.fees.gross_cents,
            },
            status=status.HTTP_200_OK,
        )


class MyContributionsView(generics.ListAPIView):
    """GET /api/payments/contributions/ -> the current user's contributions, newest first."""

    serializer_class = ContributionSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return (
            Contribution.objects.filter(user=self.request.user)
            .select_related("project", "tier")
            .order_by("-created_at", "-id")
        )
