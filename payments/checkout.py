"""
Stripe Checkout session construction.

A checkout creates no local rows.  Everything the webhook needs to
record the contribution later travels in the session's metadata as a
``CheckoutIntent``: the backer, the project, the optional tier and the
processing fee that was added on top of the tier price.  Stripe only
stores string metadata values, so the intent is serialized to strings
here and parsed back (and validated) by ``CheckoutIntent.from_metadata``
when the ``checkout.session.completed`` event arrives.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import stripe
from django.conf import settings

from projects.models import Project, Tier
from .fees import FeeBreakdown, calculate_processing_fee

logger = logging.getLogger(__name__)


class MissingMetadataError(ValueError):
    """Raised when checkout metadata lacks the identifiers needed to fulfil a payment."""


def _parse_id(value: Any, field: str, required: bool) -> int | None:
    if value in (None, ""):
        if required:
            raise MissingMetadataError(f"Missing required metadata field '{field}'")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MissingMetadataError(f"Metadata field '{field}' is not a valid id: {value!r}")


@dataclass(frozen=True)
class CheckoutIntent:
    """Correlation data for a pending payment, held by Stripe until the webhook fires."""

    user_id: int
    project_id: int
    tier_id: int | None = None
    processing_fee_cents: int = 0

    def to_metadata(self) -> dict[str, str]:
        metadata = {
            "userId": str(self.user_id),
            "projectId": str(self.project_id),
            "processingFee": str(self.processing_fee_cents),
        }
        if self.tier_id is not None:
            metadata["tierId"] = str(self.tier_id)
        return metadata

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, Any] | None) -> "CheckoutIntent":
        """Parse session metadata.  ``userId`` and ``projectId`` are required.

        An absent or unparsable ``processingFee`` counts as zero so the
        whole charge is credited to the project rather than dropped.
        """
        metadata = metadata or {}
        if not isinstance(metadata, Mapping):
            raise MissingMetadataError("Metadata is not an object")
        user_id = _parse_id(metadata.get("userId"), "userId", required=True)
        project_id = _parse_id(metadata.get("projectId"), "projectId", required=True)
        tier_id = _parse_id(metadata.get("tierId"), "tierId", required=False)
        try:
            fee = max(int(metadata.get("processingFee") or 0), 0)
        except (TypeError, ValueError):
            logger.warning("Ignoring unparsable processingFee %r", metadata.get("processingFee"))
            fee = 0
        return cls(
            user_id=user_id,
            project_id=project_id,
            tier_id=tier_id,
            processing_fee_cents=fee,
        )


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    url: str | None
    fees: FeeBreakdown


def build_line_items(tier: Tier, project: Project, fees: FeeBreakdown) -> list[dict]:
    """Two line items: the tier at face value and a separate processing fee."""
    currency = settings.STRIPE_CURRENCY
    tier_description = tier.description or f"Support {project.artist_name}: {project.title}"
    return [
        {
            "price_data": {
                "currency": currency,
                "product_data": {
                    "name": f"{project.title} - {tier.name}",
                    "description": tier_description[:500],
                },
                "unit_amount": fees.price_cents,
            },
            "quantity": 1,
        },
        {
            "price_data": {
                "currency": currency,
                "product_data": {
                    "name": "Processing fee",
                    "description": "Covers card processing so the artist receives the full tier amount",
                },
                "unit_amount": fees.fee_cents,
            },
            "quantity": 1,
        },
    ]


def create_checkout_session(*, tier: Tier, project: Project, user, origin: str | None) -> CheckoutSession:
    """Create a hosted Stripe Checkout session for one tier purchase.

    Args:
        tier: The tier being purchased; must belong to ``project``.
        project: The project credited with the tier price.
        user: The authenticated backer.
        origin: Browser origin used for the redirect URLs.  Falls back to
            ``settings.FRONTEND_URL``.

    Raises:
        stripe.StripeError: If Stripe rejects the request.
    """
    fees = calculate_processing_fee(tier.price_cents)
    intent = CheckoutIntent(
        user_id=user.pk,
        project_id=project.pk,
        tier_id=tier.pk,
        processing_fee_cents=fees.fee_cents,
    )
    base_url = (origin or settings.FRONTEND_URL).rstrip("/")

    stripe.api_key = settings.STRIPE_SECRET_KEY
    session = stripe.checkout.Session.create(
        payment_method_types=["card"],
        mode="payment",
        line_items=build_line_items(tier, project, fees),
        customer_email=user.email or None,
        metadata=intent.to_metadata(),
        success_url=f"{base_url}/success?session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=f"{base_url}/{project.slug}",
    )
    logger.info(
        "Checkout session %s created for user %s, tier %s (gross %s cents, fee %s cents)",
        session.id,
        user.pk,
        tier.pk,
        fees.gross_cents,
        fees.fee_cents,
    )
    return CheckoutSession(session_id=session.id, url=getattr(session, "url", None), fees=fees)
