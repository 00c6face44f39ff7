"""
Stripe webhook endpoint.

Stripe delivers events at least once and retries on any non-2xx
response.  The handler therefore:

* verifies the ``Stripe-Signature`` header against the raw body before
  parsing anything (400 on failure, nothing written);
* acknowledges every event type except ``checkout.session.completed``;
* rejects completed sessions whose metadata lacks the backer or project
  (400, nothing written);
* hands the payment to ``payments.ledger.record_contribution``, where the
  unique PaymentIntent id turns redeliveries into no-op acknowledgements.

Notification failures happen after the response is decided and are
never reported back to Stripe.
"""
import json
import logging

import stripe
from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .checkout import CheckoutIntent, MissingMetadataError
from .ledger import record_contribution

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


class WebhookVerificationError(Exception):
    """The request body does not carry a valid Stripe signature."""


def verify_event(payload: bytes, sig_header: str, secret: str) -> dict:
    """
    Check the Stripe signature of a raw webhook body and return the
    decoded event.

    Raises:
        WebhookVerificationError: missing secret/header, bad signature,
            stale timestamp or a body that is not JSON.
    """
    if not secret:
        raise WebhookVerificationError("Webhook secret is not configured")
    if not sig_header:
        raise WebhookVerificationError("Missing Stripe-Signature header")
    try:
        body = payload.decode("utf-8")
        stripe.WebhookSignature.verify_header(
            body, sig_header, secret, stripe.Webhook.DEFAULT_TOLERANCE
        )
        event = json.loads(body)
    except (UnicodeDecodeError, ValueError, stripe.SignatureVerificationError) as e:
        raise WebhookVerificationError(str(e)) from e
    if not isinstance(event, dict):
        raise WebhookVerificationError("Event body is not a JSON object")
    return event


def handle_checkout_completed(session: dict) -> JsonResponse:
    try:
        intent = CheckoutIntent.from_metadata(session.get("metadata"))
    except MissingMetadataError as e:
        logger.warning("Checkout session %s rejected: %s", session.get("id"), e)
        return JsonResponse({"error": "Missing required metadata"}, status=400)

    transaction_id = session.get("payment_intent") or session.get("id")
    if isinstance(transaction_id, dict):
        # Expanded PaymentIntent object
        transaction_id = transaction_id.get("id")
    if not transaction_id or not isinstance(transaction_id, str):
        logger.warning("Checkout session without payment_intent or id rejected")
        return JsonResponse({"error": "Missing transaction id"}, status=400)

    try:
        amount_total = int(session.get("amount_total") or 0)
    except (TypeError, ValueError):
        logger.warning("Checkout session %s has an invalid amount_total", session.get("id"))
        return JsonResponse({"error": "Invalid amount"}, status=400)

    customer_details = session.get("customer_details")
    if not isinstance(customer_details, dict):
        customer_details = {}
    try:
        result = record_contribution(
            intent,
            transaction_id=transaction_id,
            amount_total_cents=amount_total,
            backer_email=customer_details.get("email") or session.get("customer_email") or "",
        )
    except MissingMetadataError as e:
        logger.warning("Checkout session %s rejected: %s", session.get("id"), e)
        return JsonResponse({"error": str(e)}, status=400)

    body = {"received": True, "contribution_id": result.contribution.pk}
    if not result.created:
        body["duplicate"] = True
    return JsonResponse(body)


@csrf_exempt
@require_POST
def stripe_webhook(request):
    """
    Webhook endpoint for Stripe.

    We care about: checkout.session.completed
    """
    try:
        event = verify_event(
            request.body,
            request.META.get("HTTP_STRIPE_SIGNATURE", ""),
            settings.STRIPE_WEBHOOK_SECRET,
        )
    except WebhookVerificationError as e:
        logger.warning("Webhook signature verification failed: %s", e)
        return JsonResponse({"error": "Webhook Error"}, status=400)

    event_type = event.get("type")
    if event_type != CHECKOUT_COMPLETED:
        logger.debug("Ignoring Stripe event %s (%s)", event.get("id"), event_type)
        return JsonResponse({"received": True})

    data = event.get("data")
    session = data.get("object") if isinstance(data, dict) else None
    if not isinstance(session, dict):
        logger.warning("Stripe event %s carries no checkout session object", event.get("id"))
        return JsonResponse({"error": "Missing required metadata"}, status=400)
    return handle_checkout_completed(session)
