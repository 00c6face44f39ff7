"""
Tests for the Stripe webhook endpoint: signature checks, event
filtering, metadata validation and idempotent fulfilment.
"""
import json
from decimal import Decimal

import pytest

from payments.models import Contribution
from projects.models import Project


@pytest.mark.django_db
def test_bad_signature_is_rejected(post_webhook, checkout_event, user, project, tier):
    event = checkout_event(user_id=user.id, project_id=project.id, tier_id=tier.id)
    resp = post_webhook(event, signature="t=1,v1=deadbeef")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Webhook Error"}
    assert Contribution.objects.count() == 0


@pytest.mark.django_db
def test_missing_signature_is_rejected(client, checkout_event, user, project):
    event = checkout_event(user_id=user.id, project_id=project.id)
    resp = client.post("/api/payments/webhook/stripe/", data=json.dumps(event), content_type="application/json")
    assert resp.status_code == 400
    assert Contribution.objects.count() == 0


@pytest.mark.django_db
def test_signature_with_wrong_secret_is_rejected(client, sign, checkout_event, user, project):
    payload = json.dumps(checkout_event(user_id=user.id, project_id=project.id))
    resp = client.post(
        "/api/payments/webhook/stripe/",
        data=payload,
        content_type="application/json",
        HTTP_STRIPE_SIGNATURE=sign(payload, secret="whsec_someone_else"),
    )
    assert resp.status_code == 400
    assert Contribution.objects.count() == 0


@pytest.mark.django_db
def test_webhook_rejects_get(client):
    resp = client.get("/api/payments/webhook/stripe/")
    assert resp.status_code == 405


@pytest.mark.django_db
def test_other_event_types_are_acknowledged(post_webhook, project):
    resp = post_webhook({"id": "evt_1", "type": "payment_intent.created", "data": {"object": {}}})
    assert resp.status_code == 200
    assert resp.json() == {"received": True}
    assert Contribution.objects.count() == 0


@pytest.mark.django_db
def test_missing_user_metadata_is_rejected(post_webhook, checkout_event, project, tier):
    event = checkout_event(
        user_id=None,
        project_id=project.id,
        metadata={"projectId": str(project.id), "tierId": str(tier.id), "processingFee": "91"},
    )
    resp = post_webhook(event)
    assert resp.status_code == 400
    assert Contribution.objects.count() == 0
    project.refresh_from_db()
    assert project.backer_count == 0


@pytest.mark.django_db
def test_unknown_project_is_rejected(post_webhook, checkout_event, user):
    resp = post_webhook(checkout_event(user_id=user.id, project_id=4242))
    assert resp.status_code == 400
    assert Contribution.objects.count() == 0


@pytest.mark.django_db
def test_tier_from_other_project_is_rejected(post_webhook, checkout_event, user, tier):
    other = Project.objects.create(slug="other", title="Other", artist_name="X", funding_goal=Decimal("50.00"))
    resp = post_webhook(checkout_event(user_id=user.id, project_id=other.id, tier_id=tier.id))
    assert resp.status_code == 400
    assert Contribution.objects.count() == 0


@pytest.mark.django_db
def test_tier_purchase_is_recorded(post_webhook, checkout_event, user, project, tier):
    resp = post_webhook(checkout_event(user_id=user.id, project_id=project.id, tier_id=tier.id))
    assert resp.status_code == 200
    body = resp.json()
    assert body["received"] is True
    assert "duplicate" not in body

    c = Contribution.objects.get(pk=body["contribution_id"])
    assert c.amount_paid == Decimal("20.00")
    assert c.processing_fee == Decimal("0.91")
    assert c.gross_amount == Decimal("20.91")
    assert c.stripe_payment_intent_id == "pi_test_1"
    assert c.backer_email == "u1@example.com"
    assert c.tier_id == tier.id
    assert not c.needs_reconciliation

    tier.refresh_from_db()
    project.refresh_from_db()
    assert tier.claimed_slots == 1
    assert project.current_funding == Decimal("20.00")
    assert project.backer_count == 1


@pytest.mark.django_db
def test_donation_without_tier(post_webhook, checkout_event, user, project, tier):
    resp = post_webhook(
        checkout_event(user_id=user.id, project_id=project.id, amount_total=2000, processing_fee=0)
    )
    assert resp.status_code == 200
    c = Contribution.objects.get()
    assert c.tier is None
    assert c.amount_paid == Decimal("20.00")

    tier.refresh_from_db()
    project.refresh_from_db()
    assert tier.claimed_slots == 0
    assert project.current_funding == Decimal("20.00")
    assert project.backer_count == 1


@pytest.mark.django_db
def test_session_id_used_when_payment_intent_missing(post_webhook, checkout_event, user, project):
    event = checkout_event(user_id=user.id, project_id=project.id, amount_total=1000, processing_fee=0)
    event["data"]["object"]["payment_intent"] = None
    resp = post_webhook(event)
    assert resp.status_code == 200
    assert Contribution.objects.get().stripe_payment_intent_id == "cs_pi_test_1"


@pytest.mark.django_db
def test_redelivery_is_idempotent(post_webhook, checkout_event, user, project, tier):
    event = checkout_event(user_id=user.id, project_id=project.id, tier_id=tier.id)
    first = post_webhook(event)
    second = post_webhook(event)

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["duplicate"] is True
    assert second.json()["contribution_id"] == first.json()["contribution_id"]

    assert Contribution.objects.count() == 1
    tier.refresh_from_db()
    project.refresh_from_db()
    assert tier.claimed_slots == 1
    assert project.backer_count == 1
    assert project.current_funding == Decimal("20.00")


@pytest.mark.django_db
@pytest.mark.parametrize("data", [[], "cs_123", {"object": ["cs_123"]}, {"object": None}])
def test_malformed_session_object_is_rejected(post_webhook, project, data):
    resp = post_webhook({"id": "evt_bad", "type": "checkout.session.completed", "data": data})
    assert resp.status_code == 400
    assert Contribution.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.parametrize("metadata", [["userId", "1"], "userId=1"])
def test_non_object_metadata_is_rejected(post_webhook, checkout_event, user, project, metadata):
    resp = post_webhook(checkout_event(user_id=user.id, project_id=project.id, metadata=metadata))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required metadata"}
    assert Contribution.objects.count() == 0


@pytest.mark.django_db
def test_malformed_customer_details_falls_back_to_customer_email(post_webhook, checkout_event, user, project):
    event = checkout_event(user_id=user.id, project_id=project.id, amount_total=1000, processing_fee=0)
    event["data"]["object"]["customer_details"] = ["u1@example.com"]
    event["data"]["object"]["customer_email"] = "fallback@example.com"
    resp = post_webhook(event)
    assert resp.status_code == 200
    assert Contribution.objects.get().backer_email == "fallback@example.com"


@pytest.mark.django_db
def test_invalid_amount_is_rejected(post_webhook, checkout_event, user, project):
    event = checkout_event(user_id=user.id, project_id=project.id)
    event["data"]["object"]["amount_total"] = "lots"
    resp = post_webhook(event)
    assert resp.status_code == 400
    assert Contribution.objects.count() == 0


@pytest.mark.django_db
def test_expanded_payment_intent_uses_its_id(post_webhook, checkout_event, user, project):
    event = checkout_event(user_id=user.id, project_id=project.id, amount_total=1000, processing_fee=0)
    event["data"]["object"]["payment_intent"] = {"id": "pi_expanded", "object": "payment_intent"}
    resp = post_webhook(event)
    assert resp.status_code == 200
    assert Contribution.objects.get().stripe_payment_intent_id == "pi_expanded"
