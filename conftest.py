"""
Common test fixtures for the API tests.

Provides fixtures for creating a backer and authenticating a client
with a JWT token, a fundraising project with tiers and a team member,
and a helper that posts correctly signed Stripe webhook events.
"""
import hashlib
import hmac
import json
import time
from decimal import Decimal

import pytest
from django.conf import settings
from django.contrib.auth.models import User

from projects.models import Project, ProjectMember, Tier


@pytest.fixture
def user(db):
    """Create a test backer."""
    return User.objects.create_user(
        username="u1",
        password="pass12345",
        email="u1@example.com",
        first_name="Jane",
        last_name="Doe",
    )


@pytest.fixture
def auth_client(client, db, user):
    """Authenticate the Django test client using JWT tokens."""
    resp = client.post(
        "/api/token/",
        {"username": "u1", "password": "pass12345"},
        content_type="application/json",
    )
    assert resp.status_code == 200
    token = resp.json()["access"]
    client.defaults["HTTP_AUTHORIZATION"] = f"Bearer {token}"
    return client


@pytest.fixture
def login_as(client):
    """Re-authenticate the test client as another user."""

    def _login(username, password="pass12345"):
        resp = client.post(
            "/api/token/",
            {"username": username, "password": password},
            content_type="application/json",
        )
        assert resp.status_code == 200
        client.defaults["HTTP_AUTHORIZATION"] = f"Bearer {resp.json()['access']}"
        return client

    return _login


@pytest.fixture
def artist(db):
    """A user on the project's team."""
    u = User.objects.create_user(username="artist", password="pass12345", email="artist@example.com")
    u.profile.user_type = "artist"
    u.profile.full_name = "The Artist"
    u.profile.save()
    return u


@pytest.fixture
def platform_admin(db):
    u = User.objects.create_user(username="boss", password="pass12345", email="admin@example.com")
    u.profile.user_type = "admin"
    u.profile.save()
    return u


@pytest.fixture
def project(db, artist):
    """A fundraising project with the artist on its team."""
    p = Project.objects.create(
        slug="first-record",
        title="First Record",
        artist_name="The Artist",
        funding_goal=Decimal("1000.00"),
        status=Project.STATUS_FUNDRAISING,
        image_url="https://cdn.example.com/record.png",
    )
    ProjectMember.objects.create(project=p, user=artist)
    return p


@pytest.fixture
def tier(db, project):
    """A $20 tier with plenty of slots."""
    return Tier.objects.create(
        project=project,
        name="Signed CD",
        price=Decimal("20.00"),
        perks=["Signed CD", "Thank-you note"],
        total_slots=100,
    )


@pytest.fixture
def limited_tier(db, project):
    """A tier with a single slot."""
    return Tier.objects.create(
        project=project,
        name="Studio Visit",
        price=Decimal("500.00"),
        perks=["Spend a day in the studio"],
        total_slots=1,
    )


def sign_payload(payload, secret=None, timestamp=None):
    """Build a Stripe-Signature header for a raw payload."""
    secret = secret or settings.STRIPE_WEBHOOK_SECRET
    timestamp = int(timestamp or time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def checkout_completed_event(
    *,
    user_id,
    project_id,
    tier_id=None,
    amount_total=2091,
    processing_fee=91,
    payment_intent="pi_test_1",
    email="u1@example.com",
    metadata=None,
):
    if metadata is None:
        metadata = {"userId": str(user_id), "projectId": str(project_id), "processingFee": str(processing_fee)}
        if tier_id is not None:
            metadata["tierId"] = str(tier_id)
    return {
        "id": f"evt_{payment_intent}",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": f"cs_{payment_intent}",
                "object": "checkout.session",
                "amount_total": amount_total,
                "payment_intent": payment_intent,
                "customer_details": {"email": email},
                "metadata": metadata,
            }
        },
    }


@pytest.fixture
def post_webhook(client):
    """Post an event dict to the Stripe webhook with a valid signature (or a given header)."""

    def _post(event, signature=None):
        payload = json.dumps(event)
        header = sign_payload(payload) if signature is None else signature
        return client.post(
            "/api/payments/webhook/stripe/",
            data=payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=header,
        )

    return _post


@pytest.fixture
def checkout_event():
    """Factory for ``checkout.session.completed`` event dicts."""
    return checkout_completed_event


@pytest.fixture
def sign():
    """Factory for Stripe-Signature headers."""
    return sign_payload
