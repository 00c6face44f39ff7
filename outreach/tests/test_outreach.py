"""
Tests for newsletter sign-up and collaborator network submissions.
"""
import pytest

from outreach.models import NetworkSubmission, NewsletterSubscriber


@pytest.mark.django_db
def test_subscribe(client):
    resp = client.post("/api/newsletter/subscribe/", {"email": "Fan@Example.com "}, content_type="application/json")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Successfully subscribed!"
    assert NewsletterSubscriber.objects.get().email == "fan@example.com"


@pytest.mark.django_db
def test_duplicate_subscription_is_conflict(client):
    client.post("/api/newsletter/subscribe/", {"email": "fan@example.com"}, content_type="application/json")
    resp = client.post("/api/newsletter/subscribe/", {"email": "FAN@example.com"}, content_type="application/json")
    assert resp.status_code == 409
    assert resp.json() == {"error": "This email is already subscribed."}
    assert NewsletterSubscriber.objects.count() == 1


@pytest.mark.django_db
@pytest.mark.parametrize("payload", [{}, {"email": ""}, {"email": "not-an-email"}])
def test_subscribe_requires_valid_email(client, payload):
    resp = client.post("/api/newsletter/subscribe/", payload, content_type="application/json")
    assert resp.status_code == 400
    assert NewsletterSubscriber.objects.count() == 0


@pytest.mark.django_db
def test_network_submission(client):
    payload = {
        "firstName": "Sam",
        "lastName": "Lens",
        "email": "sam@example.com",
        "phone": "555-0100",
        "companyName": "Lens Co",
        "specialty": "video-photo",
        "contactMethod": "phone",
        "socials": "@samlens",
        "portfolio": "https://samlens.example.com",
        "genre": "Indie Rock",
    }
    resp = client.post("/api/network/", payload, content_type="application/json")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Submission successful!"}

    s = NetworkSubmission.objects.get()
    assert s.first_name == "Sam"
    assert s.company_name == "Lens Co"
    assert s.preferred_contact_method == "phone"
    assert s.portfolio_url == "https://samlens.example.com"
    assert s.preferred_genre == "Indie Rock"


@pytest.mark.django_db
def test_network_submission_minimal(client):
    payload = {"firstName": "Ana", "lastName": "Booker", "email": "ana@example.com", "specialty": "booking"}
    resp = client.post("/api/network/", payload, content_type="application/json")
    assert resp.status_code == 200
    assert NetworkSubmission.objects.get().preferred_contact_method == "email"


@pytest.mark.django_db
@pytest.mark.parametrize(
    "missing_or_bad",
    [
        {"firstName": ""},
        {"email": "nope"},
        {"specialty": "astrology"},
        {"contactMethod": "pigeon"},
    ],
)
def test_network_submission_validation(client, missing_or_bad):
    payload = {"firstName": "Ana", "lastName": "Booker", "email": "ana@example.com", "specialty": "booking"}
    payload.update(missing_or_bad)
    resp = client.post("/api/network/", payload, content_type="application/json")
    assert resp.status_code == 400
    assert NetworkSubmission.objects.count() == 0
