"""
Tests for the post-commit contribution emails.

``requests.post`` is replaced with a recorder so no HTTP leaves the
test run.  Emails are only queued once the ledger transaction commits,
so webhook-driven tests run the on-commit callbacks explicitly.
"""
from types import SimpleNamespace

import pytest
import requests
from celery.exceptions import SoftTimeLimitExceeded
from django.contrib.auth.models import User

from payments.checkout import CheckoutIntent
from payments.ledger import record_contribution
from payments.notifications import (
    build_email_context,
    dispatch_contribution_emails,
    send_transactional_email,
    stakeholder_emails,
)
from payments.tasks import send_contribution_notifications
from projects.models import ProjectMember
from projects.permissions import is_platform_admin


class Outbox(list):
    """Recorded email API calls.  Addresses in ``failing`` raise on send."""

    def __init__(self):
        super().__init__()
        self.failing = set()


@pytest.fixture
def sent(monkeypatch):
    outbox = Outbox()

    def fake_post(url, json=None, headers=None, timeout=None):
        outbox.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if json["email"] in outbox.failing:
            raise requests.ConnectionError("connection refused")
        return SimpleNamespace(status_code=200, raise_for_status=lambda: None)

    monkeypatch.setattr("payments.notifications.requests.post", fake_post)
    return outbox


def _contribution(user, project, tier=None, pi="pi_mail"):
    intent = CheckoutIntent(
        user_id=user.id,
        project_id=project.id,
        tier_id=tier.id if tier else None,
        processing_fee_cents=91 if tier else 0,
    )
    total = 2091 if tier else 2000
    return record_contribution(intent, transaction_id=pi, amount_total_cents=total).contribution


@pytest.mark.django_db
def test_webhook_sends_emails_after_commit(
    post_webhook, checkout_event, user, project, tier, platform_admin, sent, django_capture_on_commit_callbacks
):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        resp = post_webhook(checkout_event(user_id=user.id, project_id=project.id, tier_id=tier.id))
    assert resp.status_code == 200
    assert len(callbacks) == 1

    by_template = {}
    for call in sent:
        by_template.setdefault(call["json"]["transactionalId"], []).append(call["json"]["email"])
    assert by_template["tmpl_backer_confirmation"] == ["u1@example.com"]
    assert sorted(by_template["tmpl_stakeholder_alert"]) == ["admin@example.com", "artist@example.com"]

    call = sent[0]
    assert call["url"] == "https://email.test/api/v1/transactional"
    assert call["headers"]["Authorization"] == "Bearer test-email-key"
    assert call["timeout"] == 10


@pytest.mark.django_db
def test_no_email_without_commit(post_webhook, checkout_event, user, project, tier, sent):
    resp = post_webhook(checkout_event(user_id=user.id, project_id=project.id, tier_id=tier.id))
    assert resp.status_code == 200
    assert sent == []


@pytest.mark.django_db
def test_email_context_for_tier_purchase(user, project, tier):
    ctx = build_email_context(_contribution(user, project, tier))
    assert ctx["customerName"] == "Jane Doe"
    assert ctx["customerEmail"] == "u1@example.com"
    assert ctx["projectName"] == "First Record"
    assert ctx["artistName"] == "The Artist"
    assert ctx["tierName"] == "Signed CD"
    assert ctx["amount"] == "$20.00"
    assert ctx["totalCharged"] == "$20.91"
    assert ctx["processingFee"] == "$0.91"
    assert ctx["transactionId"] == "pi_mail"
    assert ctx["projectId"] == str(project.id)
    assert ctx["projectImageUrl"] == "https://cdn.example.com/record.png"
    assert ctx["artistImageUrl"] == "https://encore.test/images/placeholder.png"


@pytest.mark.django_db
def test_email_context_for_donation(user, project):
    ctx = build_email_context(_contribution(user, project))
    assert ctx["tierName"] == "Donation"
    assert ctx["processingFee"] == "$0.00"


@pytest.mark.django_db
def test_blank_name_falls_back(user, project):
    user.profile.full_name = "   "
    user.profile.save()
    ctx = build_email_context(_contribution(user, project))
    assert ctx["customerName"] == "Valued Supporter"


@pytest.mark.django_db
def test_missing_profile_falls_back(user, project, sent, settings):
    settings.STAKEHOLDER_ALERT_TEMPLATE_ID = ""
    contribution = _contribution(user, project)
    user.profile.delete()
    results = dispatch_contribution_emails(contribution.pk)
    assert results["backer"] == {"u1@example.com": True}
    assert sent[0]["json"]["dataVariables"]["customerName"] == "Valued Supporter"


@pytest.mark.django_db
def test_stakeholders_are_deduplicated(user, project, artist, platform_admin):
    ProjectMember.objects.create(project=project, user=platform_admin, role=ProjectMember.ROLE_MANAGER)
    artist.email = "Admin@Example.com"
    artist.save()
    emails = stakeholder_emails(_contribution(user, project))
    assert len(emails) == 1
    assert emails[0].lower() == "admin@example.com"


@pytest.mark.django_db
def test_inactive_members_are_skipped(user, project, artist):
    artist.is_active = False
    artist.save()
    assert stakeholder_emails(_contribution(user, project)) == []


@pytest.mark.django_db
def test_one_failure_does_not_stop_others(user, project, tier, platform_admin, sent):
    contribution = _contribution(user, project, tier)
    sent.failing.add("artist@example.com")

    results = dispatch_contribution_emails(contribution.pk)

    assert results["backer"] == {"u1@example.com": True}
    assert results["stakeholders"] == {"artist@example.com": False, "admin@example.com": True}
    assert len(sent) == 3


@pytest.mark.django_db
def test_alerts_skipped_without_template(user, project, sent, settings):
    settings.STAKEHOLDER_ALERT_TEMPLATE_ID = ""
    results = dispatch_contribution_emails(_contribution(user, project).pk)
    assert results["stakeholders"] == {}
    assert [c["json"]["email"] for c in sent] == ["u1@example.com"]


def test_send_skipped_without_api_key(sent, settings):
    settings.TRANSACTIONAL_EMAIL_API_KEY = ""
    assert send_transactional_email("a@example.com", "tmpl", {}) is False
    assert sent == []


@pytest.mark.django_db
def test_unknown_contribution_sends_nothing(sent):
    assert dispatch_contribution_emails(12345) == {"backer": {}, "stakeholders": {}}
    assert sent == []


def test_task_gives_up_on_time_limit(monkeypatch):
    def slow(contribution_id):
        raise SoftTimeLimitExceeded()

    monkeypatch.setattr("payments.tasks.dispatch_contribution_emails", slow)
    assert send_contribution_notifications(1) == {}


@pytest.mark.django_db
def test_staff_and_superusers_get_alerts(user, project, artist):
    User.objects.create_user(username="staff", password="pass12345", email="staff@example.com", is_staff=True)
    User.objects.create_superuser(username="root", password="pass12345", email="root@example.com")
    emails = stakeholder_emails(_contribution(user, project))
    assert sorted(emails) == ["artist@example.com", "root@example.com", "staff@example.com"]


@pytest.mark.django_db
def test_alert_recipients_match_feed_access(user, project, artist):
    """Everyone who receives an alert can read the contributor feed."""
    staff = User.objects.create_user(username="staff", password="pass12345", email="staff@example.com", is_staff=True)
    recipients = set(stakeholder_emails(_contribution(user, project)))
    assert staff.email in recipients
    assert is_platform_admin(staff)
    assert user.email not in recipients
    assert not is_platform_admin(user)
