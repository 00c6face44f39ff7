"""
Transactional email notifications for confirmed contributions.

Emails go through a Loops-style transactional API: one HTTP POST per
recipient carrying a template id and a flat map of template variables.
Every send is independent and time-bounded.  A failure is logged and
reported as ``False`` for that address; it never stops the remaining
sends and never touches the ledger, which is already committed by the
time these functions run.
"""
import logging

import requests
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Q

from users.models import platform_admin_q
from .fees import format_amount
from .models import Contribution

logger = logging.getLogger(__name__)

FALLBACK_BACKER_NAME = "Valued Supporter"
FALLBACK_PROJECT_NAME = "Unknown Project"
FALLBACK_ARTIST_NAME = "Unknown Artist"
DONATION_TIER_NAME = "Donation"


def send_transactional_email(email, template_id, data_variables):
    """
    Send one templated email through the transactional email API.

    Args:
        email: Recipient address
        template_id: Transactional template identifier
        data_variables: Flat dict of template variables

    Returns:
        bool: True if the API accepted the email, False otherwise
    """
    api_key = getattr(settings, "TRANSACTIONAL_EMAIL_API_KEY", "")
    if not api_key or not template_id:
        logger.warning("Transactional email not configured; skipping email to %s", email)
        return False

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    payload = {
        "transactionalId": template_id,
        "email": email,
        "dataVariables": data_variables,
    }
    try:
        r = requests.post(
            settings.TRANSACTIONAL_EMAIL_API_URL,
            json=payload,
            headers=headers,
            timeout=settings.NOTIFICATION_TIMEOUT_SECS,
        )
        r.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Failed to send email {template_id} to {email}: {e}")
        return False
    logger.info(f"Email {template_id} sent to {email}")
    return True


def _backer_name(contribution):
    try:
        profile = contribution.user.profile
    except Exception as e:
        logger.warning(f"Profile lookup failed for contribution {contribution.pk}: {e}")
        return FALLBACK_BACKER_NAME
    return (profile.full_name or "").strip() or FALLBACK_BACKER_NAME


def build_email_context(contribution):
    """
    Template variables for a contribution.  Lookups that fail fall back
    to display placeholders instead of raising.
    """
    placeholder = settings.PLACEHOLDER_IMAGE_URL
    project_name = FALLBACK_PROJECT_NAME
    artist_name = FALLBACK_ARTIST_NAME
    project_image = artist_image = placeholder
    try:
        project = contribution.project
        project_name = project.title or FALLBACK_PROJECT_NAME
        artist_name = project.artist_name or FALLBACK_ARTIST_NAME
        project_image = project.image_url or placeholder
        artist_image = project.artist_image_url or placeholder
    except Exception as e:
        logger.warning(f"Project lookup failed for contribution {contribution.pk}: {e}")

    tier_name = DONATION_TIER_NAME
    if contribution.tier_id:
        try:
            tier_name = contribution.tier.name
        except Exception as e:
            logger.warning(f"Tier lookup failed for contribution {contribution.pk}: {e}")

    currency = settings.STRIPE_CURRENCY
    return {
        "customerName": _backer_name(contribution),
        "customerEmail": recipient_for_backer(contribution),
        "projectName": project_name,
        "artistName": artist_name,
        "tierName": tier_name,
        "amount": format_amount(contribution.amount_paid, currency),
        "totalCharged": format_amount(contribution.gross_amount, currency),
        "processingFee": format_amount(contribution.processing_fee, currency),
        "transactionId": contribution.stripe_payment_intent_id,
        "paymentDate": contribution.created_at.strftime("%B %d, %Y"),
        "projectId": str(contribution.project_id),
        "projectImageUrl": project_image,
        "artistImageUrl": artist_image,
    }


def recipient_for_backer(contribution):
    """The address the backer paid with, or their account email."""
    if contribution.backer_email:
        return contribution.backer_email
    try:
        return contribution.user.email or ""
    except Exception:
        return ""


def stakeholder_emails(contribution):
    """
    Project team members and platform admins, deduplicated by
    case-insensitive address and kept in a stable order.
    """
    User = get_user_model()
    users = User.objects.filter(is_active=True).filter(
        Q(pk__in=contribution.project.memberships.values("user_id")) | platform_admin_q()
    )

    seen = set()
    emails = []
    for address in users.order_by("pk").values_list("email", flat=True):
        key = (address or "").strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        emails.append(address.strip())
    return emails


def dispatch_contribution_emails(contribution_id):
    """
    Send the backer confirmation and the stakeholder alerts for one
    contribution.

    Returns:
        dict: {"backer": {address: bool}, "stakeholders": {address: bool}}
    """
    try:
        contribution = Contribution.objects.select_related(
            "user", "project", "tier"
        ).get(pk=contribution_id)
    except Contribution.DoesNotExist:
        logger.error(f"Contribution {contribution_id} not found; no notifications sent")
        return {"backer": {}, "stakeholders": {}}

    ctx = build_email_context(contribution)
    results = {"backer": {}, "stakeholders": {}}

    backer_email = ctx["customerEmail"]
    if backer_email:
        results["backer"][backer_email] = send_transactional_email(
            backer_email, settings.BACKER_CONFIRMATION_TEMPLATE_ID, ctx
        )
    else:
        logger.warning(f"Contribution {contribution_id} has no backer email; confirmation skipped")

    alert_template = getattr(settings, "STAKEHOLDER_ALERT_TEMPLATE_ID", "")
    if alert_template:
        try:
            recipients = stakeholder_emails(contribution)
        except Exception as e:
            logger.error(f"Stakeholder lookup failed for contribution {contribution_id}: {e}")
            recipients = []
        for address in recipients:
            results["stakeholders"][address] = send_transactional_email(address, alert_template, ctx)

    failed = [
        address
        for sent in results.values()
        for address, ok in sent.items()
        if not ok
    ]
    if failed:
        logger.error(f"Notifications for contribution {contribution_id} failed for: {', '.join(failed)}")
    else:
        logger.info(f"Sent {sum(len(s) for s in results.values())} notifications for contribution {contribution_id}")
    return results
