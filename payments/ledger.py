"""
Contribution ledger writes and reconciliation.

``record_contribution`` is the only code path that changes funding
counters.  It runs in a single database transaction:

1. insert the ``Contribution`` row; the unique PaymentIntent id makes a
   redelivered webhook fail here, which is reported as a duplicate and
   nothing else runs;
2. claim a tier slot with a conditional ``UPDATE`` that only matches
   while slots remain.  If no row matches, the tier sold out under a
   concurrent payment: the contribution is kept (the card was charged)
   and flagged for manual reconciliation;
3. add the net amount to the project's funding and one to its backer
   count with ``F()`` expressions, and move a fundraising project that
   reached its goal to ``funded``.

Notifications are queued with ``transaction.on_commit`` so they only go
out once the ledger write is durable.

``reconcile_project`` recomputes the counters from the ledger and is
used by the periodic ``reconcile_ledger`` task and management command.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import (
    Case, Count, DecimalField, F, IntegerField, OuterRef, Q, Subquery, Sum, Value, When,
)
from django.db.models.functions import Coalesce, Least

from projects.models import Project, Tier
from .checkout import CheckoutIntent, MissingMetadataError
from .fees import from_cents
from .models import Contribution

logger = logging.getLogger(__name__)

User = get_user_model()

SOLD_OUT_NOTE = "Tier sold out before this payment was confirmed"


@dataclass
class LedgerResult:
    contribution: Contribution
    created: bool
    slot_claimed: bool | None = None


def _validate_references(intent: CheckoutIntent) -> None:
    if not User.objects.filter(pk=intent.user_id).exists():
        raise MissingMetadataError(f"Unknown user {intent.user_id}")
    if not Project.objects.filter(pk=intent.project_id).exists():
        raise MissingMetadataError(f"Unknown project {intent.project_id}")
    if intent.tier_id is not None and not Tier.objects.filter(
        pk=intent.tier_id, project_id=intent.project_id
    ).exists():
        raise MissingMetadataError(
            f"Tier {intent.tier_id} does not exist in project {intent.project_id}"
        )


def claim_tier_slot(tier_id: int) -> bool:
    """Atomically take one slot of a tier.  Returns False if the tier is full."""
    updated = (
        Tier.objects.filter(pk=tier_id)
        .filter(Q(total_slots__isnull=True) | Q(claimed_slots__lt=F("total_slots")))
        .update(claimed_slots=F("claimed_slots") + 1)
    )
    return updated == 1


def credit_project(project_id: int, amount: Decimal) -> None:
    """Atomically add one backer and ``amount`` to a project's funding."""
    Project.objects.filter(pk=project_id).update(
        current_funding=F("current_funding") + amount,
        backer_count=F("backer_count") + 1,
    )
    reached = Project.objects.filter(
        pk=project_id,
        status=Project.STATUS_FUNDRAISING,
        current_funding__gte=F("funding_goal"),
    ).update(status=Project.STATUS_FUNDED)
    if reached:
        logger.info("Project %s reached its funding goal", project_id)


def _existing_contribution(transaction_id: str) -> Contribution | None:
    return Contribution.objects.filter(stripe_payment_intent_id=transaction_id).first()


def _enqueue_notifications(contribution_id: int) -> None:
    from .tasks import send_contribution_notifications

    try:
        send_contribution_notifications.delay(contribution_id)
    except Exception:
        # Broker outages must not turn a recorded payment into a webhook failure
        logger.exception("Could not queue notifications for contribution %s", contribution_id)


def record_contribution(
    intent: CheckoutIntent,
    *,
    transaction_id: str,
    amount_total_cents: int,
    backer_email: str = "",
) -> LedgerResult:
    """Record a confirmed payment exactly once and update the derived counters.

    Args:
        intent: Correlation data parsed from the checkout session metadata.
        transaction_id: Stripe PaymentIntent id; the idempotency key.
        amount_total_cents: Gross amount charged, in cents.
        backer_email: Email address the backer entered on the payment page.

    Raises:
        MissingMetadataError: If the user, project or tier does not exist.
    """
    existing = _existing_contribution(transaction_id)
    if existing is not None:
        logger.info("Duplicate delivery for payment %s ignored", transaction_id)
        return LedgerResult(contribution=existing, created=False)

    _validate_references(intent)

    fee_cents = min(intent.processing_fee_cents, max(amount_total_cents, 0))
    net = from_cents(max(amount_total_cents - fee_cents, 0))
    slot_claimed = None
    try:
        with transaction.atomic():
            contribution = Contribution.objects.create(
                user_id=intent.user_id,
                project_id=intent.project_id,
                tier_id=intent.tier_id,
                amount_paid=net,
                processing_fee=from_cents(fee_cents),
                stripe_payment_intent_id=transaction_id,
                backer_email=backer_email or "",
            )
            if intent.tier_id is not None:
                slot_claimed = claim_tier_slot(intent.tier_id)
                if not slot_claimed:
                    contribution.needs_reconciliation = True
                    contribution.reconciliation_note = SOLD_OUT_NOTE
                    contribution.save(update_fields=["needs_reconciliation", "reconciliation_note"])
                    logger.warning(
                        "Tier %s sold out; contribution %s recorded and flagged for reconciliation",
                        intent.tier_id,
                        contribution.pk,
                    )
            credit_project(intent.project_id, net)
            transaction.on_commit(lambda: _enqueue_notifications(contribution.pk))
    except IntegrityError:
        # Lost a race against a concurrent delivery of the same event
        existing = Contribution.objects.filter(stripe_payment_intent_id=transaction_id).first()
        if existing is None:
            raise
        logger.info("Concurrent duplicate delivery for payment %s ignored", transaction_id)
        return LedgerResult(contribution=existing, created=False)

    logger.info(
        "Contribution %s recorded: user %s, project %s, tier %s, net %s",
        contribution.pk,
        intent.user_id,
        intent.project_id,
        intent.tier_id,
        net,
    )
    return LedgerResult(contribution=contribution, created=True, slot_claimed=slot_claimed)


@dataclass
class ReconciliationReport:
    project_id: int
    expected_funding: Decimal
    recorded_funding: Decimal
    expected_backers: int
    recorded_backers: int
    tier_drift: dict[int, tuple[int, int]] = field(default_factory=dict)
    flagged_contributions: list[int] = field(default_factory=list)
    repaired: bool = False

    @property
    def has_drift(self) -> bool:
        return (
            self.expected_funding != self.recorded_funding
            or self.expected_backers != self.recorded_backers
            or bool(self.tier_drift)
        )


def _ledger_funding():
    total = (
        Contribution.objects.filter(project_id=OuterRef("pk"))
        .order_by()
        .values("project_id")
        .annotate(total=Sum("amount_paid"))
        .values("total")
    )
    return Coalesce(
        Subquery(total, output_field=DecimalField(max_digits=12, decimal_places=2)),
        Value(Decimal("0.00")),
        output_field=DecimalField(max_digits=12, decimal_places=2),
    )


def _ledger_count(field_name):
    count = (
        Contribution.objects.filter(**{field_name: OuterRef("pk")})
        .order_by()
        .values(field_name)
        .annotate(n=Count("id"))
        .values("n")
    )
    return Coalesce(Subquery(count, output_field=IntegerField()), Value(0), output_field=IntegerField())


def _apply_repair(report: ReconciliationReport) -> None:
    """Overwrite drifted counters with values computed from the ledger in the UPDATE itself.

    Must run inside the transaction that holds the tier and project row locks.
    """
    Project.objects.filter(pk=report.project_id).update(
        current_funding=_ledger_funding(),
        backer_count=_ledger_count("project_id"),
    )
    confirmed = _ledger_count("tier_id")
    Tier.objects.filter(pk__in=list(report.tier_drift)).update(
        claimed_slots=Case(
            When(total_slots__isnull=True, then=confirmed),
            default=Least(confirmed, F("total_slots"), output_field=IntegerField()),
            output_field=IntegerField(),
        )
    )


def _compare(project: Project) -> ReconciliationReport:
    totals = project.contributions.aggregate(total=Sum("amount_paid"), count=Count("id"))
    report = ReconciliationReport(
        project_id=project.pk,
        expected_funding=(totals["total"] or Decimal("0")).quantize(Decimal("0.01")),
        recorded_funding=project.current_funding,
        expected_backers=totals["count"] or 0,
        recorded_backers=project.backer_count,
        flagged_contributions=list(
            project.contributions.filter(needs_reconciliation=True).values_list("id", flat=True)
        ),
    )

    tiers = Tier.objects.filter(project_id=project.pk).annotate(confirmed=Count("contributions"))
    for tier in tiers:
        expected = tier.confirmed
        if tier.total_slots is not None:
            expected = min(expected, tier.total_slots)
        if expected != tier.claimed_slots:
            report.tier_drift[tier.pk] = (expected, tier.claimed_slots)
    return report


def reconcile_project(project: Project, repair: bool = False) -> ReconciliationReport:
    """Compare a project's counters with its contributions, optionally fixing them.

    Tier slot counts are clamped to ``total_slots``; oversold payments
    stay visible through ``flagged_contributions`` instead.

    With ``repair`` the tier rows and then the project row are locked
    (the same order ``record_contribution`` updates them in) before the
    counters are read, and the corrected values are recomputed from the
    ledger by the ``UPDATE`` itself, so a payment recorded concurrently is
    never overwritten.
    """
    if not repair:
        report = _compare(project)
        if report.has_drift:
            _log_drift(report)
        return report

    with transaction.atomic():
        list(
            Tier.objects.select_for_update()
            .filter(project_id=project.pk)
            .order_by("pk")
            .values_list("pk", flat=True)
        )
        locked = Project.objects.select_for_update().get(pk=project.pk)
        report = _compare(locked)
        if report.has_drift:
            _log_drift(report)
            _apply_repair(report)
            report.repaired = True
            logger.info("Ledger counters repaired for project %s", project.pk)
    return report


def _log_drift(report: ReconciliationReport) -> None:
    logger.warning(
        "Ledger drift on project %s: funding %s vs %s, backers %s vs %s, tiers %s",
        report.project_id,
        report.expected_funding,
        report.recorded_funding,
        report.expected_backers,
        report.recorded_backers,
        report.tier_drift,
    )
