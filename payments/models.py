"""
Database models for the payments app.

A ``Contribution`` is the durable ledger record of one confirmed card
payment.  The Stripe PaymentIntent identifier is unique at the database
level: it is the idempotency key that turns Stripe's at-least-once
webhook delivery into exactly-once ledger writes.  ``amount_paid`` is
net of the processing fee, so the sum over a project's contributions is
what its ``current_funding`` counter must equal.
"""
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models

from projects.models import Project, Tier


class Contribution(models.Model):
    """One confirmed payment from a backer to a project."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="contributions",
    )
    project = models.ForeignKey(
        Project,
        on_delete=models.PROTECT,
        related_name="contributions",
    )
    tier = models.ForeignKey(
        Tier,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="contributions",
        help_text="Empty for plain donations",
    )
    amount_paid = models.DecimalField(
        max_digits=10, decimal_places=2, help_text="Amount credited to the project, net of fees"
    )
    processing_fee = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    stripe_payment_intent_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Stripe PaymentIntent identifier; one contribution per payment",
    )
    backer_email = models.EmailField(blank=True, default="")
    needs_reconciliation = models.BooleanField(default=False, db_index=True)
    reconciliation_note = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["project", "created_at"], name="contrib_project_created_idx"),
            models.Index(fields=["user", "created_at"], name="contrib_user_created_idx"),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Contribution {self.id} ({self.amount_paid} to project {self.project_id})"

    @property
    def gross_amount(self) -> Decimal:
        return self.amount_paid + self.processing_fee
