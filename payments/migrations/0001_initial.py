"""
Initial migration for the payments app.

Creates the Contribution ledger table.  The unique constraint on the
Stripe PaymentIntent identifier is the idempotency gate for webhook
redeliveries; project and tier references are protected so ledger rows
can never be orphaned.
"""
from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("projects", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Contribution",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "amount_paid",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Amount credited to the project, net of fees",
                        max_digits=10,
                    ),
                ),
                (
                    "processing_fee",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10),
                ),
                (
                    "stripe_payment_intent_id",
                    models.CharField(
                        help_text="Stripe PaymentIntent identifier; one contribution per payment",
                        max_length=255,
                        unique=True,
                    ),
                ),
                ("backer_email", models.EmailField(blank=True, default="", max_length=254)),
                ("needs_reconciliation", models.BooleanField(db_index=True, default=False)),
                ("reconciliation_note", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="contributions",
                        to="projects.project",
                    ),
                ),
                (
                    "tier",
                    models.ForeignKey(
                        blank=True,
                        help_text="Empty for plain donations",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="contributions",
                        to="projects.tier",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="contributions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.AddIndex(
            model_name="contribution",
            index=models.Index(fields=["project", "created_at"], name="contrib_project_created_idx"),
        ),
        migrations.AddIndex(
            model_name="contribution",
            index=models.Index(fields=["user", "created_at"], name="contrib_user_created_idx"),
        ),
    ]
