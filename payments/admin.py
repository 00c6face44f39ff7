"""
Django admin registration for the payments app.

Contributions are ledger rows: the admin lists and filters them for
troubleshooting but does not allow edits, so the funding counters can
never drift through manual changes.  Flagged rows (tier oversold under
a concurrent payment) are easy to find via ``needs_reconciliation``.
"""
from django.contrib import admin
from .models import Contribution


@admin.register(Contribution)
class ContributionAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "project",
        "tier",
        "user",
        "amount_paid",
        "processing_fee",
        "needs_reconciliation",
        "created_at",
    )
    list_filter = ("needs_reconciliation", "project")
    search_fields = ("user__username", "user__email", "backer_email", "stripe_payment_intent_id")
    ordering = ("-created_at",)
    readonly_fields = [f.name for f in Contribution._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
