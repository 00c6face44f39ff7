"""
Serializers for the projects app.

Projects, tiers, testimonials and budgets are exposed read-only:
funding counters belong to the payments ledger and project setup
happens in the admin.  The transaction serializer formats ledger rows
for the artist dashboard.
"""
from decimal import Decimal

from rest_framework import serializers

from payments.models import Contribution
from .models import BudgetCategory, BudgetLineItem, Project, Testimonial, Tier


class TierSerializer(serializers.ModelSerializer):
    remaining_slots = serializers.IntegerField(read_only=True, allow_null=True)
    is_sold_out = serializers.BooleanField(read_only=True)

    class Meta:
        model = Tier
        fields = [
            "id",
            "name",
            "description",
            "price",
            "perks",
            "total_slots",
            "claimed_slots",
            "remaining_slots",
            "is_sold_out",
        ]
        read_only_fields = fields


class ProjectSerializer(serializers.ModelSerializer):
    tiers = TierSerializer(many=True, read_only=True)
    percent_funded = serializers.IntegerField(read_only=True)

    class Meta:
        model = Project
        fields = [
            "id",
            "slug",
            "title",
            "artist_name",
            "funding_goal",
            "current_funding",
            "backer_count",
            "percent_funded",
            "status",
            "donation_link",
            "image_url",
            "artist_image_url",
            "created_at",
            "tiers",
        ]
        read_only_fields = fields


class TestimonialSerializer(serializers.ModelSerializer):
    class Meta:
        model = Testimonial
        fields = ["id", "name", "location", "profile_image_url", "moment", "story", "date", "verified"]
        read_only_fields = fields


class BudgetLineItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = BudgetLineItem
        fields = ["id", "name", "notes", "cost"]
        read_only_fields = fields


class BudgetCategorySerializer(serializers.ModelSerializer):
    line_items = BudgetLineItemSerializer(many=True, read_only=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = BudgetCategory
        fields = ["id", "name", "total", "line_items"]
        read_only_fields = fields


class ProjectDetailSerializer(ProjectSerializer):
    """Full project page: adds the artist story, testimonials and budget breakdown."""

    testimonials = TestimonialSerializer(many=True, read_only=True)
    budget_categories = BudgetCategorySerializer(many=True, read_only=True)
    budget_total = serializers.SerializerMethodField()

    class Meta(ProjectSerializer.Meta):
        fields = ProjectSerializer.Meta.fields + [
            "artist_bio",
            "artist_message",
            "artist_message_video_url",
            "audio_preview_url",
            "testimonials",
            "budget_categories",
            "budget_total",
        ]
        read_only_fields = fields

    def get_budget_total(self, obj):
        total = sum((c.total for c in obj.budget_categories.all()), Decimal("0.00"))
        return f"{total:.2f}"


class TransactionSerializer(serializers.ModelSerializer):
    """One row of a project's contributor feed."""

    amount = serializers.DecimalField(source="amount_paid", max_digits=10, decimal_places=2, read_only=True)
    date = serializers.DateTimeField(source="created_at", read_only=True)
    tier_name = serializers.SerializerMethodField()
    backer_name = serializers.SerializerMethodField()
    backer_email = serializers.SerializerMethodField()

    class Meta:
        model = Contribution
        fields = ["id", "amount", "date", "tier_name", "backer_name", "backer_email", "needs_reconciliation"]
        read_only_fields = fields

    def get_tier_name(self, obj):
        return obj.tier.name if obj.tier_id else "Donation"

    def get_backer_name(self, obj):
        profile = getattr(obj.user, "profile", None)
        return profile.short_name if profile else "Anonymous"

    def get_backer_email(self, obj):
        return obj.user.email or obj.backer_email or "N/A"
