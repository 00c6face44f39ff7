"""
Serializers for the payments app.

These serializers validate checkout requests and expose contribution
ledger rows to the REST API.  Heavy lifting (creating the Stripe
session, recording payments) happens in ``payments.checkout`` and
``payments.ledger``.
"""
from __future__ import annotations

from rest_framework import serializers
from rest_framework.exceptions import NotFound

from projects.models import Project, Tier
from .models import Contribution


class CheckoutRequestSerializer(serializers.Serializer):
    """Serializer for initiating a tier purchase (checkout)."""

    tier_id = serializers.IntegerField()
    project_id = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs):
        tier_id = attrs.get("tier_id")
        project_id = attrs.get("project_id")
        try:
            tier = Tier.objects.select_related("project").get(pk=tier_id)
        except Tier.DoesNotExist:
            raise NotFound("Tier not found.")
        if project_id is None:
            project = tier.project
        else:
            try:
                project = Project.objects.get(pk=project_id)
            except Project.DoesNotExist:
                raise NotFound("Project not found.")
        # Ensure the tier belongs to the project being funded
        if tier.project_id != project.id:
            raise serializers.ValidationError(
                {"tier_id": "This tier does not belong to the given project."}
            )
        if tier.is_sold_out:
            raise serializers.ValidationError({"tier_id": "This tier is sold out."})
        attrs["tier"] = tier
        attrs["project"] = project
        return attrs


class ContributionSerializer(serializers.ModelSerializer):
    """A backer's view of one of their own contributions (read-only)."""

    project_id = serializers.IntegerField(source="project.id", read_only=True)
    project_title = serializers.CharField(source="project.title", read_only=True)
    project_slug = serializers.CharField(source="project.slug", read_only=True)
    artist_name = serializers.CharField(source="project.artist_name", read_only=True)
    project_status = serializers.CharField(source="project.status", read_only=True)
    tier_name = serializers.SerializerMethodField()

    class Meta:
        model = Contribution
        fields = [
            "id",
            "project_id",
            "project_title",
            "project_slug",
            "artist_name",
            "project_status",
            "tier_name",
            "amount_paid",
            "processing_fee",
            "created_at",
        ]
        read_only_fields = fields

    def get_tier_name(self, obj):
        return obj.tier.name if obj.tier_id else "Donation"
