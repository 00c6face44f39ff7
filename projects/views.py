"""
Views for the projects app.

Public, read-only project listings show funding progress and tier
availability; the detail view adds the artist story, testimonials and
budget breakdown, and ``featured`` returns the newest few projects.  The transactions endpoints give a project's team (and
platform admins) the contributor feed and a CSV export of it.
"""
import csv

from django.http import HttpResponse
from rest_framework import permissions, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from payments.models import Contribution
from .models import Project
from .permissions import IsProjectMemberOrAdmin
from .serializers import ProjectDetailSerializer, ProjectSerializer, TransactionSerializer

FEATURED_PROJECT_COUNT = 3


class ProjectViewSet(viewsets.ReadOnlyModelViewSet):
    """Public project pages plus team-only contributor data."""

    serializer_class = ProjectSerializer
    permission_classes = [permissions.AllowAny]

    def get_serializer_class(self):
        if self.action == "retrieve":
            return ProjectDetailSerializer
        return ProjectSerializer

    def get_queryset(self):
        qs = Project.objects.exclude(status=Project.STATUS_DRAFT).prefetch_related("tiers")
        if self.action == "retrieve":
            qs = qs.prefetch_related("testimonials", "budget_categories__line_items")
        status_param = self.request.query_params.get("status")
        if status_param:
            qs = qs.filter(status=status_param)
        return qs.order_by("-created_at")

    @action(detail=False, methods=["get"])
    def featured(self, request):
        """GET /api/projects/featured/ -> the newest public projects, unpaginated."""
        qs = self.get_queryset().order_by("-created_at", "-id")[:FEATURED_PROJECT_COUNT]
        return Response(self.get_serializer(qs, many=True).data)

    def _contributions(self, project):
        return (
            Contribution.objects.filter(project=project)
            .select_related("user__profile", "tier")
            .order_by("-created_at", "-id")
        )

    def _team_project(self):
        # Drafts are hidden publicly but their team still manages them
        project = Project.objects.filter(pk=self.kwargs["pk"]).first()
        if project is None:
            raise NotFound("Project not found.")
        self.check_object_permissions(self.request, project)
        return project

    @action(detail=True, methods=["get"], permission_classes=[IsProjectMemberOrAdmin])
    def transactions(self, request, pk=None):
        """GET /api/projects/{id}/transactions/ -> paginated contributor feed."""
        project = self._team_project()
        qs = self._contributions(project)
        page = self.paginate_queryset(qs)
        serializer = TransactionSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(
        detail=True,
        methods=["get"],
        url_path="transactions/export",
        permission_classes=[IsProjectMemberOrAdmin],
    )
    def export_transactions(self, request, pk=None):
        """GET /api/projects/{id}/transactions/export/ -> every contribution as CSV."""
        project = self._team_project()
        response = HttpResponse(content_type="text/csv")
        response["Content-Disposition"] = f'attachment; filename="{project.slug}-contributions.csv"'
        writer = csv.writer(response)
        writer.writerow(["Date", "Amount", "Tier", "Backer", "Email"])
        for row in TransactionSerializer(self._contributions(project), many=True).data:
            writer.writerow([
                row["date"][:10],
                row["amount"],
                row["tier_name"],
                row["backer_name"],
                row["backer_email"],
            ])
        return response
