"""
Database models for the projects app.

A ``Project`` is an artist's crowdfunding campaign.  Its
``current_funding`` and ``backer_count`` counters mirror the
contribution ledger and are only ever changed with atomic ``F()``
updates from ``payments.ledger``.  A ``Tier`` is a priced reward level
with an optional slot limit; a database check constraint keeps
``claimed_slots`` within ``total_slots``.
Testimonials and the budget breakdown (categories of costed line
items) are editorial content shown on the project page.
"""
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import F, Q


class Project(models.Model):
    """An artist's crowdfunding campaign."""

    STATUS_DRAFT = "draft"
    STATUS_FUNDRAISING = "fundraising"
    STATUS_FUNDED = "funded"
    STATUS_COMPLETED = "completed"
    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_FUNDRAISING, "Fundraising"),
        (STATUS_FUNDED, "Funded"),
        (STATUS_COMPLETED, "Completed"),
    ]

    slug = models.SlugField(max_length=255, unique=True)
    title = models.CharField(max_length=255)
    artist_name = models.CharField(max_length=255)
    funding_goal = models.DecimalField(max_digits=12, decimal_places=2)
    current_funding = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    backer_count = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=12, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True
    )
    donation_link = models.URLField(blank=True, default="")
    image_url = models.URLField(blank=True, default="")
    artist_image_url = models.URLField(blank=True, default="")
    artist_bio = models.TextField(blank=True, default="")
    artist_message = models.TextField(blank=True, default="", help_text='"From the artist" note on the project page')
    artist_message_video_url = models.URLField(blank=True, default="")
    audio_preview_url = models.URLField(blank=True, default="")
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="ProjectMember",
        related_name="projects",
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.title} by {self.artist_name}"

    @property
    def percent_funded(self) -> int:
        if not self.funding_goal:
            return 0
        return int(self.current_funding * 100 / self.funding_goal)


class ProjectMember(models.Model):
    """A user on a project's team.  Members see contributor data and get alerts."""

    ROLE_ARTIST = "artist"
    ROLE_MANAGER = "manager"
    ROLE_CHOICES = [
        (ROLE_ARTIST, "Artist"),
        (ROLE_MANAGER, "Manager"),
    ]

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="memberships")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="project_memberships"
    )
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_ARTIST)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = (("project", "user"),)

    def __str__(self) -> str:
        return f"{self.user} on {self.project_id} ({self.role})"


class Tier(models.Model):
    """A priced reward level within a project."""

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="tiers")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2)
    perks = models.JSONField(default=list, blank=True, help_text="Ordered list of perk strings")
    total_slots = models.PositiveIntegerField(
        null=True, blank=True, help_text="Leave empty for unlimited slots"
    )
    claimed_slots = models.PositiveIntegerField(default=0)
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["position", "price", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_slots__isnull=True) | Q(claimed_slots__lte=F("total_slots")),
                name="tier_claimed_within_total",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} (${self.price})"

    @property
    def remaining_slots(self) -> int | None:
        if self.total_slots is None:
            return None
        return max(self.total_slots - self.claimed_slots, 0)

    @property
    def is_sold_out(self) -> bool:
        return self.total_slots is not None and self.claimed_slots >= self.total_slots

    @property
    def price_cents(self) -> int:
        from payments.fees import to_cents

        return to_cents(self.price)


class Testimonial(models.Model):
    """A fan story shown on a project page."""

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="testimonials")
    name = models.CharField(max_length=255)
    location = models.CharField(max_length=255, blank=True, default="")
    profile_image_url = models.URLField(blank=True, default="")
    moment = models.CharField(max_length=255, blank=True, default="", help_text="Headline for the story")
    story = models.TextField()
    date = models.DateField(null=True, blank=True)
    verified = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self) -> str:
        return f"{self.name} on {self.project_id}"


class BudgetCategory(models.Model):
    """A group of costs in a project's budget breakdown."""

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="budget_categories")
    name = models.CharField(max_length=255)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]
        verbose_name_plural = "budget categories"

    def __str__(self) -> str:
        return self.name

    @property
    def total(self) -> Decimal:
        return sum((item.cost for item in self.line_items.all()), Decimal("0.00"))


class BudgetLineItem(models.Model):
    category = models.ForeignKey(BudgetCategory, on_delete=models.CASCADE, related_name="line_items")
    name = models.CharField(max_length=255)
    notes = models.TextField(blank=True, default="")
    cost = models.DecimalField(max_digits=12, decimal_places=2)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self) -> str:
        return f"{self.name} (${self.cost})"
