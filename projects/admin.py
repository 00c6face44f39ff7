"""
Django admin registration for the projects app.

Artists and admins set up projects and tiers here.  Funding counters
are read-only because only the payments ledger may change them.
"""
from django.contrib import admin
from .models import BudgetCategory, BudgetLineItem, Project, ProjectMember, Testimonial, Tier


class TierInline(admin.TabularInline):
    model = Tier
    extra = 0
    readonly_fields = ("claimed_slots",)


class ProjectMemberInline(admin.TabularInline):
    model = ProjectMember
    extra = 0


class TestimonialInline(admin.StackedInline):
    model = Testimonial
    extra = 0


class BudgetCategoryInline(admin.TabularInline):
    model = BudgetCategory
    extra = 0
    show_change_link = True


class BudgetLineItemInline(admin.TabularInline):
    model = BudgetLineItem
    extra = 0


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "artist_name",
        "status",
        "funding_goal",
        "current_funding",
        "backer_count",
        "created_at",
    )
    list_filter = ("status",)
    search_fields = ("title", "artist_name", "slug")
    prepopulated_fields = {"slug": ("title",)}
    readonly_fields = ("current_funding", "backer_count")
    inlines = [TierInline, ProjectMemberInline, BudgetCategoryInline, TestimonialInline]
    ordering = ("-created_at",)


@admin.register(BudgetCategory)
class BudgetCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "project", "position")
    list_filter = ("project",)
    inlines = [BudgetLineItemInline]
