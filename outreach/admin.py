from django.contrib import admin
from .models import NetworkSubmission, NewsletterSubscriber


@admin.register(NewsletterSubscriber)
class NewsletterSubscriberAdmin(admin.ModelAdmin):
    list_display = ("email", "created_at")
    search_fields = ("email",)


@admin.register(NetworkSubmission)
class NetworkSubmissionAdmin(admin.ModelAdmin):
    list_display = ("first_name", "last_name", "email", "specialty", "preferred_contact_method", "created_at")
    list_filter = ("specialty", "preferred_contact_method")
    search_fields = ("first_name", "last_name", "email", "company_name", "preferred_genre")
