"""
Models for the outreach app.

``NewsletterSubscriber`` holds one row per address, stored lowercased
so the unique constraint is case-insensitive.  ``NetworkSubmission``
is a creative professional's request to be listed in the collaborator
network that artists browse.
"""
from django.db import models


class NewsletterSubscriber(models.Model):
    email = models.EmailField(unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.email


class NetworkSubmission(models.Model):
    """A collaborator sign-up from the "Join our network" form."""

    SPECIALTY_CHOICES = [
        ("graphic-design", "Graphic design"),
        ("video-photo", "Video / photography"),
        ("publicity", "Publicity"),
        ("marketing", "Marketing"),
        ("social-branding", "Social media / branding"),
        ("engineering-producing", "Engineering / producing"),
        ("influencer", "Influencer"),
        ("management", "Management"),
        ("booking", "Booking"),
        ("legal", "Legal"),
        ("financial", "Financial"),
        ("content-management", "Content management"),
    ]
    CONTACT_EMAIL = "email"
    CONTACT_PHONE = "phone"
    CONTACT_CHOICES = [
        (CONTACT_EMAIL, "Email"),
        (CONTACT_PHONE, "Phone"),
    ]

    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    email = models.EmailField()
    phone = models.CharField(max_length=50, blank=True, default="")
    company_name = models.CharField(max_length=255, blank=True, default="")
    specialty = models.CharField(max_length=32, choices=SPECIALTY_CHOICES, db_index=True)
    preferred_contact_method = models.CharField(
        max_length=10, choices=CONTACT_CHOICES, default=CONTACT_EMAIL
    )
    socials = models.CharField(max_length=500, blank=True, default="")
    portfolio_url = models.URLField(blank=True, default="")
    preferred_genre = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.specialty})"
