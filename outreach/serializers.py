"""
Serializers for the outreach app.

The network form posts camelCase keys (``firstName``, ``contactMethod``,
``portfolio``...), which are mapped onto the model's field names here.
"""
from rest_framework import serializers

from .models import NetworkSubmission


class NewsletterSubscribeSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate_email(self, value):
        return value.strip().lower()


class NetworkSubmissionSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source="first_name", max_length=150)
    lastName = serializers.CharField(source="last_name", max_length=150)
    companyName = serializers.CharField(source="company_name", max_length=255, required=False, allow_blank=True)
    contactMethod = serializers.ChoiceField(
        source="preferred_contact_method",
        choices=NetworkSubmission.CONTACT_CHOICES,
        required=False,
    )
    portfolio = serializers.URLField(source="portfolio_url", required=False, allow_blank=True)
    genre = serializers.CharField(source="preferred_genre", max_length=255, required=False, allow_blank=True)

    class Meta:
        model = NetworkSubmission
        fields = [
            "firstName",
            "lastName",
            "email",
            "phone",
            "companyName",
            "specialty",
            "contactMethod",
            "socials",
            "portfolio",
            "genre",
        ]
        extra_kwargs = {
            "phone": {"required": False, "allow_blank": True},
            "socials": {"required": False, "allow_blank": True},
        }
