"""
Views for the outreach app: newsletter sign-up and the collaborator
network form.  Both are public.
"""
import logging

from django.db import IntegrityError, transaction
from rest_framework import permissions, status, views
from rest_framework.response import Response

from .models import NewsletterSubscriber
from .serializers import NetworkSubmissionSerializer, NewsletterSubscribeSerializer

logger = logging.getLogger(__name__)

ALREADY_SUBSCRIBED = "This email is already subscribed."


class NewsletterSubscribeView(views.APIView):
    """POST /api/newsletter/subscribe/ -> 200, or 409 if the address is already on the list."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        ser = NewsletterSubscribeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        email = ser.validated_data["email"]

        if NewsletterSubscriber.objects.filter(email=email).exists():
            return Response({"error": ALREADY_SUBSCRIBED}, status=status.HTTP_409_CONFLICT)
        try:
            with transaction.atomic():
                NewsletterSubscriber.objects.create(email=email)
        except IntegrityError:
            return Response({"error": ALREADY_SUBSCRIBED}, status=status.HTTP_409_CONFLICT)

        logger.info("Newsletter subscription added")
        return Response({"message": "Successfully subscribed!"}, status=status.HTTP_200_OK)


class NetworkSubmissionView(views.APIView):
    """POST /api/network/ -> store a collaborator network sign-up."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        ser = NetworkSubmissionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        submission = ser.save()
        logger.info("Network submission %s received (%s)", submission.pk, submission.specialty)
        return Response({"message": "Submission successful!"}, status=status.HTTP_200_OK)
