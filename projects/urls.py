"""
URL configuration for the projects app, included under ``/api/``.
"""
from rest_framework.routers import DefaultRouter
from .views import ProjectViewSet


router = DefaultRouter()
router.register(r"projects", ProjectViewSet, basename="project")

urlpatterns = [
    *router.urls,
]
