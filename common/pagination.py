"""
Pagination utilities for the project.

Defines the default page number pagination class used across DRF
endpoints.  Clients may ask for smaller or larger pages (the artist
dashboard does) up to ``max_page_size``.
"""
from rest_framework.pagination import PageNumberPagination

class DefaultPagination(PageNumberPagination):
    """Page number paginator with a client-adjustable page size."""
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100
