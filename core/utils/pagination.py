"""
Pagination utilities for the workshop scheduling platform.

This module provides custom pagination classes for DRF APIs.
"""

from collections import OrderedDict

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsSetPagination(PageNumberPagination):
    """
    Standard pagination for list endpoints and the lift usage ledger.

    Features:
    - Page size parameter
    - Max page size limit
    - Consistent response format
    """

    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100

    def get_paginated_response(self, data):
        return Response(
            OrderedDict(
                [
                    ("count", self.page.paginator.count),
                    ("next", self.get_next_link()),
                    ("previous", self.get_previous_link()),
                    ("page_size", self.get_page_size(self.request)),
                    ("current_page", self.page.number),
                    ("total_pages", self.page.paginator.num_pages),
                    ("results", data),
                ]
            )
        )
