"""
Global permission classes for the workshop scheduling platform.

Authentication and role-based access control belong to the surrounding
platform; the API only insists that every request is bound to a tenant.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import permissions


class HasTenant(permissions.BasePermission):
    """Allow the request only when the tenant middleware resolved a tenant."""

    message = _("A valid tenant identifier is required.")

    def has_permission(self, request, view):
        return getattr(request, "tenant", None) is not None
