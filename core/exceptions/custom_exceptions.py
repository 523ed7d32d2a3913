"""
Custom exceptions for the workshop scheduling platform.

This module defines a hierarchy of custom exceptions used across the platform
to provide consistent error handling and reporting. Every exception carries
the HTTP status the API layer answers with, so services can raise them
without knowing about requests or responses.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import status


class APIException(Exception):
    """Base exception for all API-related exceptions."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = _("An unexpected error occurred.")
    error_code = "error"

    def __init__(self, message=None, status_code=None, errors=None):
        self.message = message or self.default_message
        if status_code:
            self.status_code = status_code
        self.errors = errors
        super().__init__(self.message)


class InvalidDataException(APIException):
    """Exception raised when request data is invalid."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = _("Invalid data provided.")
    error_code = "validation_error"


class ResourceNotFoundException(APIException):
    """Exception raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = _("The requested resource was not found.")
    error_code = "not_found"


class DuplicateResourceException(APIException):
    """Exception raised when attempting to create a duplicate resource."""

    status_code = status.HTTP_409_CONFLICT
    default_message = _("A resource with this identifier already exists.")
    error_code = "duplicate_resource"


class InvalidOperationException(APIException):
    """Exception raised when an operation is invalid in the current state."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = _("This operation is not valid in the current state.")
    error_code = "invalid_state"


class InvalidStatusTransitionException(InvalidOperationException):
    """Exception raised when a status change is not allowed from the current status."""

    default_message = _("This status change is not allowed.")
    error_code = "invalid_status_transition"


class SchedulingConflictException(APIException):
    """Exception raised when there's a scheduling conflict."""

    status_code = status.HTTP_409_CONFLICT
    default_message = _("A scheduling conflict was detected.")
    error_code = "scheduling_conflict"


# ---------------------------------------------------------------------------
# Lift (elevator) state errors
# ---------------------------------------------------------------------------


class LiftInMaintenanceException(InvalidOperationException):
    """Exception raised when a lift under maintenance is asked to do work."""

    default_message = _("The lift is under maintenance.")
    error_code = "lift_in_maintenance"


class LiftNotAvailableException(APIException):
    """Exception raised when a lift cannot start a new usage."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = _("The lift is not available.")
    error_code = "lift_not_available"


class LiftAlreadyInUseException(LiftNotAvailableException):
    """Exception raised when a lift already holds an open reservation or usage."""

    status_code = status.HTTP_409_CONFLICT
    default_message = _("The lift is already reserved or in use.")
    error_code = "lift_already_in_use"


class NoActiveUsageException(APIException):
    """Exception raised when ending usage on a lift that has none open."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = _("The lift has no active usage.")
    error_code = "no_active_usage"
