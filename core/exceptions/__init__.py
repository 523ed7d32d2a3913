"""
Centralised custom exceptions for workshop scheduling.

Import these from `core.exceptions` across the project instead of redefining
ad-hoc `Exception` subclasses in each app.
"""

from __future__ import annotations

from .custom_exceptions import (
    APIException,
    DuplicateResourceException,
    InvalidDataException,
    InvalidOperationException,
    InvalidStatusTransitionException,
    LiftAlreadyInUseException,
    LiftInMaintenanceException,
    LiftNotAvailableException,
    NoActiveUsageException,
    ResourceNotFoundException,
    SchedulingConflictException,
)

__all__ = [
    "APIException",
    "DuplicateResourceException",
    "InvalidDataException",
    "InvalidOperationException",
    "InvalidStatusTransitionException",
    "LiftAlreadyInUseException",
    "LiftInMaintenanceException",
    "LiftNotAvailableException",
    "NoActiveUsageException",
    "ResourceNotFoundException",
    "SchedulingConflictException",
]
