"""
Core utilities and shared components for the workshop scheduling platform.

This package provides the exception hierarchy, the DRF exception handler and
view mixins shared by every app.
"""

__version__ = "1.0.0"
