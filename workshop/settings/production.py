"""
Production settings for the workshop scheduling project.

These settings override the base settings for production environments.
"""

from decouple import config

from .base import *  # noqa: F401,F403

DEBUG = config("DEBUG", default=False, cast=bool)

SECRET_KEY = config("SECRET_KEY", default="")
if not SECRET_KEY:
    raise ValueError("SECRET_KEY environment variable not set!")

DATABASES["default"]["CONN_MAX_AGE"] = config("DB_MAX_LIFETIME", default=1800, cast=int)  # noqa: F405

SECURE_SSL_REDIRECT = config("SECURE_SSL_REDIRECT", default=True, cast=bool)
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_HSTS_SECONDS = config("SECURE_HSTS_SECONDS", default=31536000, cast=int)
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"
