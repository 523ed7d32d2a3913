"""
Development settings for the workshop scheduling project.

These settings override the base settings for local development environments.
"""

from decouple import config

from .base import *  # noqa: F401,F403

SECRET_KEY = config("SECRET_KEY", default="django-insecure-development-key-not-for-production")

DEBUG = config("DEBUG", default=True, cast=bool)

ALLOWED_HOSTS = ["*"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": config("POSTGRES_DB", default="workshop"),
        "USER": config("POSTGRES_USER", default="workshop"),
        "PASSWORD": config("POSTGRES_PASSWORD", default="workshop"),
        "HOST": config("POSTGRES_HOST", default="localhost"),
        "PORT": config("POSTGRES_PORT", default="5432"),
        "CONN_MAX_AGE": 300,
        "OPTIONS": {
            "connect_timeout": 5,
            "sslmode": config("POSTGRES_SSL_MODE", default="disable"),
        },
    }
}

if config("USE_SQLITE", default=False, cast=bool):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
        }
    }

CORS_ALLOW_ALL_ORIGINS = True

LOGGING["loggers"]["apps"]["level"] = "DEBUG"  # noqa: F405
