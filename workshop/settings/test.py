"""
Test settings for the workshop scheduling project.

These settings override the base settings for test environments.
"""

from .base import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

USE_I18N = False

TIME_ZONE = "UTC"

WORKSHOP_SCHEDULING = {
    "BUSINESS_OPEN": "08:00",
    "BUSINESS_CLOSE": "18:00",
    "SLOT_STEP_MINUTES": 30,
    "DEFAULT_DURATION_MINUTES": 60,
    "MAX_DURATION_MINUTES": 480,
}

# Disable logging during tests to speed them up
LOGGING = {
    "version": 1,
    "disable_existing_loggers": True,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "loggers": {
        "": {
            "handlers": ["null"],
            "level": "CRITICAL",
            "propagate": False,
        },
    },
}
