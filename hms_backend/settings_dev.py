"""
Development settings (SQLite).

Usage:
    export DJANGO_SETTINGS_MODULE=hms_backend.settings_dev
    python manage.py migrate
    python manage.py seed
    python manage.py runserver
"""

from .settings import *  # noqa: F401,F403

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "[::1]", "testserver", "*"]

# ---------------------------------------------------------
# DATABASES: SQLite for local development and tests
# ---------------------------------------------------------

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "dev.sqlite3",  # noqa: F405
        "OPTIONS": {
            "timeout": 20,
        },
    },
}

# ---------------------------------------------------------
# Fast password hashing: DEV/TEST ONLY, never in production
# ---------------------------------------------------------

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
    "django.contrib.auth.hashers.PBKDF2PasswordHasher",
    "django.contrib.auth.hashers.BCryptPasswordHasher",
]

CORS_ALLOW_ALL_ORIGINS = True

LOGGING["loggers"]["hms_backend"]["level"] = "DEBUG"  # noqa: F405
