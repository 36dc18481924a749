"""
Django settings for Atelier tests.

Includes all apps needed to run the full Atelier test suite.
"""

from decimal import Decimal

SECRET_KEY = "test-secret-key-for-atelier-tests"

DEBUG = True

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "simple_history",
    "rest_framework",
    "atelier",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

ROOT_URLCONF = "atelier.tests.test_api_urls"

USE_TZ = True
TIME_ZONE = "Africa/Casablanca"

REST_FRAMEWORK = {
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
}

ATELIER = {
    "DEFAULT_OVERHEAD_RATE": Decimal("0.10"),
    "ARTISAN_LEDGER_BACKEND": "atelier.adapters.noop.NoopArtisanLedger",
}
