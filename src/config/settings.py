"""Django settings for the EV trip planner project."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
PROJECT_ROOT = BASE_DIR.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me-in-production")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = [host for host in os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if host]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "trip_planner",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"
ASGI_APPLICATION = "config.asgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": PROJECT_ROOT / "db.sqlite3",
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "trip-planner-cache",
    }
}

OSRM_BASE_URL = os.getenv("OSRM_BASE_URL", "https://router.project-osrm.org")
OSRM_TIMEOUT_SECONDS = float(os.getenv("OSRM_TIMEOUT_SECONDS", "12"))
OSRM_RETRY_COUNT = int(os.getenv("OSRM_RETRY_COUNT", "2"))

GEOCODING_BASE_URL = os.getenv("GEOCODING_BASE_URL", "https://nominatim.openstreetmap.org")
GEOCODING_USER_AGENT = os.getenv("GEOCODING_USER_AGENT", "ev-trip-planner/1.0")
GEOCODING_TIMEOUT_SECONDS = float(os.getenv("GEOCODING_TIMEOUT_SECONDS", "12"))
GEOCODING_RETRY_COUNT = int(os.getenv("GEOCODING_RETRY_COUNT", "2"))
GEOCODING_COUNTRY_CODE = os.getenv("GEOCODING_COUNTRY_CODE", "in")
GEOCODING_RESULT_LIMIT = int(os.getenv("GEOCODING_RESULT_LIMIT", "5"))

ROUTE_CACHE_TTL_SECONDS = int(os.getenv("ROUTE_CACHE_TTL_SECONDS", "600"))
GEOCODE_CACHE_TTL_SECONDS = int(os.getenv("GEOCODE_CACHE_TTL_SECONDS", "86400"))

DEFAULT_MAX_RANGE_KM = float(os.getenv("DEFAULT_MAX_RANGE_KM", "300"))
DEFAULT_BATTERY_CAPACITY_KWH = float(os.getenv("DEFAULT_BATTERY_CAPACITY_KWH", "40"))

DEFAULT_CORRIDOR_KM = float(os.getenv("DEFAULT_CORRIDOR_KM", "5"))
MAX_ROUTE_SAMPLE_POINTS = int(os.getenv("MAX_ROUTE_SAMPLE_POINTS", "100"))
CHARGING_MIN_GAP_KM = float(os.getenv("CHARGING_MIN_GAP_KM", "5"))
CHARGING_FALLBACK_MIN_GAP_KM = float(os.getenv("CHARGING_FALLBACK_MIN_GAP_KM", "1"))
FEASIBILITY_SAFETY_FACTOR = float(os.getenv("FEASIBILITY_SAFETY_FACTOR", "1.1"))
CHARGING_RESERVE_FACTOR = float(os.getenv("CHARGING_RESERVE_FACTOR", "0.85"))
CHARGING_TARGET_SOC_PERCENT = float(os.getenv("CHARGING_TARGET_SOC_PERCENT", "80"))
CHARGING_MAX_ITERATIONS = int(os.getenv("CHARGING_MAX_ITERATIONS", "20"))
DC_MINUTES_PER_PERCENT = float(os.getenv("DC_MINUTES_PER_PERCENT", "1"))
AC_MINUTES_PER_PERCENT = float(os.getenv("AC_MINUTES_PER_PERCENT", "4"))

CROWD_RADIUS_KM = float(os.getenv("CROWD_RADIUS_KM", "0.5"))
CROWD_USER_TIMEOUT_SECONDS = float(os.getenv("CROWD_USER_TIMEOUT_SECONDS", "60"))
CROWD_HIGH_THRESHOLD = int(os.getenv("CROWD_HIGH_THRESHOLD", "2"))
CROWD_CRITICAL_THRESHOLD = int(os.getenv("CROWD_CRITICAL_THRESHOLD", "5"))
CROWD_WAIT_MINUTES_PER_USER = float(os.getenv("CROWD_WAIT_MINUTES_PER_USER", "10"))

TRIP_REGISTRY_MAX_CLIENTS = int(os.getenv("TRIP_REGISTRY_MAX_CLIENTS", "1000"))

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "trip_planner": {
            "handlers": ["console"],
            "level": os.getenv("TRIP_PLANNER_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
