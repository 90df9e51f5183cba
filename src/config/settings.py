"""Django settings for the fuel stop finder project."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
PROJECT_ROOT = BASE_DIR.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me-in-production")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = [host for host in os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if host]

INSTALLED_APPS = [
    "fuel_stops",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "config.urls"

WSGI_APPLICATION = "config.wsgi.application"

# Results are request-scoped; nothing is persisted.
DATABASES: dict[str, dict[str, str]] = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "fuel-stops-cache",
    },
    "routes": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "fuel-stops-routes",
    },
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "fuel_stops": {
            "handlers": ["console"],
            "level": os.getenv("FUEL_STOPS_LOG_LEVEL", "INFO"),
        },
    },
}

OSRM_BASE_URL = os.getenv("OSRM_BASE_URL", "https://router.project-osrm.org")
OSRM_TIMEOUT_SECONDS = float(os.getenv("OSRM_TIMEOUT_SECONDS", "12"))
OSRM_RETRY_COUNT = int(os.getenv("OSRM_RETRY_COUNT", "2"))

GOOGLE_PLACES_API_KEY = os.getenv("GOOGLE_PLACES_API_KEY", "")
GOOGLE_PLACES_BASE_URL = os.getenv("GOOGLE_PLACES_BASE_URL", "https://places.googleapis.com/v1")
GOOGLE_PLACES_TIMEOUT_SECONDS = float(os.getenv("GOOGLE_PLACES_TIMEOUT_SECONDS", "10"))
GOOGLE_PLACES_RETRY_COUNT = int(os.getenv("GOOGLE_PLACES_RETRY_COUNT", "1"))

ROUTE_CACHE_TTL_SECONDS = int(os.getenv("ROUTE_CACHE_TTL_SECONDS", "600"))

ROUTE_POLYLINE_MAX_POINTS = int(os.getenv("ROUTE_POLYLINE_MAX_POINTS", "180"))
MAX_DISTANCE_FROM_ROUTE_MILES = float(os.getenv("MAX_DISTANCE_FROM_ROUTE_MILES", "30"))
SELECTION_BUCKET_MILES = float(os.getenv("SELECTION_BUCKET_MILES", "25"))
PLACES_SEARCH_RADIUS_MILES = float(os.getenv("PLACES_SEARCH_RADIUS_MILES", "9.3"))
PLACES_MAX_RESULTS = int(os.getenv("PLACES_MAX_RESULTS", "20"))
PLACES_TEXT_QUERY = os.getenv("PLACES_TEXT_QUERY", "truck stop")
WAYPOINT_SEARCH_CONCURRENCY = int(os.getenv("WAYPOINT_SEARCH_CONCURRENCY", "4"))
