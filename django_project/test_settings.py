"""
Test settings for the Bebek Süt Takip backend.

Overrides production settings for test environment:
- Uses in-memory cache for local tests
- Uses Redis cache if available (for CI integration tests)
- Uses in-memory SQLite unless DATABASE_HOST points at PostgreSQL
- Raises throttle rates so API test suites are not rate limited
"""

import os

from django_project.settings import *  # noqa: F401, F403
from django_project.settings import REST_FRAMEWORK

# Configure cache for tests:
# - If REDIS_HOST is set (CI), use Redis with error handling
# - Otherwise, use in-memory cache (local testing)
if os.environ.get("REDIS_HOST"):
    redis_host = os.environ.get("REDIS_HOST", "localhost")
    redis_port = os.environ.get("REDIS_PORT", "6379")
    redis_url = f"redis://{redis_host}:{redis_port}/0"

    CACHES = {
        "default": {
            "BACKEND": "django_redis.cache.RedisCache",
            "LOCATION": redis_url,
            "OPTIONS": {
                "CLIENT_CLASS": "django_redis.client.DefaultClient",
                "SOCKET_CONNECT_TIMEOUT": 5,
                "SOCKET_TIMEOUT": 5,
                "IGNORE_EXCEPTIONS": True,  # Fall back gracefully if Redis unavailable
            },
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "unique-snowflake",
        }
    }

# Configure database for tests:
# - If DATABASE_HOST is set (CI/Docker), use PostgreSQL
# - Otherwise, use SQLite in-memory for local testing
if os.environ.get("DATABASE_HOST"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ.get("DATABASE_NAME", "postgres"),
            "USER": os.environ.get("DATABASE_USER", "postgres"),
            "PASSWORD": os.environ.get("DATABASE_PASSWORD", ""),
            "HOST": os.environ.get("DATABASE_HOST"),
            "PORT": os.environ.get("DATABASE_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
        }
    }

# Pin the clock frame used by the statistics tests
TIME_ZONE = "Europe/Istanbul"
FEEDING_STATS_LOCALE = "tr"

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {
        "anon": "100000/hour",
        "feeding_create": "100000/hour",
    },
}
