"""Cache key management and invalidation for analytics.

Analytics responses are cached per baby under a version token. Any write to
the baby's feeding records replaces the token, so every key built before the
write becomes unreachable and the next request recomputes from fresh data.
"""

import logging
import uuid

from django.core.cache import cache
from django.db import transaction

logger = logging.getLogger(__name__)


def _version_key(baby_id) -> str:
    return f"analytics:version:{baby_id}"


def get_cache_version(baby_id) -> str:
    """Return the current version token for a baby, creating one if missing."""
    key = _version_key(baby_id)
    version = cache.get(key)
    if version is None:
        version = uuid.uuid4().hex
        # add() keeps a token set concurrently by another request
        if not cache.add(key, version, None):
            version = cache.get(key, version)
    return version


def build_cache_key(kind: str, baby_id, *parts) -> str:
    """Build a versioned cache key for one analytics response.

    Args:
        kind: Endpoint name (e.g. "feeding-stats")
        baby_id: The baby's ID
        *parts: Extra key components (locale, minute stamp, ...)

    Returns:
        Cache key string
    """
    version = get_cache_version(baby_id)
    return ":".join(
        ["analytics", kind, str(baby_id), version, *(str(part) for part in parts)]
    )


def invalidate_baby_analytics(baby_id) -> None:
    """Invalidate all cached analytics for a baby.

    Runs after the surrounding transaction commits, so a request that follows
    the write never reads statistics computed before it.

    Args:
        baby_id: The baby's ID
    """

    def bump_version():
        key = _version_key(baby_id)
        try:
            cache.set(key, uuid.uuid4().hex, None)
            logger.info(
                "Invalidated baby analytics cache",
                extra={"baby_id": str(baby_id), "cache_key": key},
            )
        except Exception as e:
            # Redis outages must not fail the write that triggered this
            logger.error(
                f"Failed to invalidate baby analytics cache: {e}",
                extra={"baby_id": str(baby_id), "cache_key": key, "error": str(e)},
                exc_info=True,
            )

    transaction.on_commit(bump_version)
