"""Custom DRF throttle classes for rate limiting API endpoints."""

from rest_framework.throttling import AnonRateThrottle


class FeedingCreateThrottle(AnonRateThrottle):
    """Stricter rate limiting for feeding record writes.

    Prevents rapid mass-insertion of feeding records from a misbehaving client.
    Rate: 120 requests per hour by default (one per 30 seconds)
    """

    scope = "feeding_create"
