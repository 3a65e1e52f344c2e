"""
Pytest configuration for Django tests.

Settings come from pytest-django (DJANGO_SETTINGS_MODULE in pyproject.toml).
"""


def pytest_collection_modifyitems(config, items):
    """Mark tests for parallel execution compatibility."""
    # Tests that share cache state and conflict in parallel execution
    parallel_unsafe_tests = [
        "CacheInvalidationTests",
        "test_response_is_cached",
    ]

    for item in items:
        test_nodeid = item.nodeid
        if any(unsafe_pattern in test_nodeid for unsafe_pattern in parallel_unsafe_tests):
            item.add_marker("parallel_unsafe")

        # Analytics API tests read through the cache (Redis in CI)
        if "analytics/tests.py" in test_nodeid or "cache" in test_nodeid:
            item.add_marker("cache_dependent")
