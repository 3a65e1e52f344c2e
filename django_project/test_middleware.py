"""Tests for custom middleware."""

from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase

from .middleware import NoCacheAPIMiddleware


class NoCacheAPIMiddlewareTests(SimpleTestCase):
    """Tests for NoCacheAPIMiddleware."""

    def setUp(self):
        self.factory = RequestFactory()
        self.middleware = NoCacheAPIMiddleware(get_response=lambda r: HttpResponse())

    def test_api_response_is_not_cacheable(self):
        """Responses under /api/ get no-cache headers."""
        request = self.factory.get("/api/v1/feeding-records/")
        response = self.middleware.process_response(request, HttpResponse())
        self.assertEqual(
            response["Cache-Control"], "no-cache, no-store, must-revalidate"
        )
        self.assertEqual(response["Pragma"], "no-cache")
        self.assertEqual(response["Expires"], "0")

    def test_non_api_response_untouched(self):
        """Responses outside /api/ keep their caching headers."""
        request = self.factory.get("/admin/")
        response = self.middleware.process_response(request, HttpResponse())
        self.assertFalse(response.has_header("Cache-Control"))
        self.assertFalse(response.has_header("Pragma"))
