from django.utils.deprecation import MiddlewareMixin


class NoCacheAPIMiddleware(MiddlewareMixin):
    """Middleware to disable browser caching on API responses.

    The dashboard refetches babies and feeding records right after every
    create/update/delete and recomputes its statistics from the fresh data.
    A browser-cached response would show the state from before the write, so
    every `/api/` response is marked as non-cacheable.
    """

    def process_response(self, request, response):
        """Add Cache-Control headers to API responses."""
        if request.path_info.startswith("/api/"):
            response["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response["Pragma"] = "no-cache"
            response["Expires"] = "0"
        return response
