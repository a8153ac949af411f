"""Request middleware for the freelanceBackend project."""

from __future__ import annotations

from typing import Callable

from django.conf import settings


class JWTCSRFBypassMiddleware:
    """Exempt bearer-authenticated API calls from CSRF checks.

    Only paths under ``settings.CSRF_EXEMPT_API_PREFIX`` qualify; the admin and
    any other session endpoint keep CSRF protection.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response
        self.api_prefix = getattr(settings, "CSRF_EXEMPT_API_PREFIX", "/api/")

    def __call__(self, request):
        if self.is_bearer_api_call(request):
            request._dont_enforce_csrf_checks = True  # type: ignore[attr-defined]
        return self.get_response(request)

    def is_bearer_api_call(self, request) -> bool:
        if not request.path.startswith(self.api_prefix):
            return False
        scheme, _, token = request.META.get("HTTP_AUTHORIZATION", "").partition(" ")
        return scheme.lower() == "bearer" and bool(token.strip())
