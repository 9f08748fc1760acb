"""
attendance_backend/security/http_headers.py
HTTP security headers for a JSON API
"""
from typing import Optional, Sequence

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds the usual hardening headers to every response.

    The API never serves HTML, so the CSP forbids everything and framing
    is denied outright.
    """

    def __init__(
        self,
        app: ASGIApp,
        csp_policy: Optional[str] = None,
        hsts_max_age: int = 15552000,
        enable_hsts: bool = True,
    ):
        super().__init__(app)
        self.csp_policy = csp_policy or "default-src 'none'; frame-ancestors 'none'"
        self.hsts_max_age = hsts_max_age
        self.enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = f"max-age={self.hsts_max_age}; includeSubDomains"
        response.headers["Content-Security-Policy"] = self.csp_policy
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
        response.headers["Cross-Origin-Resource-Policy"] = "same-origin"
        response.headers["X-DNS-Prefetch-Control"] = "off"
        response.headers["X-Download-Options"] = "noopen"
        response.headers["X-Permitted-Cross-Domain-Policies"] = "none"

        return response


class SecureCacheMiddleware(BaseHTTPMiddleware):
    """Marks responses carrying credentials or personal data as uncacheable."""

    def __init__(self, app: ASGIApp, no_cache_prefixes: Optional[Sequence[str]] = None):
        super().__init__(app)
        self.no_cache_prefixes = tuple(no_cache_prefixes or ("/api/auth", "/api/users"))

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        if request.url.path.lower().startswith(self.no_cache_prefixes):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"

        return response
