"""
Rate limiting middleware.

Fixed-window limit per client IP on the public API, so license keys
and user IDs cannot be enumerated by brute force.
"""

import hashlib
import time
from typing import Callable, Tuple

from django.conf import settings
from django.core.cache import cache
from django.http import HttpRequest, HttpResponse, JsonResponse

from core.metrics import errors_total


class RateLimitMiddleware:
    """
    Rate limiting middleware per client IP.

    Counters live in the Django cache. Limits come from PUBLIC_RATE_LIMIT
    (requests per window) and PUBLIC_RATE_LIMIT_WINDOW (seconds).
    """

    DEFAULT_RATE_LIMIT = 60
    DEFAULT_RATE_LIMIT_WINDOW = 60
    RATE_LIMITED_PREFIX = "/api/v1/"

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response
        self.enabled = getattr(settings, "RATE_LIMIT_ENABLED", True)
        self.limit = getattr(settings, "PUBLIC_RATE_LIMIT", self.DEFAULT_RATE_LIMIT)
        self.window = getattr(settings, "PUBLIC_RATE_LIMIT_WINDOW", self.DEFAULT_RATE_LIMIT_WINDOW)
        self.trust_forwarded = getattr(settings, "RATE_LIMIT_TRUST_FORWARDED_FOR", False)

    def _get_client_ip(self, request: HttpRequest) -> str:
        """
        Extract the client address.

        X-Forwarded-For is used only when the deployment sits behind a
        proxy that sets it.
        """
        if self.trust_forwarded:
            forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR", "unknown")

    def _get_rate_limit_key(self, client_ip: str, window_start: int) -> str:
        ip_hash = hashlib.sha256(client_ip.encode()).hexdigest()[:16]
        return f"rate_limit:{ip_hash}:{window_start}"

    def _check_rate_limit(self, client_ip: str) -> Tuple[bool, int, int]:
        """
        Check if request is within rate limit.

        Args:
            client_ip: Client address

        Returns:
            Tuple of (is_allowed, remaining, reset_time)
        """
        window_start = int(time.time() / self.window)
        reset_time = (window_start + 1) * self.window
        cache_key = self._get_rate_limit_key(client_ip, window_start)

        # add() is a no-op when the key exists, so incr() always has a target.
        cache.add(cache_key, 0, timeout=self.window)
        try:
            count = cache.incr(cache_key)
        except ValueError:
            # Expired between add() and incr().
            cache.set(cache_key, 1, timeout=self.window)
            count = 1

        if count > self.limit:
            return False, 0, reset_time
        return True, self.limit - count, reset_time

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """
        Process request with rate limiting.

        Args:
            request: HTTP request

        Returns:
            HTTP response with rate limit headers
        """
        if not self.enabled or not request.path.startswith(self.RATE_LIMITED_PREFIX):
            return self.get_response(request)

        is_allowed, remaining, reset_time = self._check_rate_limit(self._get_client_ip(request))

        if not is_allowed:
            errors_total.labels(error_type="rate_limit_exceeded", endpoint=request.path).inc()
            response = JsonResponse(
                {
                    "error": {
                        "code": "RATE_LIMIT_EXCEEDED",
                        "message": "Rate limit exceeded. Please try again later.",
                    }
                },
                status=429,
            )
            response["Retry-After"] = str(max(0, reset_time - int(time.time())))
        else:
            response = self.get_response(request)

        response["X-RateLimit-Limit"] = str(self.limit)
        response["X-RateLimit-Remaining"] = str(remaining)
        response["X-RateLimit-Reset"] = str(reset_time)
        return response
