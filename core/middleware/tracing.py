"""
Tracing middleware for OpenTelemetry.

Adds a span to every request.
"""

import json
import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.instrumentation import Status, StatusCode, get_tracer

tracer = get_tracer(__name__)

SENSITIVE_FIELDS = ("password", "secret", "token", "license_key", "licensekey", "api_key")
UNTRACED_BODY_FIELDS = ("file_content",)


class TracingMiddleware:
    """
    Middleware to add distributed tracing to requests.

    License keys and file contents never reach span attributes.
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def _sanitize_dict(self, data, max_depth=3):
        """Redact sensitive fields and cap sizes."""
        if max_depth <= 0:
            return "..."
        if isinstance(data, dict):
            sanitized = {}
            for key, value in data.items():
                key_lower = str(key).lower()
                if any(sensitive in key_lower for sensitive in SENSITIVE_FIELDS):
                    sanitized[key] = "***REDACTED***"
                elif key_lower in UNTRACED_BODY_FIELDS:
                    sanitized[key] = f"<{len(str(value))} chars>"
                elif isinstance(value, (dict, list)):
                    sanitized[key] = self._sanitize_dict(value, max_depth - 1)
                else:
                    sanitized[key] = str(value)[:200]
            return sanitized
        if isinstance(data, list):
            return [self._sanitize_dict(item, max_depth - 1) for item in data[:10]]
        return str(data)[:200]

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request with tracing."""
        span_name = f"{request.method} {request.path}"
        with tracer.start_as_current_span(span_name) as span:
            self._set_request_attributes(span, request)
            self._process_request_body(span, request)

            span_context = span.get_span_context()
            if span_context.is_valid:
                request.trace_id = format(span_context.trace_id, "032x")

            start_time = time.time()
            try:
                response = self.get_response(request)
            except Exception as e:
                self._handle_exception(span, e, time.time() - start_time)
                raise
            self._set_response_attributes(span, response, time.time() - start_time)
            return response

    def _set_request_attributes(self, span, request: HttpRequest):
        span.set_attribute("http.method", request.method)
        span.set_attribute("http.route", request.path)
        span.set_attribute("http.user_agent", request.META.get("HTTP_USER_AGENT", ""))
        span.set_attribute("http.remote_addr", request.META.get("REMOTE_ADDR", ""))
        span.set_attribute("http.scheme", request.scheme)
        for key, value in list(request.GET.items())[:10]:
            if not any(sensitive in key.lower() for sensitive in SENSITIVE_FIELDS):
                span.set_attribute(f"http.request.query.{key}", str(value)[:200])

    def _process_request_body(self, span, request: HttpRequest):
        if request.method not in ("POST", "PUT", "PATCH"):
            return
        body = request.body
        span.set_attribute("http.request.body_size", len(body))
        try:
            body_json = json.loads(body.decode("utf-8", errors="ignore"))
        except ValueError:
            return
        span.set_attribute("http.request.body", json.dumps(self._sanitize_dict(body_json))[:5000])

    def _set_response_attributes(self, span, response, duration: float):
        span.set_attribute("http.status_code", response.status_code)
        span.set_attribute("http.duration_ms", round(duration * 1000, 2))
        if response.status_code >= 400:
            self._extract_error_details(span, response)
            span.set_status(Status(StatusCode.ERROR, f"HTTP {response.status_code}"))
        else:
            span.set_status(Status(StatusCode.OK))

    def _extract_error_details(self, span, response):
        """Copy error code and message from a JSON error body."""
        if not response.get("Content-Type", "").startswith("application/json"):
            return
        try:
            body_json = json.loads(response.content)
        except ValueError:
            return
        error_info = body_json.get("error") if isinstance(body_json, dict) else None
        if isinstance(error_info, dict):
            for key in ("code", "message"):
                if key in error_info:
                    span.set_attribute(f"error.{key}", str(error_info[key]))

    def _handle_exception(self, span, e: Exception, duration: float):
        span.set_attribute("http.duration_ms", round(duration * 1000, 2))
        span.record_exception(e)
        span.set_status(Status(StatusCode.ERROR, f"{type(e).__name__}: {e}"))
