"""
Error types rendered as the `{"error": ...}` JSON envelope.
"""

from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """Base error carrying the HTTP status and the message shown to callers."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class ConfigurationError(ApiError):
    status_code = 500


class UpstreamError(ApiError):
    """A third-party API or remote database call failed."""

    status_code = 502


def extract_error_message(payload: Any, fallback: str) -> str:
    """Best-effort error message from an upstream response body."""
    if isinstance(payload, dict):
        for key in ("error", "message", "msg", "error_description", "code"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            if isinstance(value, dict):
                nested = extract_error_message(value, "")
                if nested:
                    return nested
        return fallback
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return fallback
