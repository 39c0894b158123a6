"""
Clients for the third-party APIs the service proxies to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from projects_api.errors import UpstreamError, extract_error_message

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30  # seconds

AI_REQUEST_FAILED = "AI request failed"
MEDIA_REQUEST_FAILED = "Media request failed"


def _int_or(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return default


def _str_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def extract_completion_text(payload: Any) -> str:
    """Trimmed content of the first choice's message, or an empty string."""
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if content is None:
        return ""
    return str(content).strip()


def normalize_photo(photo: Any) -> dict:
    photo = photo if isinstance(photo, dict) else {}
    src = photo.get("src")
    src = src if isinstance(src, dict) else {}
    return {
        "id": _int_or(photo.get("id"), 0),
        "photographer": _str_or_empty(photo.get("photographer")),
        "url": _str_or_empty(photo.get("url")),
        "src": {
            "original": _str_or_empty(src.get("original")),
            "large": _str_or_empty(src.get("large")),
            "medium": _str_or_empty(src.get("medium")),
            "small": _str_or_empty(src.get("small")),
        },
    }


def normalize_search_results(payload: Any, page: int, per_page: int) -> dict:
    payload = payload if isinstance(payload, dict) else {}
    raw_photos = payload.get("photos")
    photos = [
        normalize_photo(photo)
        for photo in (raw_photos if isinstance(raw_photos, list) else [])
    ]
    return {
        "photos": photos,
        "page": _int_or(payload.get("page"), page),
        "per_page": _int_or(payload.get("per_page"), per_page),
        "total_results": _int_or(payload.get("total_results"), len(photos)),
    }


@dataclass
class CompletionClient:
    """OpenAI-compatible chat completion client."""

    api_key: str
    base_url: str = "https://api.openai.com/v1"

    def complete(self, prompt: str, model: str) -> str:
        url = f"{self.base_url.rstrip('/')}/chat/completions"
        try:
            response = requests.post(
                url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": model,
                    "messages": [{"role": "user", "content": prompt}],
                },
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            logger.exception("Completion request failed: %s", exc)
            raise UpstreamError(AI_REQUEST_FAILED) from exc

        if not response.ok:
            logger.error(
                "Completion API error %s: %s", response.status_code, response.text
            )
            raise UpstreamError(AI_REQUEST_FAILED)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.exception("Completion API returned invalid JSON")
            raise UpstreamError(AI_REQUEST_FAILED) from exc
        return extract_completion_text(payload)


@dataclass
class PexelsClient:
    """Pexels photo search client."""

    api_key: str
    base_url: str = "https://api.pexels.com/v1"

    def search(self, query: str, page: int, per_page: int) -> dict:
        url = f"{self.base_url.rstrip('/')}/search"
        try:
            response = requests.get(
                url,
                headers={"Authorization": self.api_key},
                params={"query": query, "page": page, "per_page": per_page},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            logger.exception("Photo search request failed: %s", exc)
            raise UpstreamError(MEDIA_REQUEST_FAILED) from exc

        if not response.ok:
            try:
                payload: Any = response.json()
            except ValueError:
                payload = response.text
            message = extract_error_message(payload, MEDIA_REQUEST_FAILED)
            logger.warning(
                "Photo search API error %s: %s", response.status_code, message
            )
            raise UpstreamError(message)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.exception("Photo search API returned invalid JSON")
            raise UpstreamError(MEDIA_REQUEST_FAILED) from exc
        return normalize_search_results(payload, page, per_page)
