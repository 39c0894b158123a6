"""
Origin allow-list matching and CORS header stamping.

The allow-list is a comma-separated string. Entries containing `*` are
compiled into anchored patterns where `*` matches any substring; all other
entries must match the request origin exactly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import MutableMapping, Optional, Pattern

ALLOWED_METHODS = "GET,POST,PATCH,DELETE,OPTIONS"
ALLOWED_HEADERS = "Content-Type"
MAX_AGE_SECONDS = 86400


def _compile_wildcard(origin: str) -> Pattern[str]:
    pattern = ".*".join(re.escape(part) for part in origin.split("*"))
    return re.compile(pattern)


@dataclass(frozen=True)
class OriginPolicy:
    exact: frozenset[str] = frozenset()
    patterns: tuple[Pattern[str], ...] = ()

    @classmethod
    def from_string(cls, raw: Optional[str]) -> "OriginPolicy":
        exact: set[str] = set()
        patterns: list[Pattern[str]] = []
        for entry in (raw or "").split(","):
            origin = entry.strip()
            if not origin:
                continue
            if "*" in origin:
                patterns.append(_compile_wildcard(origin))
            else:
                exact.add(origin)
        return cls(exact=frozenset(exact), patterns=tuple(patterns))

    def match(self, request_origin: Optional[str]) -> Optional[str]:
        """Return the origin to echo back, or None when it is not allowed."""
        if not request_origin:
            return None
        if request_origin in self.exact:
            return request_origin
        for pattern in self.patterns:
            if pattern.fullmatch(request_origin):
                return request_origin
        return None


def apply_cors_headers(
    headers: MutableMapping[str, str], matched_origin: Optional[str]
) -> None:
    if matched_origin:
        headers["Access-Control-Allow-Origin"] = matched_origin
        headers["Vary"] = "Origin"
    headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
    headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
    headers["Access-Control-Max-Age"] = str(MAX_AGE_SECONDS)
