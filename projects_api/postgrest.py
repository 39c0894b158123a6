"""
Project store backed by a PostgREST endpoint (e.g. Supabase `/rest/v1`).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from projects_api.db import ProjectRecord, StoreError
from projects_api.errors import extract_error_message

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30  # seconds
PROJECT_COLUMNS = "id,name,description,created_at"


class RestProjectStore:
    """
    Talks to the `projects` table through PostgREST filter query parameters.

    Requests authenticate with the service key in both the `apikey` header and
    a bearer token, which is what Supabase expects for server-side access.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        table: str = "projects",
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise ValueError("SUPABASE_URL is required for RestProjectStore")
        if not api_key:
            raise ValueError("SUPABASE_SERVICE_ROLE_KEY is required for RestProjectStore")
        self.endpoint = f"{base_url.strip().rstrip('/')}/rest/v1/{table}"
        self.api_key = api_key
        self.session = session or requests.Session()

    def _headers(self, *, returning: bool = False) -> dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if returning:
            headers["Prefer"] = "return=representation"
        return headers

    def _request(
        self,
        method: str,
        *,
        params: Optional[dict[str, str]] = None,
        body: Optional[dict[str, Any]] = None,
        returning: bool = False,
    ) -> list[dict]:
        try:
            response = self.session.request(
                method,
                self.endpoint,
                params=params,
                json=body,
                headers=self._headers(returning=returning),
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise StoreError(f"Database service request failed: {exc}", 502) from exc

        if not response.ok:
            try:
                payload: Any = response.json()
            except ValueError:
                payload = response.text
            details = extract_error_message(payload, response.reason or "")
            logger.warning(
                "Database service returned %s for %s: %s",
                response.status_code,
                method,
                details,
            )
            raise StoreError(
                f"Database service request failed ({response.status_code}): {details}",
                502,
            )

        if not response.content or not response.content.strip():
            return []
        try:
            data = response.json()
        except ValueError as exc:
            raise StoreError("Database service returned invalid JSON", 502) from exc
        if isinstance(data, dict):
            return [data]
        if not isinstance(data, list):
            raise StoreError("Database service returned an unexpected payload", 502)
        return [row for row in data if isinstance(row, dict)]

    def list_projects(self) -> list[ProjectRecord]:
        rows = self._request(
            "GET",
            params={"select": PROJECT_COLUMNS, "order": "created_at.desc,id.desc"},
        )
        return [ProjectRecord.from_dict(row) for row in rows]

    def get_project(self, project_id: int) -> Optional[ProjectRecord]:
        rows = self._request(
            "GET",
            params={"select": PROJECT_COLUMNS, "id": f"eq.{project_id}"},
        )
        return ProjectRecord.from_dict(rows[0]) if rows else None

    def create_project(self, values: dict[str, Any]) -> ProjectRecord:
        rows = self._request(
            "POST",
            params={"select": PROJECT_COLUMNS},
            body=dict(values),
            returning=True,
        )
        if not rows:
            raise StoreError("Database service did not return the created project", 502)
        return ProjectRecord.from_dict(rows[0])

    def update_project(
        self, project_id: int, changes: dict[str, Any]
    ) -> Optional[ProjectRecord]:
        rows = self._request(
            "PATCH",
            params={"select": PROJECT_COLUMNS, "id": f"eq.{project_id}"},
            body=dict(changes),
            returning=True,
        )
        return ProjectRecord.from_dict(rows[0]) if rows else None

    def delete_project(self, project_id: int) -> bool:
        rows = self._request(
            "DELETE",
            params={"select": "id", "id": f"eq.{project_id}"},
            returning=True,
        )
        return bool(rows)
