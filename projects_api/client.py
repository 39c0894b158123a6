"""
HTTP client for the projects API.
"""

from __future__ import annotations

from typing import Any, Optional

import requests

from projects_api.db import ProjectRecord

REQUEST_TIMEOUT = 30  # seconds

_UNSET: Any = object()


class ApiClientError(RuntimeError):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ProjectsApiClient:
    """Thin wrapper that turns the `{"error": ...}` envelope into exceptions."""

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
            **kwargs,
        )
        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("error") if isinstance(body, dict) else None
            raise ApiClientError(
                message if isinstance(message, str) else "Request failed",
                response.status_code,
            )
        return response.json()

    def health(self) -> bool:
        return bool(self._request("GET", "/health").get("ok"))

    def list_projects(self) -> list[ProjectRecord]:
        return [ProjectRecord.from_dict(row) for row in self._request("GET", "/projects")]

    def get_project(self, project_id: int) -> ProjectRecord:
        return ProjectRecord.from_dict(self._request("GET", f"/projects/{project_id}"))

    def create_project(
        self, name: str, description: Optional[str] = _UNSET
    ) -> ProjectRecord:
        payload: dict[str, Any] = {"name": name}
        if description is not _UNSET:
            payload["description"] = description
        return ProjectRecord.from_dict(self._request("POST", "/projects", json=payload))

    def update_project(
        self,
        project_id: int,
        *,
        name: Optional[str] = _UNSET,
        description: Optional[str] = _UNSET,
    ) -> ProjectRecord:
        payload: dict[str, Any] = {}
        if name is not _UNSET:
            payload["name"] = name
        if description is not _UNSET:
            payload["description"] = description
        return ProjectRecord.from_dict(
            self._request("PATCH", f"/projects/{project_id}", json=payload)
        )

    def delete_project(self, project_id: int) -> None:
        self._request("DELETE", f"/projects/{project_id}")

    def complete(self, prompt: str, model: Optional[str] = None) -> str:
        payload: dict[str, Any] = {"prompt": prompt}
        if model:
            payload["model"] = model
        return self._request("POST", "/ai/complete", json=payload).get("text", "")

    def search_media(
        self,
        query: str,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> dict:
        params: dict[str, Any] = {"query": query}
        if page is not None:
            params["page"] = page
        if per_page is not None:
            params["per_page"] = per_page
        return self._request("GET", "/media/pexels", params=params)
