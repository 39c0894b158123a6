"""
HTTP routes for the projects API.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from fastapi import APIRouter, Depends, Query

from projects_api.config import Settings
from projects_api.db import ProjectStore, StoreError
from projects_api.dependencies import (
    get_app_settings,
    get_completion_client,
    get_json_body,
    get_photo_client,
    get_project_store,
)
from projects_api.errors import NotFoundError, UpstreamError, ValidationError
from projects_api.schemas import (
    CompletionResponse,
    OkResponse,
    PhotoSearchResponse,
    ProjectResponse,
)
from projects_api.upstream import CompletionClient, PexelsClient

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10

_PROJECT_ID_RE = re.compile(r"-?[0-9]+")

# Ids the stores can hold (signed 64-bit).
MIN_PROJECT_ID = -(2**63)
MAX_PROJECT_ID = 2**63 - 1


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except StoreError as exc:
        logger.exception("Failed to %s: %s", action, exc)
        raise UpstreamError(f"Failed to {action}", exc.status_code) from exc


def _parse_project_id(raw: str) -> int:
    if not _PROJECT_ID_RE.fullmatch(raw.strip()):
        raise ValidationError("Invalid project id")
    return int(raw)


def _require_storable_id(pid: int) -> None:
    """No stored project can have an id outside the integer column's range."""
    if not MIN_PROJECT_ID <= pid <= MAX_PROJECT_ID:
        raise NotFoundError("Project not found")


def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int((raw or "").strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _clean_description(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Description must be a string or null")
    return value.strip()


@router.get("/health", response_model=OkResponse)
def health():
    return OkResponse()


@router.post("/ai/complete", response_model=CompletionResponse)
def complete(
    client: CompletionClient = Depends(get_completion_client),
    body: Any = Depends(get_json_body),
    settings: Settings = Depends(get_app_settings),
):
    prompt = body.get("prompt") if isinstance(body, dict) else None
    model = body.get("model") if isinstance(body, dict) else None
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationError("Prompt is required")

    selected_model = (
        model
        if isinstance(model, str) and model.strip()
        else settings.openai_default_model
    )
    text = client.complete(prompt, selected_model)
    return CompletionResponse(text=text)


@router.get("/media/pexels", response_model=PhotoSearchResponse)
def search_photos(
    client: PexelsClient = Depends(get_photo_client),
    query: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    per_page: Optional[str] = Query(None),
):
    if not query or not query.strip():
        raise ValidationError("Query is required")
    results = client.search(
        query.strip(),
        _positive_int(page, DEFAULT_PAGE),
        _positive_int(per_page, DEFAULT_PER_PAGE),
    )
    return PhotoSearchResponse(**results)


@router.get("/projects", response_model=list[ProjectResponse])
def list_projects(store: ProjectStore = Depends(get_project_store)):
    with _store_errors("load projects"):
        records = store.list_projects()
    return [record.as_dict() for record in records]


@router.get("/projects/{project_id}", response_model=ProjectResponse)
def get_project(project_id: str, store: ProjectStore = Depends(get_project_store)):
    pid = _parse_project_id(project_id)
    _require_storable_id(pid)
    with _store_errors("load project"):
        record = store.get_project(pid)
    if not record:
        raise NotFoundError("Project not found")
    return record.as_dict()


@router.post("/projects", response_model=ProjectResponse, status_code=201)
def create_project(
    store: ProjectStore = Depends(get_project_store),
    body: Any = Depends(get_json_body),
):
    name = body.get("name") if isinstance(body, dict) else None
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name is required")

    values: dict[str, Any] = {"name": name.strip()}
    if "description" in body:
        values["description"] = _clean_description(body["description"])

    with _store_errors("create project"):
        record = store.create_project(values)
    logger.info("Created project %s", record.id)
    return record.as_dict()


@router.patch("/projects/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    store: ProjectStore = Depends(get_project_store),
    body: Any = Depends(get_json_body),
):
    pid = _parse_project_id(project_id)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")

    changes: dict[str, Any] = {}
    if "name" in body:
        name = body["name"]
        if not isinstance(name, str):
            raise ValidationError("Name must be a string")
        if not name.strip():
            raise ValidationError("Name cannot be empty")
        changes["name"] = name.strip()
    if "description" in body:
        changes["description"] = _clean_description(body["description"])
    if not changes:
        raise ValidationError("No fields provided to update")

    _require_storable_id(pid)
    with _store_errors("update project"):
        record = store.update_project(pid, changes)
    if not record:
        raise NotFoundError("Project not found")
    return record.as_dict()


@router.delete("/projects/{project_id}", response_model=OkResponse)
def delete_project(project_id: str, store: ProjectStore = Depends(get_project_store)):
    pid = _parse_project_id(project_id)
    _require_storable_id(pid)
    with _store_errors("delete project"):
        deleted = store.delete_project(pid)
    if not deleted:
        raise NotFoundError("Project not found")
    return OkResponse()
