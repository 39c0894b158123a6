"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import Depends, Request

from projects_api.config import Settings, get_settings
from projects_api.db import InMemoryProjectStore, ProjectStore, SqlProjectStore
from projects_api.errors import ConfigurationError, ValidationError
from projects_api.postgrest import RestProjectStore
from projects_api.upstream import CompletionClient, PexelsClient


def get_app_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    return settings or get_settings()


def build_project_store(settings: Settings) -> ProjectStore:
    backend = settings.resolved_project_store()
    if backend == "rest":
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise ConfigurationError("Database service not configured")
        return RestProjectStore(
            settings.supabase_url,
            settings.supabase_service_role_key,
            table=settings.supabase_projects_table,
        )
    if backend == "sql":
        if not settings.database_url:
            raise ConfigurationError("Database not configured")
        return SqlProjectStore(settings.database_url)
    return InMemoryProjectStore()


def get_project_store(
    request: Request, settings: Settings = Depends(get_app_settings)
) -> ProjectStore:
    """
    Return the app's store, built on first use so in-memory state persists
    across requests. Each app gets its own store from its own settings.
    """
    store = getattr(request.app.state, "project_store", None)
    if store is None:
        store = build_project_store(settings)
        request.app.state.project_store = store
    return store


def get_completion_client(
    settings: Settings = Depends(get_app_settings),
) -> CompletionClient:
    if not settings.openai_api_key:
        raise ConfigurationError("AI integration not configured")
    return CompletionClient(
        api_key=settings.openai_api_key, base_url=settings.openai_base_url
    )


def get_photo_client(settings: Settings = Depends(get_app_settings)) -> PexelsClient:
    if not settings.pexels_api_key:
        raise ConfigurationError("Media integration not configured")
    return PexelsClient(
        api_key=settings.pexels_api_key, base_url=settings.pexels_base_url
    )


async def get_json_body(request: Request) -> Any:
    """Parse the request body as JSON, rejecting malformed payloads with a 400."""
    raw = await request.body()
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ValidationError("Invalid JSON payload") from exc
