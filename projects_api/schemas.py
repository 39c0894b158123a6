"""
Pydantic response schemas for the projects API.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel


class OkResponse(BaseModel):
    ok: Literal[True] = True


class ProjectResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: str


class CompletionResponse(BaseModel):
    text: str


class PhotoSources(BaseModel):
    original: str
    large: str
    medium: str
    small: str


class Photo(BaseModel):
    id: int
    photographer: str
    url: str
    src: PhotoSources


class PhotoSearchResponse(BaseModel):
    photos: list[Photo]
    page: int
    per_page: int
    total_results: int
