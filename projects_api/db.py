"""
Project persistence: a store interface with in-memory and SQL implementations.

The REST (PostgREST/Supabase) implementation lives in `projects_api.postgrest`.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

from sqlalchemy import Column, Integer, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker


class StoreError(RuntimeError):
    """A persistence backend failed to complete a request."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a `Z` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class ProjectRecord:
    id: int
    name: str
    description: Optional[str]
    created_at: str

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, row: dict) -> "ProjectRecord":
        description = row.get("description")
        created_at = row.get("created_at")
        return cls(
            id=int(row.get("id") or 0),
            name=str(row.get("name") or ""),
            description=None if description is None else str(description),
            created_at=created_at if isinstance(created_at, str) else utc_timestamp(),
        )


class ProjectStore(Protocol):
    """Interface every project backend implements.

    `values` / `changes` only ever hold the keys `name` and `description`;
    a key that is absent leaves the stored value (or the backend default) alone.
    """

    def list_projects(self) -> list[ProjectRecord]:
        ...

    def get_project(self, project_id: int) -> Optional[ProjectRecord]:
        ...

    def create_project(self, values: dict[str, Any]) -> ProjectRecord:
        ...

    def update_project(
        self, project_id: int, changes: dict[str, Any]
    ) -> Optional[ProjectRecord]:
        ...

    def delete_project(self, project_id: int) -> bool:
        ...


def _sort_newest_first(records: list[ProjectRecord]) -> list[ProjectRecord]:
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)


class InMemoryProjectStore:
    """Simple in-memory store for development and tests."""

    def __init__(self):
        self.projects: Dict[int, ProjectRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def list_projects(self) -> list[ProjectRecord]:
        return _sort_newest_first(list(self.projects.values()))

    def get_project(self, project_id: int) -> Optional[ProjectRecord]:
        return self.projects.get(project_id)

    def create_project(self, values: dict[str, Any]) -> ProjectRecord:
        with self._lock:
            record = ProjectRecord(
                id=self._next_id,
                name=values["name"],
                description=values.get("description"),
                created_at=utc_timestamp(),
            )
            self._next_id += 1
            self.projects[record.id] = record
        return record

    def update_project(
        self, project_id: int, changes: dict[str, Any]
    ) -> Optional[ProjectRecord]:
        record = self.projects.get(project_id)
        if not record:
            return None
        if "name" in changes:
            record.name = changes["name"]
        if "description" in changes:
            record.description = changes["description"]
        return record

    def delete_project(self, project_id: int) -> bool:
        return self.projects.pop(project_id, None) is not None

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.projects.clear()
            self._next_id = 1


class SqlProjectStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (Postgres in
    production, SQLite for local runs and tests).
    """

    def __init__(self, database_url: str, *, create_schema: bool = True):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlProjectStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        if create_schema:
            self.create_schema()

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def _to_record(self, row: "ProjectRow") -> ProjectRecord:
        return ProjectRecord(
            id=row.id,
            name=row.name,
            description=row.description,
            created_at=row.created_at,
        )

    def list_projects(self) -> list[ProjectRecord]:
        try:
            with self.Session() as session:
                stmt = select(ProjectRow).order_by(
                    ProjectRow.created_at.desc(), ProjectRow.id.desc()
                )
                rows = session.execute(stmt).scalars().all()
                return [self._to_record(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to list projects: {exc}") from exc

    def get_project(self, project_id: int) -> Optional[ProjectRecord]:
        try:
            with self.Session() as session:
                row = session.get(ProjectRow, project_id)
                return self._to_record(row) if row else None
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load project {project_id}: {exc}") from exc

    def create_project(self, values: dict[str, Any]) -> ProjectRecord:
        try:
            with self.Session() as session:
                row = ProjectRow(
                    name=values["name"],
                    description=values.get("description"),
                    created_at=utc_timestamp(),
                )
                session.add(row)
                session.commit()
                session.refresh(row)
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to insert project: {exc}") from exc

    def update_project(
        self, project_id: int, changes: dict[str, Any]
    ) -> Optional[ProjectRecord]:
        try:
            with self.Session() as session:
                row = session.get(ProjectRow, project_id)
                if not row:
                    return None
                if "name" in changes:
                    row.name = changes["name"]
                if "description" in changes:
                    row.description = changes["description"]
                session.commit()
                session.refresh(row)
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to update project {project_id}: {exc}") from exc

    def delete_project(self, project_id: int) -> bool:
        try:
            with self.Session() as session:
                row = session.get(ProjectRow, project_id)
                if not row:
                    return False
                session.delete(row)
                session.commit()
                return True
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to delete project {project_id}: {exc}") from exc


Base = declarative_base()


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(String, nullable=False, index=True)
