"""
Command-line entry point: run the server, apply the schema, manage projects.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

import requests

from projects_api.client import ApiClientError, ProjectsApiClient
from projects_api.config import get_settings
from projects_api.db import SqlProjectStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8000"


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "projects_api.app:app", host=args.host, port=args.port, reload=args.reload
    )
    return 0


def _migrate(args: argparse.Namespace) -> int:
    database_url = args.database_url or get_settings().database_url
    if not database_url:
        logger.error("No database URL given; set DATABASE_URL or pass --database-url")
        return 1
    store = SqlProjectStore(database_url, create_schema=False)
    store.create_schema()
    logger.info("Schema is up to date")
    return 0


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2))


def _health(client: ProjectsApiClient, args: argparse.Namespace) -> int:
    ok = client.health()
    _print_json({"ok": ok})
    return 0 if ok else 1


def _list(client: ProjectsApiClient, args: argparse.Namespace) -> None:
    _print_json([project.as_dict() for project in client.list_projects()])


def _create(client: ProjectsApiClient, args: argparse.Namespace) -> None:
    if args.description is None:
        project = client.create_project(args.name)
    else:
        project = client.create_project(args.name, args.description)
    _print_json(project.as_dict())


def _update(client: ProjectsApiClient, args: argparse.Namespace) -> None:
    fields = {}
    if args.name is not None:
        fields["name"] = args.name
    if args.description is not None:
        fields["description"] = args.description
    if args.clear_description:
        fields["description"] = None
    _print_json(client.update_project(args.id, **fields).as_dict())


def _delete(client: ProjectsApiClient, args: argparse.Namespace) -> None:
    client.delete_project(args.id)
    _print_json({"ok": True})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Projects API")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve.set_defaults(handler=_serve)

    migrate = subparsers.add_parser("migrate", help="Create the projects schema")
    migrate.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL (defaults to DATABASE_URL)",
    )
    migrate.set_defaults(handler=_migrate)

    client_parent = argparse.ArgumentParser(add_help=False)
    client_parent.add_argument(
        "--base-url",
        default=os.environ.get("PROJECTS_API_URL", DEFAULT_BASE_URL),
        help="Base URL of a running projects API",
    )

    health = subparsers.add_parser(
        "health", parents=[client_parent], help="Check that the API is up"
    )
    health.set_defaults(client_handler=_health)

    list_cmd = subparsers.add_parser(
        "list", parents=[client_parent], help="List projects, newest first"
    )
    list_cmd.set_defaults(client_handler=_list)

    create = subparsers.add_parser(
        "create", parents=[client_parent], help="Create a project"
    )
    create.add_argument("name")
    create.add_argument("--description", default=None)
    create.set_defaults(client_handler=_create)

    update = subparsers.add_parser(
        "update", parents=[client_parent], help="Rename or re-describe a project"
    )
    update.add_argument("id", type=int)
    update.add_argument("--name", default=None)
    update.add_argument("--description", default=None)
    update.add_argument("--clear-description", action="store_true")
    update.set_defaults(client_handler=_update)

    delete = subparsers.add_parser(
        "delete", parents=[client_parent], help="Delete a project"
    )
    delete.add_argument("id", type=int)
    delete.set_defaults(client_handler=_delete)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    client_handler = getattr(args, "client_handler", None)
    if client_handler is None:
        return args.handler(args)

    client = ProjectsApiClient(args.base_url)
    try:
        code = client_handler(client, args)
    except ApiClientError as exc:
        print(f"Error ({exc.status_code}): {exc}", file=sys.stderr)
        return 1
    except requests.RequestException as exc:
        print(f"Could not reach {args.base_url}: {exc}", file=sys.stderr)
        return 1
    return code or 0


if __name__ == "__main__":
    sys.exit(main())
