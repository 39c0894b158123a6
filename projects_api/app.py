"""
FastAPI application entry point.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from projects_api.config import Settings, get_settings
from projects_api.errors import ApiError
from projects_api.origins import OriginPolicy, apply_cors_headers
from projects_api.routes import router

logger = logging.getLogger(__name__)


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Projects API", version="0.1.0")
    app.state.settings = settings
    app.state.origin_policy = OriginPolicy.from_string(settings.allowed_origins)

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        return _error_response(exc.message, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == 404:
            message = "Not found"
        return _error_response(message, exc.status_code)

    @app.middleware("http")
    async def origin_guard(request: Request, call_next):
        policy: OriginPolicy = request.app.state.origin_policy
        request_origin = request.headers.get("origin")
        matched_origin = policy.match(request_origin)

        if request_origin and not matched_origin:
            logger.warning("Rejected request from origin %s", request_origin)
            return _error_response("Origin not allowed", 403)

        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    "Unhandled error for %s %s", request.method, request.url.path
                )
                response = _error_response("Internal server error", 500)

        apply_cors_headers(response.headers, matched_origin)
        return response

    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
