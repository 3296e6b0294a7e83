from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gemini_proxy.core.config import ProxySettings
from gemini_proxy.core.errors import ProxyError, UnexpectedError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


def get_settings() -> ProxySettings:
    return ProxySettings.from_env()


def json_response(
    status_code: int,
    content: dict[str, Any],
    extra_headers: dict[str, str] | None = None,
) -> JSONResponse:
    headers = {**CORS_HEADERS, "Cache-Control": "no-store", **(extra_headers or {})}
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=headers,
        media_type="application/json; charset=utf-8",
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ProxyError)
    async def handle_proxy_error(
        request: Request,
        exc: ProxyError,
    ) -> JSONResponse:
        logger.info(
            "%s %s failed with %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
        return json_response(exc.status_code, exc.to_error())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        _request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        return json_response(
            exc.status_code,
            {"ok": False, "error": str(exc.detail)},
            extra_headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(
        _request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception("Unhandled error escaped the request pipeline", exc_info=exc)
        compat_error = UnexpectedError()
        return json_response(compat_error.status_code, compat_error.to_error())
