from __future__ import annotations

from fastapi import FastAPI

from gemini_proxy.dependencies import register_exception_handlers
from gemini_proxy.internal import admin
from gemini_proxy.routers import generate


def create_app() -> FastAPI:
    app = FastAPI(
        title="gemini-proxy",
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
    )

    register_exception_handlers(app)

    app.include_router(generate.router)
    app.include_router(admin.router)

    return app


app = create_app()
