"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from repo_ingest.interface.dependencies import shutdown, startup
from repo_ingest.interface.error_handlers import register_error_handlers
from repo_ingest.interface.routes import router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup / shutdown of shared resources."""
    await startup()
    yield
    await shutdown()


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="Repository Ingester",
        version="1.0.0",
        description=(
            "Reduces a GitHub repository or a local folder to a small bundle "
            "for language models: metadata, file tree, README, dependency "
            "manifests and the highest-ranked source files."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
