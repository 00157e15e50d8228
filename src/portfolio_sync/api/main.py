"""FastAPI application serving the synced portfolio dataset."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_sync.api.routes import health, projects, sync_runs
from portfolio_sync.models.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the history tables on startup."""
    from portfolio_sync.data.db import init_db

    init_db()
    yield


app = FastAPI(
    title="Portfolio Sync API",
    description="Read access to the aggregated portfolio dataset and its sync history",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("Configuration error serving %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


app.include_router(health.router)
app.include_router(projects.router, prefix="/api")
app.include_router(projects.global_router, prefix="/api")
app.include_router(sync_runs.router, prefix="/api")


def main(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Start the server."""
    import uvicorn

    uvicorn.run("portfolio_sync.api.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
