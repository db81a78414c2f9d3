#!/usr/bin/env python3
"""
Reslife API - HTTP layer over the community analysis engine.

Callers post a roster and receive structure diagnostics: health, isolation
risk, bridge members, stable and fragile groups, event times and a check-in
priority list.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reslife.config import ConfigLoader
from reslife.logging_config import configure_logging, get_logger

from .settings import get_settings

# Format: 2026-01-06T14:05:52Z [api] LEVEL message
configure_logging(source="api", level=logging.getLevelName(get_settings().log_level))
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Validate analysis configuration before serving requests."""
    settings = get_settings()
    ConfigLoader.initialize(
        overrides=settings.config_overrides(),
        config_file=settings.reslife_config_file,
    )
    logger.info("Analysis configuration validated")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Reslife API",
        description="Residence-hall community structure analysis",
        lifespan=lifespan,
    )

    settings = get_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    from .routers import community

    app.include_router(community.router)

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        config_health = ConfigLoader.get_instance().health_check()
        return {"status": config_health["status"], "service": "reslife-api", "config": config_health}

    return app


# Create app instance for uvicorn
app = create_app()
