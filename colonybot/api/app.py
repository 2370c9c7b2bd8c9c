"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from colonybot.api.dependencies import set_engine_manager
from colonybot.api.engine_manager import EngineManager
from colonybot.api.routes import api_router
from colonybot.config import ColonyConfig
from colonybot.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: ColonyConfig | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = ColonyConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        set_engine_manager(manager)
        manager.start()
        logger.info("API server started — colony running.")
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Colony Extraction Engine",
        description=(
            "Tick-driven colony economy: extraction sites, output structures and haulers.\n\n"
            "## API Groups\n\n"
            "- **State** — Live colony state: agents, structures, construction sites, nodes, sites\n"
            "- **Control** — Lifecycle: start, pause, resume, step, reset\n"
            "- **Config** — Read-only colony configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live colony state polled by clients."},
            {"name": "Control", "description": "Lifecycle controls: start, pause, resume, single-step, and reset."},
            {"name": "Config", "description": "Read-only colony configuration parameters."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
