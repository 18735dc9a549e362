from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from logging_config import configure_logging
from services.bridge import build_default_bridge
from settings import get_settings


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    bridge = build_default_bridge()
    bridge.start()
    try:
        yield
    finally:
        bridge.shutdown()
        build_default_bridge.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Posyandu Telemetry Bridge",
        description="Caches MQTT temperature readings and relays operator commands to devices.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


def run() -> None:
    """Serve the bridge on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


app = create_app()
