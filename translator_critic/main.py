from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .routes.health import router as health_router
from .routes.translation import router as translation_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    # One connection pool for all outbound AI calls
    app.state.http_client = httpx.AsyncClient(timeout=settings.request_timeout_sec)
    if not settings.api_key:
        logger.info("MENTORPIECE_API_KEY not set; callers must send a bearer token")
    try:
        yield
    finally:
        await app.state.http_client.aclose()
        app.state.http_client = None


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(lifespan=lifespan, title="AI Translator & Critic", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(translation_router)
    return app


app = create_app()
