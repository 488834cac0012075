from __future__ import annotations  # FastAPI server for the avatar interview hub

import logging
from contextlib import asynccontextmanager
from functools import partial
from pathlib import Path
from typing import AsyncIterator, Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router as store_router
from api.sessions import router as session_router
from avatar_gateway import speak
from config import (
    AVATAR_ROUTE,
    GROUP_SUMMARY_KEY,
    GROUP_SUMMARY_ROUTE,
    SPEAK_KEY,
    SUMMARY_KEY,
    SUMMARY_ROUTE,
    TRANSCRIBE_KEY,
    TRANSCRIBE_ROUTE,
    TURN_KEY,
    TURN_ROUTE,
    AppConfig,
    bind_model,
    load_config,
    route_for,
    settings,
)
from llm_gateway import generate, transcribe
from observability.logger import configure_logging
from storage.migrate import migrate


logger = logging.getLogger(__name__)


def _generator(cfg: AppConfig, target: str) -> Callable[..., str]:  # generate() bound to one route
    route = route_for(cfg, target)

    def call(*, system_prompt: str, user_prompt: str) -> str:
        return generate(system_prompt, user_prompt, cfg=route)

    return call


def bind_collaborators(cfg: AppConfig) -> None:  # Install the httpx-backed collaborators
    bind_model(TURN_KEY, _generator(cfg, TURN_ROUTE))
    bind_model(SUMMARY_KEY, _generator(cfg, SUMMARY_ROUTE))
    bind_model(GROUP_SUMMARY_KEY, _generator(cfg, GROUP_SUMMARY_ROUTE))
    bind_model(
        TRANSCRIBE_KEY,
        partial(transcribe, cfg=route_for(cfg, TRANSCRIBE_ROUTE), language=settings.TRANSCRIBE_LANGUAGE),
    )
    bind_model(SPEAK_KEY, partial(speak, cfg=route_for(cfg, AVATAR_ROUTE)))


def create_app(bind: bool = True) -> FastAPI:
    """Assemble the application. Tests pass ``bind=False`` and register fakes."""

    configure_logging()

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        migrate(settings.DB_PATH)
        if bind:
            bind_collaborators(load_config(Path(settings.LLM_CONFIG_PATH)))
        logger.info("Interview hub ready db=%s origins=%s", settings.DB_PATH, settings.cors_origins())
        yield

    app = FastAPI(title="Avatar Interview Hub API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "x-admin-token"],
    )

    @app.get("/health")
    def health() -> dict:
        return {"ok": True}

    @app.get("/healthz")
    def healthz() -> dict:
        return {"ok": True}

    app.include_router(store_router)
    app.include_router(session_router)
    return app


app = create_app()
