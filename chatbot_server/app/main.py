# app/main.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — FastAPI application entrypoint
-------------------------------------------------------
This file wires everything together:

- Sets up central logging.
- Creates the FastAPI app.
- Refuses to start without the provider credential (lifespan check).
- Adds middleware (CORS, the browser frontend calls us cross-origin).
- Mounts routers:
    * /chat             (HTTP) → main chat endpoint
    * /sessions/{key}   (HTTP) → read-only transcript view (non-production)
- Exposes an ASGI `app` object for uvicorn.

Typical run command (dev):

    uvicorn app.main:app --host 0.0.0.0 --port 3000 --reload

"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.core.config import ConfigurationError, Settings, require_credentials, settings
from app.core.dependencies import CompletionProvider, get_conversation_store
from app.providers.gemini import GeminiProvider
from app.routers.chat import router as chat_router
from app.routers.sessions import router as sessions_router
from app.runtime_state import ConversationStore, conversation_store
from app.utils import get_logger, setup_logging

WELCOME_TEXT = "Welcome to the Kalvium Chatbot API! Ask me anything specific about Kalvium."

# ---------------------------------------------------------------------------
# Global logging config
# ---------------------------------------------------------------------------
setup_logging(debug=settings.debug)
logger = get_logger(__name__)


def _check_startup(cfg: Settings) -> None:
    """Fail fast when the provider credential is missing."""
    try:
        require_credentials(cfg)
    except ConfigurationError:
        logger.critical("API_KEY is missing. Refusing to start the chatbot server.")
        raise


def create_app(
    cfg: Optional[Settings] = None,
    store: Optional[ConversationStore] = None,
    provider: Optional[CompletionProvider] = None,
) -> FastAPI:
    """
    Application factory.

    Returns a configured FastAPI instance ready for uvicorn. Without
    arguments it uses the global settings and conversation store and a
    Gemini provider; tests pass their own.
    """
    cfg = cfg or settings
    if store is None:
        store = conversation_store if cfg is settings else ConversationStore(cfg.max_history_turns)
    if provider is None:
        provider = GeminiProvider(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _check_startup(cfg)
        logger.info(
            "Kalvium chatbot server ready (env=%s, model=%s, format=%s)",
            cfg.environment,
            cfg.gemini_model,
            cfg.response_format,
        )
        yield

    app = FastAPI(
        title=cfg.app_name,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.conversation_store = store
    app.state.completion_provider = provider

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Session-Id"],
    )

    app.include_router(chat_router)

    # Transcript dumps are for debugging only.
    if cfg.environment != "production":
        app.include_router(sessions_router)

    # ------------------------------------------------------------------
    # Meta / health endpoints
    # ------------------------------------------------------------------

    @app.get("/", tags=["meta"], response_class=PlainTextResponse)
    async def root() -> str:
        """Static welcome text; no conversation state involved."""
        return WELCOME_TEXT

    @app.get("/health", tags=["meta"])
    async def health_check(store: ConversationStore = Depends(get_conversation_store)):
        """Lightweight health check for monitoring scripts."""
        return {
            "status": "ok",
            "environment": cfg.environment,
            "sessions": len(store),
            "response_format": cfg.response_format,
        }

    logger.info("FastAPI app created (env=%s)", cfg.environment)
    return app


# ASGI app for uvicorn / gunicorn
app = create_app()


if __name__ == "__main__":
    """
    Allow `python3 -m app.main` during development.

    In production you normally use:

        uvicorn app.main:app --host 0.0.0.0 --port 3000
    """
    import uvicorn

    try:
        _check_startup(settings)
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=(settings.environment != "production"),
    )
