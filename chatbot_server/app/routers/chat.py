# app/routers/chat.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — /chat router
-------------------------------------
This router exposes the main HTTP endpoint the chat frontend calls.

Flow:
  HTTP POST /chat  (ChatRequest JSON)
    -> reject blank userInput with 400 (nothing is recorded)
    -> resolve the session key (userId → cookie → fallback)
    -> ConversationStore.submit()
       - get-or-create the transcript (seeded with instruction + greeting)
       - send the whole transcript + new message to Gemini
       - record user + model turns only if Gemini answered
    -> format the model text (spacing or structured policy)
    -> return ChatResponse JSON; a newly minted key is also sent back as
       the X-Session-Id header and the session cookie
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.responses import JSONResponse

from app.core.config import Settings
from app.core.dependencies import (
    CompletionProvider,
    get_completion_provider,
    get_conversation_store,
    get_settings,
)
from app.core.formatting import normalize_response
from app.core.identity import resolve_identity
from app.models.chat_request import ChatRequest
from app.models.chat_response import ChatResponse, ErrorResponse
from app.runtime_state import ConversationStore

# `tags` is just for docs (Swagger / ReDoc), makes it grouped nicely.
router = APIRouter(tags=["chat"])
logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Id"
MISSING_INPUT_ERROR = "Invalid request: userInput is missing."


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat_endpoint(
    request: Request,
    response: Response,
    body: Optional[ChatRequest] = Body(default=None),
    store: ConversationStore = Depends(get_conversation_store),
    provider: CompletionProvider = Depends(get_completion_provider),
    cfg: Settings = Depends(get_settings),
):
    """
    Main chat endpoint.

    - A missing body or blank userInput is a client error (400).
    - Provider failures are NOT errors for the client: they get the fixed
      apology text with a 200, and the transcript is left as it was.
    """
    user_text = body.text if body is not None else None
    if user_text is None:
        logger.info("[/chat] rejected request without userInput")
        return JSONResponse(status_code=400, content={"error": MISSING_INPUT_ERROR})

    identity = resolve_identity(
        explicit_key=body.user_id,
        cookie_key=request.cookies.get(cfg.session_cookie_name),
        client_address=request.client.host if request.client else None,
        fallback=cfg.identity_fallback,
    )

    logger.info(
        "[/chat] session=%s source=%s text=%r",
        identity.key,
        identity.source.value,
        user_text,
    )

    try:
        result = await store.submit(
            identity.key,
            user_text,
            provider.complete,
            username=body.username,
        )
    except Exception:  # noqa: BLE001
        # In development, we want the full stack trace to see the bug.
        logger.exception("Unhandled exception in /chat endpoint")
        if cfg.debug:
            raise
        # In production we hide internal details from the client.
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    text = normalize_response(result.text, cfg.response_format) if result.ok else result.text

    if identity.is_new:
        response.headers[SESSION_HEADER] = identity.key
        response.set_cookie(
            cfg.session_cookie_name,
            identity.key,
            httponly=True,
            samesite="lax",
        )

    return ChatResponse(
        response=text,
        session_id=identity.key if identity.is_new else None,
    )
