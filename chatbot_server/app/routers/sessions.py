# app/routers/sessions.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — /sessions router
-----------------------------------------
Read-only diagnostics for conversation state:

- GET /sessions/{session_id}  → full transcript (seed pair included)

Nothing here mutates the store. The router is only mounted outside
production, and settings.expose_transcripts can switch it off entirely.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.core.config import Settings
from app.core.dependencies import get_conversation_store, get_settings
from app.models.chat_response import TranscriptView, TurnView
from app.runtime_state import ConversationStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("/{session_id}", response_model=TranscriptView)
async def get_transcript(
    session_id: str,
    store: ConversationStore = Depends(get_conversation_store),
    cfg: Settings = Depends(get_settings),
) -> TranscriptView:
    """Return a copy of the transcript stored under `session_id`."""
    transcript = store.get(session_id) if cfg.expose_transcripts else None
    if transcript is None:
        raise HTTPException(status_code=404, detail="Unknown session.")

    return TranscriptView(
        session_id=transcript.session_id,
        created_at=transcript.created_at,
        turn_count=len(transcript.turns),
        turns=[
            TurnView(speaker=t.speaker, text=t.text, ts=t.ts)
            for t in transcript.turns
        ],
    )
