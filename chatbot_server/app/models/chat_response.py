# app/models/chat_response.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — response models
----------------------------------------
JSON bodies returned by the HTTP API.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.types import Speaker


class ChatResponse(BaseModel):
    """
    Body of a successful /chat call.

    `sessionId` is only present when the server minted a new key; the
    client must send it back as `userId` (or keep the cookie) to continue.
    """

    model_config = ConfigDict(populate_by_name=True)

    response: str
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class ErrorResponse(BaseModel):
    error: str


class TurnView(BaseModel):
    speaker: Speaker
    text: str
    ts: datetime


class TranscriptView(BaseModel):
    """Read-only transcript dump for GET /sessions/{session_id}."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    created_at: datetime = Field(alias="createdAt")
    turn_count: int = Field(alias="turnCount")
    turns: List[TurnView]
