# app/models/conversation.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — Conversation models
--------------------------------------------
Pydantic models for one conversation:

- Turn       : a single utterance by the user or the model (immutable)
- Transcript : the ordered turns for one session key, seed pair first
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from app.core.types import Speaker

# Number of turns (instruction + greeting) every transcript starts with.
SEED_TURNS = 2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Turn(BaseModel):
    """One turn in the conversation history."""

    model_config = ConfigDict(frozen=True)

    speaker: Speaker
    text: str
    ts: datetime = Field(default_factory=_utcnow)


class Transcript(BaseModel):
    """
    Per-session conversation.

    Attributes
    ----------
    session_id:
        Key the transcript is stored under.
    created_at:
        When the transcript was seeded.
    turns:
        Seed pair followed by alternating user/model turns.
    """

    session_id: str
    created_at: datetime = Field(default_factory=_utcnow)
    turns: List[Turn] = Field(default_factory=list)

    @property
    def seed(self) -> List[Turn]:
        return self.turns[:SEED_TURNS]

    @property
    def exchanges(self) -> List[Turn]:
        """Turns after the seed pair."""
        return self.turns[SEED_TURNS:]

    def __len__(self) -> int:
        return len(self.turns)
