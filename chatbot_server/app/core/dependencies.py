# app/core/dependencies.py
# -*- coding: utf-8 -*-
"""
FastAPI dependency providers.

create_app() puts the settings, the conversation store and the completion
provider on `app.state`; routers receive them through these functions.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from fastapi import Request

from app.core.config import Settings
from app.models.conversation import Turn
from app.runtime_state import ConversationStore


class CompletionProvider(Protocol):
    async def complete(self, turns: Sequence[Turn]) -> str: ...


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_conversation_store(request: Request) -> ConversationStore:
    return request.app.state.conversation_store


def get_completion_provider(request: Request) -> CompletionProvider:
    return request.app.state.completion_provider
