"""
Runtime state package for the Kalvium chatbot server.

This package is responsible for tracking per-session conversation state,
so the chatbot can hold multi-turn conversations without mixing users.

Typical usage (e.g. in routers/chat.py):

    from app.runtime_state import conversation_store

    result = await conversation_store.submit(
        session_id,
        user_text,
        provider.complete,
        username=username,
    )
    # result.text is the raw model text (or the apology if result.ok is False)
"""

from app.core.config import settings

from .conversations import (
    APOLOGY_TEXT,
    ConversationStore,
)

# Global instance used by the rest of the app
conversation_store = ConversationStore(max_history_turns=settings.max_history_turns)

__all__ = [
    "APOLOGY_TEXT",
    "ConversationStore",
    "conversation_store",
]
