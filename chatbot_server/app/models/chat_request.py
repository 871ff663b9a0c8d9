# app/models/chat_request.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — ChatRequest model
------------------------------------------
Request payload for the /chat endpoint.

The frontend sends camelCase JSON:

    {"userInput": "...", "userId": "...", "username": "..."}

`userInput` is optional at the schema level on purpose: a missing or blank
value is answered by the router with a 400 and a plain error message,
not with FastAPI's generic 422.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """
    Canonical request body for /chat.

    Fields
    ------
    user_input:
        The user's message (JSON: userInput). Required to be non-blank.
    user_id:
        Session key to continue (JSON: userId). If omitted, the session
        cookie or a freshly minted key is used.
    username:
        Display name, used only in the greeting of a new conversation.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "userInput": "What is Kalvium?",
                    "userId": "3f2b9c1e4d5a4b6f8e7d6c5b4a392817",
                    "username": "Asha",
                },
                {"userInput": "Tell me about the placement process."},
            ]
        },
    )

    user_input: Optional[str] = Field(
        default=None,
        alias="userInput",
        description="User message in plain text.",
    )
    user_id: Optional[str] = Field(
        default=None,
        alias="userId",
        description="Session key returned by an earlier /chat reply.",
    )
    username: Optional[str] = Field(
        default=None,
        description="Optional display name for the greeting.",
    )

    @property
    def text(self) -> Optional[str]:
        """Stripped user input, or None when missing/blank."""
        if self.user_input is None:
            return None
        return self.user_input.strip() or None
