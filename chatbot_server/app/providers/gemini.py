# app/providers/gemini.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — Gemini completion provider
---------------------------------------------------
This module is the ONLY place that knows how to talk to Google Gemini.

Responsibilities:
- Build the generateContent request (URL, headers, JSON payload).
- Send the whole transcript as `contents`, in order.
- Parse the response and return the candidate text.

It is used by the /chat flow through ConversationStore.submit(), which
records nothing and answers with an apology if this provider raises
CompletionError. There is no retry here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings, require_credentials, settings
from app.models.conversation import Turn
from app.utils import Stopwatch

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """Raised when the completion provider fails in a recoverable way."""


@dataclass(frozen=True)
class GenerationConfig:
    """Fixed sampling parameters sent with every request."""

    temperature: float = 0.7
    top_p: float = 0.95
    top_k: int = 64
    max_output_tokens: int = 65536
    response_mime_type: str = "text/plain"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "topP": self.top_p,
            "topK": self.top_k,
            "maxOutputTokens": self.max_output_tokens,
            "responseMimeType": self.response_mime_type,
        }


DEFAULT_GENERATION_CONFIG = GenerationConfig()


def build_gemini_payload(
    turns: Sequence[Turn],
    config: GenerationConfig = DEFAULT_GENERATION_CONFIG,
) -> Dict[str, Any]:
    """
    Build the JSON payload for generateContent.

    Parameters
    ----------
    turns:
        The full transcript, oldest first. The last turn is the new user
        message.
    config:
        Sampling parameters.
    """
    contents: List[Dict[str, Any]] = [
        {"role": turn.speaker.value, "parts": [{"text": turn.text}]}
        for turn in turns
    ]
    return {
        "contents": contents,
        "generationConfig": config.to_payload(),
    }


def _extract_text(data: Any) -> str:
    """Join the text parts of candidates[0]; raise CompletionError if absent."""
    try:
        parts = data["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts)
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise CompletionError(
            "Gemini response JSON missing candidates[0].content.parts"
        ) from exc

    if not text.strip():
        raise CompletionError("Gemini returned empty content.")
    return text


def call_gemini(
    turns: Sequence[Turn],
    config: GenerationConfig = DEFAULT_GENERATION_CONFIG,
    cfg: Optional[Settings] = None,
) -> str:
    """
    Call Gemini generateContent and return the model's text.

    Raises
    ------
    CompletionError
        If the credential is missing, or the HTTP/JSON exchange fails.
    """
    cfg = cfg or settings
    try:
        api_key = require_credentials(cfg)
    except RuntimeError as exc:
        raise CompletionError(str(exc)) from exc

    url = f"{cfg.gemini_base_url.rstrip('/')}/models/{cfg.gemini_model}:generateContent"
    headers = {
        "x-goog-api-key": api_key,
        "Content-Type": "application/json",
    }
    payload = build_gemini_payload(turns, config)

    try:
        resp = requests.post(
            url,
            headers=headers,
            json=payload,
            timeout=cfg.gemini_timeout_s,
        )
    except requests.RequestException as exc:
        raise CompletionError(f"Gemini HTTP error: {exc}") from exc

    if resp.status_code != 200:
        text_preview = resp.text[:200].replace("\n", " ")
        raise CompletionError(f"Gemini HTTP {resp.status_code}: {text_preview}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise CompletionError("Gemini returned non-JSON response.") from exc

    return _extract_text(data)


class GeminiProvider:
    """
    Async facade over call_gemini().

    The HTTP call is blocking, so it runs in the threadpool and the event
    loop stays free for other sessions while we wait.
    """

    def __init__(
        self,
        cfg: Optional[Settings] = None,
        config: GenerationConfig = DEFAULT_GENERATION_CONFIG,
    ) -> None:
        self.cfg = cfg or settings
        self.config = config

    async def complete(self, turns: Sequence[Turn]) -> str:
        with Stopwatch(f"Gemini call ({len(turns)} turns)", logger):
            return await run_in_threadpool(call_gemini, list(turns), self.config, self.cfg)
