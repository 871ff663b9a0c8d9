# app/core/prompts.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — Seed prompts
-------------------------------------
Builds the seed pair that opens every new transcript:

    user  : behavioural instructions (app/prompts/system_instruction.txt)
    model : greeting, optionally addressed to the user's display name

The provider has no separate system role in the chat history we send, so
the instructions travel as the first user turn.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from app.core.config import settings
from app.utils import read_text_safely

logger = logging.getLogger(__name__)

INSTRUCTION_FILENAME = "system_instruction.txt"

# Used only if the prompt file is missing.
FALLBACK_INSTRUCTION = (
    "You are an AI chatbot exclusively discussing Kalvium. Keep answers "
    "concise, structured with Markdown headings and lists, and end with a "
    "follow-up question."
)

GREETING_TEMPLATE = (
    "Hello{name}! I'm your Kalvium specialist. I've been designed to share "
    "insightful, structured insights about Kalvium. How familiar are you "
    "with it so far?"
)

# ---------------------------------------------------------------------------
# Prompt loading helpers
# ---------------------------------------------------------------------------

_PROMPT_CACHE: Dict[Path, str] = {}


def _read_prompt_file(filename: str, prompts_dir: Optional[Path] = None) -> str:
    """
    Read a prompt file from settings.prompts_dir with simple caching.

    If the file does not exist, returns an empty string and logs a warning.
    """
    path = (prompts_dir or settings.prompts_dir) / filename
    if path in _PROMPT_CACHE:
        return _PROMPT_CACHE[path]

    if not path.is_file():
        logger.warning("Prompt file not found: %s", path)
        text = ""
    else:
        text = read_text_safely(path, default="", strip=True) or ""

    _PROMPT_CACHE[path] = text
    return text


def instruction_text(prompts_dir: Optional[Path] = None) -> str:
    """Behavioural instructions for the first (user-role) seed turn."""
    return _read_prompt_file(INSTRUCTION_FILENAME, prompts_dir) or FALLBACK_INSTRUCTION


def greeting_text(username: Optional[str] = None) -> str:
    """Greeting for the second (model-role) seed turn."""
    name = (username or "").strip()
    return GREETING_TEMPLATE.format(name=f" {name}" if name else "")


def seed_pair(
    username: Optional[str] = None,
    prompts_dir: Optional[Path] = None,
) -> Tuple[str, str]:
    """Return (instruction, greeting) for a brand-new transcript."""
    return instruction_text(prompts_dir), greeting_text(username)
