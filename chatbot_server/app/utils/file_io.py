# app/utils/file_io.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — file_io utilities
------------------------------------------
Safe helpers for reading small text files such as prompt templates.

Reads are tolerant: on errors we log and return a default instead of
crashing the request that needed the file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def read_text_safely(
    path: Path,
    default: Optional[str] = None,
    *,
    strip: bool = False,
) -> Optional[str]:
    """
    Read a UTF-8 text file and return its content.

    - On failure, logs and returns `default`.
    - If strip=True, leading/trailing whitespace is removed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("read_text_safely: failed to read %s: %s", path, exc)
        return default

    return text.strip() if strip else text
