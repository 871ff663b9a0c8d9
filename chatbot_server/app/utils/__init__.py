# app/utils/__init__.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — Utility toolbox
----------------------------------------
Shared helper functions that are used across the server:

- file_io   : tolerant text file reading (prompt files)
- logging   : central logging configuration
- timers    : small timing helper for provider latency

Import from here when it makes sense, for a clean public API, e.g.:

    from app.utils import setup_logging, read_text_safely
"""

from __future__ import annotations

from .file_io import (  # noqa: F401
    read_text_safely,
)

from .logging import (  # noqa: F401
    setup_logging,
    get_logger,
)

from .timers import (  # noqa: F401
    Stopwatch,
)
