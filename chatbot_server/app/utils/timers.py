# app/utils/timers.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — timing utilities
-----------------------------------------
Lightweight helper for measuring how long the completion provider takes.
Latency grows with transcript length, so this is the first thing to look
at when replies get slow.
"""

from __future__ import annotations

import logging
import time
from contextlib import ContextDecorator
from typing import Optional


class Stopwatch(ContextDecorator):
    """
    Simple stopwatch context manager.

    Example:
        from app.utils import Stopwatch, get_logger

        logger = get_logger(__name__)

        with Stopwatch("Gemini call", logger):
            call_gemini(...)

    This will log something like:
        Gemini call took 1.237 s
    """

    def __init__(
        self,
        label: str,
        logger: Optional[logging.Logger] = None,
        level: int = logging.INFO,
    ) -> None:
        self.label = label
        self.logger = logger or logging.getLogger(__name__)
        self.level = level
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Stopwatch":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:  # type: ignore[override]
        self.elapsed = time.perf_counter() - self._start
        if exc_type is None:
            self.logger.log(self.level, "%s took %.3f s", self.label, self.elapsed)
        else:
            self.logger.log(
                self.level,
                "%s failed after %.3f s (%s)",
                self.label,
                self.elapsed,
                exc_type.__name__,
            )
