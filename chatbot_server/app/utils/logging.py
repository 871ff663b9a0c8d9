# app/utils/logging.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — logging utilities
------------------------------------------
Central logging configuration for the chatbot server.

- One format for every module (timestamp, level, logger, message).
- DEBUG in development when settings.debug is on, INFO otherwise.
- Third-party chatter (uvicorn access log, urllib3 from requests) is kept
  at WARNING unless KALVIUM_NOISY_LOG_LEVEL says otherwise.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("uvicorn.access", "urllib3", "httpx")


def setup_logging(
    *,
    debug: bool = False,
    level: Optional[int] = None,
    noisy: Iterable[str] = NOISY_LOGGERS,
) -> int:
    """
    Configure root logging for the process and return the level in use.

    Parameters
    ----------
    debug:
        If True, default log level becomes DEBUG, otherwise INFO.
        This is typically wired from settings.debug.
    level:
        Optional explicit logging level (overrides debug flag).
    noisy:
        Logger names to clamp to KALVIUM_NOISY_LOG_LEVEL (default WARNING).

    Safe to call more than once: if handlers already exist (uvicorn, pytest)
    only the levels are adjusted.
    """
    if level is None:
        level = logging.DEBUG if debug else logging.INFO

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        for handler in root.handlers:
            handler.setLevel(level)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)

    noisy_level = os.getenv("KALVIUM_NOISY_LOG_LEVEL", "WARNING").upper()
    for name in noisy:
        logging.getLogger(name).setLevel(noisy_level)

    return level


def get_logger(name: str) -> logging.Logger:
    """
    Small convenience wrapper around logging.getLogger.

    Usage:
        from app.utils import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
