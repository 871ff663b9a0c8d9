# app/core/types.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — Shared type helpers
--------------------------------------------
Central place for small shared type definitions used across the core:

- Speaker          : who said a turn ("user" | "model")
- IdentitySource   : where a session key came from
- ResponseFormat   : which presentation policy is applied to model text
- ResolvedIdentity : result of identity resolution for one request
- SubmitResult     : result of one conversation turn (before formatting)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Enums (string-valued so they serialize cleanly)
# ---------------------------------------------------------------------------


class Speaker(str, Enum):
    """Role of a turn. Values match the provider's role names."""

    USER = "user"
    MODEL = "model"


class IdentitySource(str, Enum):
    """Which hint produced the session key."""

    EXPLICIT = "explicit"              # userId field in the request body
    COOKIE = "cookie"                  # session cookie set on an earlier reply
    CLIENT_ADDRESS = "client_address"  # degraded: caller's network address
    GENERATED = "generated"            # freshly minted by the server


class ResponseFormat(str, Enum):
    """Presentation policy for raw model text."""

    SPACING = "spacing"
    STRUCTURED = "structured"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolvedIdentity:
    """
    Session key chosen for one request.

    Attributes
    ----------
    key:
        Opaque session key. Never empty.
    source:
        Which hint the key came from.
    is_new:
        True when the server minted the key; the caller must be told about it
        so it can echo the key on the next request.
    """

    key: str
    source: IdentitySource
    is_new: bool = False


@dataclass(frozen=True)
class SubmitResult:
    """
    Result of ConversationStore.submit(), BEFORE presentation formatting.

    Attributes
    ----------
    text:
        Raw model text on success, or the fixed apology text on failure.
    ok:
        False when the completion provider failed and nothing was recorded.
    """

    text: str
    ok: bool
