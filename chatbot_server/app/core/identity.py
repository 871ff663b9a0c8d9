# app/core/identity.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — Identity resolution
--------------------------------------------
Derives the session key for an incoming request.

Precedence:
    1) explicit `userId` from the request body
    2) session cookie from an earlier reply
    3) fallback policy:
         - "generate"       → mint a fresh uuid4 hex key
         - "client_address" → use the caller's network address

No validation is done on supplied keys: whoever presents a key continues
that conversation. The client-address fallback merges every user behind the
same network origin into one transcript; that is a known limitation of the
mode, which is why "generate" is the default.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from app.core.types import IdentitySource, ResolvedIdentity

logger = logging.getLogger(__name__)


def new_session_key() -> str:
    """Return a fresh, collision-resistant session key."""
    return uuid.uuid4().hex


def _clean(hint: Optional[str]) -> Optional[str]:
    if hint is None:
        return None
    hint = hint.strip()
    return hint or None


def resolve_identity(
    explicit_key: Optional[str] = None,
    cookie_key: Optional[str] = None,
    client_address: Optional[str] = None,
    fallback: str = "generate",
) -> ResolvedIdentity:
    """
    Pick the session key for a request. Never fails.

    Parameters
    ----------
    explicit_key:
        `userId` from the request body, if any.
    cookie_key:
        Value of the session cookie, if any.
    client_address:
        Caller's network address; only used when fallback="client_address".
    fallback:
        "generate" or "client_address".
    """
    key = _clean(explicit_key)
    if key is not None:
        return ResolvedIdentity(key=key, source=IdentitySource.EXPLICIT)

    key = _clean(cookie_key)
    if key is not None:
        return ResolvedIdentity(key=key, source=IdentitySource.COOKIE)

    if fallback == "client_address":
        key = _clean(client_address)
        if key is not None:
            logger.debug("No identity hint; falling back to client address %s", key)
            return ResolvedIdentity(key=key, source=IdentitySource.CLIENT_ADDRESS)

    key = new_session_key()
    logger.info("No identity hint; minted new session key %s", key)
    return ResolvedIdentity(key=key, source=IdentitySource.GENERATED, is_new=True)
