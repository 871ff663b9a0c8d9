# app/runtime_state/conversations.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — Runtime conversation state
---------------------------------------------------

This module implements the in-memory conversation store for the server.

Purpose
~~~~~~~
- Keep one transcript per session key so users get multi-turn context
  without mixing conversations.
- Seed every new transcript with the instruction + greeting pair.
- Run one chat turn end-to-end (`submit`): the whole transcript plus the new
  user message goes to the completion provider, and both turns are recorded
  only if the provider answered.

Design notes
~~~~~~~~~~~~
- Process-local and in-memory only. A restart forgets every conversation,
  and multiple workers do NOT share state.
- `_lock` (threading) guards the key → transcript mapping, so creation is
  atomic and a key never gets two seed pairs.
- Each key also has an asyncio lock that serializes `submit` calls for that
  key, so turns from concurrent requests never interleave. Different keys
  never wait on each other.
- History is unbounded unless `max_history_turns` is set; then the seed pair
  is kept and only the most recent user/model pairs survive.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from app.core.prompts import seed_pair
from app.core.types import Speaker, SubmitResult
from app.models.conversation import SEED_TURNS, Transcript, Turn
from app.providers.gemini import CompletionError

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logger = logging.getLogger("kalvium_chat.runtime_state")

APOLOGY_TEXT = (
    "I'm having trouble processing your request right now. "
    "Please try again later."
)

# Async callable that turns a transcript into model text.
CompleteFn = Callable[[Sequence[Turn]], Awaitable[str]]


class ConversationStore:
    """
    In-memory session store: session key → Transcript.

    Parameters
    ----------
    max_history_turns:
        Maximum number of non-seed turns kept per transcript. None means
        unbounded. Odd values are rounded down so user/model pairs stay
        together.
    """

    def __init__(self, max_history_turns: Optional[int] = None) -> None:
        if max_history_turns is not None and max_history_turns < 2:
            raise ValueError("max_history_turns must be at least 2 (one exchange).")

        self.max_history_turns = max_history_turns
        self._transcripts: Dict[str, Transcript] = {}
        self._turn_locks: Dict[str, asyncio.Lock] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Core mutations
    # ------------------------------------------------------------------

    def get_or_create(self, session_id: str, username: Optional[str] = None) -> Transcript:
        """
        Return the transcript for `session_id`, seeding a new one if needed.

        `username` only affects the greeting of a newly created transcript;
        an existing transcript is returned unchanged.
        """
        with self._lock:
            transcript = self._transcripts.get(session_id)
            if transcript is None:
                instruction, greeting = seed_pair(username)
                transcript = Transcript(
                    session_id=session_id,
                    turns=[
                        Turn(speaker=Speaker.USER, text=instruction),
                        Turn(speaker=Speaker.MODEL, text=greeting),
                    ],
                )
                self._transcripts[session_id] = transcript
                logger.info("[ConversationStore] Created transcript %s", session_id)
            return transcript

    def append(self, session_id: str, speaker: Speaker, text: str) -> Turn:
        """
        Append one turn to an existing transcript.

        Raises KeyError if get_or_create() was never called for the key.
        """
        turn = Turn(speaker=Speaker(speaker), text=text)
        self._commit(session_id, [turn])
        return turn

    def _commit(self, session_id: str, turns: List[Turn]) -> None:
        with self._lock:
            transcript = self._transcripts.get(session_id)
            if transcript is None:
                raise KeyError(f"no transcript for session {session_id!r}")
            transcript.turns.extend(turns)
            self._trim(transcript)

    def _trim(self, transcript: Transcript) -> None:
        if self.max_history_turns is None:
            return
        keep = self.max_history_turns - (self.max_history_turns % 2)
        overflow = len(transcript.turns) - SEED_TURNS - keep
        if overflow > 0:
            del transcript.turns[SEED_TURNS:SEED_TURNS + overflow]
            logger.debug(
                "[ConversationStore] Dropped %d old turns from %s",
                overflow,
                transcript.session_id,
            )

    def _turn_lock(self, session_id: str) -> asyncio.Lock:
        with self._lock:
            lock = self._turn_locks.get(session_id)
            if lock is None:
                lock = self._turn_locks[session_id] = asyncio.Lock()
            return lock

    # ------------------------------------------------------------------
    # Composite operation used by /chat
    # ------------------------------------------------------------------

    async def submit(
        self,
        session_id: str,
        user_text: str,
        complete: CompleteFn,
        username: Optional[str] = None,
    ) -> SubmitResult:
        """
        Run one chat turn for `session_id`.

        - get-or-create the transcript
        - send the entire transcript + the new user turn to `complete`
        - on success, record the user turn and the model turn, return raw text
        - on CompletionError, record nothing and return the apology text
        """
        async with self._turn_lock(session_id):
            transcript = self.get_or_create(session_id, username)
            user_turn = Turn(speaker=Speaker.USER, text=user_text)
            context = self.snapshot(session_id) + [user_turn]

            try:
                reply = await complete(context)
            except CompletionError as exc:
                logger.warning(
                    "[ConversationStore] Completion failed for %s (%d turns): %s",
                    session_id,
                    len(transcript),
                    exc,
                )
                return SubmitResult(text=APOLOGY_TEXT, ok=False)

            model_turn = Turn(speaker=Speaker.MODEL, text=reply)
            self._commit(session_id, [user_turn, model_turn])
            return SubmitResult(text=reply, ok=True)

    # ------------------------------------------------------------------
    # Read-only views (diagnostics)
    # ------------------------------------------------------------------

    def get(self, session_id: str) -> Optional[Transcript]:
        """Return a copy of the transcript for `session_id`, or None."""
        with self._lock:
            transcript = self._transcripts.get(session_id)
            return transcript.model_copy(deep=True) if transcript is not None else None

    def snapshot(self, session_id: str) -> List[Turn]:
        """Return the turns for `session_id` as a new list (empty if unknown)."""
        with self._lock:
            transcript = self._transcripts.get(session_id)
            return list(transcript.turns) if transcript is not None else []

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._transcripts)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._transcripts

    def __len__(self) -> int:
        with self._lock:
            return len(self._transcripts)
