# app/core/formatting.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — Response formatting
--------------------------------------------
Turns raw model text into the string returned to the client.

Two policies (selected with settings.response_format):

- spacing:
    Every line break becomes a blank-line paragraph break. Content is
    otherwise untouched. This is what the chat frontend renders today.

- structured:
    Look for three labelled lines in the model output:

        Heading: ...
        Content: ...
        Follow-up Question: ...

    If all three are present, emit

        **<heading>**

        <content>

        **<follow-up>**

    Otherwise fall back to the spacing policy on the whole raw text.
    A partial match never partially formats.

All functions here are pure; none of them fail on any raw text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union

from app.core.types import ResponseFormat

HEADING_PREFIX = "Heading:"
CONTENT_PREFIX = "Content:"
FOLLOW_UP_PREFIX = "Follow-up Question:"

_PREFIXES = (HEADING_PREFIX, CONTENT_PREFIX, FOLLOW_UP_PREFIX)


@dataclass(frozen=True)
class StructuredReply:
    """The three labelled parts of a structured model reply."""

    heading: str
    content: str
    follow_up: str


def normalize_spacing(raw: str) -> str:
    """Expand every line break into a double line break."""
    return raw.replace("\n", "\n\n")


def extract_structured(raw: str) -> Optional[StructuredReply]:
    """
    Find the Heading / Content / Follow-up Question lines in `raw`.

    Prefixes are case-sensitive and must start the line (indentation is
    ignored). The first non-empty occurrence of each label wins. Returns
    None unless all three labels carry a value.
    """
    found: Dict[str, str] = {}
    for line in raw.splitlines():
        stripped = line.lstrip()
        for prefix in _PREFIXES:
            if prefix in found or not stripped.startswith(prefix):
                continue
            value = stripped[len(prefix):].strip()
            if value:
                found[prefix] = value
            break

    if len(found) != len(_PREFIXES):
        return None

    return StructuredReply(
        heading=found[HEADING_PREFIX],
        content=found[CONTENT_PREFIX],
        follow_up=found[FOLLOW_UP_PREFIX],
    )


def compose_structured(reply: StructuredReply) -> str:
    """Render a StructuredReply as emphasized heading, content, emphasized follow-up."""
    return f"**{reply.heading}**\n\n{reply.content}\n\n**{reply.follow_up}**"


def normalize_response(
    raw: str,
    policy: Union[ResponseFormat, str] = ResponseFormat.SPACING,
) -> str:
    """Apply the configured presentation policy to raw model text."""
    if ResponseFormat(policy) is ResponseFormat.STRUCTURED:
        reply = extract_structured(raw)
        if reply is not None:
            return compose_structured(reply)
    return normalize_spacing(raw)
