#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot — Dev console client (POST /chat)
-------------------------------------------------
Interactive console tool for talking to the chatbot server over HTTP.

Features:
- Simple REPL: you type, the chatbot answers.
- Sends ChatRequest-shaped JSON to /chat.
- Remembers the session key the server mints on the first reply
  (`sessionId` in the body / X-Session-Id header) and sends it back as
  `userId`, so the conversation keeps its context.
- `/new` starts a fresh conversation, `/show` dumps the transcript via
  GET /sessions/{key} (development servers only).

This client is meant for development / testing on your laptop.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, Optional

import requests

DEFAULT_SERVER = "http://127.0.0.1:3000"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Kalvium Chatbot — Dev console client (/chat)",
    )
    parser.add_argument(
        "--server",
        type=str,
        default=DEFAULT_SERVER,
        help=f"Server base URL (default: {DEFAULT_SERVER})",
    )
    parser.add_argument(
        "--session",
        type=str,
        default=None,
        help="Existing session key to continue (sent as userId).",
    )
    parser.add_argument(
        "--username",
        type=str,
        default=None,
        help="Display name used in the greeting of a new conversation.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="HTTP timeout in seconds (default: 120).",
    )
    return parser.parse_args()


def send_message(
    http: requests.Session,
    server: str,
    text: str,
    session_key: Optional[str],
    username: Optional[str],
    timeout: float,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"userInput": text}
    if session_key:
        payload["userId"] = session_key
    if username:
        payload["username"] = username

    resp = http.post(f"{server.rstrip('/')}/chat", json=payload, timeout=timeout)
    data = resp.json()
    if resp.status_code != 200:
        raise RuntimeError(f"HTTP {resp.status_code}: {data.get('error', data)}")

    minted = data.get("sessionId") or resp.headers.get("X-Session-Id")
    if minted:
        data["sessionId"] = minted
    return data


def show_transcript(http: requests.Session, server: str, session_key: str, timeout: float) -> None:
    resp = http.get(f"{server.rstrip('/')}/sessions/{session_key}", timeout=timeout)
    if resp.status_code != 200:
        print(f"[client] no transcript available (HTTP {resp.status_code})")
        return
    print(json.dumps(resp.json(), indent=2, ensure_ascii=False))


def main() -> int:
    args = parse_args()
    session_key: Optional[str] = args.session

    print(f"[client] talking to {args.server}; /new resets, /show dumps, /quit exits")
    http = requests.Session()

    while True:
        try:
            text = input("you> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0

        if not text:
            continue
        if text in ("/quit", "/exit"):
            return 0
        if text == "/new":
            session_key = None
            http.cookies.clear()
            print("[client] starting a new conversation")
            continue
        if text == "/show":
            if session_key:
                show_transcript(http, args.server, session_key, args.timeout)
            else:
                print("[client] no session yet")
            continue

        try:
            data = send_message(http, args.server, text, session_key, args.username, args.timeout)
        except (requests.RequestException, RuntimeError, ValueError) as exc:
            print(f"[client] request failed: {exc}", file=sys.stderr)
            continue

        if data.get("sessionId"):
            session_key = data["sessionId"]
            print(f"[client] session key: {session_key}")

        print(f"bot> {data.get('response', '')}\n")


if __name__ == "__main__":
    raise SystemExit(main())
