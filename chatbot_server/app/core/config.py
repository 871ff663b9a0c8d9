# app/core/config.py
# -*- coding: utf-8 -*-
"""
Kalvium Chatbot Server — Configuration
--------------------------------------
Central configuration for the chatbot server, including:

- app metadata
- API host/port
- filesystem paths (prompts)
- the Gemini completion provider (credential, model, endpoint),
- conversation behaviour (identity fallback, response format, history cap).

The provider credential is the only required value. Use
`require_credentials()` before serving; the app lifespan does this for you.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

# This file is: chatbot_server/app/core/config.py
APP_DIR: Path = Path(__file__).resolve().parents[1]   # .../chatbot_server/app
ROOT_DIR: Path = APP_DIR.parent                       # .../chatbot_server

PROMPTS_DIR: Path = APP_DIR / "prompts"


class ConfigurationError(RuntimeError):
    """Raised when the server is misconfigured and must not start serving."""


# ---------------------------------------------------------------------------
# Settings model
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """
    Global configuration for the chatbot server.

    This class is instantiated once at import time as `settings`
    and used everywhere in the codebase.
    """

    model_config = SettingsConfigDict(
        env_file=ROOT_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # --- App / server basics -----------------------------------------------
    app_name: str = "Kalvium Chatbot API"
    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False

    api_host: str = "0.0.0.0"
    api_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("PORT", "API_PORT", "api_port"),
    )

    # --- Filesystem paths ---------------------------------------------------
    prompts_dir: Path = PROMPTS_DIR

    # --- Completion provider (Google Gemini) -------------------------------
    # ENV: API_KEY=... (GEMINI_API_KEY is accepted too)
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("API_KEY", "GEMINI_API_KEY", "gemini_api_key"),
        description="Credential for the Gemini API (env: API_KEY).",
    )
    gemini_model: str = "gemini-2.0-flash-thinking-exp-01-21"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Timeout (seconds) for a single generateContent call
    gemini_timeout_s: float = 60.0

    # --- Conversation behaviour --------------------------------------------
    # "spacing": double every line break (what the frontend expects).
    # "structured": Heading/Content/Follow-up extraction, spacing fallback.
    response_format: Literal["spacing", "structured"] = "spacing"

    # What to do when a request carries no userId and no session cookie.
    # "client_address" aliases everyone behind one network origin.
    identity_fallback: Literal["generate", "client_address"] = "generate"
    session_cookie_name: str = "kalvium_session"

    # Non-seed turns kept per transcript; None keeps everything.
    max_history_turns: Optional[int] = Field(default=None, ge=2)

    # Allow GET /sessions/{key} (read-only transcript dump).
    expose_transcripts: bool = True


def require_credentials(cfg: Settings) -> str:
    """
    Return the provider credential or raise ConfigurationError.

    A missing or blank key is fatal: the process must not begin serving.
    """
    key = (cfg.gemini_api_key or "").strip()
    if not key:
        raise ConfigurationError(
            "API_KEY is missing. Please set it in the environment or the .env file."
        )
    return key


# Single global settings instance used by the rest of the app.
settings = Settings()


if __name__ == "__main__":
    # Minimal self-test so you can quickly verify config loading.
    print("Kalvium Chatbot — Settings self-test")
    print(f"ROOT_DIR          : {ROOT_DIR}")
    print(f"PROMPTS_DIR       : {settings.prompts_dir}")
    print(f"Environment       : {settings.environment}")
    print(f"Port              : {settings.api_port}")
    print(f"API key set       : {bool(settings.gemini_api_key)}")
    print(f"Model             : {settings.gemini_model}")
    print(f"Response format   : {settings.response_format}")
    print(f"Identity fallback : {settings.identity_fallback}")
    print(f"History cap       : {settings.max_history_turns}")
