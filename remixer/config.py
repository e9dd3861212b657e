"""
Runtime configuration, read from the environment (and .env via python-dotenv).

  GEMINI_API_KEY / API_KEY      Gemini credential (placeholder if absent)
  REMIXER_MODEL                 image model, default gemini-2.5-flash-image
  REMIXER_OUTPUT_DIR            where the CLI saves results, default outputs/
  TELEGRAM_BOT_TOKEN            bot token (bot only)
  TELEGRAM_ALLOWED_CHAT_IDS     comma-separated whitelist (empty = allow all)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Mapping, Optional

from dotenv import load_dotenv
from google import genai

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-image"
PLACEHOLDER_API_KEY = "YOUR_API_KEY"
DEFAULT_OUTPUT_DIR = Path("outputs")


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str = DEFAULT_MODEL
    output_dir: Path = DEFAULT_OUTPUT_DIR
    telegram_token: str = ""
    allowed_chat_ids: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def using_placeholder_key(self) -> bool:
        return self.api_key == PLACEHOLDER_API_KEY

    def chat_allowed(self, chat_id: int) -> bool:
        return not self.allowed_chat_ids or chat_id in self.allowed_chat_ids


def _parse_chat_ids(raw: str) -> FrozenSet[int]:
    ids = set()
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            ids.add(int(chunk))
        except ValueError:
            logger.warning("Ignoring invalid chat id in TELEGRAM_ALLOWED_CHAT_IDS: %r", chunk)
    return frozenset(ids)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from ``env`` (defaults to os.environ after loading .env).

    A missing API key does not stop startup: a warning is logged and a
    placeholder key is used, so every generation call fails at request time
    with the service's authentication error instead.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    api_key = (env.get("GEMINI_API_KEY") or env.get("API_KEY") or "").strip()
    if not api_key:
        logger.warning(
            "GEMINI_API_KEY environment variable not set. Using a placeholder. "
            "Please set your API key for the app to function."
        )
        api_key = PLACEHOLDER_API_KEY

    return Settings(
        api_key=api_key,
        model=(env.get("REMIXER_MODEL") or DEFAULT_MODEL).strip(),
        output_dir=Path(env.get("REMIXER_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR),
        telegram_token=(env.get("TELEGRAM_BOT_TOKEN") or "").strip(),
        allowed_chat_ids=_parse_chat_ids(env.get("TELEGRAM_ALLOWED_CHAT_IDS") or ""),
    )


def create_client(settings: Settings) -> genai.Client:
    """Credential-bound Gemini client; construct once per process and pass it down."""
    return genai.Client(api_key=settings.api_key)
