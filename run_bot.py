#!/usr/bin/env python3
"""
run_bot.py — Logo Remixer Telegram Bot entry point.

Usage:
    python run_bot.py

Required env vars (in .env):
    TELEGRAM_BOT_TOKEN=...
    GEMINI_API_KEY=...          # without it every remix fails with an auth error

Optional:
    TELEGRAM_ALLOWED_CHAT_IDS=123456,789012   # whitelist (leave empty = allow all)
    REMIXER_MODEL=gemini-2.5-flash-image
"""

from __future__ import annotations

import logging
import sys

from remixer.config import load_settings

logging.basicConfig(
    format="%(asctime)s — %(levelname)s — %(name)s — %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    if not settings.telegram_token:
        logger.error("TELEGRAM_BOT_TOKEN not set in environment / .env")
        sys.exit(1)

    logger.info("Starting Logo Remixer Bot (model: %s)...", settings.model)
    logger.info("Polling for updates — press Ctrl+C to stop")

    from bot.telegram_bot import build_app
    app = build_app(settings)
    app.run_polling(drop_pending_updates=True)


if __name__ == "__main__":
    main()
