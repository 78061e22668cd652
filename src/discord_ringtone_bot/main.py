#!/usr/bin/env python3
"""Entry point for the Discord Ringtone Bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from discord_ringtone_bot.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from discord_ringtone_bot.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(log_level: str = "INFO", config_path: Path = _LOGGING_CONFIG_PATH) -> None:
    """Configure logging from ``logging_config.json``; ``log_level`` always wins for root."""
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(config_path) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format=_FALLBACK_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.warning("Could not load %s, falling back to basic config", config_path)

    logging.getLogger().setLevel(resolved_level)


def _run_bot(settings: Settings, token: str) -> int:
    from discord_ringtone_bot.config.container import create_container
    from discord_ringtone_bot.infrastructure.discord.bot import create_bot

    logger = logging.getLogger(__name__)
    container = create_container(settings)
    bot = create_bot(container, settings)

    try:
        logger.info(LogTemplates.BOT_STARTING_RUN)
        bot.run_with_graceful_shutdown(token)
        logger.info(LogTemplates.BOT_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1


def main() -> int:
    from discord_ringtone_bot.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)

    token = settings.discord.token.get_secret_value()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(LogTemplates.BOT_STARTING.format(environment=settings.environment))
    logger.info("Greetings are read from %s", Path(settings.ringtone.directory).resolve())

    return _run_bot(settings, token)


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
