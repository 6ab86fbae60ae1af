"""Environment variable loading and validation.

This is the only module that reads the process environment. Everything it
finds is returned as an EnvironmentConfig value and passed on explicitly.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TelegramCredentials:
    """Bot token and chat id for the Telegram channel."""

    bot_token: str
    chat_id: str

    def __repr__(self) -> str:
        return f"TelegramCredentials(bot_token='***', chat_id={self.chat_id!r})"


@dataclass
class EnvironmentConfig:
    """Environment variable configuration holder."""

    telegram: Optional[TelegramCredentials] = None
    log_level: Optional[str] = None
    digest_size: Optional[int] = None
    http_timeout: Optional[float] = None

    @property
    def channel_configured(self) -> bool:
        return self.telegram is not None


def load_environment_config(environ: Optional[Mapping[str, str]] = None) -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Optional environment variables:
    - TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID: Telegram channel (both or neither)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - DIGEST_SIZE: Override notifications.digest_size
    - HTTP_TIMEOUT: Override advanced.http_request_timeout (seconds)

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        EnvironmentConfig with validated values

    Raises:
        ConfigurationError: If any variable is set to an invalid value
    """
    env = os.environ if environ is None else environ
    errors = []

    bot_token = (env.get("TELEGRAM_BOT_TOKEN") or "").strip()
    chat_id = (env.get("TELEGRAM_CHAT_ID") or "").strip()
    log_level = (env.get("LOG_LEVEL") or "").strip() or None
    digest_size_str = (env.get("DIGEST_SIZE") or "").strip()
    http_timeout_str = (env.get("HTTP_TIMEOUT") or "").strip()

    telegram = None
    if bot_token and chat_id:
        telegram = TelegramCredentials(bot_token=bot_token, chat_id=chat_id)
    elif bot_token:
        errors.append(
            "TELEGRAM_BOT_TOKEN is set but TELEGRAM_CHAT_ID is not. Both must be set for delivery."
        )
    elif chat_id:
        errors.append(
            "TELEGRAM_CHAT_ID is set but TELEGRAM_BOT_TOKEN is not. Both must be set for delivery."
        )

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    digest_size = None
    if digest_size_str:
        try:
            digest_size = int(digest_size_str)
            if not 1 <= digest_size <= 50:
                errors.append(f"Invalid DIGEST_SIZE: {digest_size}. Must be between 1 and 50.")
        except ValueError:
            errors.append(f"Invalid DIGEST_SIZE: '{digest_size_str}'. Must be a valid integer.")

    http_timeout = None
    if http_timeout_str:
        try:
            http_timeout = float(http_timeout_str)
            if not 1 <= http_timeout <= 300:
                errors.append(f"Invalid HTTP_TIMEOUT: {http_timeout}. Must be between 1 and 300.")
        except ValueError:
            errors.append(f"Invalid HTTP_TIMEOUT: '{http_timeout_str}'. Must be a number.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Leave both TELEGRAM_* variables empty to print the digest locally",
            ],
        )

    return EnvironmentConfig(
        telegram=telegram,
        log_level=log_level.upper() if log_level else None,
        digest_size=digest_size,
        http_timeout=http_timeout,
    )
