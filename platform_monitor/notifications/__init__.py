"""Digest delivery through Telegram or local output.

This module provides:
- Notifier: Selects, renders and delivers the top-ranked records
- DigestRenderer: Jinja2 rendering of the Telegram and console digests
- TelegramClient: Bot API sendMessage wrapper
- DeliveryResult / DeliveryStatus: Outcome of one delivery
"""

from .models import (
    DeliveryResult,
    DeliveryStatus,
    NotificationError,
    NotificationTemplateError,
    TelegramDeliveryError,
)
from .payloads import build_digest_context, build_record_context
from .service import Notifier
from .telegram_client import TelegramClient
from .templates import DigestRenderer, escape_markdown

__all__ = [
    # Service
    "Notifier",
    "DigestRenderer",
    "TelegramClient",
    # Payloads
    "build_digest_context",
    "build_record_context",
    "escape_markdown",
    # Models
    "DeliveryResult",
    "DeliveryStatus",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "TelegramDeliveryError",
]
