"""Notifier delivering the ranked digest.

This module provides the Notifier class that picks the top records,
renders them and hands the result to Telegram, or to a local stream when
no channel is configured. Delivery failures come back as a DeliveryResult;
the Notifier never raises to the pipeline.
"""

import logging
import sys
from typing import List, Optional, Sequence, TextIO, Tuple

from platform_monitor.config.environment import TelegramCredentials
from platform_monitor.config.models import NotificationConfig
from platform_monitor.domain.models import ScoredRecord
from platform_monitor.logging import get_logger

from .models import (
    DeliveryResult,
    DeliveryStatus,
    NotificationTemplateError,
    TelegramDeliveryError,
)
from .payloads import build_digest_context
from .telegram_client import TelegramClient
from .templates import DigestRenderer

logger = get_logger(__name__, component="notification")

TELEGRAM_MESSAGE_LIMIT = 4096


class Notifier:
    """Delivers the top-N ranked records.

    Flow:
    1. Take the first digest_size records (input is already ranked)
    2. Empty selection: report EMPTY, deliver nothing
    3. No credentials: render the console digest to the stream (LOCAL)
    4. Credentials: render the Markdown digest and send it (SENT or FAILED).
       Trailing records are dropped until the message fits Telegram's limit.

    The ranked sequence is only read, never modified.
    """

    def __init__(
        self,
        config: NotificationConfig,
        credentials: Optional[TelegramCredentials] = None,
        telegram_client: Optional[TelegramClient] = None,
        stream: Optional[TextIO] = None,
        renderer: Optional[DigestRenderer] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notifier.

        Args:
            config: Digest size and Telegram message options
            credentials: Telegram credentials; None selects local output
            telegram_client: Client instance (creates default if None)
            stream: Local output stream (sys.stdout at delivery time if None)
            renderer: Digest renderer (creates default if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.config = config
        self.credentials = credentials
        self.telegram_client = telegram_client or TelegramClient(api_base=config.telegram_api_base)
        self.stream = stream
        self.renderer = renderer or DigestRenderer()
        self.logger = logger_instance or logger

    @property
    def channel_configured(self) -> bool:
        return self.credentials is not None

    def deliver(self, ranked: Sequence[ScoredRecord]) -> DeliveryResult:
        """Deliver the digest for a ranking.

        Args:
            ranked: Records ordered by descending score

        Returns:
            DeliveryResult describing the outcome
        """
        selected = list(ranked[: self.config.digest_size])

        if not selected:
            self.logger.info(
                "No records to deliver",
                extra={"event": "notification.delivery.empty"},
            )
            return DeliveryResult(status=DeliveryStatus.EMPTY)

        if not self.channel_configured:
            return self._deliver_local(selected)
        return self._deliver_telegram(selected)

    def _deliver_local(self, selected: List[ScoredRecord]) -> DeliveryResult:
        count = len(selected)
        try:
            text = self.renderer.render_console(build_digest_context(selected))
        except NotificationTemplateError as e:
            return self._failed(count, str(e))

        stream = self.stream or sys.stdout
        stream.write(text)
        stream.flush()

        self.logger.info(
            f"Telegram not configured, wrote {count} records to local output",
            extra={"event": "notification.delivery.local", "record_count": count},
        )
        return DeliveryResult(status=DeliveryStatus.LOCAL, record_count=count, rendered=text)

    def _deliver_telegram(self, selected: List[ScoredRecord]) -> DeliveryResult:
        try:
            text, count = self._render_within_limit(selected)
        except NotificationTemplateError as e:
            return self._failed(len(selected), str(e))

        try:
            status_code = self.telegram_client.send_message(
                self.credentials,
                text,
                parse_mode=self.config.parse_mode,
                disable_web_page_preview=self.config.disable_web_page_preview,
            )
        except TelegramDeliveryError as e:
            return self._failed(count, str(e), status_code=e.status_code, rendered=text)

        self.logger.info(
            f"Digest of {count} records sent to Telegram",
            extra={
                "event": "notification.delivery.sent",
                "record_count": count,
                "status_code": status_code,
            },
        )
        return DeliveryResult(
            status=DeliveryStatus.SENT,
            record_count=count,
            status_code=status_code,
            rendered=text,
        )

    def _render_within_limit(self, selected: List[ScoredRecord]) -> Tuple[str, int]:
        """Render the Telegram digest, dropping trailing records until it fits.

        The first record is always kept; a single oversized item is left for
        the API to reject.
        """
        count = len(selected)
        text = self.renderer.render_telegram(build_digest_context(selected))
        while len(text) > TELEGRAM_MESSAGE_LIMIT and count > 1:
            count -= 1
            text = self.renderer.render_telegram(build_digest_context(selected[:count]))

        if count < len(selected):
            self.logger.warning(
                f"Digest trimmed to {count} of {len(selected)} records to fit the Telegram message limit",
                extra={
                    "event": "notification.digest.trimmed",
                    "record_count": count,
                    "dropped_count": len(selected) - count,
                    "message_limit": TELEGRAM_MESSAGE_LIMIT,
                },
            )
        return text, count

    def _failed(
        self,
        count: int,
        error: str,
        status_code: Optional[int] = None,
        rendered: str = "",
    ) -> DeliveryResult:
        self.logger.error(
            f"Digest delivery failed: {error}",
            extra={
                "event": "notification.delivery.failed",
                "record_count": count,
                "status_code": status_code,
            },
        )
        return DeliveryResult(
            status=DeliveryStatus.FAILED,
            record_count=count,
            status_code=status_code,
            error=error,
            rendered=rendered,
        )
