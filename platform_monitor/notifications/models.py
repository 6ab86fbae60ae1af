"""Data models and exceptions for digest delivery.

This module defines the delivery result type and the exceptions raised
inside the notification package. The Notifier converts every exception
into a DeliveryResult, so none of them reach the pipeline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when a digest template fails to render."""

    pass


class TelegramDeliveryError(NotificationError):
    """Raised when the Telegram Bot API rejects or never receives a message.

    Attributes:
        status_code: HTTP status returned by the API, None if no response arrived
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class DeliveryStatus(str, Enum):
    """Outcome of one digest delivery."""

    SENT = "sent"  # accepted by the Telegram API
    LOCAL = "local"  # written to the local stream, no channel configured
    FAILED = "failed"  # channel configured but delivery did not succeed
    EMPTY = "empty"  # nothing ranked, nothing delivered


@dataclass
class DeliveryResult:
    """Result of delivering one digest.

    Attributes:
        status: Delivery outcome
        record_count: Records included in the digest
        status_code: HTTP status from the Telegram API, when a request was answered
        error: Error message when status is FAILED
        rendered: Text that was written or sent (empty when nothing was delivered)
    """

    status: DeliveryStatus
    record_count: int = 0
    status_code: Optional[int] = None
    error: Optional[str] = None
    rendered: str = ""

    def is_success(self) -> bool:
        """True if the digest reached its destination (channel or local stream)."""
        return self.status in (DeliveryStatus.SENT, DeliveryStatus.LOCAL)

    def is_failure(self) -> bool:
        return self.status == DeliveryStatus.FAILED
