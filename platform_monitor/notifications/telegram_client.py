"""Telegram Bot API client for digest delivery.

Thin wrapper around ``requests.post`` to the sendMessage method. One
attempt per call; a failed delivery is reported, never retried.
"""

import logging

import requests

from platform_monitor.config.environment import TelegramCredentials

from .models import TelegramDeliveryError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.telegram.org"


class TelegramClient:
    """Sends messages through the Telegram Bot API.

    Designed to be easily mockable for testing: the Notifier only calls
    send_message().

    Attributes:
        api_base: API base URL without trailing slash
        timeout: Request timeout in seconds
    """

    def __init__(self, api_base: str = DEFAULT_API_BASE, timeout: float = 10.0):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got: {timeout}")
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def send_message(
        self,
        credentials: TelegramCredentials,
        text: str,
        parse_mode: str = "Markdown",
        disable_web_page_preview: bool = True,
    ) -> int:
        """Send one message to the configured chat.

        Args:
            credentials: Bot token and chat id
            text: Message body, already rendered for parse_mode
            parse_mode: Telegram parse mode
            disable_web_page_preview: Suppress link previews

        Returns:
            HTTP status code of the (2xx) response

        Raises:
            TelegramDeliveryError: On non-2xx status or request failure
        """
        url = f"{self.api_base}/bot{credentials.bot_token}/sendMessage"
        payload = {
            "chat_id": credentials.chat_id,
            "text": text,
            "parse_mode": parse_mode,
            "disable_web_page_preview": disable_web_page_preview,
        }

        logger.debug(f"Posting sendMessage to chat {credentials.chat_id} ({len(text)} chars)")

        try:
            response = requests.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            # Exception text can embed the request URL, which holds the token
            error_msg = f"Telegram request failed: {self._redact(str(e), credentials)}"
            raise TelegramDeliveryError(error_msg) from e

        if not 200 <= response.status_code < 300:
            description = self._error_description(response)
            error_msg = f"Telegram API returned HTTP {response.status_code}: {description}"
            raise TelegramDeliveryError(error_msg, status_code=response.status_code)

        return response.status_code

    @staticmethod
    def _error_description(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return (response.text or "").strip()[:200] or "no description"
        if isinstance(body, dict) and body.get("description"):
            return str(body["description"])
        return "no description"

    @staticmethod
    def _redact(message: str, credentials: TelegramCredentials) -> str:
        return message.replace(credentials.bot_token, "***") if credentials.bot_token else message
