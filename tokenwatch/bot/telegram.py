"""Telegram Bot API client used to deliver messages."""

import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


class Notifier(Protocol):
    """Anything that can deliver a text message to a chat."""

    async def send_message(self, chat_id: int, text: str) -> bool: ...


class TelegramClient:
    """Sends HTML-formatted messages through ``sendMessage``."""

    def __init__(
        self,
        token: str,
        client: httpx.AsyncClient,
        api_url: str = TELEGRAM_API_URL,
        timeout: float = 10.0,
    ):
        self._client = client
        self._url = f"{api_url.rstrip('/')}/bot{token}/sendMessage"
        self._timeout = timeout

    async def send_message(self, chat_id: int, text: str) -> bool:
        """Send a message to a chat.

        Args:
            chat_id: Target chat.
            text: Message body, HTML parse mode.

        Returns:
            The ``ok`` flag of the API response; False on any failure.
        """
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }

        try:
            response = await self._client.post(self._url, json=payload, timeout=self._timeout)
        except httpx.HTTPError as e:
            logger.error(f"Failed to send to {chat_id}: {e}")
            return False

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Failed to send to {chat_id}: malformed response (HTTP {response.status_code})")
            return False

        ok = bool(data.get("ok")) if isinstance(data, dict) else False
        if not ok:
            description = data.get("description") if isinstance(data, dict) else data
            logger.warning(f"Telegram rejected message to {chat_id}: {description}")
        return ok
