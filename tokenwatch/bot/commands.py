"""Chat command handling.

Incoming webhook updates are parsed into commands, applied to the alert
store, and answered through the notifier. Input validation happens here:
nothing invalid ever reaches the store.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence

from tokenwatch.bot import messages
from tokenwatch.bot.telegram import Notifier
from tokenwatch.providers.base import positive_float
from tokenwatch.providers.service import PriceService
from tokenwatch.store import AlertStore

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "/"
GROUP_CHAT_TYPES = ("group", "supergroup")


@dataclass(frozen=True)
class Command:
    """A parsed chat command such as ``/setlow 0.035``."""

    name: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class Chat:
    """The chat a message came from."""

    id: int
    type: str = "private"
    title: Optional[str] = None

    @property
    def is_group(self) -> bool:
        return self.type in GROUP_CHAT_TYPES


def parse_command(text: str) -> Optional[Command]:
    """Parse message text into a command.

    ``/setlow@MyBot 0.035`` and ``/setlow 0.035`` both parse to
    ``Command("setlow", ("0.035",))``.

    Args:
        text: Raw message text.

    Returns:
        The command, or None if the text is not a command.
    """
    parts = text.strip().split()
    if not parts or not parts[0].startswith(COMMAND_PREFIX):
        return None

    name = parts[0][len(COMMAND_PREFIX):].split("@", 1)[0].lower()
    if not name:
        return None
    return Command(name=name, args=tuple(parts[1:]))


def parse_threshold(args: Sequence[str]) -> Optional[float]:
    """Parse the price argument of /setlow or /sethigh.

    Returns:
        A finite price greater than zero, or None if the argument is
        missing, non-numeric, or not positive.
    """
    if not args:
        return None
    return positive_float(args[0])


def parse_chat(message: dict) -> Optional[Chat]:
    chat = message.get("chat")
    if not isinstance(chat, dict) or "id" not in chat:
        return None
    try:
        chat_id = int(chat["id"])
    except (TypeError, ValueError):
        return None
    return Chat(id=chat_id, type=str(chat.get("type") or "private"), title=chat.get("title"))


class CommandHandler:
    """Applies chat commands to the alert store and replies to the chat."""

    def __init__(
        self,
        store: AlertStore,
        prices: PriceService,
        notifier: Notifier,
        token_name: str = "DeepNode",
        check_interval: float = 60.0,
        rate_ttl: float = 1800.0,
        authorized_chat_id: Optional[int] = None,
    ):
        """Initialize the handler.

        Args:
            store: Shared alert store.
            prices: Price service used for replies that show the price.
            notifier: Used to send replies.
            token_name: Token name shown in messages.
            check_interval: Evaluator interval, mentioned in /help.
            rate_ttl: Exchange-rate cache lifetime, mentioned in /rate.
            authorized_chat_id: If set, messages from other chats are ignored.
        """
        self.store = store
        self.prices = prices
        self.notifier = notifier
        self.token_name = token_name
        self.check_interval = check_interval
        self.rate_ttl = rate_ttl
        self.authorized_chat_id = authorized_chat_id

        self._handlers: dict[str, Callable[[Chat, Command], Awaitable[str]]] = {
            "start": self._start,
            "help": self._help,
            "setlow": self._set_low,
            "sethigh": self._set_high,
            "price": self._price,
            "status": self._status,
            "clear": self._clear,
        }
        if self.currency:
            self._handlers["rate"] = self._rate
            self._handlers[f"{self.currency.lower()}rate"] = self._rate

    @property
    def currency(self) -> Optional[str]:
        """Local currency, or None when conversion is disabled."""
        return self.prices.currency if self.prices.rates is not None else None

    def is_authorized(self, chat: Chat) -> bool:
        return self.authorized_chat_id is None or chat.id == self.authorized_chat_id

    async def handle_update(self, update: Any) -> bool:
        """Process one webhook update.

        Args:
            update: Decoded Telegram update.

        Returns:
            True if a reply was sent.
        """
        if not isinstance(update, dict):
            return False
        message = update.get("message")
        if not isinstance(message, dict):
            return False

        text = message.get("text")
        chat = parse_chat(message)
        if not isinstance(text, str) or chat is None:
            return False

        logger.info(f"{'Group' if chat.is_group else 'Private'} {chat.id}: {text}")

        if not self.is_authorized(chat):
            logger.warning(f"Ignoring message from unauthorized chat {chat.id}")
            return False

        reply = await self.handle_message(chat, text)
        if reply is None:
            return False
        return await self.notifier.send_message(chat.id, reply)

    async def handle_message(self, chat: Chat, text: str) -> Optional[str]:
        """Run the command in ``text`` and build the reply.

        Returns:
            Reply text, or None for non-command messages.
        """
        command = parse_command(text)
        if command is None:
            return None

        handler = self._handlers.get(command.name)
        if handler is None:
            return messages.unknown_command(self.currency)

        self.store.get_or_create(chat.id)
        return await handler(chat, command)

    async def _start(self, chat: Chat, command: Command) -> str:
        return messages.welcome(self.token_name, self.currency)

    async def _help(self, chat: Chat, command: Command) -> str:
        return messages.help_text(self.token_name, self.currency, self.check_interval)

    async def _set_low(self, chat: Chat, command: Command) -> str:
        price = parse_threshold(command.args)
        if price is None:
            return messages.usage("setlow", "0.035")

        self.store.set_low(chat.id, price)
        snapshot = await self.prices.snapshot()
        return messages.threshold_set("low", price, snapshot)

    async def _set_high(self, chat: Chat, command: Command) -> str:
        price = parse_threshold(command.args)
        if price is None:
            return messages.usage("sethigh", "0.050")

        self.store.set_high(chat.id, price)
        snapshot = await self.prices.snapshot()
        return messages.threshold_set("high", price, snapshot)

    async def _price(self, chat: Chat, command: Command) -> str:
        snapshot = await self.prices.snapshot()
        return messages.current_price(self.token_name, snapshot)

    async def _status(self, chat: Chat, command: Command) -> str:
        snapshot = await self.prices.snapshot()
        title = chat.title if chat.is_group and chat.title else "Your"
        return messages.status(title, snapshot, self.store.get_or_create(chat.id))

    async def _clear(self, chat: Chat, command: Command) -> str:
        self.store.clear(chat.id)
        return messages.alerts_cleared()

    async def _rate(self, chat: Chat, command: Command) -> str:
        rate = await self.prices.get_rate()
        if rate is None:
            return messages.rate_unavailable()
        return messages.exchange_rate(self.prices.currency, rate, self.rate_ttl)
