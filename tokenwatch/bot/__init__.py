"""Telegram bot: commands, alert evaluation and the webhook server."""

from tokenwatch.bot.commands import Chat, Command, CommandHandler, parse_command, parse_threshold
from tokenwatch.bot.evaluator import AlertEvaluator
from tokenwatch.bot.telegram import Notifier, TelegramClient

__all__ = [
    "AlertEvaluator",
    "Chat",
    "Command",
    "CommandHandler",
    "Notifier",
    "TelegramClient",
    "parse_command",
    "parse_threshold",
]
