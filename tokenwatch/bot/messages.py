"""Chat message templates (Telegram HTML).

Text that does not come from this module, such as chat titles and the
configured token name, is escaped before it is inserted.
"""

import html
from decimal import Decimal
from typing import Optional

from tokenwatch.models import Alert, PriceSnapshot

CURRENCY_SYMBOLS = {"INR": "₹", "EUR": "€", "GBP": "£", "JPY": "¥"}


def _sym(currency: str) -> str:
    return CURRENCY_SYMBOLS.get(currency.upper(), currency.upper() + " ")


def _price_lines(snapshot: PriceSnapshot) -> str:
    """Bullet lines with USD and converted price."""
    if snapshot.usd is None:
        return "• <i>Loading...</i>\n"
    lines = f"• <b>${snapshot.usd:.6f}</b> (USD)\n"
    if snapshot.converted is not None:
        lines += f"• <b>{_sym(snapshot.currency)}{snapshot.converted:.2f}</b> ({snapshot.currency})\n"
    return lines


def _threshold(value: float) -> str:
    # Shortest decimal that round-trips, never in exponent form: 0.035, 0.00001
    return f"${Decimal(repr(value)):f}"


def welcome(token_name: str, currency: Optional[str]) -> str:
    token_name = html.escape(token_name)
    conversion = f"<i>Prices shown in USD & {currency}</i>\n\n" if currency else "\n"
    rate_line = "/rate           - Show USD exchange rate\n" if currency else ""
    return (
        f"🤖 <b>{token_name} Price Alert Bot</b>\n\n"
        f"I monitor {token_name} price 24/7 on all DEXes.\n"
        f"{conversion}"
        "<b>Commands:</b>\n"
        "/setlow [price]  - Alert when price drops\n"
        "/sethigh [price] - Alert when price rises\n"
        "/price           - Get current price\n"
        "/status          - Check alerts\n"
        "/clear           - Clear all alerts\n"
        f"{rate_line}"
        "/help            - Show help\n\n"
        "💡 Works for everyone in this chat!"
    )


def help_text(token_name: str, currency: Optional[str], check_interval: float) -> str:
    token_name = html.escape(token_name)
    minutes = check_interval / 60
    every = "every minute" if minutes == 1 else f"every {check_interval:g} seconds"
    features = f"• Shows prices in USD & {currency}\n" if currency else ""
    rate_line = "/rate          - USD exchange rate\n" if currency else ""
    return (
        f"🤖 <b>Help - {token_name} Alert Bot</b>\n\n"
        "<b>Features:</b>\n"
        f"{features}"
        f"• Checks price {every}\n"
        "• Works in groups & private chats\n\n"
        "<b>Commands:</b>\n"
        "/setlow 0.035  - Alert when ≤ $0.035\n"
        "/sethigh 0.050 - Alert when ≥ $0.050\n"
        "/price         - Current price\n"
        "/status        - Check alerts\n"
        f"{rate_line}"
        "/clear         - Clear all alerts\n"
        "/help          - This message\n\n"
        "💡 <i>Alerts are set in USD</i>"
    )


def usage(command: str, example: str) -> str:
    return f"❌ Use: /{command} {example}"


def unknown_command(currency: Optional[str] = None) -> str:
    rate = ", /rate" if currency else ""
    return (
        "❌ <b>Unknown command</b>\n\n"
        "Try: /start, /setlow, /sethigh,\n"
        f"/price, /status, /clear{rate}, /help"
    )


def threshold_set(side: str, price: float, snapshot: PriceSnapshot) -> str:
    label, verb = ("Low", "drops below") if side == "low" else ("High", "rises above")
    text = (
        f"✅ <b>{label} price alert set at {_threshold(price)}</b>\n\n"
        "Current price:\n"
        f"{_price_lines(snapshot)}\n"
    )
    converted = snapshot.convert(price)
    if converted is not None:
        text += f"Alert value in {snapshot.currency}: <b>{_sym(snapshot.currency)}{converted:.2f}</b>\n"
    text += f"I'll notify when price {verb} {_threshold(price)}"
    return text


def price_drop(token_name: str, snapshot: PriceSnapshot, low: float) -> str:
    return (
        "⚠️ <b>PRICE DROP ALERT</b>\n\n"
        f"{html.escape(token_name)} Price:\n"
        f"{_price_lines(snapshot)}\n"
        f"📉 <i>Below your alert: {_threshold(low)}</i>\n"
        "🔄 Alert cleared. Set new with /setlow"
    )


def price_rise(token_name: str, snapshot: PriceSnapshot, high: float) -> str:
    return (
        "🚀 <b>PRICE RISE ALERT</b>\n\n"
        f"{html.escape(token_name)} Price:\n"
        f"{_price_lines(snapshot)}\n"
        f"📈 <i>Above your alert: {_threshold(high)}</i>\n"
        "🔄 Alert cleared. Set new with /sethigh"
    )


def current_price(token_name: str, snapshot: PriceSnapshot) -> str:
    if snapshot.usd is None:
        return "❌ Could not fetch price"
    text = f"💰 <b>Current {html.escape(token_name)} Price</b>\n\nUSD: <b>${snapshot.usd:.6f}</b>\n"
    if snapshot.converted is not None and snapshot.rate is not None:
        text += (
            f"{snapshot.currency}: <b>{_sym(snapshot.currency)}{snapshot.converted:.2f}</b>\n\n"
            f"💱 Exchange Rate: $1 = {_sym(snapshot.currency)}{snapshot.rate:.2f}\n"
        )
    return text.rstrip("\n")


def status(title: str, snapshot: PriceSnapshot, alert: Alert) -> str:
    text = f"📊 <b>{html.escape(title)} Alert Status</b>\n\n"
    if snapshot.usd is not None:
        text += f"Current price:\n{_price_lines(snapshot)}\n"
    else:
        text += "Current price: <i>Loading...</i>\n\n"

    for label, value in (("Low", alert.low), ("High", alert.high)):
        if value is None:
            text += f"{label} alert: ❌ Not set\n"
            continue
        text += f"{label} alert: <b>{_threshold(value)}</b>"
        converted = snapshot.convert(value)
        if converted is not None:
            text += f" (≈ {_sym(snapshot.currency)}{converted:.2f})"
        text += "\n"

    text += "\n💡 Use /setlow or /sethigh to set alerts"
    return text


def exchange_rate(currency: str, rate: float, cache_ttl: float) -> str:
    return (
        f"💱 <b>USD to {currency} Exchange Rate</b>\n\n"
        f"Current rate: <b>$1 = {_sym(currency)}{rate:.2f}</b>\n\n"
        f"💡 This rate updates every {cache_ttl / 60:g} minutes.\n"
        f"Used for all USD → {currency} conversions."
    )


def alerts_cleared() -> str:
    return "🗑️ <b>All alerts cleared!</b>\nSet new ones with /setlow or /sethigh"


def rate_unavailable() -> str:
    return "❌ Could not fetch exchange rate"
