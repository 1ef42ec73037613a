"""Webhook server and process lifecycle.

The aiohttp application owns every long-lived object: the shared HTTP
client, the alert store, the price sources and the evaluator task. They
are created on startup, torn down on cleanup, and reach the request
handlers through the application.
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

import httpx
from aiohttp import web

from tokenwatch.bot.commands import CommandHandler
from tokenwatch.bot.evaluator import AlertEvaluator
from tokenwatch.bot.telegram import TelegramClient
from tokenwatch.config import Settings
from tokenwatch.providers.service import PriceService, build_price_service
from tokenwatch.store import AlertStore

logger = logging.getLogger(__name__)


@dataclass
class BotServices:
    """Everything the bot needs at runtime, wired from settings."""

    settings: Settings
    store: AlertStore
    prices: PriceService
    notifier: TelegramClient
    commands: CommandHandler
    evaluator: AlertEvaluator


def build_services(settings: Settings, client: httpx.AsyncClient) -> BotServices:
    """Wire the bot's components together.

    Args:
        settings: Loaded settings.
        client: HTTP client shared by providers and the notifier.

    Returns:
        The wired services.
    """
    store = AlertStore()
    prices = build_price_service(settings, client)
    notifier = TelegramClient(
        settings.telegram.bot_token,
        client,
        api_url=settings.telegram.api_url,
        timeout=settings.monitor.request_timeout,
    )
    commands = CommandHandler(
        store,
        prices,
        notifier,
        token_name=settings.token.name,
        check_interval=settings.monitor.check_interval,
        rate_ttl=settings.fx.cache_ttl,
        authorized_chat_id=settings.telegram.authorized_chat_id,
    )
    evaluator = AlertEvaluator(store, prices, notifier, token_name=settings.token.name)
    return BotServices(settings, store, prices, notifier, commands, evaluator)


SERVICES_KEY = web.AppKey("services", BotServices)


async def handle_webhook(request: web.Request) -> web.Response:
    """Receive a Telegram update. Always acknowledged so Telegram does not redeliver."""
    services = request.app[SERVICES_KEY]

    try:
        update = await request.json()
    except ValueError:
        logger.warning("Ignoring webhook request with malformed JSON body")
        return web.Response(status=200)

    try:
        await services.commands.handle_update(update)
    except Exception:
        logger.exception("Telegram handler error")

    return web.Response(status=200)


async def handle_status(request: web.Request) -> web.Response:
    services = request.app[SERVICES_KEY]
    prices = services.prices

    return web.json_response({
        "service": f"{services.settings.token.name} Alert Bot",
        "status": "running",
        "chats": len(services.store),
        "price": prices.prices.cached,
        "rate": prices.rates.cached if prices.rates is not None else None,
        "currency": prices.currency if prices.rates is not None else None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


async def _monitor(services: BotServices, interval: float) -> None:
    """Warm the exchange rate cache, then run the evaluator loop."""
    prices = services.prices
    if prices.rates is not None:
        rate = await prices.get_rate()
        if rate is not None:
            logger.info(f"Initial USD/{prices.currency} rate: {rate}")

    await services.evaluator.run(interval)


def create_app(
    settings: Settings,
    http_client: Optional[httpx.AsyncClient] = None,
    run_evaluator: bool = True,
) -> web.Application:
    """Create the web application.

    Args:
        settings: Loaded settings.
        http_client: Client to use instead of creating one. The caller keeps
            ownership and must close it.
        run_evaluator: Start the evaluator loop with the application.

    Returns:
        The aiohttp application.
    """
    app = web.Application()

    async def lifecycle(app: web.Application) -> AsyncIterator[None]:
        client = http_client or httpx.AsyncClient(follow_redirects=True)
        services = build_services(settings, client)
        app[SERVICES_KEY] = services

        tasks: list[asyncio.Task] = []
        if run_evaluator:
            tasks.append(asyncio.create_task(
                _monitor(services, settings.monitor.check_interval)
            ))

        yield

        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if http_client is None:
            await client.aclose()

    app.cleanup_ctx.append(lifecycle)
    app.router.add_get("/", handle_status)
    app.router.add_post(settings.server.webhook_path, handle_webhook)
    return app


def run_server(settings: Settings, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the webhook until interrupted."""
    host = host or settings.server.host
    port = port or settings.server.port

    logger.info(f"Starting {settings.token.name} alert bot on {host}:{port}")
    logger.info(f"Webhook: {settings.server.webhook_path}")
    logger.info(f"Check interval: every {settings.monitor.check_interval:g}s")
    if settings.fx.enabled:
        logger.info(f"{settings.fx.currency} conversion: enabled")
    if settings.telegram.authorized_chat_id is not None:
        logger.info(f"Restricted to chat {settings.telegram.authorized_chat_id}")

    web.run_app(create_app(settings), host=host, port=port, print=None)
