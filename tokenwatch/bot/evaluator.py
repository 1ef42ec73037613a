"""Fixed-interval alert evaluation."""

import asyncio
import logging
from typing import Optional

from tokenwatch.bot import messages
from tokenwatch.bot.telegram import Notifier
from tokenwatch.models import Alert, PriceSnapshot
from tokenwatch.providers.service import PriceService
from tokenwatch.store import AlertStore

logger = logging.getLogger(__name__)


class AlertEvaluator:
    """Checks every chat's thresholds against one price per tick.

    A threshold is disarmed only after its notification was delivered; a
    failed send leaves it armed so the next tick tries again.
    """

    def __init__(
        self,
        store: AlertStore,
        prices: PriceService,
        notifier: Notifier,
        token_name: str = "DeepNode",
    ):
        self.store = store
        self.prices = prices
        self.notifier = notifier
        self.token_name = token_name
        self.ticks = 0

    async def tick(self) -> int:
        """Run one evaluation pass.

        Returns:
            Number of notifications delivered.
        """
        self.ticks += 1
        logger.info(f"Checking price for {len(self.store)} chats...")

        snapshot = await self.prices.snapshot()
        if snapshot.usd is None:
            logger.warning("No price available, skipping this tick")
            return 0

        delivered = 0
        for chat_id, alert in self.store.items():
            try:
                delivered += await self._evaluate_chat(chat_id, alert, snapshot)
            except Exception:
                logger.exception(f"Error evaluating alerts for chat {chat_id}")
        return delivered

    async def _evaluate_chat(self, chat_id: int, alert: Alert, snapshot: PriceSnapshot) -> int:
        price = snapshot.usd
        delivered = 0

        # Read both thresholds up front; the sends below may yield to command handlers
        low, high = alert.low, alert.high

        if low is not None and price <= low:
            text = messages.price_drop(self.token_name, snapshot, low)
            if await self.notifier.send_message(chat_id, text):
                self.store.disarm(chat_id, "low", low)
                delivered += 1
                logger.info(f"Low alert fired for {chat_id}: ${price} <= ${low}")
            else:
                logger.warning(f"Low alert for {chat_id} not delivered, will retry next tick")

        if high is not None and price >= high:
            text = messages.price_rise(self.token_name, snapshot, high)
            if await self.notifier.send_message(chat_id, text):
                self.store.disarm(chat_id, "high", high)
                delivered += 1
                logger.info(f"High alert fired for {chat_id}: ${price} >= ${high}")
            else:
                logger.warning(f"High alert for {chat_id} not delivered, will retry next tick")

        return delivered

    async def run(self, interval: float, stop: Optional[asyncio.Event] = None) -> None:
        """Tick every ``interval`` seconds until cancelled or ``stop`` is set.

        A failing tick is logged and never ends the loop.
        """
        stop = stop or asyncio.Event()
        logger.info(f"Alert evaluator started (every {interval:g}s)")

        while not stop.is_set():
            try:
                await self.tick()
            except Exception:
                logger.exception("Alert evaluation tick failed")

            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass

        logger.info("Alert evaluator stopped")
