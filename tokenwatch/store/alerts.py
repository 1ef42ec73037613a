"""In-memory alert store."""

from typing import Iterator, Literal, Optional

from tokenwatch.models import Alert

Side = Literal["low", "high"]


class AlertStore:
    """Maps chat ids to their alert thresholds.

    One instance is created per process and shared by the command handler
    and the evaluator. Nothing is persisted; a restart forgets every alert.
    """

    def __init__(self):
        self._alerts: dict[int, Alert] = {}

    def __len__(self) -> int:
        return len(self._alerts)

    def __contains__(self, chat_id: int) -> bool:
        return chat_id in self._alerts

    def get(self, chat_id: int) -> Optional[Alert]:
        return self._alerts.get(chat_id)

    def get_or_create(self, chat_id: int) -> Alert:
        """Get a chat's alert, registering an empty one on first use."""
        alert = self._alerts.get(chat_id)
        if alert is None:
            alert = Alert()
            self._alerts[chat_id] = alert
        return alert

    def set_low(self, chat_id: int, price: float) -> Alert:
        """Arm the low threshold.

        Raises:
            ValueError: If price is not strictly positive.
        """
        alert = self.get_or_create(chat_id)
        alert.low = price
        return alert

    def set_high(self, chat_id: int, price: float) -> Alert:
        """Arm the high threshold.

        Raises:
            ValueError: If price is not strictly positive.
        """
        alert = self.get_or_create(chat_id)
        alert.high = price
        return alert

    def clear(self, chat_id: int) -> Alert:
        """Disarm both thresholds."""
        alert = self.get_or_create(chat_id)
        alert.low = None
        alert.high = None
        return alert

    def disarm(self, chat_id: int, side: Side, value: float) -> bool:
        """Clear one threshold if it still holds ``value``.

        A user may re-set the threshold while a notification for the old
        value is being sent; in that case the new value is kept.

        Returns:
            True if the threshold was cleared.
        """
        alert = self._alerts.get(chat_id)
        if alert is None or getattr(alert, side) != value:
            return False
        setattr(alert, side, None)
        return True

    def items(self) -> Iterator[tuple[int, Alert]]:
        """Snapshot of (chat_id, alert) pairs, safe to iterate across awaits."""
        return iter(list(self._alerts.items()))
