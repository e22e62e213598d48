"""
Refresh bus for change notifications.

Stores publish a RefreshType after every mutation; view models subscribe and
re-read whatever aggregates they display. One bus is created per user session
and handed to everything that needs it.
"""

import enum
import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class RefreshType(enum.Enum):
    """Kind of data that changed."""
    TRANSACTIONS = "transactions"
    BUDGETS = "budgets"
    SETTINGS = "settings"
    ALL = "all"

    def matches(self, *types: "RefreshType") -> bool:
        """True if this notification concerns any of ``types``. ALL matches everything."""
        return self is RefreshType.ALL or self in types


@runtime_checkable
class RefreshListener(Protocol):
    def on_data_refresh(self, refresh_type: RefreshType) -> None:
        ...


class RefreshBus:
    """Synchronous publish/subscribe hub for RefreshType notifications."""

    def __init__(self):
        self._listeners: list[RefreshListener] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def is_subscribed(self, listener: RefreshListener) -> bool:
        return any(existing is listener for existing in self._listeners)

    def subscribe(self, listener: RefreshListener) -> None:
        if self.is_subscribed(listener):
            return
        self._listeners.append(listener)
        logger.debug("Subscribed %s", type(listener).__name__)

    def unsubscribe(self, listener: RefreshListener) -> None:
        for i, existing in enumerate(self._listeners):
            if existing is listener:
                del self._listeners[i]
                logger.debug("Unsubscribed %s", type(listener).__name__)
                return

    def publish(self, refresh_type: RefreshType) -> None:
        """
        Call every subscribed listener with ``refresh_type``.

        Iterates over a copy taken now, so listeners may subscribe or
        unsubscribe (themselves or others) while being notified.
        """
        snapshot = list(self._listeners)
        logger.debug("Publishing %s to %d listeners", refresh_type.name, len(snapshot))

        for listener in snapshot:
            try:
                listener.on_data_refresh(refresh_type)
            except Exception:
                logger.exception(
                    "Listener %s failed on %s refresh",
                    type(listener).__name__,
                    refresh_type.name,
                )

    def refresh_transactions(self) -> None:
        self.publish(RefreshType.TRANSACTIONS)

    def refresh_budgets(self) -> None:
        self.publish(RefreshType.BUDGETS)

    def refresh_settings(self) -> None:
        self.publish(RefreshType.SETTINGS)

    def refresh_all(self) -> None:
        self.publish(RefreshType.ALL)
