"""
Base class for view models.

A view model subscribes to the session's refresh bus when it is created and
forwards the notifications it cares about to its own change listeners.
"""

from typing import Protocol, runtime_checkable

from ..services.finance_data import FinanceData
from ..services.refresh_bus import RefreshType


@runtime_checkable
class ChangeListener(Protocol):
    def on_data_changed(self) -> None:
        ...


class ViewModel:
    # Refresh types this view model reacts to; ALL always matches
    refresh_types: tuple[RefreshType, ...] = ()

    def __init__(self, finance: FinanceData):
        self.finance = finance
        self._change_listeners: list[ChangeListener] = []
        finance.bus.subscribe(self)

    def add_change_listener(self, listener: ChangeListener) -> None:
        if not any(existing is listener for existing in self._change_listeners):
            self._change_listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        self._change_listeners = [
            existing for existing in self._change_listeners if existing is not listener
        ]

    def on_data_refresh(self, refresh_type: RefreshType) -> None:
        if refresh_type.matches(*self.refresh_types):
            self.reload()
            self.notify_changed()

    def reload(self) -> None:
        """Re-read cached state from the stores. Most view models keep none."""

    def notify_changed(self) -> None:
        for listener in list(self._change_listeners):
            listener.on_data_changed()

    def cleanup(self) -> None:
        """Unsubscribe from the bus and drop every change listener."""
        self.finance.bus.unsubscribe(self)
        self._change_listeners.clear()
