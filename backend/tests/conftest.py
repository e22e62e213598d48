import pytest

from finance_tracker.services.finance_data import FinanceData
from finance_tracker.services.refresh_bus import RefreshBus


class RecordingListener:
    """Bus listener that remembers every notification it receives."""

    def __init__(self):
        self.received = []

    def on_data_refresh(self, refresh_type) -> None:
        self.received.append(refresh_type)


@pytest.fixture
def bus() -> RefreshBus:
    return RefreshBus()


@pytest.fixture
def recorder(bus: RefreshBus) -> RecordingListener:
    listener = RecordingListener()
    bus.subscribe(listener)
    return listener


@pytest.fixture
def finance(bus: RefreshBus) -> FinanceData:
    return FinanceData("alice", bus=bus)


@pytest.fixture
def sample_finance(bus: RefreshBus) -> FinanceData:
    data = FinanceData("alice", bus=bus)
    data.transactions.add_many([
        {"timestamp": "2025-05-23", "description": "Salary", "category": "Income", "amount": "1000"},
        {"timestamp": "2025-05-23", "description": "Groceries", "category": "Food", "amount": "-100"},
        {"timestamp": "2025-05-24 18:30", "description": "Cinema", "category": "Fun", "amount": "-25.50"},
        {"timestamp": "2025-06-02", "description": "Bakery", "category": "Food", "amount": "-12.25"},
    ])
    return data
