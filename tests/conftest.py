"""
Pytest fixtures for the inventory core.

Every store gets its own temporary data folder and a clock that ticks one
second per call, so timestamps are predictable.
"""
from datetime import datetime, timedelta, timezone

import pytest

from model.database import InventoryDB
from model.inventory import InventoryStore


class TickingClock:
    def __init__(self, start=datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def db(tmp_path):
    return InventoryDB(tmp_path / "data")


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(db, clock):
    s = InventoryStore(db, clock=clock)
    s.load()
    return s


@pytest.fixture
def make_fields():
    def _make(item_id="NGP0001", **overrides):
        fields = {
            "storeName": "X",
            "itemId": item_id,
            "itemType": "Ring",
            "weight": "5",
            "purity": "22K",
            "totalPrice": "300",
        }
        fields.update(overrides)
        return fields
    return _make
