"""
Pytest fixtures for the Market Pro ledger.

Every test gets an in-memory SQLite key-value storage and a store driven by a
controllable clock.
"""
from datetime import datetime, timedelta, timezone

import pytest

from core.db import KeyValueStorage
from core.services.catalog import ProductInput, add_company, add_product
from core.store import DataStore


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def storage():
    s = KeyValueStorage.open(":memory:")
    yield s
    s.conn.close()


@pytest.fixture
def store(storage, clock):
    return DataStore.load(storage, clock=clock)


@pytest.fixture
def company(store):
    return add_company(store, name="Nile Foods")


@pytest.fixture
def make_product(store, company):
    def _make(name="Rice 1kg", *, price_after_tax=100.0, stock=50, threshold=0, company_id=None):
        return add_product(
            store,
            ProductInput(
                name=name,
                company_id=company_id or company.id,
                price_before_tax=round(price_after_tax / 1.14, 2),
                price_after_tax=price_after_tax,
                stock=stock,
                low_stock_threshold=threshold,
            ),
        )

    return _make
