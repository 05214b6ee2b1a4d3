from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from aska.billing import InvoiceBook
from aska.data.local_storage import MemoryStorage


class FakeClock:
    """Returns a fixed time that tests can move forward."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 3, 14, 9, 30, 0, 250000, tzinfo=timezone.utc))


@pytest.fixture
def ids():
    counter = count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def book(storage, ids, clock):
    return InvoiceBook.open(storage, id_factory=ids, clock=clock)
