"""Shared test fixtures for the board store tests."""

import itertools

import pytest

from parallel.store import BoardStore


class FakeGateway:
    """In-memory stand-in for BoardGateway that records every save."""

    def __init__(self, doc=None):
        self.doc = doc
        self.saved = []

    def load_board(self):
        return self.doc

    def save_board(self, doc):
        self.saved.append(doc)


class FakeClock:
    """Deterministic epoch-ms clock; advances by one second per call."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1000
        return self.now


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(gateway, clock):
    counter = itertools.count()
    s = BoardStore(
        gateway,
        debounce_delay=60,  # tests flush explicitly
        clock=clock,
        id_factory=lambda: f"test-id-{next(counter)}",
    )
    yield s
    s._persister.cancel()
