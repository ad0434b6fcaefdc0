import pytest

from gradtrack.io import MemoryStorage
from gradtrack.store import StateStore

from util import ticking_clock


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return StateStore(storage=storage, clock=ticking_clock())
