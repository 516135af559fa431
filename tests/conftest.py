import os

import pytest

from memocache.config import reset_settings
from tests.factories import FakeClock


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch):
    """Keep MEMOCACHE_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("MEMOCACHE_"):
            monkeypatch.delenv(name)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
