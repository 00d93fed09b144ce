"""Pytest configuration and shared fixtures."""
import pytest

from emitterpro.events import Emitter, emitter as emitter_module


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture
def emitter():
    return Emitter()


@pytest.fixture
def calls():
    """Collects call records from listeners."""
    return []


@pytest.fixture
def global_emitter(monkeypatch):
    """Fresh process-wide emitter, discarded after the test."""
    monkeypatch.setattr(emitter_module, "_emitter", None)
    yield emitter_module.get_emitter()
