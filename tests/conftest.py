"""Pytest configuration and shared fixtures."""

import os
from datetime import datetime, timedelta

import pytest

from sitegrid.collections.store import CollectionStore
from sitegrid.core.models import GridSize, Position, Settings, Tag, Website
from sitegrid.storage.backends.memory import MemoryBackend
from sitegrid.storage.events import EventBus
from sitegrid.storage.persistence import SnapshotStorage


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Isolate environment variables and config lookup for each test."""
    original_env = os.environ.copy()
    for name in list(os.environ):
        if name.startswith("SITEGRID_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)

    yield

    os.environ.clear()
    os.environ.update(original_env)


class FakeClock:
    """Clock that advances one second per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def event_bus():
    return EventBus()


def fake_favicon(url: str) -> str:
    return f"icon:{url}"


@pytest.fixture
def store(event_bus, clock):
    """Empty in-memory store without persistence or sample data."""
    store = CollectionStore(
        None, event_bus, favicon_resolver=fake_favicon, clock=clock, seed=False
    )
    store.initialize()
    return store


@pytest.fixture
def memory_backend():
    return MemoryBackend()


@pytest.fixture
def storage(memory_backend):
    return SnapshotStorage(memory_backend)


@pytest.fixture
def persisted_store(storage, event_bus, clock):
    """Empty store persisting synchronously to a memory backend."""
    store = CollectionStore(
        storage, event_bus, favicon_resolver=fake_favicon, clock=clock, seed=False
    )
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def make_website():
    """Build a website placed at ``(page, order)``."""

    def factory(name: str, page: int = 0, order: int = 0, **kwargs) -> Website:
        kwargs.setdefault("url", f"https://{name.lower().replace(' ', '')}.com/")
        return Website(name=name, position=Position(page=page, order=order), **kwargs)

    return factory


@pytest.fixture
def make_page(make_website):
    """Build ``count`` websites laid out consecutively from page 0."""

    def factory(count: int, per_page: int, prefix: str = "Site") -> list[Website]:
        return [
            make_website(f"{prefix} {i}", page=i // per_page, order=i % per_page)
            for i in range(count)
        ]

    return factory


@pytest.fixture
def work_tag():
    return Tag(id="tag-work", name="Work", color="#667eea")


@pytest.fixture
def large_settings():
    return Settings(grid_size=GridSize.LARGE)


@pytest.fixture
def fill():
    """Add ``count`` websites through a store."""

    def factory(
        store: CollectionStore, count: int, prefix: str = "Site"
    ) -> list[Website]:
        return [
            store.add_website(
                f"{prefix} {i}", f"https://{prefix.lower()}{i}.example.com"
            )
            for i in range(count)
        ]

    return factory
