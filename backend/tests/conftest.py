import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from localnotes.main import create_app
from localnotes.storage.blob_store import MemoryBlobStore
from localnotes.storage.notes_store import NotesStore


class FakeClock:
    """Starts at a fixed instant and moves one second forward on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def id_factory():
    counter = itertools.count(1)
    return lambda: f"note{next(counter)}"


@pytest.fixture()
def blob_store():
    return MemoryBlobStore()


@pytest.fixture()
def store(blob_store, clock, id_factory):
    return NotesStore(blob_store, clock=clock, id_factory=id_factory)


@pytest.fixture()
def client(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("NOTES_STORAGE", "file")
    return TestClient(create_app())
