"""
Shared pytest fixtures.

Unit tests run against MemorySlotStorage with a controllable clock and a
deterministic line picker. Persistence tests use a file-backed SQLite
database so no external server is required.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_nivra.db")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from nivra.db.base import Base, SessionLocal, engine  # noqa: E402
from nivra.main import app  # noqa: E402
from nivra.models.storage_slot import StorageSlot  # noqa: E402
from nivra.services.save_pipeline import build_widget  # noqa: E402
from nivra.services.storage import MemorySlotStorage, SlotKeys, SqlSlotStorage  # noqa: E402

from helpers import FirstLinePicker, FixedClock  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    import nivra.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def keys():
    return SlotKeys.from_prefix("nivra_")


@pytest.fixture()
def storage():
    return MemorySlotStorage()


@pytest.fixture()
def sql_storage():
    db = SessionLocal()
    try:
        db.query(StorageSlot).delete()
        db.commit()
    finally:
        db.close()
    return SqlSlotStorage(SessionLocal)


@pytest.fixture()
def clock():
    return FixedClock()


@pytest.fixture()
def widget(storage, clock):
    return build_widget(storage, clock=clock, picker=FirstLinePicker())


@pytest.fixture()
def client(widget, storage):
    app.state.widget = widget
    app.state.storage = storage
    with TestClient(app) as c:
        yield c
    app.state.widget = None
    app.state.storage = None
