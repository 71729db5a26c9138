import pytest
from fastapi.testclient import TestClient

from core.connection_manager import ConnectionManager
from core.room_registry import RoomRegistry
from core.room_session import RoomSession
from dependencies import get_registry, get_connection_manager, get_room_session
from main import app


class RecordingBroadcaster:
    """Collects every message the session sends instead of writing to a socket."""

    def __init__(self):
        self.sent = []

    def send(self, connection_id, message):
        self.sent.append((connection_id, message))

    def recipients(self):
        return [cid for cid, _ in self.sent]

    def last_state(self):
        return self.sent[-1][1]["state"]

    def reset(self):
        self.sent.clear()


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def session(registry, broadcaster):
    return RoomSession(registry, broadcaster)


@pytest.fixture
def client():
    registry = RoomRegistry()
    manager = ConnectionManager()
    session = RoomSession(registry, manager)
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_connection_manager] = lambda: manager
    app.dependency_overrides[get_room_session] = lambda: session
    with TestClient(app) as test_client:
        test_client.registry = registry
        yield test_client
    app.dependency_overrides.clear()
