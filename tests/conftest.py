import pytest
from fastapi.testclient import TestClient

from connections import ConnectionHub
from lifecycle import LifecycleManager
from main import create_app
from rooms import ConnectionRegistry
from settings import Settings
from signaling import SignalingRouter


class FakeConnection:
    """Records what the relay would have sent to one peer."""

    def __init__(self, peer_id: str):
        self.peer_id = peer_id
        self.sent = []

    def send(self, event, data):
        self.sent.append((event, data))
        return True

    def events(self, name):
        return [data for event, data in self.sent if event == name]


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def hub():
    return ConnectionHub()


@pytest.fixture
def router(registry, hub):
    return SignalingRouter(registry, hub)


@pytest.fixture
def lifecycle(registry, hub):
    return LifecycleManager(registry, hub)


@pytest.fixture
def connect(lifecycle):
    """Register fake peers: ``a, b = connect("A", "B")``."""
    def _connect(*peer_ids):
        peers = [FakeConnection(peer_id) for peer_id in peer_ids]
        for peer in peers:
            lifecycle.connect(peer)
        return peers
    return _connect


def make_client(**overrides) -> TestClient:
    return TestClient(create_app(Settings(**overrides)))


def join(ws, room_id, ack_id=1):
    """Join ``room_id`` over the socket and return the ack payload."""
    ws.send_json({"event": "joinRoom", "data": room_id, "id": ack_id})
    return expect(ws, "ack")


def expect(ws, event):
    message = ws.receive_json()
    assert message["event"] == event, message
    return message["data"]


def connect_peer(ws):
    return expect(ws, "connected")["id"]
