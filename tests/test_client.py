# tests/test_client.py
"""
TrackerClient against an in-process tracker. FastAPI's TestClient
speaks the same request()/json() interface as a requests.Session.
"""
import pytest
import requests
from fastapi.testclient import TestClient

from core.models import Transaction
from core.state import TrackerState
from network.client import TrackerClient, TrackerClientError
from network.tracker import create_app


@pytest.fixture
def state():
    return TrackerState()


@pytest.fixture
def tracker(state):
    return TrackerClient("http://testserver", session=TestClient(create_app(state)))


def test_register_and_lookup(tracker):
    assert tracker.register_node(0, "10.0.0.1", 9000, "pub0") == 0
    assert tracker.register_node(2, "10.0.0.2", 9001, "pub2") == 2

    node = tracker.get_node(2)
    assert (node.address, node.port, node.public_key) == ("10.0.0.2", 9001, "pub2")
    assert tracker.get_node(1) is None

    nodes = tracker.get_nodes()
    assert [n.id if n else None for n in nodes] == [0, None, 2]


def test_update_and_status(tracker):
    tracker.register_node(0, "10.0.0.1", 9000, "pub0")
    assert tracker.update_node(0, "10.0.0.9", 9009, "pub9") is True
    assert tracker.update_node(3, "h", 1, "k") is False
    assert tracker.set_node_status(0, True) is True
    assert tracker.set_node_status(3, True) is False
    assert tracker.get_status() == {"registered": 1, "running": 1}
    assert tracker.get_node(0).running is True


def test_transactions_and_reset(tracker, state):
    tracker.register_transaction(Transaction(0, 2, 5, 0, 1, 1))
    assert len(state.transactions) == 1
    tracker.reset()
    assert len(state.transactions) == 0


def test_unreachable_tracker_raises():
    class DeadSession:
        def request(self, *args, **kwargs):
            raise requests.ConnectionError("connection refused")

    client = TrackerClient("http://127.0.0.1:1", session=DeadSession())
    with pytest.raises(TrackerClientError):
        client.get_status()


def test_refused_request_raises(tracker):
    class Rejected:
        status_code = 500

        def json(self):
            return {"success": False, "err": "boom"}

    class ErrorSession:
        def request(self, *args, **kwargs):
            return Rejected()

    tracker.session = ErrorSession()
    with pytest.raises(TrackerClientError) as excinfo:
        tracker.register_node(0, "h", 1, "k")
    assert excinfo.value.status_code == 500
    assert "boom" in str(excinfo.value)
