# tests/test_state.py
from core.models import Transaction
from core.state import TrackerState


class RecordingSubscriber:
    def __init__(self):
        self.received = []

    def setup(self):
        pass

    def send(self, payload):
        self.received.append(payload)


def test_reset_swaps_in_empty_registry_and_ledger():
    state = TrackerState()
    state.nodes.register_node(0, "10.0.0.1", 9000, "pub0")
    state.transactions.add_transaction(Transaction(0, 2, 5, 0, 1, 1))
    state.transactions.add_transaction(Transaction(2, 0, 3, 0, 1, 1))
    old_nodes = state.nodes
    assert len(state.transactions.get_graph_edges()) == 2

    state.reset()

    assert state.transactions.get_graph_edges() == []
    assert state.nodes.get_size() == 0
    # a reader holding the old instance still sees the old data
    assert old_nodes.get_size() == 1


def test_reset_keeps_subscribers():
    state = TrackerState()
    sub = RecordingSubscriber()
    state.hub.subscribe(sub)
    state.nodes.register_node(3, "h", 1, "k")

    state.reset()
    state.hub.publish_update()

    assert len(state.hub) == 1
    assert sub.received == [{
        "nodes": [],
        "edges": [],
        "numbers": {
            "numberOfTransactions": 0,
            "averageNumberOfChains": 0.0,
            "averageNumberOfBlocks": 0.0,
        },
    }]
