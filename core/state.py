# core/state.py
from __future__ import annotations

import logging
from typing import Any, Dict

from .broadcast import BroadcastHub
from .ledger import TransactionLedger
from .registry import NodeRegistry

logger = logging.getLogger(__name__)


class TrackerState:
    """
    Owns the node registry, the transaction ledger and the broadcast hub
    for the lifetime of the process.

    The hub reads through this object on every publish, so after reset()
    observers immediately see the new, empty registry and ledger.
    """

    def __init__(self) -> None:
        self.nodes = NodeRegistry()
        self.transactions = TransactionLedger()
        self.hub = BroadcastHub(snapshot=self.snapshot)

    def snapshot(self) -> Dict[str, Any]:
        # both views come from the same pair of instances
        nodes, transactions = self.nodes, self.transactions
        return {
            "nodes": nodes.get_graph_nodes(),
            "edges": transactions.get_graph_edges(),
            "numbers": transactions.get_numbers(),
        }

    def reset(self) -> None:
        """
        Discard all nodes and transactions. Observers stay connected.
        """
        self.nodes = NodeRegistry()
        self.transactions = TransactionLedger()
        logger.info("Tracker state reset")
