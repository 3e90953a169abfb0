# core/ledger.py
from __future__ import annotations

from typing import Any, Dict, List

from .models import Transaction


class TransactionLedger:
    """
    Append-only, insertion-ordered record of transactions.
    """

    def __init__(self) -> None:
        self.transactions: List[Transaction] = []

    def __len__(self) -> int:
        return len(self.transactions)

    def add_transaction(self, tx: Transaction) -> None:
        self.transactions.append(tx)

    def get_graph_edges(self) -> List[Dict[str, Any]]:
        """
        One directed edge per transaction, in the order they were added.
        Repeated sender/receiver pairs show up as repeated edges.
        """
        return [
            {"from": tx.sender, "to": tx.receiver, "label": str(tx.amount)}
            for tx in self.transactions
        ]

    def get_numbers(self) -> Dict[str, Any]:
        """
        Aggregate counters shown next to the graph.
        """
        count = len(self.transactions)
        if not count:
            return {
                "numberOfTransactions": 0,
                "averageNumberOfChains": 0.0,
                "averageNumberOfBlocks": 0.0,
            }
        chains = sum(tx.number_of_chains for tx in self.transactions)
        blocks = sum(tx.number_of_blocks for tx in self.transactions)
        return {
            "numberOfTransactions": count,
            "averageNumberOfChains": chains / count,
            "averageNumberOfBlocks": blocks / count,
        }
