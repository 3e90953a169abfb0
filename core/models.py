# core/models.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

Amount = Union[int, float]


@dataclass
class Node:
    """
    A worker node known to the tracker.
    """
    id: int
    address: str
    port: int
    public_key: str
    running: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "address": self.address,
            "port": self.port,
            "publicKey": self.public_key,
            "running": self.running,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        return cls(
            id=data["id"],
            address=data["address"],
            port=data["port"],
            public_key=data["publicKey"],
            running=bool(data.get("running", False)),
        )


@dataclass(frozen=True)
class Transaction:
    """
    A value transfer between two node ids. Immutable once recorded.
    """
    sender: int
    receiver: int
    amount: Amount
    remainder: Amount
    number_of_chains: int
    number_of_blocks: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.sender,
            "to": self.receiver,
            "amount": self.amount,
            "remainder": self.remainder,
            "numberOfChains": self.number_of_chains,
            "numberOfBlocks": self.number_of_blocks,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        return cls(
            sender=data["from"],
            receiver=data["to"],
            amount=data["amount"],
            remainder=data["remainder"],
            number_of_chains=data["numberOfChains"],
            number_of_blocks=data["numberOfBlocks"],
        )
