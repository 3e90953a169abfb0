# network/schemas.py
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from core.models import Node, Transaction


class NodeInfo(BaseModel):
    id: int
    address: str
    port: Union[int, str]
    publicKey: str
    running: bool = False

    @classmethod
    def from_node(cls, node: Node) -> "NodeInfo":
        return cls(**node.to_dict())


class RegisterNodeRequest(BaseModel):
    id: int = Field(ge=0)
    address: str
    port: Union[int, str]
    publicKey: str


class UpdateNodeRequest(RegisterNodeRequest):
    pass


class NodeStatusRequest(BaseModel):
    id: int = Field(ge=0)
    running: bool


class RegisterTransactionRequest(BaseModel):
    # "from" is a keyword, so the sender travels under an alias
    model_config = ConfigDict(populate_by_name=True)

    sender: int = Field(alias="from")
    receiver: int = Field(alias="to")
    amount: Union[int, float]
    remainder: Union[int, float]
    numberOfChains: int
    numberOfBlocks: int

    def to_transaction(self) -> Transaction:
        return Transaction(
            sender=self.sender,
            receiver=self.receiver,
            amount=self.amount,
            remainder=self.remainder,
            number_of_chains=self.numberOfChains,
            number_of_blocks=self.numberOfBlocks,
        )


class NodeListResponse(BaseModel):
    # holes in the id space come back as null
    nodes: List[Optional[NodeInfo]]


class StatusResponse(BaseModel):
    registered: int
    running: int


class Ack(BaseModel):
    success: bool = True
    id: Optional[int] = None
    node: Optional[NodeInfo] = None


class ErrorResponse(BaseModel):
    success: bool = False
    err: str
