# core/registry.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .models import Node

logger = logging.getLogger(__name__)


class NodeRegistry:
    """
    Sparse store of nodes keyed by caller-assigned integer ids.

    Ids do not have to be contiguous. Every slot below the highest
    registered id that holds no node is a hole: it counts towards the
    length of get_nodes() but never towards get_size().
    """

    def __init__(self) -> None:
        self._nodes: Dict[int, Node] = {}
        # one past the highest id ever registered
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def register_node(self, node_id: int, address: str, port: int, public_key: str) -> int:
        """
        Add a node, replacing whatever was registered under the same id.
        Returns the id.
        """
        replaced = node_id in self._nodes
        self._nodes[node_id] = Node(node_id, address, port, public_key)
        self._length = max(self._length, node_id + 1)
        logger.info(
            "%s node %d at %s:%s", "Re-registered" if replaced else "Registered",
            node_id, address, port,
        )
        return node_id

    def update_node(self, node_id: int, address: str, port: int, public_key: str) -> bool:
        """
        Overwrite the location and key of an existing node.

        Returns:
            True  - the node existed and was updated
            False - no node is registered under this id
        """
        node = self._nodes.get(node_id)
        if node is None:
            return False
        node.address = address
        node.port = port
        node.public_key = public_key
        return True

    def set_node_status(self, node_id: int, running: bool) -> bool:
        node = self._nodes.get(node_id)
        if node is None:
            return False
        node.running = running
        return True

    def get_node(self, node_id: int) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_nodes(self) -> List[Optional[Node]]:
        """
        Index-aligned view of the registry, holes included as None.
        """
        return [self._nodes.get(i) for i in range(self._length)]

    def get_size(self) -> int:
        return len(self._nodes)

    def get_running(self) -> int:
        return sum(1 for node in self._nodes.values() if node.running)

    def get_graph_nodes(self) -> List[Dict[str, object]]:
        """
        Visualization view: one {id, label} entry per node, ascending by id.
        """
        return [
            {"id": node_id, "label": str(node_id)}
            for node_id in sorted(self._nodes)
        ]
