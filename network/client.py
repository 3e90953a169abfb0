# network/client.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from config import CLIENT_TIMEOUT, DEFAULT_TRACKER_URL
from core.errors import TrackerError
from core.models import Node, Transaction

logger = logging.getLogger(__name__)


class TrackerClientError(TrackerError):
    """The tracker could not be reached or refused a request."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TrackerClient:
    """
    Used by worker nodes to report themselves and their transactions
    to the tracker.

    Lookups and updates on unknown ids come back as None / False, the
    same way the registry reports them. Anything else that goes wrong
    raises TrackerClientError.
    """

    def __init__(
        self,
        tracker_url: str = DEFAULT_TRACKER_URL,
        timeout: float = CLIENT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.tracker_url = tracker_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # nodes

    def register_node(self, node_id: int, address: str, port: Union[int, str], public_key: str) -> int:
        logger.info("Registering node %d with tracker at %s...", node_id, self.tracker_url)
        payload = {"id": node_id, "address": address, "port": port, "publicKey": public_key}
        data = self._post("/register-node", payload)
        return data["id"]

    def update_node(self, node_id: int, address: str, port: Union[int, str], public_key: str) -> bool:
        payload = {"id": node_id, "address": address, "port": port, "publicKey": public_key}
        return self._post("/update-node", payload, refused_ok=True) is not None

    def set_node_status(self, node_id: int, running: bool) -> bool:
        payload = {"id": node_id, "running": running}
        return self._post("/set-node-status", payload, refused_ok=True) is not None

    def get_node(self, node_id: int) -> Optional[Node]:
        data = self._request("GET", "/node", params={"id": node_id}, refused_ok=True)
        if data is None:
            return None
        return Node.from_dict(data["node"])

    def get_nodes(self) -> List[Optional[Node]]:
        data = self._request("GET", "/")
        return [Node.from_dict(n) if n is not None else None for n in data["nodes"]]

    def get_status(self) -> Dict[str, int]:
        return self._request("GET", "/status")

    # transactions

    def register_transaction(self, tx: Transaction) -> None:
        self._post("/register-transaction", tx.to_dict())

    def reset(self) -> None:
        logger.info("Resetting tracker at %s", self.tracker_url)
        self._post("/reset", {})

    # plumbing

    def _post(self, path: str, payload: Dict[str, Any], refused_ok: bool = False) -> Optional[Dict[str, Any]]:
        return self._request("POST", path, json=payload, refused_ok=refused_ok)

    def _request(self, method: str, path: str, refused_ok: bool = False, **kwargs: Any) -> Optional[Dict[str, Any]]:
        """
        Send one request and return the decoded body.

        With refused_ok, a 403 from the tracker returns None instead of
        raising.
        """
        url = f"{self.tracker_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TrackerClientError(f"{method} {path} failed: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if resp.status_code == 403 and refused_ok:
            logger.debug("Tracker refused %s %s: %s", method, path, data.get("err"))
            return None
        if resp.status_code != 200:
            err = data.get("err") if isinstance(data, dict) else None
            raise TrackerClientError(
                err or f"{method} {path} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        return data
