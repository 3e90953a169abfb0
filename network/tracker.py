# network/tracker.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from config import HEARTBEAT_INTERVAL
from core.state import TrackerState
from network.schemas import (
    Ack,
    ErrorResponse,
    NodeInfo,
    NodeListResponse,
    NodeStatusRequest,
    RegisterNodeRequest,
    RegisterTransactionRequest,
    StatusResponse,
    UpdateNodeRequest,
)
from network.sse import SseConnection

logger = logging.getLogger(__name__)

# error message per route when the body is missing fields
MISSING_FIELDS = {
    "/register-node": "Specify id, address, port and publicKey",
    "/update-node": "Specify id, address, port and publicKey",
    "/set-node-status": "Specify node ID and running status",
    "/register-transaction": (
        "Specify from, to, amount, remainder, numberOfChains and numberOfBlocks"
    ),
    "/node": "Specify id",
}


def reject(err: str) -> JSONResponse:
    return JSONResponse(status_code=403, content=ErrorResponse(err=err).model_dump())


def create_app(state: Optional[TrackerState] = None, heartbeat_interval: float = HEARTBEAT_INTERVAL) -> FastAPI:
    """
    Build the tracker HTTP service around `state`.

    All handlers are coroutines so that every mutation and every publish
    runs on the event loop, in the same thread as the heartbeat.
    """
    state = state or TrackerState()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state.hub.start_heartbeat(heartbeat_interval)
        yield
        state.hub.stop_heartbeat()
        logger.info("Tracker shutting down.")

    app = FastAPI(title="Tracker Service", lifespan=lifespan)
    app.state.tracker = state

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return reject(MISSING_FIELDS.get(request.url.path, "invalid request"))

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {
            "status": "ok",
            "registered_nodes": state.nodes.get_size(),
            "subscribers": len(state.hub),
        }

    @app.get("/", response_model=NodeListResponse)
    async def get_nodes() -> NodeListResponse:
        return NodeListResponse(
            nodes=[NodeInfo.from_node(n) if n is not None else None for n in state.nodes.get_nodes()]
        )

    @app.post("/register-node", response_model=Ack, response_model_exclude_none=True)
    async def register_node(req: RegisterNodeRequest) -> Ack:
        node_id = state.nodes.register_node(req.id, req.address, req.port, req.publicKey)
        state.hub.publish_update()
        return Ack(id=node_id)

    @app.post("/update-node", response_model=Ack, response_model_exclude_none=True)
    async def update_node(req: UpdateNodeRequest):
        if not state.nodes.update_node(req.id, req.address, req.port, req.publicKey):
            return reject("invalid node")
        return Ack()

    @app.post("/set-node-status", response_model=Ack, response_model_exclude_none=True)
    async def set_node_status(req: NodeStatusRequest):
        if not state.nodes.set_node_status(req.id, req.running):
            return reject("invalid node")
        return Ack(id=req.id)

    @app.get("/node", response_model=Ack, response_model_exclude_none=True)
    async def get_node(request: Request, node_id: Optional[int] = Query(None, alias="id")):
        """
        The id comes from the query string, or from a JSON body for
        older clients that send one with GET.
        """
        if node_id is None:
            try:
                body = await request.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                node_id = body.get("id")
        if node_id is None:
            return reject(MISSING_FIELDS["/node"])
        # JSON true/false are not ids
        valid = isinstance(node_id, int) and not isinstance(node_id, bool)
        node = state.nodes.get_node(node_id) if valid else None
        if node is None:
            return reject("invalid id or uninitialized node")
        return Ack(node=NodeInfo.from_node(node))

    @app.post("/register-transaction", response_model=Ack, response_model_exclude_none=True)
    async def register_transaction(req: RegisterTransactionRequest) -> Ack:
        state.transactions.add_transaction(req.to_transaction())
        state.hub.publish_update()
        return Ack()

    @app.post("/reset", response_model=Ack, response_model_exclude_none=True)
    async def reset() -> Ack:
        state.reset()
        state.hub.publish_update()
        return Ack()

    @app.get("/status", response_model=StatusResponse)
    async def status() -> StatusResponse:
        return StatusResponse(
            registered=state.nodes.get_size(),
            running=state.nodes.get_running(),
        )

    @app.get("/topn/updates")
    async def topn_updates(request: Request) -> StreamingResponse:
        """
        Server-sent events: a full graph snapshot on every change and on
        every heartbeat.
        """
        connection = SseConnection()
        state.hub.subscribe(connection)

        async def stream():
            try:
                async for event in connection.events(request):
                    yield event
            finally:
                state.hub.unsubscribe(connection)

        return StreamingResponse(
            stream(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    return app


app = create_app()
