import asyncio
from typing import Any, Dict, Optional

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from logging_config import get_logger

logger = get_logger(__name__)


class WebSocketConnection:
    """One client's socket plus its outbound queue.

    ``send`` only enqueues; a per-connection writer task does the actual
    socket writes, so routing code never waits on a peer.
    """

    def __init__(self, websocket: WebSocket, peer_id: str, queue_size: int = 256):
        self.websocket = websocket
        self.peer_id = peer_id
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._writer: Optional[asyncio.Task] = None
        self.closed = False

    def start(self):
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())

    def send(self, event: str, data: Any) -> bool:
        return self._put({"event": event, "data": data})

    def ack(self, ack_id, data: Any) -> bool:
        return self._put({"event": "ack", "id": ack_id, "data": data})

    def _put(self, message: dict) -> bool:
        if self.closed:
            return False
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(f"Outbound queue full for {self.peer_id}, dropping {message['event']}")
            return False
        return True

    async def _drain(self):
        while True:
            message = await self._queue.get()
            if self.websocket.client_state != WebSocketState.CONNECTED:
                break
            try:
                await self.websocket.send_json(message)
            except Exception as e:
                logger.warning(f"Send to {self.peer_id} failed, closing: {e}")
                break
        self._mark_closed()
        await self._close_socket()

    def _mark_closed(self):
        self.closed = True
        # drop whatever was queued for a peer that can no longer receive it
        while not self._queue.empty():
            self._queue.get_nowait()

    async def _close_socket(self):
        if self.websocket.client_state == WebSocketState.DISCONNECTED:
            return
        try:
            await self.websocket.close()
        except Exception as e:
            logger.debug(f"Error closing WebSocket for {self.peer_id}: {e}")

    async def close(self):
        self.closed = True
        if self._writer is not None:
            self._writer.cancel()
            try:
                await self._writer
            except asyncio.CancelledError:
                pass
            self._writer = None


class ConnectionHub:
    """Live connections addressable by peer id."""

    def __init__(self):
        self._connections: Dict[str, Any] = {}

    def add(self, connection):
        self._connections[connection.peer_id] = connection

    def remove(self, peer_id: str):
        return self._connections.pop(peer_id, None)

    def get(self, peer_id: str):
        return self._connections.get(peer_id)

    def send(self, peer_id: str, event: str, data: Any) -> bool:
        connection = self._connections.get(peer_id)
        if connection is None:
            logger.debug(f"No connection for {peer_id}, dropping {event}")
            return False
        return connection.send(event, data)

    def __contains__(self, peer_id) -> bool:
        return peer_id in self._connections

    def __len__(self) -> int:
        return len(self._connections)
