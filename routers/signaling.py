import json
import uuid

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from connections import WebSocketConnection
from logging_config import get_logger
from schemas import Envelope, MalformedEnvelope

logger = get_logger(__name__)

router = APIRouter()


def parse_envelope(text: str) -> Envelope:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedEnvelope(f"invalid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise MalformedEnvelope("frame must be a JSON object")
    try:
        return Envelope.model_validate(raw)
    except ValidationError as e:
        raise MalformedEnvelope(str(e)) from e


@router.websocket("/ws")
async def signaling_endpoint(websocket: WebSocket):
    state = websocket.app.state
    await websocket.accept()

    peer_id = str(uuid.uuid4())
    connection = WebSocketConnection(websocket, peer_id, queue_size=state.settings.OUTBOUND_QUEUE_SIZE)
    connection.start()
    state.lifecycle.connect(connection)
    connection.send("connected", {"id": peer_id})

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            text = message.get("text")
            if text is None:
                logger.warning(f"Dropping non-text frame from {peer_id}")
                continue
            try:
                envelope = parse_envelope(text)
            except MalformedEnvelope as e:
                logger.warning(f"Dropping frame from {peer_id}: {e}")
                continue

            ack = state.router.dispatch(peer_id, envelope.event, envelope.data)
            if ack is not None and envelope.id is not None:
                connection.ack(envelope.id, ack)

    except WebSocketDisconnect:
        pass
    finally:
        state.lifecycle.disconnect(peer_id)
        await connection.close()
