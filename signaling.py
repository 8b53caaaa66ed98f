from typing import Any, Iterable, Optional

from pydantic import ValidationError

from connections import ConnectionHub
from logging_config import get_logger
from rooms import ConnectionRegistry
from schemas import IceCandidate, RoomRequest, StreamAnswer, StreamOffer

logger = get_logger(__name__)


class SignalingRouter:
    """Turns one inbound negotiation event into outbound deliveries.

    ``dispatch`` is synchronous: the registry update and the choice of
    recipients happen in one step, with sends only enqueued on the hub.
    A sender is never among the recipients of what it forwards.
    """

    def __init__(self, registry: ConnectionRegistry, hub: ConnectionHub):
        self.registry = registry
        self.hub = hub
        self._handlers = {
            "joinRoom": self.join_room,
            "leaveRoom": self.leave_room,
            "streamOffer": self.stream_offer,
            "streamAnswer": self.stream_answer,
            "iceCandidate": self.ice_candidate,
        }

    def dispatch(self, peer_id: str, event: str, data: Any) -> Optional[dict]:
        """Handle ``event`` from ``peer_id``; returns the ack payload, if any."""
        handler = self._handlers.get(event)
        if handler is None:
            logger.warning(f"Unknown event {event!r} from {peer_id}, ignoring")
            return None
        try:
            return handler(peer_id, data)
        except ValidationError as e:
            logger.warning(f"Malformed {event} from {peer_id}: {e.errors()}")
            return None

    # Room membership

    def join_room(self, peer_id: str, data: Any) -> dict:
        request = RoomRequest.model_validate(data)
        room_id = request.room_id
        logger.info(f"Client {peer_id} joining room {room_id}")
        self.registry.join(room_id, peer_id)
        self._fan_out(room_id, peer_id, "userJoined", {"userId": peer_id})
        return {"success": True, "roomId": room_id}

    def leave_room(self, peer_id: str, data: Any) -> dict:
        request = RoomRequest.model_validate(data)
        logger.info(f"Client {peer_id} leaving room {request.room_id}")
        self.registry.leave(request.room_id, peer_id)
        return {"success": True}

    # Negotiation forwarding

    def stream_offer(self, peer_id: str, data: Any) -> None:
        message = StreamOffer.model_validate(data)
        payload = {"offer": message.offer, "from": peer_id}
        if message.to:
            logger.debug(f"Stream offer from {peer_id} to {message.to}")
            self._unicast(message.to, peer_id, "streamOffer", payload)
        else:
            logger.debug(f"Stream offer from {peer_id} for room {message.room_id}")
            self._fan_out(message.room_id, peer_id, "streamOffer", payload)

    def stream_answer(self, peer_id: str, data: Any) -> None:
        message = StreamAnswer.model_validate(data)
        logger.debug(f"Stream answer from {peer_id} to {message.to}")
        self._unicast(message.to, peer_id, "streamAnswer", {"answer": message.answer, "from": peer_id})

    def ice_candidate(self, peer_id: str, data: Any) -> None:
        message = IceCandidate.model_validate(data)
        payload = {"candidate": message.candidate, "from": peer_id}
        # addressing the room itself floods the candidate to every other member
        if message.to == message.room_id:
            logger.debug(f"ICE candidate from {peer_id} for room {message.room_id}")
            self._fan_out(message.room_id, peer_id, "iceCandidate", payload)
        else:
            logger.debug(f"ICE candidate from {peer_id} to {message.to}")
            self._unicast(message.to, peer_id, "iceCandidate", payload)

    # Delivery

    def _unicast(self, target: str, sender: str, event: str, payload: dict) -> int:
        if target == sender:
            return 0
        return int(self.hub.send(target, event, payload))

    def _fan_out(self, room_id: str, sender: str, event: str, payload: dict) -> int:
        return self._deliver(self.registry.members_of(room_id), sender, event, payload)

    def _deliver(self, recipients: Iterable[str], sender: str, event: str, payload: dict) -> int:
        delivered = 0
        for peer_id in recipients:
            if peer_id != sender and self.hub.send(peer_id, event, payload):
                delivered += 1
        return delivered
