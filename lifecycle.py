from logging_config import get_logger
from rooms import ConnectionRegistry
from connections import ConnectionHub

logger = get_logger(__name__)


class LifecycleManager:
    """Ties registry cleanup to the transport's connect/disconnect events."""

    def __init__(self, registry: ConnectionRegistry, hub: ConnectionHub, notify_disconnect: bool = False):
        self.registry = registry
        self.hub = hub
        self.notify_disconnect = notify_disconnect

    def connect(self, connection):
        logger.info(f"Client connected: {connection.peer_id}")
        self.hub.add(connection)

    def disconnect(self, peer_id: str):
        """Drop ``peer_id`` from every room; repeated calls are no-ops."""
        connection = self.hub.remove(peer_id)
        left = self.registry.leave_all(peer_id)
        if connection is None and not left:
            return left
        logger.info(f"Client disconnected: {peer_id}, left rooms {left}")
        if self.notify_disconnect:
            # one notice per remaining peer, however many rooms it shared
            recipients = set()
            for room_id in left:
                recipients.update(self.registry.members_of(room_id))
            for member in recipients:
                self.hub.send(member, "userDisconnected", {"userId": peer_id})
        return left
