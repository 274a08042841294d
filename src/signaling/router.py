"""
Message Router

Decides, for each inbound event, how relay state changes and which
connections receive which outbound frames. The router performs no I/O: it
returns a list of deliveries that the transport sends afterwards, so a
failed send can never undo a state change.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .errors import InvalidRoomId, NotInRoom, RelayError
from .schemas import (
    Disconnect,
    InboundEvent,
    JoinRoom,
    LeaveRoom,
    Relay,
    SendMessage,
    create_error_response,
    create_new_message_event,
    create_relay_event,
    create_room_joined_event,
    create_room_left_event,
    create_user_count_event,
    create_user_joined_event,
    create_user_left_event,
    create_welcome_event,
)
from .state import LeaveResult, RelayState
from .utils import validate_room_id

logger = logging.getLogger(__name__)


@dataclass
class Delivery:
    """
    One outbound frame for one connection.

    Attributes:
        connection_id: Recipient connection
        message: Frame to send, serialized by the transport
    """

    connection_id: str
    message: Dict[str, Any]


class MessageRouter:
    """
    Routes inbound client events.

    Per connection the router moves between two states: unjoined and in a
    room. Relay and chat events require a room; join-room and disconnect
    are accepted in either state.
    """

    def __init__(self, state: RelayState):
        """
        Initialize the router.

        Args:
            state: Shared relay state
        """
        self.state = state

    def dispatch(
        self, connection_id: str, event: InboundEvent
    ) -> List[Delivery]:
        """
        Apply one inbound event.

        Args:
            connection_id: The connection the event came from
            event: The decoded event

        Returns:
            Frames to deliver, in send order
        """
        try:
            if isinstance(event, JoinRoom):
                return self.handle_join_room(connection_id, event)
            elif isinstance(event, LeaveRoom):
                return self.handle_leave_room(connection_id)
            elif isinstance(event, Relay):
                return self.handle_relay(connection_id, event)
            elif isinstance(event, SendMessage):
                return self.handle_send_message(connection_id, event)
            elif isinstance(event, Disconnect):
                return self.handle_disconnect(connection_id, event)
            else:
                raise TypeError(f"Unsupported event: {event!r}")
        except RelayError as e:
            logger.warning(
                f"Rejected {type(event).__name__} from {connection_id}: "
                f"{e.message}"
            )
            return [self.error(connection_id, e.message)]

    def handle_connect(self, connection_id: str) -> List[Delivery]:
        """Register a new connection and greet it."""
        self.state.connect(connection_id)
        logger.info(f"Connection {connection_id} connected")
        return [Delivery(connection_id, create_welcome_event(connection_id))]

    @staticmethod
    def error(connection_id: str, message: str) -> Delivery:
        """Build an error frame for a single connection."""
        return Delivery(connection_id, create_error_response(message))

    def handle_join_room(
        self, connection_id: str, event: JoinRoom
    ) -> List[Delivery]:
        """
        Handle a join-room request.

        Leaves the current room first (the same room included), then
        enters the requested one.
        """
        room_id = event.room_id
        is_valid, error_message = validate_room_id(room_id)
        if not is_valid:
            raise InvalidRoomId(error_message)

        result = self.state.enter_room(connection_id, room_id)

        deliveries = []
        if result.left is not None:
            deliveries.extend(
                self._left_notifications(connection_id, result.left)
            )

        for member in result.members:
            if member != connection_id:
                deliveries.append(
                    Delivery(member, create_user_joined_event(connection_id))
                )
        count_event = create_user_count_event(result.user_count)
        for member in result.members:
            deliveries.append(Delivery(member, count_event))
        deliveries.append(
            Delivery(
                connection_id,
                create_room_joined_event(room_id, result.user_count),
            )
        )

        logger.info(
            f"Connection {connection_id} joined room {room_id} "
            f"({result.user_count} users)"
        )
        return deliveries

    def handle_leave_room(self, connection_id: str) -> List[Delivery]:
        """Handle an explicit leave-room request."""
        result = self.state.leave_room(connection_id)
        if result is None:
            raise NotInRoom()

        deliveries = self._left_notifications(connection_id, result)
        deliveries.append(
            Delivery(connection_id, create_room_left_event(result.room_id))
        )
        logger.info(f"Connection {connection_id} left room {result.room_id}")
        return deliveries

    def handle_relay(self, connection_id: str, event: Relay) -> List[Delivery]:
        """
        Forward an offer, answer or ice-candidate to its target.

        The target is not required to share the sender's room.
        """
        self._require_room(connection_id)

        target = event.to
        if not isinstance(target, str) or not self.state.is_connected(target):
            logger.debug(
                f"Dropping {event.kind} from {connection_id}: "
                f"no live connection {target!r}"
            )
            return []

        if target == connection_id:
            logger.debug(f"Dropping {event.kind} addressed to its sender")
            return []

        logger.debug(f"Relaying {event.kind} from {connection_id} to {target}")
        return [
            Delivery(
                target,
                create_relay_event(
                    event.kind, event.payload_key, event.payload, connection_id
                ),
            )
        ]

    def handle_send_message(
        self, connection_id: str, event: SendMessage
    ) -> List[Delivery]:
        """Broadcast a chat message to the whole room, sender included."""
        room_id = self._require_room(connection_id)

        message = create_new_message_event(
            connection_id,
            event.message,
            datetime.now(timezone.utc).isoformat(),
        )
        return [
            Delivery(member, message)
            for member in self.state.room_members(room_id)
        ]

    def handle_disconnect(
        self, connection_id: str, event: Disconnect
    ) -> List[Delivery]:
        """Remove a closed connection and notify its room."""
        result = self.state.disconnect(connection_id)
        logger.info(
            f"Connection {connection_id} disconnected (reason: {event.reason})"
        )
        if result is None:
            return []
        return self._left_notifications(connection_id, result)

    def _require_room(self, connection_id: str) -> str:
        room_id: Optional[str] = self.state.current_room(connection_id)
        if room_id is None:
            raise NotInRoom()
        return room_id

    @staticmethod
    def _left_notifications(
        connection_id: str, result: LeaveResult
    ) -> List[Delivery]:
        # Nobody is left to tell when the room was deleted
        if result.room_deleted:
            return []
        deliveries = [
            Delivery(member, create_user_left_event(connection_id))
            for member in result.remaining
        ]
        count_event = create_user_count_event(len(result.remaining))
        deliveries.extend(
            Delivery(member, count_event) for member in result.remaining
        )
        return deliveries
