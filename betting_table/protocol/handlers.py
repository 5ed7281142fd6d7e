"""Message handlers for WebSocket protocol."""
import json
from typing import Optional

from betting_table.auth.roles import Role, resolve_role
from betting_table.coordinator import TableCoordinator
from betting_table.game.errors import InvalidMessage, TableError
from betting_table.protocol.messages import (
    parse_client_message,
    ClientMessage,
    JoinMessage,
    LeaveMessage,
    SetConfigMessage,
    ResetTableMessage,
    StartHandMessage,
    EndHandMessage,
    NextRoundMessage,
    FoldMessage,
    CheckCallMessage,
    BetRaiseMessage,
    PingMessage,
    ErrorMessage,
    PongMessage,
)
from betting_table.utils.logger import get_logger

logger = get_logger(__name__)


class MessageHandler:
    """Turns raw client frames into coordinator calls."""

    def __init__(self, coordinator: TableCoordinator):
        """Initialize handler.

        Args:
            coordinator: The table coordinator.
        """
        self.coordinator = coordinator

    def is_admin(self, handle: str) -> bool:
        """Check if the caller is seated under the admin name."""
        player = self.coordinator.table.roster.get(handle)
        return player is not None and resolve_role(player.name) == Role.ADMIN

    def handle_message(self, handle: str, raw_message: str) -> tuple[Optional[dict], bool]:
        """Handle an incoming message.

        Runs to completion without awaiting, so intents are applied one at a
        time in arrival order.

        Args:
            handle: Caller's connection handle.
            raw_message: Raw JSON message string.

        Returns:
            Tuple of (reply for the caller or None, whether state changed).
        """
        try:
            data = json.loads(raw_message)
            if not isinstance(data, dict):
                raise ValueError("Message must be a JSON object")
            message = parse_client_message(data)
        except json.JSONDecodeError as e:
            return ErrorMessage(message=f"Invalid JSON: {e}", code="INVALID_MESSAGE").model_dump(), False
        except ValueError as e:
            return ErrorMessage(message=str(e), code="INVALID_MESSAGE").model_dump(), False

        if isinstance(message, PingMessage):
            return PongMessage().model_dump(), False

        try:
            changed = self._dispatch(handle, message)
        except TableError as e:
            logger.debug(f"Rejected {message.type} from {handle}: {e.code}")
            return ErrorMessage(message=e.message, code=e.code).model_dump(), False

        return None, changed

    def _dispatch(self, handle: str, message: ClientMessage) -> bool:
        """Route a parsed message to the coordinator.

        Returns:
            True if the table state changed.
        """
        coordinator = self.coordinator

        if isinstance(message, JoinMessage):
            coordinator.join(handle, message.name)
            return True

        if isinstance(message, LeaveMessage):
            return coordinator.leave(handle) is not None

        # Player actions
        if isinstance(message, FoldMessage):
            coordinator.fold(handle)
            return True

        if isinstance(message, CheckCallMessage):
            coordinator.check_or_call(handle)
            return True

        if isinstance(message, BetRaiseMessage):
            coordinator.bet_or_raise(handle, message.target_total)
            return True

        # Admin directives
        is_admin = self.is_admin(handle)

        if isinstance(message, SetConfigMessage):
            coordinator.set_config(
                is_admin,
                message.bet_limit,
                message.initial_stack,
                message.small_blind,
            )
            return True

        if isinstance(message, ResetTableMessage):
            coordinator.reset_table(is_admin)
            return True

        if isinstance(message, StartHandMessage):
            coordinator.start_hand(is_admin)
            return True

        if isinstance(message, EndHandMessage):
            coordinator.end_hand_award(is_admin, message.winner_id)
            return True

        if isinstance(message, NextRoundMessage):
            coordinator.next_round(is_admin)
            return True

        raise InvalidMessage(f"Unhandled message type: {message.type}")
