"""Pydantic message schemas for WebSocket protocol."""
from typing import Optional, Literal, Union
from pydantic import BaseModel


# ============= Client -> Server Messages =============

class JoinMessage(BaseModel):
    """Take a seat under a display name."""
    type: Literal["join"] = "join"
    name: str


class LeaveMessage(BaseModel):
    """Leave the table."""
    type: Literal["leave"] = "leave"


class SetConfigMessage(BaseModel):
    """Admin: change betting parameters."""
    type: Literal["admin_set_config"] = "admin_set_config"
    bet_limit: float
    initial_stack: float
    small_blind: float


class ResetTableMessage(BaseModel):
    """Admin: clear the hand and restore every stack."""
    type: Literal["admin_reset_table"] = "admin_reset_table"


class StartHandMessage(BaseModel):
    """Admin: start a new hand."""
    type: Literal["admin_start_hand"] = "admin_start_hand"


class EndHandMessage(BaseModel):
    """Admin: award the pot to a player."""
    type: Literal["admin_end_hand"] = "admin_end_hand"
    winner_id: str


class NextRoundMessage(BaseModel):
    """Admin: open the next betting round."""
    type: Literal["admin_next_round"] = "admin_next_round"


class FoldMessage(BaseModel):
    type: Literal["action_fold"] = "action_fold"


class CheckCallMessage(BaseModel):
    type: Literal["action_check_call"] = "action_check_call"


class BetRaiseMessage(BaseModel):
    """Bet or raise to a total for this round (not an increment)."""
    type: Literal["action_bet_raise"] = "action_bet_raise"
    target_total: float


class PingMessage(BaseModel):
    """Keep-alive ping from client."""
    type: Literal["ping"] = "ping"


# Union of all client messages
ClientMessage = Union[
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
]


# ============= Server -> Client Messages =============

class ErrorMessage(BaseModel):
    """Error response, sent to the caller only."""
    type: Literal["error"] = "error"
    message: str
    code: Optional[str] = None


class StateMessage(BaseModel):
    """Full public table state."""
    type: Literal["state"] = "state"
    config: dict
    hand: dict
    players: list[dict]


class PongMessage(BaseModel):
    """Keep-alive pong response."""
    type: Literal["pong"] = "pong"


def parse_client_message(data: dict) -> ClientMessage:
    """Parse a client message from JSON dict.

    Args:
        data: Message data dictionary.

    Returns:
        Parsed client message.

    Raises:
        ValueError: If message type is unknown or invalid.
    """
    msg_type = data.get("type")

    type_map = {
        "join": JoinMessage,
        "leave": LeaveMessage,
        "admin_set_config": SetConfigMessage,
        "admin_reset_table": ResetTableMessage,
        "admin_start_hand": StartHandMessage,
        "admin_end_hand": EndHandMessage,
        "admin_next_round": NextRoundMessage,
        "action_fold": FoldMessage,
        "action_check_call": CheckCallMessage,
        "action_bet_raise": BetRaiseMessage,
        "ping": PingMessage,
    }

    if not isinstance(msg_type, str) or msg_type not in type_map:
        raise ValueError(f"Unknown message type: {msg_type}")

    return type_map[msg_type](**data)
