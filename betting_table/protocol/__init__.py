"""Protocol module for WebSocket message handling."""
from .messages import (
    ClientMessage,
    ErrorMessage,
    StateMessage,
    parse_client_message,
)
from .handlers import MessageHandler

__all__ = [
    "ClientMessage",
    "ErrorMessage",
    "StateMessage",
    "parse_client_message",
    "MessageHandler",
]
