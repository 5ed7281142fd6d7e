"""Table error taxonomy.

Every rejected intent raises one of these before any state is mutated. The
protocol layer turns them into an error message for the caller only.
"""
from typing import Optional


class TableError(Exception):
    """Base class for errors reported back to the calling player."""

    code = "TABLE_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(TableError):
    """Bad name, bad numeric input or malformed message."""
    code = "INVALID_INPUT"


class AuthorizationError(TableError):
    """Caller is not allowed to run admin directives."""
    code = "NOT_ADMIN"


class StateError(TableError):
    """Intent is not legal in the current table state."""
    code = "INVALID_STATE"


class RuleViolation(TableError):
    """Bet breaks a betting rule."""
    code = "RULE_VIOLATION"


# Specific errors

class InvalidName(ValidationError):
    code = "INVALID_NAME"


class DuplicateName(ValidationError):
    code = "DUPLICATE_NAME"


class InvalidConfig(ValidationError):
    code = "INVALID_CONFIG"


class InvalidAmount(ValidationError):
    code = "INVALID_AMOUNT"


class InvalidMessage(ValidationError):
    code = "INVALID_MESSAGE"


class NotSeated(StateError):
    code = "NOT_SEATED"


class AlreadySeated(StateError):
    code = "ALREADY_SEATED"


class NoActiveHand(StateError):
    code = "NO_ACTIVE_HAND"


class NotYourTurn(StateError):
    code = "NOT_YOUR_TURN"


class AlreadyFolded(StateError):
    code = "ALREADY_FOLDED"


class HandInProgress(StateError):
    code = "HAND_IN_PROGRESS"


class InsufficientPlayers(StateError):
    code = "INSUFFICIENT_PLAYERS"


class InvalidWinner(StateError):
    code = "INVALID_WINNER"


class RoundStillOpen(StateError):
    code = "ROUND_STILL_OPEN"


class HandDecided(StateError):
    code = "HAND_DECIDED"


class BetTooSmall(RuleViolation):
    code = "BET_TOO_SMALL"


class BetLimitExceeded(RuleViolation):
    code = "BET_LIMIT_EXCEEDED"
