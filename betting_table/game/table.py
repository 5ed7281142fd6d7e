"""Table context: configuration, roster and hand state."""
import math
from dataclasses import dataclass, asdict
from typing import Optional

from betting_table.config import config
from betting_table.game.errors import InvalidConfig
from betting_table.game.roster import PlayerRoster


@dataclass
class TableConfig:
    """Betting parameters read by every betting computation."""

    bet_limit: int = 50
    initial_stack: int = 500
    small_blind: int = 5

    @property
    def big_blind(self) -> int:
        return self.small_blind * 2

    @classmethod
    def from_env(cls) -> "TableConfig":
        """Build the defaults from application configuration."""
        return cls(
            bet_limit=config.bet_limit,
            initial_stack=config.initial_stack,
            small_blind=config.small_blind,
        )

    def update(self, bet_limit: float, initial_stack: float, small_blind: float) -> None:
        """Replace all three parameters at once.

        Values are floored to whole chips. Nothing changes unless all three
        are valid.

        Raises:
            InvalidConfig: If any value is missing, non-finite or not positive.
        """
        values = []
        for value in (bet_limit, initial_stack, small_blind):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfig("Invalid config (values must be > 0).")
            if not math.isfinite(value) or math.floor(value) <= 0:
                raise InvalidConfig("Invalid config (values must be > 0).")
            values.append(int(math.floor(value)))

        self.bet_limit, self.initial_stack, self.small_blind = values

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class HandState:
    """State of the hand currently being played.

    Indices point into the roster; None means "no seat".
    """

    in_progress: bool = False
    dealer_index: Optional[int] = None
    small_blind_index: Optional[int] = None
    big_blind_index: Optional[int] = None
    turn_index: Optional[int] = None
    pot: int = 0
    current_bet: int = 0
    last_aggressor_index: Optional[int] = None
    round_closed: bool = False

    def reset(self, keep_dealer: bool = True) -> None:
        """Return to the idle form.

        Args:
            keep_dealer: Keep the button position so rotation continues.
        """
        self.in_progress = False
        if not keep_dealer:
            self.dealer_index = None
        self.small_blind_index = None
        self.big_blind_index = None
        self.turn_index = None
        self.pot = 0
        self.current_bet = 0
        self.last_aggressor_index = None
        self.round_closed = False

    def to_dict(self) -> dict:
        return asdict(self)


class Table:
    """The single shared table.

    Owns the config, the seated players and the hand state. Created once
    when the server starts and passed explicitly to whoever mutates it.
    """

    def __init__(self, table_config: Optional[TableConfig] = None):
        self.config = table_config or TableConfig.from_env()
        self.roster = PlayerRoster()
        self.hand = HandState()

    def chips_in_play(self) -> int:
        """Stacks plus pot. Constant across every betting action."""
        return self.roster.total_stacks() + self.hand.pot

    def to_dict(self) -> dict:
        """Public state published to every connection."""
        return {
            "config": self.config.to_dict(),
            "hand": self.hand.to_dict(),
            "players": self.roster.to_list(),
        }
