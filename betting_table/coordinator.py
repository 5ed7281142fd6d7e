"""Table coordinator: the single entry point for inbound intents."""
import math
from typing import Optional

from betting_table.auth.roles import require_admin
from betting_table.game.betting import Action, ActionType, BettingEngine
from betting_table.game.errors import InvalidAmount, InvalidWinner, NoActiveHand
from betting_table.game.player import Player
from betting_table.game.table import Table
from betting_table.utils.logger import get_logger

logger = get_logger(__name__)


class TableCoordinator:
    """Applies intents from already identified callers to the table.

    Callers are identified by an opaque handle. Admin directives take the
    externally decided is_admin flag as their first argument. Each method
    either applies the whole intent or raises a TableError leaving state
    untouched; none of them awaits, so intents never interleave.
    """

    def __init__(self, table: Optional[Table] = None):
        """Initialize coordinator.

        Args:
            table: Table context to own; a default one is created if omitted.
        """
        self.table = table or Table()
        self.engine = BettingEngine(self.table)

    # Seating

    def join(self, handle: str, name: object) -> Player:
        """Seat the caller under a display name."""
        return self.table.roster.join(handle, name, self.table.config.initial_stack)

    def leave(self, handle: str) -> Optional[Player]:
        """Remove the caller's seat (also used on disconnect)."""
        return self.engine.remove_player(handle)

    # Admin directives

    @require_admin("change the table config")
    def set_config(self, bet_limit: float, initial_stack: float, small_blind: float) -> None:
        self.table.config.update(bet_limit, initial_stack, small_blind)
        logger.info(f"Config changed: {self.table.config.to_dict()}")

    @require_admin("reset the table")
    def reset_table(self) -> None:
        self.engine.reset_table()

    @require_admin("start a hand")
    def start_hand(self) -> None:
        self.engine.start_hand()

    @require_admin("award the pot")
    def end_hand_award(self, winner_handle: str) -> int:
        """Give the pot to the declared winner.

        Returns:
            Amount awarded.
        """
        if not self.table.hand.in_progress:
            raise NoActiveHand("No hand in progress.")

        winner_index = self.table.roster.find_by_handle(winner_handle)
        if winner_index is None:
            raise InvalidWinner("Invalid winner.")
        return self.engine.end_hand(winner_index)

    @require_admin("open the next betting round")
    def next_round(self) -> None:
        self.engine.open_next_round()

    # Player actions

    def fold(self, handle: str) -> None:
        self.engine.process_action(handle, Action(type=ActionType.FOLD))

    def check_or_call(self, handle: str) -> int:
        return self.engine.process_action(handle, Action(type=ActionType.CHECK_CALL))

    def bet_or_raise(self, handle: str, target_total: float) -> int:
        """Bet or raise to a total for this round.

        Turn legality is reported before a bad amount.

        Args:
            handle: Caller handle.
            target_total: Requested total, floored to whole chips.

        Returns:
            Amount paid.
        """
        self.engine.assert_turn(handle)

        if (
            isinstance(target_total, bool)
            or not isinstance(target_total, (int, float))
            or not math.isfinite(target_total)
        ):
            raise InvalidAmount("Invalid amount.")

        action = Action(type=ActionType.BET_RAISE, amount=int(math.floor(target_total)))
        return self.engine.process_action(handle, action)

    # Outbound

    def public_state(self) -> dict:
        """Full public state: config, hand and players."""
        return self.table.to_dict()
