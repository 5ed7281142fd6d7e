"""Betting round state machine."""
from enum import Enum
from dataclasses import dataclass
from typing import Optional

from betting_table.game.errors import (
    AlreadyFolded,
    BetLimitExceeded,
    BetTooSmall,
    HandDecided,
    HandInProgress,
    InsufficientPlayers,
    InvalidWinner,
    NoActiveHand,
    NotSeated,
    NotYourTurn,
    RoundStillOpen,
)
from betting_table.game.player import Player
from betting_table.game.table import Table
from betting_table.utils.logger import get_logger

logger = get_logger(__name__)

MIN_PLAYERS = 2


class ActionType(str, Enum):
    """Player action types."""
    FOLD = "fold"
    CHECK_CALL = "check_call"
    BET_RAISE = "bet_raise"


@dataclass
class Action:
    """A player's action.

    For BET_RAISE, amount is the total the player wants committed this
    round, not the increment.
    """
    type: ActionType
    amount: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "amount": self.amount,
        }


class BettingEngine:
    """Runs hands and betting rounds on a table.

    Every public mutator checks legality first and only then touches state,
    so a rejected call leaves the table exactly as it was.
    """

    def __init__(self, table: Table):
        """Initialize engine.

        Args:
            table: The table whose state this engine mutates.
        """
        self.table = table

    @property
    def hand(self):
        return self.table.hand

    @property
    def roster(self):
        return self.table.roster

    @property
    def config(self):
        return self.table.config

    # Turn rotation

    def next_in_hand(self, from_index: Optional[int]) -> Optional[int]:
        """Find the next seat still contesting the hand.

        Scans circularly from the seat after from_index through every seat,
        so from_index itself is checked last.

        Args:
            from_index: Seat to start after; None starts at seat 0.

        Returns:
            Seat index, or None if nobody is in the hand.
        """
        seats = len(self.roster)
        if seats == 0:
            return None

        start = -1 if from_index is None else from_index
        for step in range(1, seats + 1):
            index = (start + step) % seats
            if self.roster[index].in_hand:
                return index
        return None

    # Hand lifecycle

    def start_hand(self) -> None:
        """Start a new hand: move the button, post blinds, set first turn.

        Raises:
            HandInProgress: If a hand is already running.
            InsufficientPlayers: If fewer than two players are seated.
        """
        if self.hand.in_progress:
            raise HandInProgress("A hand is already in progress.")

        seats = len(self.roster)
        if seats < MIN_PLAYERS:
            raise InsufficientPlayers(f"At least {MIN_PLAYERS} players are needed.")

        for player in self.roster:
            player.in_hand = True
            player.reset_round()

        previous = -1 if self.hand.dealer_index is None else self.hand.dealer_index
        self.hand.dealer_index = (previous + 1) % seats
        self.hand.small_blind_index = self.next_in_hand(self.hand.dealer_index)
        self.hand.big_blind_index = self.next_in_hand(self.hand.small_blind_index)

        self.hand.in_progress = True
        self.hand.pot = 0
        self.hand.current_bet = 0
        self.hand.last_aggressor_index = None
        self.hand.round_closed = False

        small = self._post_blind(self.hand.small_blind_index, self.config.small_blind)
        big = self._post_blind(self.hand.big_blind_index, self.config.big_blind)

        # A short-stacked big blind can post less than the small blind
        self.hand.current_bet = max(
            self.roster[self.hand.small_blind_index].bet_this_round,
            self.roster[self.hand.big_blind_index].bet_this_round,
        )
        self.hand.turn_index = self.next_in_hand(self.hand.big_blind_index)

        logger.info(
            f"Hand started: dealer={self.roster[self.hand.dealer_index].name}, "
            f"blinds posted {small}/{big}, first to act="
            f"{self.roster[self.hand.turn_index].name}"
        )

    def _post_blind(self, index: int, amount: int) -> int:
        """Post a blind, all-in if the stack is short."""
        paid = self.roster[index].pay(amount)
        self.hand.pot += paid
        return paid

    def end_hand(self, winner_index: Optional[int]) -> int:
        """Award the whole pot to the declared winner and go idle.

        Args:
            winner_index: Seat index of the winner.

        Returns:
            Amount awarded.

        Raises:
            InvalidWinner: If the index does not point at a seat.
        """
        if winner_index is None or not 0 <= winner_index < len(self.roster):
            raise InvalidWinner("Invalid winner.")

        winner = self.roster[winner_index]
        amount = self.hand.pot
        winner.win_pot(amount)
        self._clear_hand()

        logger.info(f"Hand ended: {winner.name} wins {amount}")
        return amount

    def open_next_round(self) -> None:
        """Open a fresh betting round after the next street was dealt.

        Bets for the round are cleared, the pot carries over and action
        starts left of the button.

        Raises:
            NoActiveHand: If no hand is running.
            HandDecided: If fewer than two players are still in the hand.
            RoundStillOpen: If the current round has not closed yet.
        """
        if not self.hand.in_progress:
            raise NoActiveHand("No hand in progress.")
        if self.roster.count_in_hand() < MIN_PLAYERS:
            raise HandDecided("The hand is already decided. Award the pot.")
        if not self.hand.round_closed:
            raise RoundStillOpen("The current betting round is still open.")

        for player in self.roster:
            player.reset_round()

        self.hand.current_bet = 0
        self.hand.last_aggressor_index = None
        self.hand.round_closed = False
        self.hand.turn_index = self.next_in_hand(self.hand.dealer_index)

        logger.info(f"New betting round opened, pot={self.hand.pot}")

    def abandon_hand(self) -> None:
        """Drop the running hand after a seat disappeared.

        Seat indices shift when a player is removed, so blind and turn
        tracking cannot continue. Chips already in the pot are forfeited.
        """
        if self.hand.in_progress:
            logger.warning(f"Hand abandoned, {self.hand.pot} chips in the pot forfeited")
        self._clear_hand()

    def remove_player(self, handle: str) -> Optional[Player]:
        """Take a player off the table, folding them first if they are in a hand.

        Removing anyone while a hand is running abandons that hand.

        Args:
            handle: Player handle.

        Returns:
            Removed player or None if the handle was not seated.
        """
        index = self.roster.find_by_handle(handle)
        if index is None:
            return None

        was_running = self.hand.in_progress
        if was_running and self.roster[index].in_hand:
            self.fold(index)

        player = self.roster.remove(handle)

        if was_running:
            self.abandon_hand()
        if len(self.roster) == 0:
            self.hand.dealer_index = None

        return player

    def reset_table(self) -> None:
        """Clear the hand and the button and give everyone a fresh stack."""
        self.hand.reset(keep_dealer=False)
        for player in self.roster:
            player.reset_for_table(self.config.initial_stack)
        logger.info(f"Table reset, stacks restored to {self.config.initial_stack}")

    def _clear_hand(self) -> None:
        self.hand.reset()
        for player in self.roster:
            player.in_hand = False
            player.reset_round()

    # Player actions

    def assert_turn(self, handle: str) -> int:
        """Resolve the acting player and check it may act now.

        Args:
            handle: Caller handle.

        Returns:
            Seat index of the caller.

        Raises:
            NotSeated, NoActiveHand, NotYourTurn, AlreadyFolded.
        """
        index = self.roster.find_by_handle(handle)
        if index is None:
            raise NotSeated("You are not seated at the table.")
        if not self.hand.in_progress:
            raise NoActiveHand("No hand in progress.")
        if self.hand.turn_index != index:
            raise NotYourTurn("It is not your turn.")
        if not self.roster[index].in_hand:
            raise AlreadyFolded("You have already folded.")
        return index

    def process_action(self, handle: str, action: Action) -> int:
        """Validate and apply an action, then move the turn on.

        Args:
            handle: Acting player's handle.
            action: The action.

        Returns:
            Chips the player moved into the pot.
        """
        index = self.assert_turn(handle)
        player = self.roster[index]

        if action.type == ActionType.FOLD:
            self.fold(index)
            paid = 0
            logger.info(f"{player.name} folds")

        elif action.type == ActionType.CHECK_CALL:
            paid = self.check_or_call(index)
            if paid:
                logger.info(f"{player.name} calls {paid}")
            else:
                logger.info(f"{player.name} checks")

        elif action.type == ActionType.BET_RAISE:
            paid = self.bet_or_raise(index, action.amount)
            logger.info(f"{player.name} bets/raises to {action.amount} (paid {paid})")

        else:
            raise ValueError(f"Unknown action {action.type}")

        self.advance_turn()
        return paid

    def fold(self, index: int) -> None:
        """Fold a player; a lone survivor ends the action."""
        self.roster[index].fold()

        if self.roster.count_in_hand() <= 1:
            self.hand.turn_index = None

    def check_or_call(self, index: int) -> int:
        """Match the current bet as far as the stack allows.

        Returns:
            Amount paid (0 for a check).
        """
        player = self.roster[index]
        paid = player.pay(self.hand.current_bet - player.bet_this_round)
        self.hand.pot += paid
        player.has_acted = True
        return paid

    def bet_or_raise(self, index: int, target_total: int) -> int:
        """Bet or raise so this round's total becomes target_total.

        The limit is checked against the requested target, so going all-in
        below the target is legal. Only a raise that actually reaches the
        new current bet reopens the action.

        Args:
            index: Seat index of the bettor.
            target_total: Desired total contribution this round.

        Returns:
            Amount paid.

        Raises:
            BetTooSmall: If target does not exceed the current bet.
            BetLimitExceeded: If the increment is above the bet limit.
        """
        current_bet = self.hand.current_bet
        min_target = 1 if current_bet == 0 else current_bet + 1
        if target_total < min_target:
            raise BetTooSmall(f"Bet/raise must be at least {min_target}.")

        increment = target_total if current_bet == 0 else target_total - current_bet
        if increment > self.config.bet_limit:
            raise BetLimitExceeded(f"Exceeds the per-action limit ({self.config.bet_limit}).")

        player = self.roster[index]
        paid = player.pay(target_total - player.bet_this_round)
        self.hand.pot += paid
        self.hand.current_bet = max(current_bet, player.bet_this_round)

        if player.bet_this_round == self.hand.current_bet:
            self.hand.last_aggressor_index = index
            for other_index, other in enumerate(self.roster):
                if other_index != index and other.in_hand:
                    other.has_acted = False
            self.hand.round_closed = False

        player.has_acted = True
        return paid

    # Round closure

    def is_round_closed(self) -> bool:
        """Check if every player in the hand is matched and has acted.

        All-in players count as matched whatever they put in. The last
        aggressor counts as having acted.
        """
        for index, player in enumerate(self.roster):
            if not player.in_hand:
                continue
            matched = player.bet_this_round == self.hand.current_bet or player.is_all_in
            if not matched:
                return False
            if not player.has_acted and index != self.hand.last_aggressor_index:
                return False
        return True

    def advance_turn(self) -> None:
        """Close the round or pass the turn to the next player in the hand."""
        if not self.hand.in_progress:
            return

        if self.roster.count_in_hand() <= 1:
            self.hand.turn_index = None
            return

        if self.is_round_closed():
            self.hand.round_closed = True
            self.hand.turn_index = None
            logger.info(f"Betting round closed, pot={self.hand.pot}")
            return

        self.hand.turn_index = self.next_in_hand(self.hand.turn_index)
