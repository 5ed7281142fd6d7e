"""Player model."""
from dataclasses import dataclass


@dataclass
class Player:
    """A player seated at the table."""

    handle: str
    name: str
    stack: int = 0
    in_hand: bool = False
    bet_this_round: int = 0
    has_acted: bool = False

    def reset_round(self) -> None:
        """Clear per-round betting fields."""
        self.bet_this_round = 0
        self.has_acted = False

    def reset_for_table(self, initial_stack: int) -> None:
        """Restore the starting stack and clear all hand fields.

        Args:
            initial_stack: Stack every player starts with.
        """
        self.stack = initial_stack
        self.in_hand = False
        self.reset_round()

    def pay(self, amount: int) -> int:
        """Move chips from the stack into this round's bet, going all-in if short.

        Args:
            amount: Amount owed.

        Returns:
            Actual amount paid (may be less if all-in).
        """
        paid = min(self.stack, max(0, amount))
        self.stack -= paid
        self.bet_this_round += paid
        return paid

    def fold(self) -> None:
        """Fold the hand."""
        self.in_hand = False
        self.has_acted = True

    def win_pot(self, amount: int) -> None:
        """Win chips from the pot.

        Args:
            amount: Amount won.
        """
        self.stack += amount

    @property
    def is_all_in(self) -> bool:
        """Check if player has nothing left to put in."""
        return self.stack == 0

    def to_dict(self) -> dict:
        """Convert to dictionary for broadcasting (everything is public)."""
        return {
            "id": self.handle,
            "name": self.name,
            "stack": self.stack,
            "in_hand": self.in_hand,
            "bet_this_round": self.bet_this_round,
            "has_acted": self.has_acted,
        }
