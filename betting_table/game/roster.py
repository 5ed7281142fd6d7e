"""Seating order and player lookup."""
import re
from typing import Iterator, Optional

from betting_table.game.errors import AlreadySeated, DuplicateName, InvalidName
from betting_table.game.player import Player
from betting_table.utils.logger import get_logger

logger = get_logger(__name__)

MAX_NAME_LENGTH = 16


def sanitize_name(name: object) -> str:
    """Trim a display name, cap its length, then collapse whitespace runs.

    The cap applies to the raw trimmed text, so a long run of spaces counts
    toward the limit before it is collapsed.

    Args:
        name: Raw name as received from the client.

    Returns:
        Cleaned name (may be empty).
    """
    if name is None:
        return ""
    capped = str(name).strip()[:MAX_NAME_LENGTH]
    return re.sub(r"\s+", " ", capped)


class PlayerRoster:
    """Players in seating order.

    Insertion order is seating order and therefore turn order. Players are
    addressed by their stable handle; positions are only resolved when needed.
    """

    def __init__(self):
        self._players: list[Player] = []

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players)

    def __getitem__(self, index: int) -> Player:
        return self._players[index]

    def join(self, handle: str, name: object, initial_stack: int) -> Player:
        """Seat a new player at the end of the table.

        Args:
            handle: Opaque connection identity.
            name: Requested display name.
            initial_stack: Chips the player starts with.

        Returns:
            The seated player.

        Raises:
            AlreadySeated: If the handle already holds a seat.
            InvalidName: If the cleaned name is empty.
            DuplicateName: If the name is taken (case-insensitive).
        """
        if self.find_by_handle(handle) is not None:
            raise AlreadySeated("You are already seated at the table.")

        clean = sanitize_name(name)
        if not clean:
            raise InvalidName("Invalid name.")

        if self.find_by_name(clean) is not None:
            raise DuplicateName(f"The name '{clean}' is already taken at this table.")

        player = Player(handle=handle, name=clean, stack=initial_stack)
        self._players.append(player)
        logger.info(f"{clean} joined the table at seat {len(self._players) - 1}")
        return player

    def remove(self, handle: str) -> Optional[Player]:
        """Remove a player's seat.

        Args:
            handle: Player handle.

        Returns:
            Removed player or None.
        """
        index = self.find_by_handle(handle)
        if index is None:
            return None
        player = self._players.pop(index)
        logger.info(f"{player.name} left the table")
        return player

    def find_by_handle(self, handle: str) -> Optional[int]:
        """Get the seat index of a handle, or None if not seated."""
        for index, player in enumerate(self._players):
            if player.handle == handle:
                return index
        return None

    def find_by_name(self, name: str) -> Optional[Player]:
        """Get player by name (case-insensitive)."""
        wanted = name.lower()
        for player in self._players:
            if player.name.lower() == wanted:
                return player
        return None

    def get(self, handle: str) -> Optional[Player]:
        """Get player by handle."""
        index = self.find_by_handle(handle)
        return None if index is None else self._players[index]

    def count_in_hand(self) -> int:
        """Number of players still contesting the hand."""
        return sum(1 for p in self._players if p.in_hand)

    def total_stacks(self) -> int:
        """Sum of all stacks at the table."""
        return sum(p.stack for p in self._players)

    def to_list(self) -> list[dict]:
        """Public projection of every seat, in seating order."""
        return [p.to_dict() for p in self._players]
