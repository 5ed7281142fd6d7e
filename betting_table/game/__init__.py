"""Betting table game engine."""
from .player import Player
from .roster import PlayerRoster, sanitize_name
from .table import Table, TableConfig, HandState
from .betting import BettingEngine, Action, ActionType

__all__ = [
    "Player",
    "PlayerRoster",
    "sanitize_name",
    "Table",
    "TableConfig",
    "HandState",
    "BettingEngine",
    "Action",
    "ActionType",
]
