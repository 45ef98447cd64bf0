"""
Repository layer for data access abstraction.
"""

from repositories.base_repository import BaseRepository
from repositories.interfaces import (
    IRosterRepository,
    LobbyClosedError,
    LobbyNotFoundError,
    RosterStoreError,
    SlotTakenError,
)
from repositories.roster_repository import RosterRepository

__all__ = [
    "BaseRepository",
    "RosterRepository",
    "IRosterRepository",
    "RosterStoreError",
    "LobbyNotFoundError",
    "LobbyClosedError",
    "SlotTakenError",
]
