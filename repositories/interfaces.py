"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod

from domain.models.lobby import Lobby
from domain.models.player import Player
from domain.models.roster import Assignment, Role, RosterEntry, Team


class RosterStoreError(Exception):
    """Base class for roster store rejections."""


class LobbyNotFoundError(RosterStoreError):
    def __init__(self, lobby_id: str):
        super().__init__(f"Lobby {lobby_id} not found")
        self.lobby_id = lobby_id


class LobbyClosedError(RosterStoreError):
    def __init__(self, lobby_id: str):
        super().__init__(f"Lobby {lobby_id} is closed")
        self.lobby_id = lobby_id


class SlotTakenError(RosterStoreError):
    def __init__(self, lobby_id: str, team: Team, role: Role):
        super().__init__(f"{team.value}/{role.value} is already taken in lobby {lobby_id}")
        self.lobby_id = lobby_id
        self.team = team
        self.role = role


class IRosterRepository(ABC):
    # Lobbies
    @abstractmethod
    def create_lobby(self, guild_id: str, name: str) -> Lobby: ...

    @abstractmethod
    def get_lobby(self, lobby_id: str) -> Lobby | None: ...

    @abstractmethod
    def list_lobbies(self, guild_id: str) -> list[Lobby]: ...

    @abstractmethod
    def close_lobby(self, lobby_id: str) -> bool: ...

    @abstractmethod
    def delete_lobby(self, lobby_id: str) -> bool: ...

    # Players
    @abstractmethod
    def find_or_create_player(self, external_id: str, display_name: str) -> Player: ...

    @abstractmethod
    def get_player_by_external_id(self, external_id: str) -> Player | None: ...

    # Assignments
    @abstractmethod
    def insert_assignment(self, lobby_id: str, player_id: str, team: Team, role: Role) -> Assignment: ...

    @abstractmethod
    def remove_assignment_by_player(self, lobby_id: str, external_id: str) -> bool: ...

    @abstractmethod
    def remove_assignment_by_slot(self, lobby_id: str, team: Team, role: Role) -> RosterEntry | None: ...

    @abstractmethod
    def count_assignments(self, lobby_id: str) -> int: ...

    @abstractmethod
    def get_roster(self, lobby_id: str) -> list[RosterEntry]: ...
