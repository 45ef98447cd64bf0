"""
Slot assignment engine: validates join/leave/kick requests and builds the
canonical roster view.
"""

import functools
import logging
import sqlite3

from domain.models.lobby import Lobby
from domain.models.roster import Assignment, Role, RosterEntry, RosterView, Team, build_slot_grid
from repositories.interfaces import (
    IRosterRepository,
    LobbyClosedError,
    LobbyNotFoundError,
    SlotTakenError,
)
from services import error_codes
from services.result import Result

logger = logging.getLogger("roster_bot.services.roster")


def parse_team(value) -> Team | None:
    if isinstance(value, Team):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Team(value)
    except ValueError:
        return None


def parse_role(value) -> Role | None:
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def _storage_guard(operation: str):
    """Turn unexpected sqlite errors into a logged STORAGE_ERROR result."""

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except sqlite3.Error:
                logger.exception(f"Storage failure during {operation}")
                return Result.fail(f"Failed to {operation}", code=error_codes.STORAGE_ERROR)

        return wrapper

    return decorator


class RosterService:
    """
    Orchestrates roster changes against a roster store.

    Every public method resolves to exactly one Result: the value on success
    or a failure carrying one of the roster error codes.
    """

    def __init__(self, roster_repo: IRosterRepository):
        self.roster_repo = roster_repo

    # -- Lobbies --

    @_storage_guard("create lobby")
    def create_lobby(self, guild_id: str, name: str) -> Result[Lobby]:
        if not guild_id or not name or not str(name).strip():
            return Result.fail("Guild ID and name are required", code=error_codes.VALIDATION_ERROR)
        lobby = self.roster_repo.create_lobby(str(guild_id), str(name).strip())
        return Result.ok(lobby)

    @_storage_guard("get lobby")
    def get_lobby(self, lobby_id: str) -> Result[Lobby]:
        lobby = self.roster_repo.get_lobby(lobby_id)
        if lobby is None:
            return Result.fail("Lobby not found", code=error_codes.LOBBY_NOT_FOUND)
        return Result.ok(lobby)

    @_storage_guard("list lobbies")
    def list_lobbies(self, guild_id: str) -> Result[list[Lobby]]:
        if not guild_id:
            return Result.fail("Guild ID is required", code=error_codes.VALIDATION_ERROR)
        return Result.ok(self.roster_repo.list_lobbies(str(guild_id)))

    @_storage_guard("close lobby")
    def close_lobby(self, lobby_id: str) -> Result[None]:
        """Close a lobby. Closing an already closed lobby also succeeds."""
        if not self.roster_repo.close_lobby(lobby_id):
            return Result.fail("Lobby not found", code=error_codes.LOBBY_NOT_FOUND)
        logger.info(f"Closed lobby {lobby_id}")
        return Result.ok()

    @_storage_guard("delete lobby")
    def delete_lobby(self, lobby_id: str) -> Result[None]:
        if not self.roster_repo.delete_lobby(lobby_id):
            return Result.fail("Lobby not found", code=error_codes.LOBBY_NOT_FOUND)
        return Result.ok()

    @_storage_guard("get player count")
    def player_count(self, lobby_id: str) -> Result[int]:
        return Result.ok(self.roster_repo.count_assignments(lobby_id))

    # -- Slots --

    @_storage_guard("join lobby")
    def join(
        self,
        lobby_id: str,
        external_id: str,
        display_name: str | None,
        team,
        role,
    ) -> Result[Assignment]:
        """
        Put a player into a (team, role) slot.

        The uniqueness constraint on the slot decides races: of two
        concurrent joins to the same slot exactly one succeeds and the other
        gets SLOT_TAKEN.
        """
        logger.info(f"Join request: lobby={lobby_id}, user={external_id}, team={team}, role={role}")
        if not external_id or not team or not role:
            return Result.fail("Discord ID, team and role are required", code=error_codes.VALIDATION_ERROR)

        parsed_team = parse_team(team)
        if parsed_team is None:
            return Result.fail("Invalid team value", code=error_codes.VALIDATION_ERROR)
        parsed_role = parse_role(role)
        if parsed_role is None:
            return Result.fail("Invalid role value", code=error_codes.VALIDATION_ERROR)

        lobby = self.roster_repo.get_lobby(lobby_id)
        if lobby is None:
            return Result.fail("Lobby not found", code=error_codes.LOBBY_NOT_FOUND)
        if lobby.is_closed:
            return Result.fail("Lobby is closed", code=error_codes.LOBBY_CLOSED)

        player = self.roster_repo.find_or_create_player(str(external_id), display_name or "")

        # The lobby can still vanish or close between the read above and the
        # insert; the store re-checks both inside the insert.
        try:
            assignment = self.roster_repo.insert_assignment(
                lobby_id, player.player_id, parsed_team, parsed_role
            )
        except SlotTakenError:
            return Result.fail("This role in the team is already taken", code=error_codes.SLOT_TAKEN)
        except LobbyClosedError:
            return Result.fail("Lobby is closed", code=error_codes.LOBBY_CLOSED)
        except LobbyNotFoundError:
            return Result.fail("Lobby not found", code=error_codes.LOBBY_NOT_FOUND)

        logger.info(
            f"Player {external_id} joined lobby {lobby_id} as {parsed_team.value}/{parsed_role.value}"
        )
        return Result.ok(assignment)

    @_storage_guard("leave lobby")
    def leave(self, lobby_id: str, external_id: str) -> Result[None]:
        if not external_id:
            return Result.fail("Discord ID is required", code=error_codes.VALIDATION_ERROR)
        if not self.roster_repo.remove_assignment_by_player(lobby_id, str(external_id)):
            return Result.fail("Player not found in lobby", code=error_codes.NOT_IN_LOBBY)
        logger.info(f"Player {external_id} left lobby {lobby_id}")
        return Result.ok()

    @_storage_guard("kick player")
    def kick(self, lobby_id: str, team, role) -> Result[RosterEntry]:
        """Clear a slot; the value is the entry that was removed."""
        if not team or not role:
            return Result.fail("Team and role are required", code=error_codes.VALIDATION_ERROR)
        parsed_team = parse_team(team)
        parsed_role = parse_role(role)
        if parsed_team is None or parsed_role is None:
            return Result.fail("Invalid team or role value", code=error_codes.VALIDATION_ERROR)

        removed = self.roster_repo.remove_assignment_by_slot(lobby_id, parsed_team, parsed_role)
        if removed is None:
            return Result.fail("No player found in this position", code=error_codes.SLOT_EMPTY)
        logger.info(
            f"Kicked {removed.external_id} from {parsed_team.value}/{parsed_role.value} in lobby {lobby_id}"
        )
        return Result.ok(removed)

    # -- Views --

    @_storage_guard("get roster")
    def build_roster_view(self, lobby_id: str) -> Result[RosterView]:
        """Full 2 x 5 roster for a lobby, empty slots included."""
        lobby = self.roster_repo.get_lobby(lobby_id)
        if lobby is None:
            return Result.fail("Lobby not found", code=error_codes.LOBBY_NOT_FOUND)
        entries = self.roster_repo.get_roster(lobby_id)
        return Result.ok(RosterView(lobby=lobby, players=entries, teams=build_slot_grid(entries)))
