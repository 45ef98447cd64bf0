"""
Repository for lobby, player and slot-assignment persistence.
"""

import logging
import sqlite3
import uuid

from domain.models.lobby import Lobby
from domain.models.player import Player
from domain.models.roster import Assignment, Role, RosterEntry, Team
from repositories.base_repository import BaseRepository
from repositories.interfaces import (
    IRosterRepository,
    LobbyClosedError,
    LobbyNotFoundError,
    SlotTakenError,
)

logger = logging.getLogger("roster_bot.repositories.roster")


def generate_id() -> str:
    return uuid.uuid4().hex


class RosterRepository(BaseRepository, IRosterRepository):
    """
    Roster store.

    Slot uniqueness and player identity are enforced by table constraints;
    callers never need to read before writing.
    """

    # -- Lobbies --

    def create_lobby(self, guild_id: str, name: str) -> Lobby:
        lobby_id = generate_id()
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO lobbies (id, guild_id, name) VALUES (?, ?, ?)",
                (lobby_id, guild_id, name),
            )
            cursor.execute(
                "SELECT id, guild_id, name, is_active, created_at FROM lobbies WHERE id = ?",
                (lobby_id,),
            )
            row = cursor.fetchone()
        logger.info(f"Created lobby {lobby_id} for guild {guild_id}: {name!r}")
        return Lobby.from_row(row)

    def get_lobby(self, lobby_id: str) -> Lobby | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, guild_id, name, is_active, created_at FROM lobbies WHERE id = ?",
                (lobby_id,),
            )
            row = cursor.fetchone()
            return Lobby.from_row(row) if row else None

    def list_lobbies(self, guild_id: str) -> list[Lobby]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, guild_id, name, is_active, created_at
                FROM lobbies
                WHERE guild_id = ?
                ORDER BY rowid
                """,
                (guild_id,),
            )
            return [Lobby.from_row(row) for row in cursor.fetchall()]

    def close_lobby(self, lobby_id: str) -> bool:
        """
        Mark a lobby inactive.

        SQLite counts a matched row as changed even when is_active is already
        0, so closing a closed lobby reports True.
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("UPDATE lobbies SET is_active = 0 WHERE id = ?", (lobby_id,))
            return cursor.rowcount > 0

    def delete_lobby(self, lobby_id: str) -> bool:
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM lobbies WHERE id = ?", (lobby_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"Deleted lobby {lobby_id}")
        return deleted

    # -- Players --

    def find_or_create_player(self, external_id: str, display_name: str) -> Player:
        """
        Return the player for external_id, creating it if needed.

        A single upsert keyed on the UNIQUE external_id column, so two
        concurrent first calls still produce one row. A non-empty display
        name refreshes the stored one.
        """
        name = display_name or ""
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO players (id, external_id, display_name)
                VALUES (?, ?, ?)
                ON CONFLICT(external_id) DO UPDATE SET
                    display_name = excluded.display_name,
                    updated_at = CURRENT_TIMESTAMP
                WHERE ? != '' AND excluded.display_name != players.display_name
                """,
                (generate_id(), external_id, name or external_id, name),
            )
            cursor.execute(
                "SELECT id, external_id, display_name, created_at FROM players WHERE external_id = ?",
                (external_id,),
            )
            return Player.from_row(cursor.fetchone())

    def get_player_by_external_id(self, external_id: str) -> Player | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, external_id, display_name, created_at FROM players WHERE external_id = ?",
                (external_id,),
            )
            row = cursor.fetchone()
            return Player.from_row(row) if row else None

    # -- Assignments --

    def insert_assignment(self, lobby_id: str, player_id: str, team: Team, role: Role) -> Assignment:
        """
        Put a player into a slot.

        The insert selects from the lobby row itself, so a missing or closed
        lobby inserts nothing. A duplicate slot trips the UNIQUE constraint.

        Raises:
            LobbyNotFoundError, LobbyClosedError, SlotTakenError
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO lobby_players (lobby_id, player_id, team, role)
                    SELECT id, ?, ?, ? FROM lobbies WHERE id = ? AND is_active = 1
                    """,
                    (player_id, team.value, role.value, lobby_id),
                )
            except sqlite3.IntegrityError as exc:
                if "UNIQUE" not in str(exc):
                    raise
                raise SlotTakenError(lobby_id, team, role) from exc

            if cursor.rowcount == 0:
                cursor.execute("SELECT is_active FROM lobbies WHERE id = ?", (lobby_id,))
                row = cursor.fetchone()
                if row is None:
                    raise LobbyNotFoundError(lobby_id)
                raise LobbyClosedError(lobby_id)

            cursor.execute(
                "SELECT joined_at FROM lobby_players WHERE id = ?",
                (cursor.lastrowid,),
            )
            joined_at = cursor.fetchone()["joined_at"]

        return Assignment(
            lobby_id=lobby_id,
            player_id=player_id,
            team=team,
            role=role,
            joined_at=joined_at,
        )

    def remove_assignment_by_player(self, lobby_id: str, external_id: str) -> bool:
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                DELETE FROM lobby_players
                WHERE lobby_id = ? AND player_id IN (
                    SELECT id FROM players WHERE external_id = ?
                )
                """,
                (lobby_id, external_id),
            )
            return cursor.rowcount > 0

    def remove_assignment_by_slot(self, lobby_id: str, team: Team, role: Role) -> RosterEntry | None:
        """
        Clear a slot and return who held it, or None if it was empty.

        The occupant is read under the same write lock as the delete, so the
        returned entry is always the row that was removed.
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT lp.id, p.external_id, p.display_name, lp.team, lp.role
                FROM lobby_players lp
                JOIN players p ON lp.player_id = p.id
                WHERE lp.lobby_id = ? AND lp.team = ? AND lp.role = ?
                """,
                (lobby_id, team.value, role.value),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            cursor.execute("DELETE FROM lobby_players WHERE id = ?", (row["id"],))
            return self._row_to_entry(row)

    def count_assignments(self, lobby_id: str) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT COUNT(*) AS count FROM lobby_players WHERE lobby_id = ?",
                (lobby_id,),
            )
            return cursor.fetchone()["count"]

    def get_roster(self, lobby_id: str) -> list[RosterEntry]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT p.external_id, p.display_name, lp.team, lp.role
                FROM lobby_players lp
                JOIN players p ON lp.player_id = p.id
                WHERE lp.lobby_id = ?
                ORDER BY lp.id
                """,
                (lobby_id,),
            )
            return [self._row_to_entry(row) for row in cursor.fetchall()]

    @staticmethod
    def _row_to_entry(row) -> RosterEntry:
        return RosterEntry(
            external_id=row["external_id"],
            display_name=row["display_name"],
            team=Team(row["team"]),
            role=Role(row["role"]),
        )
