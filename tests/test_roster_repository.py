"""
Tests for RosterRepository.
"""

import sqlite3
import threading

import pytest

from domain.models.roster import Role, Team
from repositories.interfaces import LobbyClosedError, LobbyNotFoundError, SlotTakenError
from repositories.roster_repository import RosterRepository
from tests.conftest import TEST_GUILD_ID, TEST_GUILD_ID_SECONDARY


def _raw_count(db_path: str, sql: str, params=()) -> int:
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute(sql, params).fetchone()[0]
    finally:
        conn.close()


class TestLobbies:
    def test_create_and_get_lobby(self, roster_repository):
        lobby = roster_repository.create_lobby(TEST_GUILD_ID, "Friday Night")

        fetched = roster_repository.get_lobby(lobby.lobby_id)
        assert fetched is not None
        assert fetched.guild_id == TEST_GUILD_ID
        assert fetched.name == "Friday Night"
        assert fetched.is_active is True
        assert fetched.created_at is not None

    def test_create_generates_unique_ids(self, roster_repository):
        ids = {roster_repository.create_lobby(TEST_GUILD_ID, f"L{i}").lobby_id for i in range(20)}
        assert len(ids) == 20

    def test_get_missing_lobby(self, roster_repository):
        assert roster_repository.get_lobby("nope") is None

    def test_list_lobbies_scoped_to_guild_in_insertion_order(self, roster_repository):
        first = roster_repository.create_lobby(TEST_GUILD_ID, "First")
        other = roster_repository.create_lobby(TEST_GUILD_ID_SECONDARY, "Other")
        second = roster_repository.create_lobby(TEST_GUILD_ID, "Second")
        roster_repository.close_lobby(second.lobby_id)

        lobbies = roster_repository.list_lobbies(TEST_GUILD_ID)

        assert [l.lobby_id for l in lobbies] == [first.lobby_id, second.lobby_id]
        assert lobbies[1].is_active is False
        assert [l.lobby_id for l in roster_repository.list_lobbies(TEST_GUILD_ID_SECONDARY)] == [other.lobby_id]

    def test_close_lobby(self, roster_repository, lobby):
        assert roster_repository.close_lobby(lobby.lobby_id) is True
        assert roster_repository.get_lobby(lobby.lobby_id).is_active is False

    def test_reclosing_a_closed_lobby_reports_success(self, roster_repository, lobby):
        """Policy: close is idempotent; only unknown ids fail."""
        assert roster_repository.close_lobby(lobby.lobby_id) is True
        assert roster_repository.close_lobby(lobby.lobby_id) is True

    def test_close_missing_lobby(self, roster_repository):
        assert roster_repository.close_lobby("nope") is False

    def test_delete_lobby_cascades_assignments(self, roster_repository, lobby, repo_db_path):
        for i, role in enumerate(Role):
            player = roster_repository.find_or_create_player(f"u{i}", f"User {i}")
            roster_repository.insert_assignment(lobby.lobby_id, player.player_id, Team.LIGHT, role)
        assert roster_repository.count_assignments(lobby.lobby_id) == 5

        assert roster_repository.delete_lobby(lobby.lobby_id) is True

        assert roster_repository.get_lobby(lobby.lobby_id) is None
        assert _raw_count(repo_db_path, "SELECT COUNT(*) FROM lobby_players WHERE lobby_id = ?", (lobby.lobby_id,)) == 0
        # Players survive their lobby
        assert roster_repository.get_player_by_external_id("u0") is not None

    def test_delete_missing_lobby(self, roster_repository):
        assert roster_repository.delete_lobby("nope") is False


class TestPlayers:
    def test_find_or_create_returns_same_player(self, roster_repository):
        first = roster_repository.find_or_create_player("u1", "Alice")
        second = roster_repository.find_or_create_player("u1", "Alice")

        assert first.player_id == second.player_id
        assert first.external_id == "u1"

    def test_display_name_refreshes_when_supplied(self, roster_repository):
        original = roster_repository.find_or_create_player("u1", "Alice")
        renamed = roster_repository.find_or_create_player("u1", "Alicia")

        assert renamed.player_id == original.player_id
        assert renamed.display_name == "Alicia"

    def test_empty_display_name_keeps_stored_name(self, roster_repository):
        roster_repository.find_or_create_player("u1", "Alice")
        again = roster_repository.find_or_create_player("u1", "")

        assert again.display_name == "Alice"

    def test_missing_display_name_defaults_to_external_id(self, roster_repository):
        player = roster_repository.find_or_create_player("u9", "")
        assert player.display_name == "u9"

    def test_concurrent_first_calls_create_one_row(self, repo_db_path):
        repos = [RosterRepository(repo_db_path) for _ in range(8)]
        barrier = threading.Barrier(len(repos))
        results = []
        errors = []

        def worker(repo):
            try:
                barrier.wait()
                results.append(repo.find_or_create_player("racer", "Racer").player_id)
            except Exception as exc:  # pragma: no cover - surfaced by assertion below
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(repo,)) for repo in repos]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(set(results)) == 1
        assert _raw_count(repo_db_path, "SELECT COUNT(*) FROM players WHERE external_id = 'racer'") == 1


class TestAssignments:
    def test_insert_assignment(self, roster_repository, lobby):
        player = roster_repository.find_or_create_player("u1", "Alice")

        assignment = roster_repository.insert_assignment(lobby.lobby_id, player.player_id, Team.LIGHT, Role.CARRY)

        assert assignment.lobby_id == lobby.lobby_id
        assert assignment.player_id == player.player_id
        assert assignment.team is Team.LIGHT
        assert assignment.role is Role.CARRY
        assert assignment.joined_at is not None
        assert roster_repository.count_assignments(lobby.lobby_id) == 1

    def test_duplicate_slot_raises_slot_taken(self, roster_repository, lobby):
        alice = roster_repository.find_or_create_player("u1", "Alice")
        bob = roster_repository.find_or_create_player("u2", "Bob")
        roster_repository.insert_assignment(lobby.lobby_id, alice.player_id, Team.LIGHT, Role.CARRY)

        with pytest.raises(SlotTakenError):
            roster_repository.insert_assignment(lobby.lobby_id, bob.player_id, Team.LIGHT, Role.CARRY)

        assert roster_repository.count_assignments(lobby.lobby_id) == 1

    def test_same_role_on_other_team_is_free(self, roster_repository, lobby):
        alice = roster_repository.find_or_create_player("u1", "Alice")
        bob = roster_repository.find_or_create_player("u2", "Bob")
        roster_repository.insert_assignment(lobby.lobby_id, alice.player_id, Team.LIGHT, Role.MID)
        roster_repository.insert_assignment(lobby.lobby_id, bob.player_id, Team.DARK, Role.MID)

        assert roster_repository.count_assignments(lobby.lobby_id) == 2

    def test_same_slot_in_other_lobby_is_free(self, roster_repository, lobby):
        other = roster_repository.create_lobby(TEST_GUILD_ID, "Other")
        alice = roster_repository.find_or_create_player("u1", "Alice")
        bob = roster_repository.find_or_create_player("u2", "Bob")
        roster_repository.insert_assignment(lobby.lobby_id, alice.player_id, Team.LIGHT, Role.MID)
        roster_repository.insert_assignment(other.lobby_id, bob.player_id, Team.LIGHT, Role.MID)

        assert roster_repository.count_assignments(other.lobby_id) == 1

    def test_player_may_hold_two_slots_in_one_lobby(self, roster_repository, lobby):
        alice = roster_repository.find_or_create_player("u1", "Alice")
        roster_repository.insert_assignment(lobby.lobby_id, alice.player_id, Team.LIGHT, Role.MID)
        roster_repository.insert_assignment(lobby.lobby_id, alice.player_id, Team.DARK, Role.SUPPORT)

        assert roster_repository.count_assignments(lobby.lobby_id) == 2

    def test_insert_into_missing_lobby(self, roster_repository):
        player = roster_repository.find_or_create_player("u1", "Alice")

        with pytest.raises(LobbyNotFoundError):
            roster_repository.insert_assignment("nope", player.player_id, Team.LIGHT, Role.CARRY)

    def test_insert_into_closed_lobby(self, roster_repository, lobby):
        player = roster_repository.find_or_create_player("u1", "Alice")
        roster_repository.close_lobby(lobby.lobby_id)

        with pytest.raises(LobbyClosedError):
            roster_repository.insert_assignment(lobby.lobby_id, player.player_id, Team.LIGHT, Role.CARRY)
        assert roster_repository.count_assignments(lobby.lobby_id) == 0

    def test_remove_by_player(self, roster_repository, lobby):
        alice = roster_repository.find_or_create_player("u1", "Alice")
        roster_repository.insert_assignment(lobby.lobby_id, alice.player_id, Team.LIGHT, Role.CARRY)

        assert roster_repository.remove_assignment_by_player(lobby.lobby_id, "u1") is True
        assert roster_repository.remove_assignment_by_player(lobby.lobby_id, "u1") is False
        assert roster_repository.count_assignments(lobby.lobby_id) == 0

    def test_remove_by_unknown_player(self, roster_repository, lobby):
        assert roster_repository.remove_assignment_by_player(lobby.lobby_id, "ghost") is False

    def test_remove_by_slot_returns_removed_entry(self, roster_repository, lobby):
        alice = roster_repository.find_or_create_player("u1", "Alice")
        roster_repository.insert_assignment(lobby.lobby_id, alice.player_id, Team.DARK, Role.SUPPORT)

        removed = roster_repository.remove_assignment_by_slot(lobby.lobby_id, Team.DARK, Role.SUPPORT)

        assert (removed.external_id, removed.display_name, removed.team, removed.role) == (
            "u1",
            "Alice",
            Team.DARK,
            Role.SUPPORT,
        )
        assert roster_repository.remove_assignment_by_slot(lobby.lobby_id, Team.DARK, Role.SUPPORT) is None
        assert roster_repository.count_assignments(lobby.lobby_id) == 0

    def test_concurrent_slot_removals_report_one_occupant(self, repo_db_path, lobby):
        setup_repo = RosterRepository(repo_db_path)
        alice = setup_repo.find_or_create_player("u1", "Alice")
        setup_repo.insert_assignment(lobby.lobby_id, alice.player_id, Team.LIGHT, Role.MID)
        barrier = threading.Barrier(4)
        outcomes = []

        def worker():
            repo = RosterRepository(repo_db_path)
            barrier.wait()
            outcomes.append(repo.remove_assignment_by_slot(lobby.lobby_id, Team.LIGHT, Role.MID))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        removed = [entry for entry in outcomes if entry is not None]
        assert len(outcomes) == 4
        assert [entry.external_id for entry in removed] == ["u1"]

    def test_get_roster(self, roster_repository, lobby):
        alice = roster_repository.find_or_create_player("u1", "Alice")
        bob = roster_repository.find_or_create_player("u2", "Bob")
        roster_repository.insert_assignment(lobby.lobby_id, alice.player_id, Team.LIGHT, Role.CARRY)
        roster_repository.insert_assignment(lobby.lobby_id, bob.player_id, Team.DARK, Role.HARDSUPPORT)

        roster = roster_repository.get_roster(lobby.lobby_id)

        assert [(e.external_id, e.display_name, e.team, e.role) for e in roster] == [
            ("u1", "Alice", Team.LIGHT, Role.CARRY),
            ("u2", "Bob", Team.DARK, Role.HARDSUPPORT),
        ]


    def test_concurrent_inserts_to_same_slot_have_one_winner(self, repo_db_path, lobby):
        setup_repo = RosterRepository(repo_db_path)
        players = [setup_repo.find_or_create_player(f"u{i}", f"User {i}") for i in range(6)]
        barrier = threading.Barrier(len(players))
        outcomes = []

        def worker(player):
            repo = RosterRepository(repo_db_path)
            barrier.wait()
            try:
                repo.insert_assignment(lobby.lobby_id, player.player_id, Team.LIGHT, Role.OFFLANE)
                outcomes.append("ok")
            except SlotTakenError:
                outcomes.append("taken")

        threads = [threading.Thread(target=worker, args=(p,)) for p in players]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 1
        assert outcomes.count("taken") == len(players) - 1
        assert _raw_count(
            repo_db_path,
            "SELECT COUNT(*) FROM lobby_players WHERE lobby_id = ? AND team = 'light' AND role = 'offlane'",
            (lobby.lobby_id,),
        ) == 1
