"""
Roster domain model: teams, roles, slots and the assignments that fill them.
"""

from dataclasses import dataclass, field
from enum import Enum

from domain.models.lobby import Lobby


class Team(str, Enum):
    """The two sides of a lobby."""

    LIGHT = "light"
    DARK = "dark"


class Role(str, Enum):
    """Role slots, declared in canonical display order."""

    CARRY = "carry"
    MID = "mid"
    OFFLANE = "offlane"
    SUPPORT = "support"
    HARDSUPPORT = "hardsupport"


SLOTS_PER_TEAM = len(Role)
MAX_ASSIGNMENTS = len(Team) * SLOTS_PER_TEAM


@dataclass(frozen=True)
class Assignment:
    """A player occupying one (team, role) slot in a lobby."""

    lobby_id: str
    player_id: str
    team: Team
    role: Role
    joined_at: str | None = None


@dataclass(frozen=True)
class RosterEntry:
    """An occupied slot as seen from outside: who sits where."""

    external_id: str
    display_name: str
    team: Team
    role: Role

    def to_dict(self) -> dict:
        return {
            "discord_id": self.external_id,
            "discord_name": self.display_name,
            "team": self.team.value,
            "role": self.role.value,
        }


@dataclass(frozen=True)
class SlotView:
    """One slot of the roster view; player is None when the slot is empty."""

    team: Team
    role: Role
    player: RosterEntry | None = None

    @property
    def is_empty(self) -> bool:
        return self.player is None

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "player": self.player.to_dict() if self.player else None,
        }


@dataclass
class RosterView:
    """
    Full roster for a lobby.

    ``teams`` always holds both teams, each with all five roles in canonical
    order, whether or not the slots are filled.
    """

    lobby: Lobby
    players: list[RosterEntry] = field(default_factory=list)
    teams: dict[Team, list[SlotView]] = field(default_factory=dict)

    def slots(self) -> list[SlotView]:
        return [slot for team in Team for slot in self.teams.get(team, [])]

    def filled_count(self) -> int:
        return sum(1 for slot in self.slots() if not slot.is_empty)

    def to_dict(self) -> dict:
        payload = self.lobby.to_dict()
        payload["players"] = [p.to_dict() for p in self.players]
        payload["teams"] = {
            team.value: [slot.to_dict() for slot in self.teams.get(team, [])]
            for team in Team
        }
        return payload


def build_slot_grid(entries: list[RosterEntry]) -> dict[Team, list[SlotView]]:
    """Lay occupied entries onto the fixed 2 x 5 slot grid."""
    occupants = {(entry.team, entry.role): entry for entry in entries}
    return {
        team: [SlotView(team=team, role=role, player=occupants.get((team, role))) for role in Role]
        for team in Team
    }
