"""
Player domain model.
"""

from dataclasses import dataclass


@dataclass
class Player:
    """
    Represents a player known to the roster.

    ``player_id`` is internal; ``external_id`` is the caller-supplied
    identity (e.g. a Discord user id) and is unique across players.
    """

    player_id: str
    external_id: str
    display_name: str
    created_at: str | None = None

    @classmethod
    def from_row(cls, row) -> "Player":
        return cls(
            player_id=row["id"],
            external_id=row["external_id"],
            display_name=row["display_name"],
            created_at=row["created_at"],
        )
