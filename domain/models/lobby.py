"""
Lobby domain model.
"""

from dataclasses import dataclass


@dataclass
class Lobby:
    """A guild-scoped lobby with two teams of five role slots."""

    lobby_id: str
    guild_id: str
    name: str
    is_active: bool = True
    created_at: str | None = None

    @property
    def is_closed(self) -> bool:
        return not self.is_active

    def to_dict(self) -> dict:
        return {
            "id": self.lobby_id,
            "guild_id": self.guild_id,
            "name": self.name,
            "is_active": self.is_active,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row) -> "Lobby":
        return cls(
            lobby_id=row["id"],
            guild_id=row["guild_id"],
            name=row["name"],
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
        )
