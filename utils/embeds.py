"""
Reusable Discord embed builders.
"""

import discord

from domain.models.roster import MAX_ASSIGNMENTS, Role, RosterView, Team

TEAM_LABELS = {
    Team.LIGHT: "☀️ Light",
    Team.DARK: "🌑 Dark",
}

ROLE_LABELS = {
    Role.CARRY: "Carry",
    Role.MID: "Mid",
    Role.OFFLANE: "Offlane",
    Role.SUPPORT: "Support",
    Role.HARDSUPPORT: "Hard Support",
}

EMPTY_SLOT = "— open —"


def format_team_slots(view: RosterView, team: Team) -> str:
    """One line per role in canonical order, empty slots included."""
    lines = []
    for slot in view.teams.get(team, []):
        if slot.player is None:
            occupant = EMPTY_SLOT
        elif slot.player.external_id.isdigit():
            # Mention real Discord users; fall back to the stored name otherwise
            occupant = f"<@{slot.player.external_id}>"
        else:
            occupant = slot.player.display_name
        lines.append(f"**{ROLE_LABELS[slot.role]}**: {occupant}")
    return "\n".join(lines)


def create_roster_embed(view: RosterView) -> discord.Embed:
    """Create the roster embed with both teams and lobby status."""
    lobby = view.lobby
    filled = view.filled_count()

    if lobby.is_active:
        color = discord.Color.green() if filled >= MAX_ASSIGNMENTS else discord.Color.blue()
        status = "🟢 Open - use `/rosterjoin` to take a slot"
    else:
        color = discord.Color.dark_grey()
        status = "🔒 Closed"

    embed = discord.Embed(
        title=f"🎮 {lobby.name}",
        description=f"Players ({filled}/{MAX_ASSIGNMENTS})",
        color=color,
    )
    for team in Team:
        embed.add_field(name=TEAM_LABELS[team], value=format_team_slots(view, team), inline=True)
    embed.add_field(name="Status", value=status, inline=False)
    embed.set_footer(text=f"Lobby ID: {lobby.lobby_id}")
    return embed


def create_lobby_list_embed(lobbies) -> discord.Embed:
    """Summary of all lobbies in a guild."""
    embed = discord.Embed(title="📋 Lobbies", color=discord.Color.blue())
    if not lobbies:
        embed.description = "No lobbies yet. Use `/rostercreate` to open one."
        return embed

    lines = []
    for lobby in lobbies:
        marker = "🟢" if lobby.is_active else "🔒"
        lines.append(f"{marker} **{lobby.name}** · `{lobby.lobby_id}`")
    embed.description = "\n".join(lines)
    return embed
