"""
Roster commands: /rostercreate, /rosterlist, /roster, /rosterjoin,
/rosterleave, /rosterkick, /rosterclose, /rosterdelete.
"""

import asyncio
import logging

import discord
from discord import app_commands
from discord.ext import commands

from domain.models.roster import Role, Team
from services import error_codes
from services.permissions import has_admin_permission
from services.roster_service import RosterService
from utils.embeds import ROLE_LABELS, TEAM_LABELS, create_lobby_list_embed, create_roster_embed
from utils.interaction_safety import safe_defer

logger = logging.getLogger("roster_bot.commands.roster")

TEAM_CHOICES = [app_commands.Choice(name=TEAM_LABELS[t], value=t.value) for t in Team]
ROLE_CHOICES = [app_commands.Choice(name=ROLE_LABELS[r], value=r.value) for r in Role]

ERROR_PREFIXES = {
    error_codes.VALIDATION_ERROR: "❌",
    error_codes.LOBBY_NOT_FOUND: "⚠️",
    error_codes.LOBBY_CLOSED: "🔒",
    error_codes.SLOT_TAKEN: "❌",
    error_codes.NOT_IN_LOBBY: "⚠️",
    error_codes.SLOT_EMPTY: "⚠️",
    error_codes.STORAGE_ERROR: "💥",
}


def guild_key(interaction: discord.Interaction) -> str:
    """Guild id as stored by the roster; DMs map to "0"."""
    return str(interaction.guild.id) if interaction.guild else "0"


def format_failure(result) -> str:
    prefix = ERROR_PREFIXES.get(result.error_code, "❌")
    return f"{prefix} {result.error}"


class RosterCommands(commands.Cog):
    """Slash commands for team/role roster management."""

    def __init__(self, bot: commands.Bot, roster_service: RosterService):
        self.bot = bot
        self.roster_service = roster_service

    async def _send_roster(self, interaction: discord.Interaction, lobby_id: str, content: str | None = None):
        view_result = await asyncio.to_thread(self.roster_service.build_roster_view, lobby_id)
        if not view_result:
            await interaction.followup.send(content or format_failure(view_result), ephemeral=True)
            return
        await interaction.followup.send(content=content, embed=create_roster_embed(view_result.value))

    @app_commands.command(name="rostercreate", description="Open a new lobby with two teams of five roles")
    @app_commands.describe(name="Display name for the lobby")
    async def rostercreate(self, interaction: discord.Interaction, name: str):
        logger.info(f"Rostercreate command: User {interaction.user.id} creating {name!r}")
        if not await safe_defer(interaction):
            return

        result = await asyncio.to_thread(self.roster_service.create_lobby, guild_key(interaction), name)
        if not result:
            await interaction.followup.send(format_failure(result), ephemeral=True)
            return
        await self._send_roster(interaction, result.value.lobby_id, content="✅ Lobby created!")

    @app_commands.command(name="rosterlist", description="List lobbies in this server")
    async def rosterlist(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=True):
            return

        result = await asyncio.to_thread(self.roster_service.list_lobbies, guild_key(interaction))
        if not result:
            await interaction.followup.send(format_failure(result), ephemeral=True)
            return
        await interaction.followup.send(embed=create_lobby_list_embed(result.value), ephemeral=True)

    @app_commands.command(name="roster", description="Show the teams and roles of a lobby")
    @app_commands.describe(lobby_id="Lobby ID (see /rosterlist)")
    async def roster(self, interaction: discord.Interaction, lobby_id: str):
        if not await safe_defer(interaction):
            return
        await self._send_roster(interaction, lobby_id)

    @app_commands.command(name="rosterjoin", description="Take a team and role slot in a lobby")
    @app_commands.describe(lobby_id="Lobby ID (see /rosterlist)", team="Light or Dark", role="Role to play")
    @app_commands.choices(team=TEAM_CHOICES, role=ROLE_CHOICES)
    async def rosterjoin(
        self,
        interaction: discord.Interaction,
        lobby_id: str,
        team: app_commands.Choice[str],
        role: app_commands.Choice[str],
    ):
        logger.info(
            f"Rosterjoin command: User {interaction.user.id} -> {lobby_id} {team.value}/{role.value}"
        )
        if not await safe_defer(interaction, ephemeral=True):
            return

        result = await asyncio.to_thread(
            self.roster_service.join,
            lobby_id,
            str(interaction.user.id),
            getattr(interaction.user, "display_name", None) or str(interaction.user),
            team.value,
            role.value,
        )
        if not result:
            await interaction.followup.send(format_failure(result), ephemeral=True)
            return
        await interaction.followup.send(
            f"✅ Joined {TEAM_LABELS[result.value.team]} as {ROLE_LABELS[result.value.role]}!",
            ephemeral=True,
        )

    @app_commands.command(name="rosterleave", description="Give up your slot in a lobby")
    @app_commands.describe(lobby_id="Lobby ID (see /rosterlist)")
    async def rosterleave(self, interaction: discord.Interaction, lobby_id: str):
        logger.info(f"Rosterleave command: User {interaction.user.id} leaving {lobby_id}")
        if not await safe_defer(interaction, ephemeral=True):
            return

        result = await asyncio.to_thread(self.roster_service.leave, lobby_id, str(interaction.user.id))
        if not result:
            if result.error_code == error_codes.NOT_IN_LOBBY:
                await interaction.followup.send("⚠️ You're not in that lobby.", ephemeral=True)
            else:
                await interaction.followup.send(format_failure(result), ephemeral=True)
            return
        await interaction.followup.send("✅ Left the lobby.", ephemeral=True)

    @app_commands.command(name="rosterkick", description="Clear a team and role slot (Admin only)")
    @app_commands.describe(lobby_id="Lobby ID (see /rosterlist)", team="Light or Dark", role="Role slot to clear")
    @app_commands.choices(team=TEAM_CHOICES, role=ROLE_CHOICES)
    async def rosterkick(
        self,
        interaction: discord.Interaction,
        lobby_id: str,
        team: app_commands.Choice[str],
        role: app_commands.Choice[str],
    ):
        logger.info(
            f"Rosterkick command: User {interaction.user.id} clearing {lobby_id} {team.value}/{role.value}"
        )
        if not await safe_defer(interaction, ephemeral=True):
            return

        if not has_admin_permission(interaction):
            await interaction.followup.send("❌ Permission denied. Admin only.", ephemeral=True)
            return

        result = await asyncio.to_thread(self.roster_service.kick, lobby_id, team.value, role.value)
        if not result:
            await interaction.followup.send(format_failure(result), ephemeral=True)
            return

        removed = result.value
        await interaction.followup.send(
            f"✅ Kicked {removed.display_name} from {TEAM_LABELS[removed.team]} {ROLE_LABELS[removed.role]}.",
            ephemeral=True,
        )

    @app_commands.command(name="rosterclose", description="Close a lobby to new joins (Admin only)")
    @app_commands.describe(lobby_id="Lobby ID (see /rosterlist)")
    async def rosterclose(self, interaction: discord.Interaction, lobby_id: str):
        logger.info(f"Rosterclose command: User {interaction.user.id} closing {lobby_id}")
        if not await safe_defer(interaction, ephemeral=True):
            return

        if not has_admin_permission(interaction):
            await interaction.followup.send("❌ Permission denied. Admin only.", ephemeral=True)
            return

        result = await asyncio.to_thread(self.roster_service.close_lobby, lobby_id)
        if not result:
            await interaction.followup.send(format_failure(result), ephemeral=True)
            return
        await interaction.followup.send("🔒 Lobby closed.", ephemeral=True)

    @app_commands.command(name="rosterdelete", description="Delete a lobby and its roster (Admin only)")
    @app_commands.describe(lobby_id="Lobby ID (see /rosterlist)")
    async def rosterdelete(self, interaction: discord.Interaction, lobby_id: str):
        logger.info(f"Rosterdelete command: User {interaction.user.id} deleting {lobby_id}")
        if not await safe_defer(interaction, ephemeral=True):
            return

        if not has_admin_permission(interaction):
            await interaction.followup.send("❌ Permission denied. Admin only.", ephemeral=True)
            return

        result = await asyncio.to_thread(self.roster_service.delete_lobby, lobby_id)
        if not result:
            await interaction.followup.send(format_failure(result), ephemeral=True)
            return
        await interaction.followup.send("🗑️ Lobby deleted.", ephemeral=True)


async def setup(bot: commands.Bot):
    roster_service = getattr(bot, "roster_service", None)
    cog = RosterCommands(bot, roster_service)
    await bot.add_cog(cog)
