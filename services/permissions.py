"""
Permission checks for destructive roster commands (kick, close, delete).
"""

import discord

from config import ADMIN_USER_IDS


def has_admin_permission(interaction: discord.Interaction, admin_ids: list[int] | None = None) -> bool:
    """
    Check if the invoking user may manage lobbies.

    Allowed when the user id is in ADMIN_USER_IDS, or the member holds
    Administrator or Manage Server in the guild.
    """
    allowlist = ADMIN_USER_IDS if admin_ids is None else admin_ids
    if allowlist and interaction.user.id in allowlist:
        return True

    # Prefer guild member lookup, fall back to the user object for partial objects
    if interaction.guild:
        get_member = getattr(interaction.guild, "get_member", None)
        if callable(get_member):
            member = get_member(interaction.user.id)
            if member and getattr(member, "guild_permissions", None):
                return bool(
                    member.guild_permissions.administrator
                    or member.guild_permissions.manage_guild
                )

    perms = getattr(interaction.user, "guild_permissions", None)
    if perms:
        return bool(getattr(perms, "administrator", False) or getattr(perms, "manage_guild", False))

    return False
