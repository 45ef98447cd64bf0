"""
Helpers for responding to interactions without tripping Discord's
"already acknowledged" and expiry errors.
"""

import logging

import discord

logger = logging.getLogger("roster_bot.utils.interaction_safety")


async def safe_defer(interaction: discord.Interaction, ephemeral: bool = False) -> bool:
    """
    Defer the interaction response.

    Returns True if the caller may continue with interaction.followup,
    False if the interaction has expired.
    """
    if interaction.response.is_done():
        return True
    try:
        await interaction.response.defer(ephemeral=ephemeral)
        return True
    except discord.NotFound:
        logger.warning(f"Interaction expired before defer (user={interaction.user.id})")
        return False
    except discord.HTTPException as exc:
        if exc.code == 40060:  # already acknowledged
            return True
        logger.warning(f"Failed to defer interaction: {exc}")
        return False
