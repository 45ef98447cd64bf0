"""
Main Discord bot entry for the roster bot.
"""

import asyncio
import logging

# Configure logging BEFORE importing discord to prevent duplicate handlers
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,  # Override any existing handlers (e.g., from discord.py)
)
logger = logging.getLogger("roster_bot")


# Suppress PyNaCl warning since voice support isn't needed
class _PyNaClFilter(logging.Filter):
    def filter(self, record):
        return "PyNaCl is not installed" not in record.getMessage()


logging.getLogger("discord.client").addFilter(_PyNaClFilter())

import discord
from discord.ext import commands

# discord.py adds its own handler to the 'discord' logger on import
_discord_logger = logging.getLogger("discord")
_discord_logger.handlers.clear()
_discord_logger.setLevel(logging.INFO)

from config import API_HOST, API_PORT, DB_PATH, DISCORD_BOT_TOKEN, RUN_API_WITH_BOT
from infrastructure.service_container import ServiceConfig, ServiceContainer

intents = discord.Intents.default()

bot = commands.Bot(command_prefix="!", intents=intents)

_container: ServiceContainer | None = None
_api_task: asyncio.Task | None = None

EXTENSIONS = [
    "commands.roster",
]


def _init_services() -> ServiceContainer:
    """Initialize all services via ServiceContainer (lazy, idempotent)."""
    global _container
    if _container is None:
        _container = ServiceContainer(ServiceConfig(db_path=DB_PATH))
        _container.initialize()
        _container.expose_to_bot(bot)
    return _container


async def _load_extensions():
    """Load command extensions if not already loaded."""
    _init_services()

    for ext in EXTENSIONS:
        if ext in bot.extensions:
            logger.debug(f"Extension {ext} already loaded, skipping")
            continue
        try:
            await bot.load_extension(ext)
            logger.info(f"Loaded extension: {ext}")
        except Exception as exc:
            logger.error(f"Failed to load extension {ext}: {exc}", exc_info=True)


async def _start_api(container: ServiceContainer) -> None:
    """Serve the HTTP API on the bot's event loop, sharing its container."""
    import uvicorn

    from api.app import create_app

    server = uvicorn.Server(
        uvicorn.Config(create_app(container), host=API_HOST, port=API_PORT, log_config=None)
    )
    global _api_task
    _api_task = asyncio.create_task(server.serve())
    logger.info(f"HTTP API listening on http://{API_HOST}:{API_PORT}")


@bot.event
async def setup_hook():
    """Load command cogs and optionally start the HTTP API."""
    container = _init_services()
    await _load_extensions()
    if RUN_API_WITH_BOT:
        await _start_api(container)


@bot.event
async def on_ready():
    logger.info(f"{bot.user} connected. Guilds: {len(bot.guilds)}")
    try:
        synced = await bot.tree.sync()
        logger.info(f"Slash commands synced globally: {len(synced)}")
    except Exception as exc:
        logger.error(f"Failed to sync slash commands: {exc}", exc_info=True)


def main():
    """Run the bot."""
    if not DISCORD_BOT_TOKEN:
        logger.error("DISCORD_BOT_TOKEN not found!")
        return

    try:
        # Pass log_handler=None to prevent discord.py from adding its own handler
        bot.run(DISCORD_BOT_TOKEN, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (Ctrl+C)")


if __name__ == "__main__":
    main()
