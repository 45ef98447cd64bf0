"""
Service container for dependency injection and initialization.

The roster store is built once here and handed to the roster service,
which the Discord cog and the HTTP API both receive from this container.

Usage:
    container = ServiceContainer(ServiceConfig(db_path="roster.db"))
    container.initialize()

    roster_service = container.roster_service
"""

import logging
from dataclasses import dataclass

from config import DB_PATH
from infrastructure.schema_manager import SchemaManager
from repositories.roster_repository import RosterRepository
from services.roster_service import RosterService

logger = logging.getLogger("roster_bot.infrastructure.container")


@dataclass
class RepositoryContainer:
    """Container for all repositories."""

    roster: RosterRepository | None = None


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    db_path: str = DB_PATH


class ServiceContainer:
    """
    Central container for all application services.

    Example:
        container = ServiceContainer(config)
        container.initialize()
        roster_service = container.roster_service
    """

    def __init__(self, config: ServiceConfig | None = None):
        """
        Initialize the container with configuration.

        Args:
            config: Service configuration (uses defaults if None)
        """
        self.config = config or ServiceConfig()
        self._initialized = False
        self._repos = RepositoryContainer()
        self._roster_service: RosterService | None = None

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized

    def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")
        self._init_database()
        self._init_repositories()
        self._init_services()
        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_database(self) -> None:
        """Create the data directory, schema and migrations."""
        logger.debug(f"Initializing database at {self.config.db_path}")
        SchemaManager(self.config.db_path).initialize()

    def _init_repositories(self) -> None:
        logger.debug("Initializing repositories")
        self._repos.roster = RosterRepository(self.config.db_path)

    def _init_services(self) -> None:
        logger.debug("Initializing services")
        self._roster_service = RosterService(self._repos.roster)

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("ServiceContainer.initialize() must be called first")

    @property
    def roster_repo(self) -> RosterRepository:
        self._require_initialized()
        return self._repos.roster

    @property
    def roster_service(self) -> RosterService:
        self._require_initialized()
        return self._roster_service

    def expose_to_bot(self, bot) -> None:
        """
        Expose services to a Discord bot object.

        Cogs look services up via bot.<service_name> in their setup().
        """
        bot.roster_repo = self.roster_repo
        bot.roster_service = self.roster_service
