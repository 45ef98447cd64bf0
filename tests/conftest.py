"""
Pytest fixtures for tests.

Schema creation runs once per session into a template database; each test
copies the template file instead of re-running migrations.
"""

import shutil

import pytest

from infrastructure.schema_manager import SchemaManager
from infrastructure.service_container import ServiceConfig, ServiceContainer
from repositories.roster_repository import RosterRepository
from services.roster_service import RosterService

TEST_GUILD_ID = "12345"
"""Standard guild ID for single-guild tests."""

TEST_GUILD_ID_SECONDARY = "67890"
"""Secondary guild ID for multi-guild isolation tests."""


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    SchemaManager(template_path).initialize()
    yield template_path


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path (no schema)."""
    path = str(tmp_path / "temp.db")
    yield path


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """Temporary database with initialized schema for repository tests."""
    test_db_path = str(tmp_path / "test.db")
    shutil.copy2(_schema_template_path, test_db_path)
    yield test_db_path


@pytest.fixture
def roster_repository(repo_db_path):
    return RosterRepository(repo_db_path)


@pytest.fixture
def roster_service(roster_repository):
    return RosterService(roster_repository)


@pytest.fixture
def lobby(roster_repository):
    """An active lobby in TEST_GUILD_ID."""
    return roster_repository.create_lobby(TEST_GUILD_ID, "Friday Night")


@pytest.fixture
def service_container(repo_db_path):
    container = ServiceContainer(ServiceConfig(db_path=repo_db_path))
    container.initialize()
    return container
