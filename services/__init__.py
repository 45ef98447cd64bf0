"""
Application services layer.

Services orchestrate roster operations on top of the repositories.
"""

from services.permissions import has_admin_permission

# Result type for consistent error handling
from services.result import Result
from services.roster_service import RosterService, parse_role, parse_team

__all__ = [
    "RosterService",
    "parse_team",
    "parse_role",
    # Permissions
    "has_admin_permission",
    # Result type
    "Result",
]
