"""
Domain models - pure data structures representing business entities.
"""

from domain.models.lobby import Lobby
from domain.models.player import Player
from domain.models.roster import Assignment, Role, RosterEntry, RosterView, SlotView, Team
