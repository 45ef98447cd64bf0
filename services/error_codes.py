"""
Standard error codes for service layer.

These error codes allow command handlers and the HTTP API to map roster
failures without parsing error message text.

Usage:
    from services.error_codes import SLOT_TAKEN
    from services.result import Result

    return Result.fail("That slot is already taken", code=SLOT_TAKEN)
"""

# General errors
VALIDATION_ERROR = "validation_error"
STORAGE_ERROR = "storage_error"

# Lobby errors
LOBBY_NOT_FOUND = "lobby_not_found"
LOBBY_CLOSED = "lobby_closed"
NOT_IN_LOBBY = "not_in_lobby"

# Slot errors
SLOT_TAKEN = "slot_taken"
SLOT_EMPTY = "slot_empty"
