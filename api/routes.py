"""
HTTP routes for lobby and roster management.
"""

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from services import error_codes
from services.roster_service import RosterService

router = APIRouter(prefix="/api")

STATUS_BY_CODE = {
    error_codes.VALIDATION_ERROR: 400,
    error_codes.SLOT_TAKEN: 400,
    error_codes.LOBBY_CLOSED: 400,
    error_codes.LOBBY_NOT_FOUND: 404,
    error_codes.STORAGE_ERROR: 500,
}

# Missing-occupant outcomes are reported in the body, not as HTTP errors
SOFT_FAILURE_CODES = {error_codes.NOT_IN_LOBBY, error_codes.SLOT_EMPTY}


class LobbyCreate(BaseModel):
    """Schema for creating a lobby."""
    guildId: Optional[str] = None
    name: Optional[str] = None


class JoinRequest(BaseModel):
    """Schema for joining a team/role slot."""
    discordId: Optional[str] = None
    discordName: Optional[str] = None
    team: Optional[str] = None
    role: Optional[str] = None


class LeaveRequest(BaseModel):
    discordId: Optional[str] = None


class KickRequest(BaseModel):
    team: Optional[str] = None
    role: Optional[str] = None


class LobbySummary(BaseModel):
    id: str
    name: str
    is_active: bool
    created_at: Optional[str] = None


def get_roster_service(request: Request) -> RosterService:
    return request.app.state.container.roster_service


def raise_for_failure(result) -> None:
    if not result:
        raise HTTPException(status_code=STATUS_BY_CODE.get(result.error_code, 500), detail=result.error)


def action_response(result) -> dict:
    """{"success": ...} body shared by leave/kick/close/delete."""
    if result:
        return {"success": True}
    if result.error_code in SOFT_FAILURE_CODES:
        return {"success": False, "message": result.error}
    raise_for_failure(result)


@router.post("/lobbies")
async def create_lobby(body: LobbyCreate, service: RosterService = Depends(get_roster_service)):
    result = await asyncio.to_thread(service.create_lobby, body.guildId, body.name)
    raise_for_failure(result)
    lobby = result.value
    return {"id": lobby.lobby_id, "guildId": lobby.guild_id, "name": lobby.name}


@router.get("/lobbies", response_model=List[LobbySummary])
async def list_lobbies(guildId: Optional[str] = None, service: RosterService = Depends(get_roster_service)):
    result = await asyncio.to_thread(service.list_lobbies, guildId)
    raise_for_failure(result)
    return [
        LobbySummary(id=lobby.lobby_id, name=lobby.name, is_active=lobby.is_active, created_at=lobby.created_at)
        for lobby in result.value
    ]


@router.get("/lobbies/{lobby_id}")
async def get_lobby(lobby_id: str, service: RosterService = Depends(get_roster_service)):
    result = await asyncio.to_thread(service.build_roster_view, lobby_id)
    raise_for_failure(result)
    return result.value.to_dict()


@router.post("/lobbies/{lobby_id}/join")
async def join_lobby(lobby_id: str, body: JoinRequest, service: RosterService = Depends(get_roster_service)):
    result = await asyncio.to_thread(
        service.join, lobby_id, body.discordId, body.discordName, body.team, body.role
    )
    raise_for_failure(result)
    assignment = result.value
    return {
        "success": True,
        "lobbyId": assignment.lobby_id,
        "playerId": assignment.player_id,
        "team": assignment.team.value,
        "role": assignment.role.value,
    }


@router.delete("/lobbies/{lobby_id}/leave")
async def leave_lobby(lobby_id: str, body: LeaveRequest, service: RosterService = Depends(get_roster_service)):
    result = await asyncio.to_thread(service.leave, lobby_id, body.discordId)
    return action_response(result)


@router.post("/lobbies/{lobby_id}/kick")
async def kick_player(lobby_id: str, body: KickRequest, service: RosterService = Depends(get_roster_service)):
    result = await asyncio.to_thread(service.kick, lobby_id, body.team, body.role)
    return action_response(result)


@router.post("/lobbies/{lobby_id}/close")
async def close_lobby(lobby_id: str, service: RosterService = Depends(get_roster_service)):
    result = await asyncio.to_thread(service.close_lobby, lobby_id)
    return action_response(result)


@router.get("/lobbies/{lobby_id}/player-count")
async def player_count(lobby_id: str, service: RosterService = Depends(get_roster_service)):
    result = await asyncio.to_thread(service.player_count, lobby_id)
    raise_for_failure(result)
    return {"count": result.value}


@router.delete("/lobbies/{lobby_id}")
async def delete_lobby(lobby_id: str, service: RosterService = Depends(get_roster_service)):
    result = await asyncio.to_thread(service.delete_lobby, lobby_id)
    return action_response(result)


@router.get("/ping")
async def ping():
    """Liveness endpoint for external keep-alive checks."""
    return {"status": "alive", "time": datetime.now(timezone.utc).isoformat()}
