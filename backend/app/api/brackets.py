from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from backend.app.core.database import get_db
from backend.app.core.errors import BracketError, InconsistentStateError, NotFoundError, ValidationError
from backend.app.engine.standings import TeamStanding
from backend.app.schemas.bracket_schema import (
    AdvanceRoundRequest,
    AdvanceRoundResponse,
    BracketCreate,
    BracketResponse,
    BracketStateResponse,
    BracketSummary,
    ChampionResponse,
    MatchResponse,
    MatchResultUpdate,
    MatchScheduleUpdate,
)
from backend.app.services.bracket_service import bracket_service
from backend.app.services.match_store import SqlMatchStore

router = APIRouter()

def get_store(db: AsyncSession = Depends(get_db)) -> SqlMatchStore:
    return SqlMatchStore(db)

def _http_error(exc: BracketError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, InconsistentStateError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))

@router.post("", response_model=BracketResponse)
async def create_bracket(payload: BracketCreate, store: SqlMatchStore = Depends(get_store)):
    try:
        return await bracket_service.create_bracket(
            store, payload.event_id, payload.sport_name, payload.bracket_type, payload.team_ids
        )
    except BracketError as e:
        raise _http_error(e)

@router.get("/event/{event_id}", response_model=List[BracketSummary])
async def list_event_brackets(event_id: int, store: SqlMatchStore = Depends(get_store)):
    """All brackets of an event, newest first, with their progress."""
    rows = await bracket_service.list_event_brackets(store, event_id)
    return [
        BracketSummary(
            id=bracket.id,
            event_id=bracket.event_id,
            sport_name=bracket.sport_name,
            bracket_type=bracket.bracket_type,
            created_at=bracket.created_at,
            current_round=progress.current_round,
            total_rounds=progress.total_rounds,
            is_completed=progress.is_completed,
            champion_team_id=progress.champion_team_id
        )
        for bracket, progress in rows
    ]

@router.get("/{bracket_id}", response_model=BracketStateResponse)
async def get_bracket_state(bracket_id: int, store: SqlMatchStore = Depends(get_store)):
    try:
        return await bracket_service.get_bracket_state(store, bracket_id)
    except BracketError as e:
        raise _http_error(e)

@router.get("/{bracket_id}/standings", response_model=List[TeamStanding])
async def get_standings(bracket_id: int, store: SqlMatchStore = Depends(get_store)):
    """Round-robin table sorted by points, then wins."""
    try:
        return await bracket_service.get_standings(store, bracket_id)
    except BracketError as e:
        raise _http_error(e)

@router.post("/matches/{match_id}/result", response_model=MatchResponse)
async def record_match_result(
    match_id: int,
    payload: MatchResultUpdate,
    store: SqlMatchStore = Depends(get_store)
):
    try:
        return await bracket_service.record_match_result(
            store, match_id, payload.team1_score, payload.team2_score, payload.winner_team_id
        )
    except BracketError as e:
        raise _http_error(e)

@router.patch("/matches/{match_id}/schedule", response_model=MatchResponse)
async def update_match_schedule(
    match_id: int,
    payload: MatchScheduleUpdate,
    store: SqlMatchStore = Depends(get_store)
):
    try:
        return await bracket_service.update_match_schedule(store, match_id, payload.match_date, payload.venue)
    except BracketError as e:
        raise _http_error(e)

@router.post("/{bracket_id}/advance", response_model=AdvanceRoundResponse)
async def manual_advance_round(
    bracket_id: int,
    payload: AdvanceRoundRequest,
    store: SqlMatchStore = Depends(get_store)
):
    """Admin: generate the next round by hand (no-op for round robin)."""
    try:
        advanced = await bracket_service.manual_advance_round(store, bracket_id, payload.current_round)
    except BracketError as e:
        raise _http_error(e)

    progress = await store.get_progress(bracket_id)
    return AdvanceRoundResponse(
        advanced=advanced,
        current_round=progress.current_round,
        is_completed=progress.is_completed
    )

@router.post("/{bracket_id}/champion", response_model=ChampionResponse)
async def manual_set_champion(bracket_id: int, store: SqlMatchStore = Depends(get_store)):
    """Admin: crown the champion from the stored results."""
    try:
        champion = await bracket_service.manual_set_champion(store, bracket_id)
    except BracketError as e:
        raise _http_error(e)
    return ChampionResponse(bracket_id=bracket_id, champion_team_id=champion)
