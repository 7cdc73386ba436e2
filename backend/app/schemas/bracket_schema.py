from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

class BracketCreate(BaseModel):
    event_id: int
    sport_name: str
    # Validated by the engine so an unknown type is a 400, not a 422
    bracket_type: str
    team_ids: List[int]

class MatchResultUpdate(BaseModel):
    team1_score: Optional[int] = Field(default=None, ge=0)
    team2_score: Optional[int] = Field(default=None, ge=0)
    # None records a draw (round robin only)
    winner_team_id: Optional[int] = None

class MatchScheduleUpdate(BaseModel):
    match_date: Optional[datetime] = None
    venue: Optional[str] = None

class AdvanceRoundRequest(BaseModel):
    current_round: int = Field(ge=1)

class MatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bracket_id: int
    round_number: int
    match_number: int
    team1_id: int
    team2_id: Optional[int] = None
    winner_team_id: Optional[int] = None
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None
    status: str
    match_date: Optional[datetime] = None
    venue: Optional[str] = None

class ProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_round: int
    total_rounds: int
    champion_team_id: Optional[int] = None
    is_completed: bool

class BracketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_id: int
    sport_name: str
    bracket_type: str
    created_at: Optional[datetime] = None

class BracketStateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    bracket: BracketResponse
    progress: ProgressResponse
    matches: List[MatchResponse]

class BracketSummary(BracketResponse):
    current_round: int
    total_rounds: int
    is_completed: bool
    champion_team_id: Optional[int] = None

class AdvanceRoundResponse(BaseModel):
    advanced: bool
    current_round: int
    is_completed: bool

class ChampionResponse(BaseModel):
    bracket_id: int
    champion_team_id: Optional[int] = None
