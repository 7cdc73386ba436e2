"""
Pairing rules for bracket rounds.

Pure functions only: they decide who plays whom, the service layer turns
the result into Match rows.
"""

import math
import random
from typing import List, Optional, Sequence

from pydantic import BaseModel

from backend.app.core.errors import ValidationError
from backend.app.models.enums import BracketType

MIN_TEAMS = 2


class PlannedMatch(BaseModel):
    match_number: int
    team1_id: int
    team2_id: Optional[int] = None

    @property
    def is_bye(self) -> bool:
        return self.team2_id is None


def parse_bracket_type(value) -> BracketType:
    try:
        return BracketType(value)
    except ValueError:
        valid = ", ".join(t.value for t in BracketType)
        raise ValidationError(f"Invalid bracket type '{value}' (expected one of: {valid})")


def validate_teams(team_ids: Sequence[int]) -> List[int]:
    teams = list(team_ids)
    if len(teams) < MIN_TEAMS:
        raise ValidationError(f"A bracket needs at least {MIN_TEAMS} teams, got {len(teams)}")
    if len(set(teams)) != len(teams):
        raise ValidationError("Team list contains duplicates")
    return teams


def total_rounds_for(bracket_type: BracketType, team_count: int) -> int:
    # Round robin schedules every pairing in round 1
    if bracket_type == BracketType.ROUND_ROBIN:
        return 1
    return math.ceil(math.log2(team_count))


def shuffled(team_ids: Sequence[int], rng: random.Random) -> List[int]:
    """Returns a uniformly shuffled copy, the input is left untouched."""
    teams = list(team_ids)
    rng.shuffle(teams)
    return teams


def pair_sequential(team_ids: Sequence[int]) -> List[PlannedMatch]:
    """
    Pairs teams as (1st, 2nd), (3rd, 4th), ... in the given order.
    With an odd count the last team gets a bye.
    """
    planned = []
    for i in range(0, len(team_ids), 2):
        team2 = team_ids[i + 1] if i + 1 < len(team_ids) else None
        planned.append(PlannedMatch(
            match_number=len(planned) + 1,
            team1_id=team_ids[i],
            team2_id=team2
        ))
    return planned


def round_robin_pairs(team_ids: Sequence[int]) -> List[PlannedMatch]:
    """Every unordered pair (i < j) once, numbered in generation order."""
    planned = []
    for i in range(len(team_ids)):
        for j in range(i + 1, len(team_ids)):
            planned.append(PlannedMatch(
                match_number=len(planned) + 1,
                team1_id=team_ids[i],
                team2_id=team_ids[j]
            ))
    return planned
