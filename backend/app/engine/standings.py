from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from backend.app.models.enums import MatchStatus

WIN_POINTS = 3
DRAW_POINTS = 1


class TeamStanding(BaseModel):
    team_id: int
    matches_played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    points: int = 0


def compute_standings(
    matches: Iterable,
    win_points: int = WIN_POINTS,
    draw_points: int = DRAW_POINTS
) -> List[TeamStanding]:
    """
    Builds the round-robin table from match rows.

    Every team seen in any match gets a row, even before it has played.
    Only completed matches count. A completed match without a winner is a
    draw and gives draw_points to both sides.
    Sorted by points, then wins; remaining ties keep first-appearance order.
    """
    table: Dict[int, TeamStanding] = {}

    matches = list(matches)
    for match in matches:
        for team_id in (match.team1_id, match.team2_id):
            if team_id is not None and team_id not in table:
                table[team_id] = TeamStanding(team_id=team_id)

    for match in matches:
        if match.status != MatchStatus.COMPLETED:
            continue

        sides = [t for t in (match.team1_id, match.team2_id) if t is not None]
        for team_id in sides:
            table[team_id].matches_played += 1

        if match.winner_team_id is None:
            for team_id in sides:
                table[team_id].draws += 1
                table[team_id].points += draw_points
            continue

        for team_id in sides:
            if team_id == match.winner_team_id:
                table[team_id].wins += 1
                table[team_id].points += win_points
            else:
                table[team_id].losses += 1

    return sorted(table.values(), key=lambda s: (-s.points, -s.wins))


def pick_champion(standings: List[TeamStanding]) -> Optional[int]:
    """Top of the table, or None while no match has been played."""
    if not standings or all(s.matches_played == 0 for s in standings):
        return None
    return standings[0].team_id
