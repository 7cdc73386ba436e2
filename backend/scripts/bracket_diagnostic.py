#!/usr/bin/env python3
"""
Bracket Diagnostic Script
Prints a bracket's progress, per-round completion and, for round robin,
the current standings. Flags brackets stuck between rounds.

Usage:
    python backend/scripts/bracket_diagnostic.py <bracket_id>
"""

import argparse
import asyncio
import os
import sys
from itertools import groupby

# Add project root to path so we can import from backend.app
sys.path.append(os.path.join(os.path.dirname(__file__), '../../'))

from backend.app.core.database import get_session_maker
from backend.app.core.errors import NotFoundError
from backend.app.models.enums import BracketType, MatchStatus
from backend.app.services.bracket_service import bracket_service
from backend.app.services.match_store import SqlMatchStore

async def diagnose(bracket_id: int):
    SessionLocal = get_session_maker()
    async with SessionLocal() as db:
        store = SqlMatchStore(db)
        try:
            state = await bracket_service.get_bracket_state(store, bracket_id)
        except NotFoundError as e:
            print(str(e))
            return

        b, p = state.bracket, state.progress
        print(f"--- Diagnostic: Bracket #{b.id} ({b.bracket_type}) ---")
        print(f"Event: {b.event_id}  Sport: {b.sport_name}  Created: {b.created_at}")
        print(f"Round: {p.current_round}/{p.total_rounds}  Completed: {p.is_completed}  Champion: {p.champion_team_id}")

        print("\nRound Breakdown:")
        stuck_rounds = []
        for round_number, round_matches in groupby(state.matches, key=lambda m: m.round_number):
            round_matches = list(round_matches)
            done = sum(1 for m in round_matches if m.status == MatchStatus.COMPLETED)
            byes = sum(1 for m in round_matches if m.is_bye)
            print(f"  Round {round_number}: {done}/{len(round_matches)} completed ({byes} byes)")
            for m in round_matches:
                opponent = "BYE" if m.is_bye else m.team2_id
                print(f"    #{m.match_number}: {m.team1_id} vs {opponent} -> winner {m.winner_team_id} ({m.status})")
            if done == len(round_matches) and round_number == p.current_round and not p.is_completed:
                stuck_rounds.append(round_number)

        if stuck_rounds:
            print(f"\n⚠️  WARNING: round {stuck_rounds[0]} is finished but the bracket did not advance.")
            print("  Use the manual advance / set champion endpoints to repair it.")

        if b.bracket_type == BracketType.ROUND_ROBIN:
            print("\nStandings:")
            for rank, row in enumerate(await bracket_service.get_standings(store, bracket_id), 1):
                print(f"  {rank}. team {row.team_id}: {row.points} pts, {row.wins}W {row.draws}D {row.losses}L")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Inspect a tournament bracket")
    parser.add_argument("bracket_id", type=int)
    args = parser.parse_args()
    asyncio.run(diagnose(args.bracket_id))
