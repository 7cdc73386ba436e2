"""
Bracket Service - Tournament Bracket Engine

Single source of truth for every bracket mutation:
- Bracket creation (single elimination seeding, round-robin schedule)
- Match result recording
- Round completion checks and next-round generation
- Round-robin standings and champion selection
- Manual overrides for admins

Every public mutation runs in one transaction on the injected MatchStore:
either all of its matches and progress changes are committed, or none are.
"""

import logging
import random
from contextlib import asynccontextmanager
from datetime import datetime
from functools import partial
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError

from backend.app.core.bracket_config import BracketConfig, settings
from backend.app.core.errors import (
    BracketCompletedError,
    InconsistentStateError,
    MatchAlreadyCompletedError,
    NotFoundError,
    ValidationError,
)
from backend.app.core.events import BracketEvents, bracket_events
from backend.app.engine.pairing import (
    PlannedMatch,
    pair_sequential,
    parse_bracket_type,
    round_robin_pairs,
    shuffled,
    total_rounds_for,
    validate_teams,
)
from backend.app.engine.standings import TeamStanding, compute_standings, pick_champion
from backend.app.models.bracket_model import Bracket, TournamentProgress
from backend.app.models.enums import BracketType, MatchStatus
from backend.app.models.match_model import Match
from backend.app.services.match_store import MatchStore

logger = logging.getLogger(__name__)


class BracketState:
    """Snapshot of a bracket for API responses"""
    def __init__(self, bracket: Bracket, progress: TournamentProgress, matches: List[Match]):
        self.bracket = bracket
        self.progress = progress
        self.matches = matches


class BracketService:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        config: Optional[BracketConfig] = None,
        events: Optional[BracketEvents] = None
    ):
        self.config = config or settings
        self.rng = rng or random.Random(self.config.shuffle_seed)
        self.events = events or bracket_events

    # --- Public operations ---

    async def create_bracket(
        self,
        store: MatchStore,
        event_id: int,
        sport_name: str,
        bracket_type: str,
        team_ids: Sequence[int]
    ) -> Bracket:
        """
        Creates the bracket, its progress row and every round-1 match.
        Single elimination shuffles the teams first; round robin keeps the
        given order.
        """
        kind = parse_bracket_type(bracket_type)
        teams = validate_teams(team_ids)
        if not sport_name or not sport_name.strip():
            raise ValidationError("Sport name is required")
        if await store.find_bracket(event_id, sport_name):
            raise ValidationError(f"Event {event_id} already has a bracket for '{sport_name}'")

        async with self._transaction(store):
            bracket = Bracket(event_id=event_id, sport_name=sport_name, bracket_type=kind)
            store.add(bracket)
            try:
                await store.flush()
            except IntegrityError as e:
                # Lost a race with a concurrent create for the same event and sport
                raise ValidationError(f"Event {event_id} already has a bracket for '{sport_name}'") from e

            if kind == BracketType.SINGLE_ELIMINATION:
                seeded = shuffled(teams, self.rng)
                logger.info("Bracket %s seeding: %s", bracket.id, seeded)
                planned = pair_sequential(seeded)
            else:
                planned = round_robin_pairs(teams)

            store.add(TournamentProgress(
                bracket_id=bracket.id,
                current_round=1,
                total_rounds=total_rounds_for(kind, len(teams)),
                is_completed=False
            ))
            store.add_all(self._build_matches(bracket.id, 1, planned))
            await store.flush()

        await store.refresh(bracket)
        logger.info(
            "Created %s bracket %s for event %s (%s): %d teams, %d round-1 matches",
            kind, bracket.id, event_id, sport_name, len(teams), len(planned)
        )
        return bracket

    async def record_match_result(
        self,
        store: MatchStore,
        match_id: int,
        team1_score: Optional[int],
        team2_score: Optional[int],
        winner_team_id: Optional[int]
    ) -> Match:
        """Stores a result, then advances the bracket if that result closed its round."""
        async with self._transaction(store) as notices:
            match = await store.get_match(match_id, for_update=True)
            if not match:
                raise NotFoundError("match", match_id)

            bracket = await store.get_bracket(match.bracket_id)
            progress = await store.get_progress(match.bracket_id, for_update=True)
            if progress.is_completed:
                raise BracketCompletedError(bracket.id)
            self._validate_result(bracket, match, winner_team_id)
            if match.status == MatchStatus.COMPLETED:
                raise MatchAlreadyCompletedError(match.id)

            match.team1_score = team1_score
            match.team2_score = team2_score
            match.winner_team_id = winner_team_id
            match.status = MatchStatus.COMPLETED
            await store.flush()
            logger.info(
                "Match %s (bracket %s, round %s): %s-%s, winner %s",
                match.id, bracket.id, match.round_number, team1_score, team2_score, winner_team_id
            )

            notices.extend(await self._evaluate_completion(store, bracket, progress, match.round_number))

        return match

    async def get_bracket_state(self, store: MatchStore, bracket_id: int) -> BracketState:
        bracket = await self._require_bracket(store, bracket_id)
        progress = await store.get_progress(bracket_id)
        matches = await store.list_matches(bracket_id)
        return BracketState(bracket, progress, matches)

    async def get_standings(self, store: MatchStore, bracket_id: int) -> List[TeamStanding]:
        bracket = await self._require_bracket(store, bracket_id)
        if bracket.bracket_type != BracketType.ROUND_ROBIN:
            raise ValidationError(f"Bracket {bracket_id} is not a round-robin bracket")
        return self._standings(await store.list_matches(bracket_id))

    async def list_event_brackets(self, store: MatchStore, event_id: int) -> List[Tuple[Bracket, TournamentProgress]]:
        return await store.list_event_brackets(event_id)

    async def update_match_schedule(
        self,
        store: MatchStore,
        match_id: int,
        match_date: Optional[datetime],
        venue: Optional[str]
    ) -> Match:
        async with self._transaction(store):
            match = await store.get_match(match_id, for_update=True)
            if not match:
                raise NotFoundError("match", match_id)
            match.match_date = match_date
            match.venue = venue
        return match

    async def manual_advance_round(self, store: MatchStore, bracket_id: int, current_round: int) -> bool:
        """
        Admin escape hatch: generate the round after current_round.
        Returns False when there was nothing to do (round robin, or the
        next round already exists).
        """
        bracket = await self._require_bracket(store, bracket_id)
        if bracket.bracket_type == BracketType.ROUND_ROBIN:
            logger.info("Bracket %s is round robin: all matches already exist in round 1", bracket_id)
            return False

        async with self._transaction(store) as notices:
            progress = await store.get_progress(bracket_id, for_update=True)
            if progress.is_completed:
                raise BracketCompletedError(bracket_id)

            total, completed = await store.count_matches(bracket_id, current_round)
            if total == 0 or total != completed:
                raise InconsistentStateError(
                    f"Round {current_round} of bracket {bracket_id} is not finished ({completed}/{total})"
                )
            notices.extend(await self._advance_round(store, bracket, progress, current_round))

        return bool(notices)

    async def manual_set_champion(self, store: MatchStore, bracket_id: int) -> Optional[int]:
        """
        Admin escape hatch: crown the champion from stored results.
        Single elimination needs exactly one decided match in the highest
        round, and a bye there only counts once nothing else is left to
        play; round robin recomputes the standings.
        """
        bracket = await self._require_bracket(store, bracket_id)

        async with self._transaction(store) as notices:
            progress = await store.get_progress(bracket_id, for_update=True)
            if progress.is_completed:
                raise BracketCompletedError(bracket_id)

            if bracket.bracket_type == BracketType.SINGLE_ELIMINATION:
                top_round = await store.max_round(bracket_id)
                top_matches = await store.list_matches(bracket_id, top_round) if top_round is not None else []
                unplayed = any(m.status == MatchStatus.SCHEDULED for m in top_matches)
                # A bye only counts as the final while nothing else in the round is left to play
                decided = [
                    m for m in top_matches
                    if m.winner_team_id is not None and not (unplayed and m.is_bye)
                ]
                if len(decided) != 1:
                    raise InconsistentStateError(
                        f"Bracket {bracket_id}: expected 1 decided match in round {top_round}, found {len(decided)}"
                    )
                notices.extend(self._crown(progress, decided[0].winner_team_id))
            else:
                notices.extend(await self._complete_round_robin(store, progress))

        return progress.champion_team_id

    # --- Progression ---

    async def _evaluate_completion(
        self,
        store: MatchStore,
        bracket: Bracket,
        progress: TournamentProgress,
        round_number: int
    ) -> list:
        if bracket.bracket_type == BracketType.SINGLE_ELIMINATION:
            total, completed = await store.count_matches(bracket.id, round_number)
            logger.info("Bracket %s round %s progress: %d/%d", bracket.id, round_number, completed, total)
            if total > 0 and total == completed:
                return await self._advance_round(store, bracket, progress, round_number)
            return []

        # Round robin: the single round is the whole bracket
        total, completed = await store.count_matches(bracket.id)
        logger.info("Bracket %s round-robin progress: %d/%d", bracket.id, completed, total)
        if total > 0 and total == completed:
            return await self._complete_round_robin(store, progress)
        return []

    async def _advance_round(
        self,
        store: MatchStore,
        bracket: Bracket,
        progress: TournamentProgress,
        round_number: int
    ) -> list:
        next_round = round_number + 1
        if await store.round_exists(bracket.id, next_round):
            logger.info("Bracket %s round %s already generated, skipping", bracket.id, next_round)
            return []
        if round_number != progress.current_round:
            raise InconsistentStateError(
                f"Bracket {bracket.id}: round {round_number} is not the current round ({progress.current_round})"
            )

        winners = await store.round_winners(bracket.id, round_number)
        logger.info("Bracket %s round %s winners: %s", bracket.id, round_number, winners)

        if not winners:
            raise InconsistentStateError(f"Bracket {bracket.id}: no winners recorded in round {round_number}")
        if len(winners) == 1:
            return self._crown(progress, winners[0])

        progress.current_round = next_round
        # No reshuffle after round 1: an odd winner count gives the bye to the last one
        matches = self._build_matches(bracket.id, next_round, pair_sequential(winners))
        store.add_all(matches)
        await store.flush()
        logger.info("Bracket %s advanced to round %s with %d matches", bracket.id, next_round, len(matches))

        return [partial(self.events.notify_round_advanced, bracket.id, next_round, [m.id for m in matches])]

    async def _complete_round_robin(self, store: MatchStore, progress: TournamentProgress) -> list:
        standings = self._standings(await store.list_matches(progress.bracket_id))
        champion = pick_champion(standings)
        if champion is None:
            logger.warning("Bracket %s: no completed matches, champion not set", progress.bracket_id)
            return []
        logger.info("Bracket %s final standings: %s", progress.bracket_id, [s.model_dump() for s in standings])
        return self._crown(progress, champion)

    def _crown(self, progress: TournamentProgress, team_id: int) -> list:
        if progress.is_completed:
            raise BracketCompletedError(progress.bracket_id)
        progress.champion_team_id = team_id
        progress.is_completed = True
        logger.info("Bracket %s complete, champion: team %s", progress.bracket_id, team_id)
        return [partial(self.events.notify_champion, progress.bracket_id, team_id)]

    # --- Helpers ---

    @asynccontextmanager
    async def _transaction(self, store: MatchStore):
        """
        Commit-or-rollback block. Yields a list that collects event
        notifications; they are sent only once the commit succeeded.
        """
        notices = []
        try:
            yield notices
            await store.commit()
        except Exception as e:
            logger.warning("Bracket transaction rolled back: %s", e)
            await store.rollback()
            raise

        for notify in notices:
            await notify()

    async def _require_bracket(self, store: MatchStore, bracket_id: int) -> Bracket:
        bracket = await store.get_bracket(bracket_id)
        if not bracket:
            raise NotFoundError("bracket", bracket_id)
        return bracket

    def _standings(self, matches: List[Match]) -> List[TeamStanding]:
        scoring = self.config.scoring
        return compute_standings(matches, win_points=scoring.win_points, draw_points=scoring.draw_points)

    def _validate_result(self, bracket: Bracket, match: Match, winner_team_id: Optional[int]):
        if match.is_bye:
            raise ValidationError(f"Match {match.id} is a bye and takes no result")
        if winner_team_id is None:
            if bracket.bracket_type == BracketType.SINGLE_ELIMINATION:
                raise ValidationError(f"Match {match.id} needs a winner in a single-elimination bracket")
            return
        if winner_team_id not in (match.team1_id, match.team2_id):
            raise ValidationError(f"Team {winner_team_id} did not play in match {match.id}")

    def _build_matches(self, bracket_id: int, round_number: int, planned: List[PlannedMatch]) -> List[Match]:
        matches = []
        for p in planned:
            if p.is_bye:
                # The bye team advances without playing
                matches.append(Match(
                    bracket_id=bracket_id,
                    round_number=round_number,
                    match_number=p.match_number,
                    team1_id=p.team1_id,
                    team2_id=None,
                    winner_team_id=p.team1_id,
                    status=MatchStatus.COMPLETED
                ))
            else:
                matches.append(Match(
                    bracket_id=bracket_id,
                    round_number=round_number,
                    match_number=p.match_number,
                    team1_id=p.team1_id,
                    team2_id=p.team2_id,
                    status=MatchStatus.SCHEDULED
                ))
        return matches


# Singleton instance
bracket_service = BracketService()
