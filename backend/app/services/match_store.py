"""
Match Store - persistence port for the bracket engine.

BracketService only talks to storage through MatchStore, so tests and
alternative backends can provide their own implementation. SqlMatchStore
is the production one, backed by an AsyncSession. Nothing here commits on
its own: the caller owns the transaction.
"""

from typing import List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from sqlalchemy import case, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from backend.app.models.bracket_model import Bracket, TournamentProgress
from backend.app.models.enums import MatchStatus
from backend.app.models.match_model import Match


@runtime_checkable
class MatchStore(Protocol):
    """Storage operations the bracket engine relies on."""

    def add(self, obj) -> None:
        ...

    def add_all(self, objs: Sequence) -> None:
        ...

    async def flush(self) -> None:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...

    async def refresh(self, obj) -> None:
        ...

    async def get_bracket(self, bracket_id: int) -> Optional[Bracket]:
        ...

    async def find_bracket(self, event_id: int, sport_name: str) -> Optional[Bracket]:
        ...

    async def list_event_brackets(self, event_id: int) -> List[Tuple[Bracket, TournamentProgress]]:
        ...

    async def get_progress(self, bracket_id: int, for_update: bool = False) -> Optional[TournamentProgress]:
        ...

    async def get_match(self, match_id: int, for_update: bool = False) -> Optional[Match]:
        ...

    async def list_matches(self, bracket_id: int, round_number: Optional[int] = None) -> List[Match]:
        ...

    async def count_matches(self, bracket_id: int, round_number: Optional[int] = None) -> Tuple[int, int]:
        """Returns (total, completed) for a round, or the whole bracket when round_number is None."""
        ...

    async def round_winners(self, bracket_id: int, round_number: int) -> List[int]:
        """Winner team ids of a round, ordered by match number."""
        ...

    async def round_exists(self, bracket_id: int, round_number: int) -> bool:
        ...

    async def max_round(self, bracket_id: int) -> Optional[int]:
        ...


class SqlMatchStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    def add(self, obj) -> None:
        self.db.add(obj)

    def add_all(self, objs: Sequence) -> None:
        self.db.add_all(objs)

    async def flush(self) -> None:
        await self.db.flush()

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()

    async def refresh(self, obj) -> None:
        await self.db.refresh(obj)

    # --- Brackets ---

    async def get_bracket(self, bracket_id: int) -> Optional[Bracket]:
        result = await self.db.execute(select(Bracket).where(Bracket.id == bracket_id))
        return result.scalar_one_or_none()

    async def find_bracket(self, event_id: int, sport_name: str) -> Optional[Bracket]:
        result = await self.db.execute(
            select(Bracket).where(
                Bracket.event_id == event_id,
                Bracket.sport_name == sport_name
            )
        )
        return result.scalars().first()

    async def list_event_brackets(self, event_id: int) -> List[Tuple[Bracket, TournamentProgress]]:
        result = await self.db.execute(
            select(Bracket, TournamentProgress)
            .join(TournamentProgress, TournamentProgress.bracket_id == Bracket.id)
            .where(Bracket.event_id == event_id)
            .order_by(Bracket.created_at.desc(), Bracket.id.desc())
        )
        return [(bracket, progress) for bracket, progress in result.all()]

    async def get_progress(self, bracket_id: int, for_update: bool = False) -> Optional[TournamentProgress]:
        query = select(TournamentProgress).where(TournamentProgress.bracket_id == bracket_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    # --- Matches ---

    async def get_match(self, match_id: int, for_update: bool = False) -> Optional[Match]:
        query = select(Match).where(Match.id == match_id)
        if for_update:
            # Two results for the same match must not both see it as scheduled
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_matches(self, bracket_id: int, round_number: Optional[int] = None) -> List[Match]:
        query = select(Match).where(Match.bracket_id == bracket_id)
        if round_number is not None:
            query = query.where(Match.round_number == round_number)
        result = await self.db.execute(
            query.order_by(Match.round_number.asc(), Match.match_number.asc())
        )
        return list(result.scalars().all())

    async def count_matches(self, bracket_id: int, round_number: Optional[int] = None) -> Tuple[int, int]:
        query = select(
            func.count(Match.id),
            func.sum(case((Match.status == MatchStatus.COMPLETED, 1), else_=0))
        ).where(Match.bracket_id == bracket_id)
        if round_number is not None:
            query = query.where(Match.round_number == round_number)
        result = await self.db.execute(query)
        total, completed = result.one()
        return total or 0, completed or 0

    async def round_winners(self, bracket_id: int, round_number: int) -> List[int]:
        result = await self.db.execute(
            select(Match.winner_team_id)
            .where(
                Match.bracket_id == bracket_id,
                Match.round_number == round_number,
                Match.winner_team_id.is_not(None)
            )
            .order_by(Match.match_number.asc())
        )
        return list(result.scalars().all())

    async def round_exists(self, bracket_id: int, round_number: int) -> bool:
        result = await self.db.execute(
            select(Match.id)
            .where(Match.bracket_id == bracket_id, Match.round_number == round_number)
            .limit(1)
        )
        return result.first() is not None

    async def max_round(self, bracket_id: int) -> Optional[int]:
        result = await self.db.execute(
            select(func.max(Match.round_number)).where(Match.bracket_id == bracket_id)
        )
        return result.scalar()
