from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from backend.app.core.database import Base
from backend.app.models.enums import MatchStatus

class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("bracket_id", "round_number", "match_number", name="uq_match_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)

    bracket_id = Column(Integer, ForeignKey("tournament_brackets.id"), nullable=False, index=True)
    round_number = Column(Integer, nullable=False)
    match_number = Column(Integer, nullable=False)

    bracket = relationship("Bracket", back_populates="matches")

    # Participants (team2 is NULL for a bye)
    team1_id = Column(Integer, nullable=False)
    team2_id = Column(Integer, nullable=True)

    # Result
    winner_team_id = Column(Integer, nullable=True)
    team1_score = Column(Integer, nullable=True)
    team2_score = Column(Integer, nullable=True)
    status = Column(String, nullable=False, default=MatchStatus.SCHEDULED) # scheduled, completed

    # Scheduling
    match_date = Column(DateTime(timezone=True), nullable=True)
    venue = Column(String, nullable=True)

    @property
    def is_bye(self) -> bool:
        return self.team2_id is None
