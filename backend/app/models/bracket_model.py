from sqlalchemy import Boolean, Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from backend.app.core.database import Base

class Bracket(Base):
    __tablename__ = "tournament_brackets"
    # One bracket per sport within an event
    __table_args__ = (UniqueConstraint("event_id", "sport_name", name="uq_bracket_event_sport"),)

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event_id = Column(Integer, nullable=False, index=True)
    sport_name = Column(String, nullable=False)
    bracket_type = Column(String, nullable=False) # single_elimination, round_robin

    # Relationships
    progress = relationship("TournamentProgress", back_populates="bracket", uselist=False, cascade="all, delete-orphan")
    matches = relationship("Match", back_populates="bracket", cascade="all, delete-orphan")

class TournamentProgress(Base):
    __tablename__ = "tournament_progress"

    bracket_id = Column(Integer, ForeignKey("tournament_brackets.id"), primary_key=True)
    current_round = Column(Integer, nullable=False, default=1)
    total_rounds = Column(Integer, nullable=False, default=1)

    # Set once, together with is_completed
    champion_team_id = Column(Integer, nullable=True)
    is_completed = Column(Boolean, nullable=False, default=False)

    bracket = relationship("Bracket", back_populates="progress")
