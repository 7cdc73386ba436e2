from enum import StrEnum

class BracketType(StrEnum):
    SINGLE_ELIMINATION = "single_elimination"
    ROUND_ROBIN = "round_robin"

class MatchStatus(StrEnum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
