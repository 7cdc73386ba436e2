"""
Bracket engine exceptions.

Validation and lookup failures are raised before anything is written.
Inconsistent-state failures abort the running transaction.
"""


class BracketError(Exception):
    """Base exception for all bracket engine errors."""
    pass


class ValidationError(BracketError, ValueError):
    """Raised when a request can never succeed as given (bad type, too few teams...)."""
    pass


class NotFoundError(BracketError, LookupError):
    """Raised when a bracket or match does not exist."""
    def __init__(self, kind: str, identifier: int):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} {identifier} not found")


class InconsistentStateError(BracketError):
    """Raised when stored bracket data does not allow the requested transition."""
    pass


class BracketCompletedError(InconsistentStateError):
    """Raised when mutating a bracket that already has a champion."""
    def __init__(self, bracket_id: int):
        self.bracket_id = bracket_id
        super().__init__(f"Bracket {bracket_id} is already completed")


class MatchAlreadyCompletedError(InconsistentStateError):
    """Raised when a result is recorded twice for the same match."""
    def __init__(self, match_id: int):
        self.match_id = match_id
        super().__init__(f"Match {match_id} already has a result")
