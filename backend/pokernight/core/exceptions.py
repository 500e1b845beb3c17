"""Domain exceptions and user-facing error messages."""
from __future__ import annotations


class ErrorMessages:
    PLAYER_NOT_FOUND = "Player not found"
    PLAYER_NAME_REQUIRED = "Player name is required"
    PLAYER_NAME_EXISTS = "Player name already exists"

    SESSION_NOT_FOUND = "Session not found"
    SESSION_NAME_REQUIRED = "Session name is required"
    SESSION_DATETIME_REQUIRED = "Scheduled date and time is required"
    SESSION_PLAYER_NOT_FOUND = "Player is not part of this session"
    UNKNOWN_PLAYERS = "Unknown player ids"

    SEATING_CHART_NOT_FOUND = "Seating chart not found"
    SEATING_CHART_NAME_REQUIRED = "Name is required"

    EMPTY_ROSTER = "At least one player must be selected"
    NON_POSITIVE_TABLES = "Number of tables must be at least 1"
    INVALID_TABLE_COUNT = "Number of tables must be an integer"
    TOO_MANY_TABLES = "Cannot have more tables than players"
    DUPLICATE_PLAYERS = "Player ids must be unique"
    TABLE_TOO_SMALL = "Each table should have at least {minimum} players"
    TABLE_TOO_LARGE = "Tables should not have more than {maximum} players"


class DomainError(Exception):
    """Base class for errors raised by the service layer."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    pass


class ValidationError(DomainError):
    pass


class SeatingValidationError(ValidationError):
    """A seating request failed one of the engine's hard constraints.

    ``code`` identifies the constraint: ``empty_roster``,
    ``non_positive_tables``, ``too_many_tables``, ``duplicate_players`` or
    ``invalid_table_count``.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class SeatingPolicyError(SeatingValidationError):
    """A seating request is valid but breaks the configured table-size policy."""
