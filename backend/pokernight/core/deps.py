from __future__ import annotations

from fastapi import HTTPException, status

from .config import settings
from .db import SessionLocal
from .exceptions import DomainError, NotFoundError, ValidationError
from ..services.seating import SeatingAssignmentEngine, SeatingPolicy


seating_engine = SeatingAssignmentEngine()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_seating_engine() -> SeatingAssignmentEngine:
    return seating_engine


def get_seating_policy() -> SeatingPolicy | None:
    if not settings.SEATING_ENFORCE_TABLE_LIMITS:
        return None
    return SeatingPolicy(
        min_players_per_table=settings.SEATING_MIN_PLAYERS_PER_TABLE,
        max_players_per_table=settings.SEATING_MAX_PLAYERS_PER_TABLE,
    )


def http_error(exc: DomainError) -> HTTPException:
    """Map a service-layer error onto the HTTP status the client should see."""
    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ValidationError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=exc.message)
