from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session as DBSession

from ..core.deps import get_db, http_error
from ..core.exceptions import DomainError, ErrorMessages
from ..models.db import Session
from ..models.schemas import (
    FinancialsIn,
    MessageOut,
    SessionIn,
    SessionOut,
    SessionPlayerOut,
    SessionSummaryOut,
    StatusUpdateIn,
)
from ..services.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def _get_session_or_404(db: DBSession, session_id: int) -> Session:
    try:
        return SessionService.get_session(db, session_id)
    except DomainError as e:
        raise http_error(e)


def _validate_payload(payload: SessionIn) -> str:
    name = (payload.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail=ErrorMessages.SESSION_NAME_REQUIRED)
    if payload.scheduled_datetime is None:
        raise HTTPException(status_code=400, detail=ErrorMessages.SESSION_DATETIME_REQUIRED)
    return name


@router.get("", response_model=list[SessionOut])
def list_sessions(db: DBSession = Depends(get_db)):
    sessions = db.query(Session).order_by(Session.created_at.desc(), Session.id.desc()).all()
    return [SessionOut.model_validate(s) for s in sessions]


@router.get("/{session_id}", response_model=SessionOut)
def get_session(session_id: int, db: DBSession = Depends(get_db)):
    return SessionOut.model_validate(_get_session_or_404(db, session_id))


@router.post("", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
def create_session(payload: SessionIn, db: DBSession = Depends(get_db)):
    name = _validate_payload(payload)

    s = Session(name=name, scheduled_datetime=payload.scheduled_datetime)
    db.add(s)
    try:
        SessionService.set_roster(db, s, payload.player_ids)
    except DomainError as e:
        db.rollback()
        raise http_error(e)

    db.commit()
    db.refresh(s)
    logger.info(f"Created session {s.id} with {len(s.players)} invited players")
    return SessionOut.model_validate(s)


@router.put("/{session_id}", response_model=SessionOut)
def update_session(session_id: int, payload: SessionIn, db: DBSession = Depends(get_db)):
    name = _validate_payload(payload)
    s = _get_session_or_404(db, session_id)

    s.name = cast(Any, name)
    s.scheduled_datetime = cast(Any, payload.scheduled_datetime)
    try:
        SessionService.set_roster(db, s, payload.player_ids)
    except DomainError as e:
        db.rollback()
        raise http_error(e)

    db.commit()
    db.refresh(s)
    return SessionOut.model_validate(s)


@router.delete("/{session_id}", response_model=MessageOut)
def delete_session(session_id: int, db: DBSession = Depends(get_db)):
    s = _get_session_or_404(db, session_id)
    db.delete(s)
    db.commit()
    logger.info(f"Deleted session {session_id}")
    return MessageOut(message="Session deleted successfully")


@router.get("/{session_id}/players", response_model=list[SessionPlayerOut])
def list_session_players(session_id: int, db: DBSession = Depends(get_db)):
    try:
        entries = SessionService.roster(db, session_id)
    except DomainError as e:
        raise http_error(e)
    return [SessionPlayerOut.model_validate(e) for e in entries]


@router.put("/{session_id}/players/{player_id}/status", response_model=SessionPlayerOut)
def update_player_status(
    session_id: int,
    player_id: int,
    payload: StatusUpdateIn,
    db: DBSession = Depends(get_db),
):
    try:
        entry = SessionService.update_status(db, session_id, player_id, payload.status)
    except DomainError as e:
        raise http_error(e)
    return SessionPlayerOut.model_validate(entry)


@router.put("/{session_id}/players/{player_id}/financials", response_model=SessionPlayerOut)
def update_player_financials(
    session_id: int,
    player_id: int,
    payload: FinancialsIn,
    db: DBSession = Depends(get_db),
):
    try:
        entry = SessionService.update_financials(
            db,
            session_id,
            player_id,
            buy_in=payload.buy_in,
            cash_out=payload.cash_out,
        )
    except DomainError as e:
        raise http_error(e)
    return SessionPlayerOut.model_validate(entry)


@router.get("/{session_id}/summary", response_model=SessionSummaryOut)
def get_session_summary(session_id: int, db: DBSession = Depends(get_db)):
    try:
        return SessionSummaryOut.model_validate(SessionService.summary(db, session_id))
    except DomainError as e:
        raise http_error(e)
