from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DBSession

from ..core.deps import get_db
from ..core.exceptions import ErrorMessages
from ..models.db import Player
from ..models.schemas import MessageOut, PlayerIn, PlayerOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/players", tags=["players"])


def _normalize_name(v: str | None) -> str:
    return (v or "").strip()


def _normalize_email(v: str | None) -> str | None:
    v = (v or "").strip()
    return v or None


def _get_player(db: DBSession, player_id: int) -> Player:
    p = db.query(Player).filter(Player.id == player_id).first()
    if not p:
        raise HTTPException(status_code=404, detail=ErrorMessages.PLAYER_NOT_FOUND)
    return p


def _ensure_unique_name(db: DBSession, name: str, exclude_id: int | None = None) -> None:
    q = db.query(Player).filter(Player.name == name)
    if exclude_id is not None:
        q = q.filter(Player.id != exclude_id)
    if q.first():
        raise HTTPException(status_code=409, detail=ErrorMessages.PLAYER_NAME_EXISTS)


@router.get("", response_model=list[PlayerOut])
def list_players(db: DBSession = Depends(get_db)):
    players = db.query(Player).order_by(Player.created_at.desc(), Player.id.desc()).all()
    return [PlayerOut.model_validate(p) for p in players]


@router.get("/{player_id}", response_model=PlayerOut)
def get_player(player_id: int, db: DBSession = Depends(get_db)):
    return PlayerOut.model_validate(_get_player(db, player_id))


@router.post("", response_model=PlayerOut, status_code=status.HTTP_201_CREATED)
def create_player(payload: PlayerIn, db: DBSession = Depends(get_db)):
    name = _normalize_name(payload.name)
    if not name:
        raise HTTPException(status_code=400, detail=ErrorMessages.PLAYER_NAME_REQUIRED)
    _ensure_unique_name(db, name)

    p = Player(name=name, email=_normalize_email(payload.email))
    db.add(p)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=ErrorMessages.PLAYER_NAME_EXISTS)
    db.refresh(p)
    logger.info(f"Created player {p.id} ({name})")
    return PlayerOut.model_validate(p)


@router.put("/{player_id}", response_model=PlayerOut)
def update_player(player_id: int, payload: PlayerIn, db: DBSession = Depends(get_db)):
    name = _normalize_name(payload.name)
    if not name:
        raise HTTPException(status_code=400, detail=ErrorMessages.PLAYER_NAME_REQUIRED)

    p = _get_player(db, player_id)
    _ensure_unique_name(db, name, exclude_id=player_id)

    p.name = cast(Any, name)
    if payload.email is not None:
        p.email = cast(Any, _normalize_email(payload.email))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=ErrorMessages.PLAYER_NAME_EXISTS)
    db.refresh(p)
    return PlayerOut.model_validate(p)


@router.delete("/{player_id}", response_model=MessageOut)
def delete_player(player_id: int, db: DBSession = Depends(get_db)):
    p = _get_player(db, player_id)
    db.delete(p)
    db.commit()
    logger.info(f"Deleted player {player_id}")
    return MessageOut(message="Player deleted successfully")
