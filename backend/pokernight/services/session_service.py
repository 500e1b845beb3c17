from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, cast

from sqlalchemy.orm import Session as DBSession, joinedload

from ..core.exceptions import ErrorMessages, NotFoundError, ValidationError
from ..models.db import DEFAULT_PLAYER_STATUS, MAX_AMOUNT, PLAYER_STATUSES, Player, Session, SessionPlayer

logger = logging.getLogger(__name__)

# Lower sorts first: In > Attending but not playing > Maybe > Invited > Out
_STATUS_PRIORITY = {
    "In": 1,
    "Attending but not playing": 2,
    "Maybe": 3,
    "Invited": 4,
    "Out": 5,
}

CENTS = Decimal("0.01")


def status_priority(status: str) -> int:
    return _STATUS_PRIORITY.get(status, len(_STATUS_PRIORITY) + 1)


def to_money(value: float | int | Decimal) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


class SessionService:
    @staticmethod
    def get_session(db: DBSession, session_id: int) -> Session:
        s = db.query(Session).filter(Session.id == session_id).first()
        if not s:
            raise NotFoundError(ErrorMessages.SESSION_NOT_FOUND)
        return s

    @staticmethod
    def resolve_players(db: DBSession, player_ids: list[int]) -> list[int]:
        """Return ``player_ids`` without repeats, failing if any id is unknown."""
        unique_ids = list(dict.fromkeys(int(pid) for pid in player_ids))
        if not unique_ids:
            return []

        found = {pid for (pid,) in db.query(Player.id).filter(Player.id.in_(unique_ids)).all()}
        missing = [pid for pid in unique_ids if pid not in found]
        if missing:
            raise ValidationError(f"{ErrorMessages.UNKNOWN_PLAYERS}: {', '.join(str(m) for m in missing)}")
        return unique_ids

    @staticmethod
    def set_roster(db: DBSession, session: Session, player_ids: list[int]) -> None:
        """Replace the invited players; players who stay keep their RSVP and books."""
        wanted = SessionService.resolve_players(db, player_ids)
        current = {int(cast(int, sp.player_id)): sp for sp in session.players}

        for pid, entry in current.items():
            if pid not in wanted:
                session.players.remove(entry)

        for pid in wanted:
            if pid not in current:
                session.players.append(
                    SessionPlayer(player_id=pid, status=cast(Any, DEFAULT_PLAYER_STATUS))
                )

    @staticmethod
    def get_entry(db: DBSession, session_id: int, player_id: int) -> SessionPlayer:
        SessionService.get_session(db, session_id)
        entry = (
            db.query(SessionPlayer)
            .filter(SessionPlayer.session_id == session_id, SessionPlayer.player_id == player_id)
            .first()
        )
        if not entry:
            raise NotFoundError(ErrorMessages.SESSION_PLAYER_NOT_FOUND)
        return entry

    @staticmethod
    def roster(db: DBSession, session_id: int) -> list[SessionPlayer]:
        SessionService.get_session(db, session_id)
        entries = (
            db.query(SessionPlayer)
            .options(joinedload(SessionPlayer.player))
            .filter(SessionPlayer.session_id == session_id)
            .all()
        )
        return sorted(entries, key=lambda e: (status_priority(cast(str, e.status)), cast(str, e.player.name).lower()))

    @staticmethod
    def update_status(db: DBSession, session_id: int, player_id: int, status: str) -> SessionPlayer:
        if status not in PLAYER_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        entry = SessionService.get_entry(db, session_id, player_id)
        entry.status = cast(Any, status)
        db.commit()
        logger.info(f"Session {session_id}: player {player_id} is now {status!r}")
        db.refresh(entry)
        return entry

    @staticmethod
    def update_financials(
        db: DBSession,
        session_id: int,
        player_id: int,
        buy_in: float | None = None,
        cash_out: float | None = None,
    ) -> SessionPlayer:
        entry = SessionService.get_entry(db, session_id, player_id)
        for label, value in (("buy_in", buy_in), ("cash_out", cash_out)):
            if value is None:
                continue
            if not math.isfinite(value) or not 0 <= value <= MAX_AMOUNT:
                raise ValidationError(f"{label} must be between 0 and {MAX_AMOUNT:.2f}")
            setattr(entry, label, to_money(value))
        db.commit()
        logger.info(f"Session {session_id}: updated books for player {player_id}")
        db.refresh(entry)
        return entry

    @staticmethod
    def summary(db: DBSession, session_id: int) -> dict[str, Any]:
        entries = SessionService.roster(db, session_id)

        counts = {status: 0 for status in PLAYER_STATUSES}
        total_buy_in = Decimal("0.00")
        total_cash_out = Decimal("0.00")
        for e in entries:
            counts[cast(str, e.status)] = counts.get(cast(str, e.status), 0) + 1
            total_buy_in += Decimal(e.buy_in or 0)
            total_cash_out += Decimal(e.cash_out or 0)

        discrepancy = total_cash_out - total_buy_in
        return {
            "session_id": session_id,
            "total_players": len(entries),
            "status_counts": counts,
            "total_buy_in": float(total_buy_in),
            "total_cash_out": float(total_cash_out),
            "discrepancy": float(discrepancy),
            "balanced": discrepancy == 0,
        }

    @staticmethod
    def confirmed_player_ids(db: DBSession, session_id: int) -> list[int]:
        """Players who answered "In"; the default roster for a seating chart."""
        SessionService.get_session(db, session_id)
        rows = (
            db.query(SessionPlayer.player_id)
            .filter(SessionPlayer.session_id == session_id, SessionPlayer.status == "In")
            .order_by(SessionPlayer.id.asc())
            .all()
        )
        return [int(pid) for (pid,) in rows]
