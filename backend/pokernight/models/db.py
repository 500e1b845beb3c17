from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


PLAYER_STATUSES = ("Invited", "In", "Out", "Maybe", "Attending but not playing")
DEFAULT_PLAYER_STATUS = "Invited"

# largest value a Numeric(10, 2) money column holds
MAX_AMOUNT = 99_999_999.99


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: dt.datetime.utcnow())

    session_entries = relationship("SessionPlayer", back_populates="player", cascade="all, delete")
    seat_assignments = relationship("SeatingAssignment", back_populates="player", cascade="all, delete")


class Session(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    scheduled_datetime = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=lambda: dt.datetime.utcnow(), index=True)

    players = relationship(
        "SessionPlayer",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionPlayer.id",
    )
    seating_charts = relationship("SeatingChart", back_populates="session", cascade="all, delete-orphan")

    @property
    def player_ids(self) -> list[int]:
        return [int(sp.player_id) for sp in self.players]


class SessionPlayer(Base):
    __tablename__ = "session_players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(50), nullable=False, default=DEFAULT_PLAYER_STATUS)  # see PLAYER_STATUSES
    buy_in = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    cash_out = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    created_at = Column(DateTime, nullable=False, default=lambda: dt.datetime.utcnow())

    session = relationship("Session", back_populates="players")
    player = relationship("Player", back_populates="session_entries")

    __table_args__ = (
        UniqueConstraint("session_id", "player_id", name="uq_session_players_session_player"),
    )

    @property
    def net(self) -> Decimal:
        return Decimal(self.cash_out or 0) - Decimal(self.buy_in or 0)


class SeatingChart(Base):
    __tablename__ = "seating_charts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    number_of_tables = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: dt.datetime.utcnow(), index=True)

    session = relationship("Session", back_populates="seating_charts")
    assignments = relationship(
        "SeatingAssignment",
        back_populates="seating_chart",
        cascade="all, delete-orphan",
        order_by="[SeatingAssignment.table_number, SeatingAssignment.seat_position]",
    )


class SeatingAssignment(Base):
    __tablename__ = "seating_assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    seating_chart_id = Column(Integer, ForeignKey("seating_charts.id", ondelete="CASCADE"), nullable=False, index=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    table_number = Column(Integer, nullable=False)
    seat_position = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: dt.datetime.utcnow())

    seating_chart = relationship("SeatingChart", back_populates="assignments")
    player = relationship("Player", back_populates="seat_assignments")

    __table_args__ = (
        UniqueConstraint("seating_chart_id", "table_number", "seat_position", name="uq_seating_assignment_seat"),
    )
