from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .db import MAX_AMOUNT


PlayerStatus = Literal["Invited", "In", "Out", "Maybe", "Attending but not playing"]


class CamelModel(BaseModel):
    """JSON uses camelCase keys; snake_case is still accepted on input."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


class MessageOut(CamelModel):
    message: str


# ----------------------------- players -----------------------------
class PlayerIn(CamelModel):
    name: str = Field(default="", max_length=255)
    email: str | None = Field(default=None, max_length=255)


class PlayerOut(CamelModel):
    id: int
    name: str
    email: str | None = None
    created_at: dt.datetime


# ----------------------------- sessions -----------------------------
class SessionIn(CamelModel):
    name: str = Field(default="", max_length=255)
    scheduled_datetime: dt.datetime | None = Field(default=None, alias="scheduledDateTime")
    player_ids: list[int] = []


class SessionOut(CamelModel):
    id: int
    name: str
    scheduled_datetime: dt.datetime | None = Field(alias="scheduledDateTime")
    created_at: dt.datetime
    player_ids: list[int] = []


class SessionPlayerOut(CamelModel):
    id: int
    session_id: int
    player_id: int
    player: PlayerOut
    status: PlayerStatus
    buy_in: float
    cash_out: float
    net: float  # cash_out - buy_in


class StatusUpdateIn(CamelModel):
    status: PlayerStatus


class FinancialsIn(CamelModel):
    buy_in: float | None = Field(default=None, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    cash_out: float | None = Field(default=None, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)


class SessionSummaryOut(CamelModel):
    session_id: int
    total_players: int
    status_counts: dict[str, int]
    total_buy_in: float
    total_cash_out: float
    # non-zero means the books do not balance
    discrepancy: float
    balanced: bool


# ----------------------------- seating -----------------------------
class SeatingChartCreateIn(CamelModel):
    session_id: int
    name: str = Field(default="", max_length=255)
    number_of_tables: int
    # None means "every player marked In for the session"
    player_ids: list[int] | None = None


class SeatingChartUpdateIn(CamelModel):
    name: str = Field(default="", max_length=255)


class SeatingAssignmentOut(CamelModel):
    id: int
    seating_chart_id: int
    player_id: int
    table_number: int
    seat_position: int
    player: PlayerOut


class SeatingTableOut(CamelModel):
    table_number: int
    assignments: list[SeatingAssignmentOut]


class SeatingChartOut(CamelModel):
    id: int
    session_id: int
    name: str
    number_of_tables: int
    created_at: dt.datetime
    assignments: list[SeatingAssignmentOut] = []
    tables: list[SeatingTableOut] = []


class DistributionSuggestionOut(CamelModel):
    tables: int
    players_per_table: str
    description: str
