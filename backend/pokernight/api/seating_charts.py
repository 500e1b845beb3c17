from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session as DBSession, joinedload

from ..core.config import settings
from ..core.deps import get_db, get_seating_engine, get_seating_policy, http_error
from ..core.exceptions import DomainError, ErrorMessages
from ..models.db import SeatingAssignment, SeatingChart
from ..models.schemas import (
    DistributionSuggestionOut,
    MessageOut,
    SeatingAssignmentOut,
    SeatingChartCreateIn,
    SeatingChartOut,
    SeatingChartUpdateIn,
    SeatingTableOut,
)
from ..services.seating import (
    SeatingAssignmentEngine,
    SeatingPolicy,
    group_assignments_by_table,
    table_distribution_suggestions,
)
from ..services.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/seating-charts", tags=["seating-charts"])


def _chart_out(chart: SeatingChart) -> SeatingChartOut:
    assignments = [SeatingAssignmentOut.model_validate(a) for a in chart.assignments]
    tables = [
        SeatingTableOut(table_number=t.table_number, assignments=t.assignments)
        for t in group_assignments_by_table(assignments)
    ]
    return SeatingChartOut(
        id=cast(int, chart.id),
        session_id=cast(int, chart.session_id),
        name=cast(str, chart.name),
        number_of_tables=cast(int, chart.number_of_tables),
        created_at=cast(Any, chart.created_at),
        assignments=assignments,
        tables=tables,
    )


def _load_chart(db: DBSession, chart_id: int) -> SeatingChart:
    chart = (
        db.query(SeatingChart)
        .options(joinedload(SeatingChart.assignments).joinedload(SeatingAssignment.player))
        .filter(SeatingChart.id == chart_id)
        .first()
    )
    if not chart:
        raise HTTPException(status_code=404, detail=ErrorMessages.SEATING_CHART_NOT_FOUND)
    return chart


@router.get("/suggestions", response_model=list[DistributionSuggestionOut])
def get_distribution_suggestions(player_count: int = Query(alias="playerCount", ge=0)):
    suggestions = table_distribution_suggestions(player_count, max_tables=settings.SEATING_MAX_SUGGESTED_TABLES)
    return [DistributionSuggestionOut.model_validate(s) for s in suggestions]


@router.get("/session/{session_id}", response_model=list[SeatingChartOut])
def list_session_charts(session_id: int, db: DBSession = Depends(get_db)):
    try:
        SessionService.get_session(db, session_id)
    except DomainError as e:
        raise http_error(e)

    charts = (
        db.query(SeatingChart)
        .options(joinedload(SeatingChart.assignments).joinedload(SeatingAssignment.player))
        .filter(SeatingChart.session_id == session_id)
        .order_by(SeatingChart.created_at.desc(), SeatingChart.id.desc())
        .all()
    )
    return [_chart_out(c) for c in charts]


@router.get("/{chart_id}", response_model=SeatingChartOut)
def get_chart(chart_id: int, db: DBSession = Depends(get_db)):
    return _chart_out(_load_chart(db, chart_id))


@router.post("", response_model=SeatingChartOut, status_code=status.HTTP_201_CREATED)
def create_chart(
    payload: SeatingChartCreateIn,
    db: DBSession = Depends(get_db),
    seating: SeatingAssignmentEngine = Depends(get_seating_engine),
    policy: SeatingPolicy | None = Depends(get_seating_policy),
):
    name = (payload.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail=ErrorMessages.SEATING_CHART_NAME_REQUIRED)

    try:
        session = SessionService.get_session(db, payload.session_id)
        if payload.player_ids is None:
            player_ids = SessionService.confirmed_player_ids(db, payload.session_id)
        else:
            player_ids = list(payload.player_ids)

        seating.validate(player_ids, payload.number_of_tables)
        SessionService.resolve_players(db, player_ids)
        if policy is not None:
            policy.check(len(player_ids), payload.number_of_tables)

        seats = seating.generate(player_ids, payload.number_of_tables)
    except DomainError as e:
        raise http_error(e)

    chart = SeatingChart(
        session=session,
        name=name,
        number_of_tables=payload.number_of_tables,
    )
    for seat in seats:
        chart.assignments.append(
            SeatingAssignment(
                player_id=seat.player_id,
                table_number=seat.table_number,
                seat_position=seat.seat_position,
            )
        )
    db.add(chart)

    db.commit()
    logger.info(
        f"Generated seating chart {chart.id} for session {payload.session_id}: "
        f"{len(seats)} players at {payload.number_of_tables} tables"
    )
    return _chart_out(_load_chart(db, cast(int, chart.id)))


@router.put("/{chart_id}", response_model=SeatingChartOut)
def rename_chart(chart_id: int, payload: SeatingChartUpdateIn, db: DBSession = Depends(get_db)):
    name = (payload.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail=ErrorMessages.SEATING_CHART_NAME_REQUIRED)

    chart = _load_chart(db, chart_id)
    chart.name = cast(Any, name)
    db.commit()
    return _chart_out(_load_chart(db, chart_id))


@router.delete("/{chart_id}", response_model=MessageOut)
def delete_chart(chart_id: int, db: DBSession = Depends(get_db)):
    chart = _load_chart(db, chart_id)
    db.delete(chart)
    db.commit()
    logger.info(f"Deleted seating chart {chart_id}")
    return MessageOut(message="Seating chart deleted successfully")
