from __future__ import annotations

from typing import cast
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session as DBSession

from ..core.deps import get_db, http_error
from ..core.exceptions import DomainError
from ..services.report_service import build_session_workbook
from ..services.session_service import SessionService

router = APIRouter(prefix="/api/sessions", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _ascii_filename_component(name: str) -> str:
    """Convert filename to ASCII-safe characters for HTTP headers."""
    out = []
    for ch in name:
        if ch.isascii() and (ch.isalnum() or ch in "._-"):
            out.append(ch)
        else:
            out.append("_")
    return "".join(out)


@router.get("/{session_id}/report.xlsx")
def export_session_report(session_id: int, db: DBSession = Depends(get_db)):
    try:
        session = SessionService.get_session(db, session_id)
        entries = SessionService.roster(db, session_id)
        summary = SessionService.summary(db, session_id)
    except DomainError as e:
        raise http_error(e)

    output = build_session_workbook(session, entries, summary)

    filename = f"session_{session_id}_{cast(str, session.name)}.xlsx"
    headers = {
        "Content-Disposition": (
            f'attachment; filename="{_ascii_filename_component(filename)}"; '
            f"filename*=UTF-8''{quote(filename)}"
        )
    }
    return StreamingResponse(output, media_type=XLSX_MEDIA_TYPE, headers=headers)
