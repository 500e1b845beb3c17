"""
XLSX ledger export for a single game session.

Sheets:
- Ledger: one row per invited player with RSVP status, buy-in, cash-out, net
- Summary: RSVP counts and the buy-in / cash-out totals
"""
from __future__ import annotations

import io
from typing import Any, cast

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from ..models.db import Session, SessionPlayer

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
MONEY_POSITIVE_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
MONEY_NEGATIVE_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
MONEY_FORMAT = "#,##0.00"

LEDGER_HEADERS = ["Player", "Status", "Buy-in", "Cash-out", "Net"]


def _style_header(ws, row: int, cols: int):
    """Apply header styling to a row."""
    for col in range(1, cols + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = THIN_BORDER


def _auto_width(ws):
    for column_cells in ws.columns:
        max_length = max((len(str(c.value)) for c in column_cells if c.value is not None), default=0)
        ws.column_dimensions[column_cells[0].column_letter].width = max(min(max_length + 4, 60), 12)


def _money_cell(ws, row: int, col: int, value: float, colour: bool = False):
    cell = ws.cell(row=row, column=col, value=value)
    cell.number_format = MONEY_FORMAT
    if colour and value > 0:
        cell.fill = MONEY_POSITIVE_FILL
    elif colour and value < 0:
        cell.fill = MONEY_NEGATIVE_FILL
    return cell


def _create_ledger_sheet(wb: Workbook, entries: list[SessionPlayer]):
    ws = wb.create_sheet(title="Ledger")

    for col, h in enumerate(LEDGER_HEADERS, start=1):
        ws.cell(row=1, column=col, value=h)
    _style_header(ws, 1, len(LEDGER_HEADERS))

    if not entries:
        ws.cell(row=2, column=1, value="No players invited")
        ws.cell(row=2, column=1).font = Font(italic=True)
        return

    row = 2
    for e in entries:
        ws.cell(row=row, column=1, value=cast(str, e.player.name))
        ws.cell(row=row, column=2, value=cast(str, e.status))
        _money_cell(ws, row, 3, float(e.buy_in or 0))
        _money_cell(ws, row, 4, float(e.cash_out or 0))
        _money_cell(ws, row, 5, float(e.net), colour=True)
        row += 1

    _auto_width(ws)


def _create_summary_sheet(wb: Workbook, session: Session, summary: dict[str, Any]):
    ws = wb.create_sheet(title="Summary")

    ws.cell(row=1, column=1, value=cast(str, session.name))
    ws.cell(row=1, column=1).font = Font(bold=True, size=14)
    scheduled = cast(Any, session.scheduled_datetime)
    ws.cell(row=2, column=1, value=scheduled.strftime("%Y-%m-%d %H:%M") if scheduled else "Not scheduled")

    row = 4
    ws.cell(row=row, column=1, value="RSVP")
    ws.cell(row=row, column=1).font = Font(bold=True)
    row += 1
    for status, count in summary["status_counts"].items():
        ws.cell(row=row, column=1, value=status)
        ws.cell(row=row, column=2, value=count)
        row += 1

    row += 1
    ws.cell(row=row, column=1, value="Total buy-in")
    _money_cell(ws, row, 2, summary["total_buy_in"])
    row += 1
    ws.cell(row=row, column=1, value="Total cash-out")
    _money_cell(ws, row, 2, summary["total_cash_out"])
    row += 1
    ws.cell(row=row, column=1, value="Discrepancy")
    ws.cell(row=row, column=1).font = Font(bold=True)
    cell = _money_cell(ws, row, 2, summary["discrepancy"], colour=True)
    cell.font = Font(bold=True)

    _auto_width(ws)


def build_session_workbook(session: Session, entries: list[SessionPlayer], summary: dict[str, Any]) -> io.BytesIO:
    wb = Workbook()
    wb.remove(wb.active)

    _create_ledger_sheet(wb, entries)
    _create_summary_sheet(wb, session, summary)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output
