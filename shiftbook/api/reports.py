# shiftbook/api/reports.py

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session

from shiftbook.db.base import get_ctx, get_db
from shiftbook.db.models import Employee, Shift
from shiftbook.db.queries import load_month_records, load_roster, shifts_between
from shiftbook.report.export import render_print_html, workbook_bytes, workbook_filename
from shiftbook.report.monthly import export_table, grand_total, summarize
from shiftbook.utils.timeutils import month_bounds, month_label, round2, today_in, week_start

log = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _resolve_month(year: Optional[int], month: Optional[int], tz_name: str) -> tuple[int, int]:
    # defaults: current shop-local month
    today = today_in(tz_name)
    y = today.year if year is None else year
    m = today.month if month is None else month
    if not 1 <= m <= 12 or not 1 <= y <= 9999:
        raise HTTPException(status_code=422, detail="year/month out of range")
    return y, m


def _summary(db: Session, y: int, m: int):
    # recomputed from the shift records on every request
    return summarize(load_month_records(db, y, m), load_roster(db))


@router.get("/monthly")
def monthly_report(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    hide_empty: bool = Query(False, description="Drop employees with no hours"),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    """
    Per-employee hours and pay for one calendar month.

    Every employee is listed (zero-hour and inactive ones too) unless
    hide_empty is set; the grand total is always taken over all rows.
    """
    y, m = _resolve_month(year, month, ctx.settings.timezone)
    rows = _summary(db, y, m)
    total = grand_total(rows)
    shown = [r for r in rows if r.total_hours > 0] if hide_empty else rows
    return {
        "ok": True,
        "period": f"{y:04d}-{m:02d}",
        "month_label": month_label(y, m),
        "shop_name": ctx.settings.shop_name,
        "rows": [r.to_dict() for r in shown],
        "grand_total": total.to_dict(),
    }


@router.get("/monthly.xlsx")
def monthly_report_xlsx(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    s = ctx.settings
    y, m = _resolve_month(year, month, s.timezone)
    table = export_table(_summary(db, y, m), month_label(y, m), s.shop_name, s.currency)
    filename = workbook_filename(y, m)
    log.info("Exporting %s", filename)
    return Response(
        content=workbook_bytes(table),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/monthly/print", response_class=HTMLResponse)
def monthly_report_print(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    s = ctx.settings
    y, m = _resolve_month(year, month, s.timezone)
    html = render_print_html(
        _summary(db, y, m), month_label(y, m), s.shop_name, s.currency,
        printed_on=today_in(s.timezone),
    )
    return HTMLResponse(html)


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db), ctx=Depends(get_ctx)):
    """Quick numbers for the home page: today, this week, this month."""
    today = today_in(ctx.settings.timezone)
    first, last = month_bounds(today.year, today.month)
    wk_first = week_start(today)
    wk_last = wk_first + timedelta(days=6)

    def work_hours(start, end) -> Decimal:
        q = shifts_between(db, start, end).filter(Shift.is_leave.is_(False))
        return round2(sum((Decimal(s.total_hours) for s in q.all()), Decimal(0)))

    return {
        "ok": True,
        "today": today.isoformat(),
        "today_shifts": shifts_between(db, today, today).count(),
        "weekly_hours": f"{work_hours(wk_first, wk_last):.2f}",
        "monthly_hours": f"{work_hours(first, last):.2f}",
        "active_employees": db.query(Employee).filter(Employee.active.is_(True)).count(),
        "recent_changes": [c.to_dict() for c in ctx.feed.recent(5)],
    }
