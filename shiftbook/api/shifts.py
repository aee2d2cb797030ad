# shiftbook/api/shifts.py

from datetime import datetime
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query
from sqlalchemy.orm import Session

from shiftbook.db.base import get_ctx, get_db
from shiftbook.db.feed import Change
from shiftbook.db.models import Employee, Shift
from shiftbook.db.queries import shifts_between
from shiftbook.domain import LEAVE_TYPE_LABELS, UNKNOWN_EMPLOYEE_NAME, LeaveType
from shiftbook.utils.timeutils import (
    ZERO, format_date, hours_worked, is_valid_time_of_day, month_bounds, parse_period, period_of, round2,
    shift_span, today_in,
)
from shiftbook.utils.validation import shift_error

router = APIRouter(prefix="/shifts", tags=["shifts"])


# ----- helpers -----
def _get_or_404(db: Session, shift_id: int) -> Shift:
    s = db.get(Shift, shift_id)
    if not s:
        raise HTTPException(status_code=404, detail="Shift not found")
    return s


def _require_employee(db: Session, emp_id: int, must_be_active: bool) -> Employee:
    emp = db.get(Employee, emp_id)
    if not emp:
        raise HTTPException(status_code=404, detail="Employee not found")
    if must_be_active and not emp.active:
        raise HTTPException(status_code=422, detail="Employee is not active")
    return emp


def _apply(s: Shift, employee_id: int, day: str, is_leave: bool, leave_type: Optional[str],
           start: Optional[str], end: Optional[str], break_min: int, notes: Optional[str]) -> None:
    err = shift_error(employee_id, day, is_leave, leave_type, start, end, break_min)
    if err:
        raise HTTPException(status_code=422, detail=err)

    s.employee_id = employee_id
    s.date = datetime.strptime(day, "%Y-%m-%d").date()
    s.is_leave = is_leave
    s.notes = (notes or "").strip() or None
    if is_leave:
        s.leave_type = LeaveType.parse(leave_type)
        s.start = s.end = None
        s.break_min = 0
        s.total_hours = ZERO
    else:
        s.leave_type = None
        s.start, s.end, s.break_min = start, end, break_min
        s.total_hours = hours_worked(start, end, break_min)


def _month_or_current(month: Optional[str], tz_name: str) -> tuple[int, int]:
    if not month:
        today = today_in(tz_name)
        return today.year, today.month
    parsed = parse_period(month)
    if parsed is None:
        raise HTTPException(status_code=422, detail="month must be YYYY-MM")
    return parsed


# ----- live preview -----
@router.get("/preview")
def preview_hours(
    start: str = Query(""),
    end: str = Query(""),
    break_min: int = Query(0),
):
    """Hours for a half-filled form; never fails, bad input gives 0."""
    return {
        "start_valid": is_valid_time_of_day(start),
        "end_valid": is_valid_time_of_day(end),
        "total_hours": f"{hours_worked(start, end, break_min):.2f}",
    }


@router.get("/leave-types")
def leave_types():
    return [{"value": t.value, "label": label} for t, label in LEAVE_TYPE_LABELS.items()]


# ----- calendar -----
@router.get("/calendar")
def calendar_events(
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to the current month"),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    """
    Shifts of one month as calendar events.

    Work shifts get start/end datetimes (an end of "00:00" is midnight of the
    next day, an earlier end rolls over); leave records are all-day events.
    """
    y, m = _month_or_current(month, ctx.settings.timezone)
    first, last = month_bounds(y, m)
    shifts = shifts_between(db, first, last).order_by(Shift.date.asc(), Shift.start.asc(), Shift.id.asc()).all()
    employees = {e.id: e for e in db.query(Employee).all()}

    events = []
    for s in shifts:
        emp = employees.get(s.employee_id)
        event = {
            "id": s.id,
            "employee_id": s.employee_id,
            "title": emp.full_name if emp else UNKNOWN_EMPLOYEE_NAME,
            "color": emp.color if emp else None,
            "is_leave": bool(s.is_leave),
        }
        if s.is_leave:
            event.update(all_day=True, start=s.date.isoformat(), end=None,
                         leave_label=LEAVE_TYPE_LABELS.get(s.leave_type))
        else:
            starts, ends = shift_span(s.date, s.start, s.end)
            event.update(all_day=False, start=starts.isoformat(timespec="minutes"),
                         end=ends.isoformat(timespec="minutes"))
        events.append(event)

    return {"ok": True, "period": f"{y:04d}-{m:02d}", "events": events}


# ----- create -----
@router.post("")
def create_shift(
    employee_id: int = Form(...),
    date: str = Form(...),           # YYYY-MM-DD
    is_leave: bool = Form(False),
    leave_type: Optional[str] = Form(None),
    start: Optional[str] = Form(None),
    end: Optional[str] = Form(None),
    break_min: int = Form(0),
    notes: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    s = Shift()
    _apply(s, employee_id, date, is_leave, leave_type, start, end, break_min, notes)
    _require_employee(db, employee_id, must_be_active=True)

    db.add(s)
    db.commit()
    db.refresh(s)

    ctx.feed.publish(Change("shift", "created", s.id, (period_of(s.date),)))
    return {"ok": True, "shift": s.to_dict()}


# ----- read/list -----
@router.get("")
def list_shifts(
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to the current month"),
    employee_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    y, m = _month_or_current(month, ctx.settings.timezone)
    first, last = month_bounds(y, m)
    shifts = (
        shifts_between(db, first, last, employee_id)
        .order_by(Shift.date.desc(), Shift.id.desc())
        .all()
    )
    employees = {e.id: e for e in db.query(Employee).all()}

    items = []
    work_hours = ZERO
    work_pay = Decimal(0)
    for s in shifts:
        emp = employees.get(s.employee_id)
        item = s.to_dict()
        item["employee_name"] = emp.full_name if emp else UNKNOWN_EMPLOYEE_NAME
        item["date_label"] = format_date(s.date)
        items.append(item)
        if not s.is_leave:
            work_hours += Decimal(s.total_hours)
            if emp:
                work_pay += Decimal(s.total_hours) * Decimal(emp.hourly_rate)

    return {
        "ok": True,
        "period": f"{y:04d}-{m:02d}",
        "shifts": items,
        "totals": {
            "work_count": sum(1 for s in shifts if not s.is_leave),
            "leave_count": sum(1 for s in shifts if s.is_leave),
            "total_hours": f"{round2(work_hours):.2f}",
            "total_pay": f"{round2(work_pay):.2f}",
        },
    }


@router.get("/{shift_id}")
def get_shift(shift_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, shift_id).to_dict()


# ----- update -----
@router.put("/{shift_id}")
def update_shift(
    shift_id: int,
    employee_id: int = Form(...),
    date: str = Form(...),
    is_leave: bool = Form(False),
    leave_type: Optional[str] = Form(None),
    start: Optional[str] = Form(None),
    end: Optional[str] = Form(None),
    break_min: int = Form(0),
    notes: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    s = _get_or_404(db, shift_id)
    old_period = period_of(s.date)
    reassigned = employee_id != s.employee_id

    _apply(s, employee_id, date, is_leave, leave_type, start, end, break_min, notes)
    _require_employee(db, employee_id, must_be_active=reassigned)
    db.commit()
    db.refresh(s)

    periods = tuple(sorted({old_period, period_of(s.date)}))
    ctx.feed.publish(Change("shift", "updated", s.id, periods))
    return {"ok": True, "shift": s.to_dict()}


# ----- delete -----
@router.delete("/{shift_id}")
def delete_shift(shift_id: int, db: Session = Depends(get_db), ctx=Depends(get_ctx)):
    s = _get_or_404(db, shift_id)
    period = period_of(s.date)
    db.delete(s)
    db.commit()
    ctx.feed.publish(Change("shift", "deleted", shift_id, (period,)))
    return {"ok": True, "deleted_id": shift_id}
