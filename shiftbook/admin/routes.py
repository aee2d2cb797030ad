from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from shiftbook.db.base import get_ctx, get_db
from shiftbook.db.feed import Change
from shiftbook.db.models import Employee, Shift, pick_color
from shiftbook.db.queries import shifts_between
from shiftbook.db.seed import seed_demo_data
from shiftbook.domain import LEAVE_TYPE_LABELS, UNKNOWN_EMPLOYEE_NAME, LeaveType
from shiftbook.report.export import templates
from shiftbook.utils.timeutils import (
    hours_worked, month_bounds, month_label, parse_period, period_of, today_in, today_string,
)
from shiftbook.utils.validation import employee_error, parse_rate, shift_error

router = APIRouter(prefix="/admin", tags=["Admin Pages"])


@router.get("/ping")
def admin_ping():
    return {"ok": True, "where": "admin"}


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


# ---------- employees ----------
@router.get("/employees", response_class=HTMLResponse)
def employees_list(
    request: Request,
    status: str = Query("all"),
    error: Optional[str] = Query(None),
    ok: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    all_employees = db.query(Employee).order_by(Employee.full_name.asc(), Employee.id.asc()).all()
    if status == "active":
        employees = [e for e in all_employees if e.active]
    elif status == "inactive":
        employees = [e for e in all_employees if not e.active]
    else:
        status, employees = "all", all_employees
    return templates.TemplateResponse(
        request,
        "employees.html",
        {
            "employees": employees,
            "status": status,
            "counts": {
                "all": len(all_employees),
                "active": sum(1 for e in all_employees if e.active),
                "inactive": sum(1 for e in all_employees if not e.active),
            },
            "error": error,
            "ok": ok,
        },
    )


@router.post("/employees/new")
def employees_add(
    full_name: str = Form(""),
    hourly_rate: str = Form(""),
    active: bool = Form(False),
    color: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    rate = parse_rate(hourly_rate)
    color = color or None
    err = employee_error(full_name, rate, color)
    if err:
        return _redirect(f"/admin/employees?error={err}")

    emp = Employee(
        full_name=full_name.strip(),
        hourly_rate=rate,
        active=active,
        color=color or pick_color(full_name.strip()),
    )
    db.add(emp)
    db.commit()
    ctx.feed.publish(Change("employee", "created", emp.id))
    return _redirect("/admin/employees?ok=1")


@router.post("/employees/{emp_id}/toggle")
def employees_toggle(emp_id: int, db: Session = Depends(get_db), ctx=Depends(get_ctx)):
    emp = db.get(Employee, emp_id)
    if not emp:
        return _redirect("/admin/employees?error=Employee not found")
    emp.active = not emp.active
    db.commit()
    ctx.feed.publish(Change("employee", "updated", emp.id))
    return _redirect("/admin/employees?ok=1")


# ---------- shifts ----------
@router.get("/shifts", response_class=HTMLResponse)
def shifts_list(
    request: Request,
    month: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    ok: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    tz_name = ctx.settings.timezone
    today = today_in(tz_name)
    y, m = parse_period(month or "") or (today.year, today.month)
    first, last = month_bounds(y, m)

    shifts = shifts_between(db, first, last).order_by(Shift.date.desc(), Shift.id.desc()).all()
    employees = db.query(Employee).order_by(Employee.full_name.asc()).all()
    names = {e.id: e.full_name for e in employees}
    rows = [
        {"shift": s, "employee_name": names.get(s.employee_id, UNKNOWN_EMPLOYEE_NAME)}
        for s in shifts
    ]
    return templates.TemplateResponse(
        request,
        "shifts.html",
        {
            "rows": rows,
            "period": f"{y:04d}-{m:02d}",
            "month_label": month_label(y, m),
            "year": y,
            "month": m,
            "active_employees": [e for e in employees if e.active],
            "leave_types": LEAVE_TYPE_LABELS,
            "today": today_string(tz_name),
            "work_count": sum(1 for s in shifts if not s.is_leave),
            "leave_count": sum(1 for s in shifts if s.is_leave),
            "error": error,
            "ok": ok,
        },
    )


@router.post("/shifts/new")
def shifts_add(
    employee_id: int = Form(0),
    date: str = Form(""),
    is_leave: bool = Form(False),
    leave_type: Optional[str] = Form(None),
    start: Optional[str] = Form(None),
    end: Optional[str] = Form(None),
    break_min: int = Form(0),
    notes: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    err = shift_error(employee_id, date, is_leave, leave_type, start, end, break_min)
    emp = db.get(Employee, employee_id) if employee_id else None
    if not err and (emp is None or not emp.active):
        err = "Choose an active employee"
    if err:
        return _redirect(f"/admin/shifts?error={err}")

    day = datetime.strptime(date, "%Y-%m-%d").date()
    s = Shift(employee_id=employee_id, date=day, is_leave=is_leave, notes=(notes or "").strip() or None)
    if is_leave:
        s.leave_type = LeaveType.parse(leave_type)
        s.break_min = 0
        s.total_hours = 0
    else:
        s.start, s.end, s.break_min = start, end, break_min
        s.total_hours = hours_worked(start, end, break_min)
    db.add(s)
    db.commit()

    ctx.feed.publish(Change("shift", "created", s.id, (period_of(day),)))
    return _redirect(f"/admin/shifts?month={period_of(day)}&ok=1")


# ---------- demo data ----------
@router.post("/seed")
def seed(db: Session = Depends(get_db), ctx=Depends(get_ctx)):
    result = seed_demo_data(db)
    if not result["seeded"]:
        return _redirect("/admin/employees?error=Demo data needs an empty store")
    for emp_id in result["employee_ids"]:
        ctx.feed.publish(Change("employee", "created", emp_id))
    for shift_id, period in result["shifts"]:
        ctx.feed.publish(Change("shift", "created", shift_id, (period,)))
    return _redirect(f"/admin/employees?ok=seeded-{len(result['employee_ids'])}")
