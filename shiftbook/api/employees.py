# shiftbook/api/employees.py

from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query
from sqlalchemy.orm import Session

from shiftbook.db.base import get_ctx, get_db
from shiftbook.db.feed import Change
from shiftbook.db.models import Employee, pick_color
from shiftbook.utils.validation import employee_error, parse_rate

router = APIRouter(prefix="/employees", tags=["employees"])

STATUS_FILTERS = ("all", "active", "inactive")


def _get_or_404(db: Session, emp_id: int) -> Employee:
    emp = db.get(Employee, emp_id)
    if not emp:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


# ----- create -----
@router.post("")
def create_employee(
    full_name: str = Form(...),
    hourly_rate: str = Form(...),
    active: bool = Form(True),
    color: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    rate = parse_rate(hourly_rate)
    err = employee_error(full_name, rate, color)
    if err:
        raise HTTPException(status_code=422, detail=err)

    emp = Employee(
        full_name=full_name.strip(),
        hourly_rate=rate,
        active=active,
        color=color or pick_color(full_name.strip()),
    )
    db.add(emp)
    db.commit()
    db.refresh(emp)

    ctx.feed.publish(Change("employee", "created", emp.id))
    return {"ok": True, "employee": emp.to_dict()}


# ----- read/list -----
@router.get("")
def list_employees(
    status: str = Query("all", description="all | active | inactive"),
    db: Session = Depends(get_db),
):
    if status not in STATUS_FILTERS:
        raise HTTPException(status_code=422, detail="status must be all, active or inactive")
    q = db.query(Employee)
    if status == "active":
        q = q.filter(Employee.active.is_(True))
    elif status == "inactive":
        q = q.filter(Employee.active.is_(False))
    return [e.to_dict() for e in q.order_by(Employee.full_name.asc(), Employee.id.asc()).all()]


@router.get("/{emp_id}")
def get_employee(emp_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, emp_id).to_dict()


# ----- update -----
@router.put("/{emp_id}")
def update_employee(
    emp_id: int,
    full_name: Optional[str] = Form(None),
    hourly_rate: Optional[str] = Form(None),
    active: Optional[bool] = Form(None),
    color: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    ctx=Depends(get_ctx),
):
    emp = _get_or_404(db, emp_id)

    new_name = full_name if full_name is not None else emp.full_name
    new_rate = parse_rate(hourly_rate) if hourly_rate is not None else emp.hourly_rate
    err = employee_error(new_name, new_rate, (color or "").strip() or None)
    if err:
        raise HTTPException(status_code=422, detail=err)

    # Patch fields if provided
    emp.full_name = new_name.strip()
    emp.hourly_rate = new_rate
    if active is not None:
        emp.active = active
    if color is not None:
        # a blank colour goes back to the palette one
        emp.color = color.strip() or pick_color(emp.full_name)

    db.commit()
    db.refresh(emp)

    ctx.feed.publish(Change("employee", "updated", emp.id))
    return {"ok": True, "employee": emp.to_dict()}


# ----- delete -----
@router.delete("/{emp_id}")
def delete_employee(emp_id: int, db: Session = Depends(get_db), ctx=Depends(get_ctx)):
    emp = _get_or_404(db, emp_id)
    db.delete(emp)
    db.commit()
    # shifts are kept; reports skip them from now on
    ctx.feed.publish(Change("employee", "deleted", emp_id))
    return {"ok": True, "deleted_id": emp_id}
