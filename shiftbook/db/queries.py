from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from shiftbook.db.models import Employee, Shift
from shiftbook.domain import EmployeeRef, ShiftRecord
from shiftbook.utils.timeutils import month_bounds


def load_roster(db: Session) -> List[EmployeeRef]:
    """Every employee, active or not, in a stable order."""
    return [e.to_record() for e in db.query(Employee).order_by(Employee.id.asc()).all()]


def shifts_between(db: Session, start: date, end: date, employee_id: Optional[int] = None):
    q = db.query(Shift).filter(Shift.date >= start, Shift.date <= end)
    if employee_id is not None:
        q = q.filter(Shift.employee_id == employee_id)
    return q


def load_month_records(db: Session, y: int, m: int) -> List[ShiftRecord]:
    first, last = month_bounds(y, m)
    rows = shifts_between(db, first, last).order_by(Shift.date.asc(), Shift.id.asc()).all()
    return [s.to_record() for s in rows]
