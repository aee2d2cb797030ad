# shiftbook/db/models.py

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, Column, Date, DateTime, Enum, Integer, Numeric, String

from shiftbook.db.base import Base
from shiftbook.domain import EmployeeRef, LeaveType, ShiftRecord

# calendar colours handed out to new employees
PALETTE = [
    "#6366F1", "#EF4444", "#10B981", "#F59E0B",
    "#8B5CF6", "#EC4899", "#14B8A6", "#F97316",
]


def pick_color(name: str) -> str:
    return PALETTE[sum(ord(ch) for ch in name) % len(PALETTE)]


# ---------- Employee ----------
class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    color = Column(String, nullable=True)           # "#RRGGBB", calendar only
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_record(self) -> EmployeeRef:
        return EmployeeRef(
            id=str(self.id),
            full_name=self.full_name,
            hourly_rate=Decimal(self.hourly_rate),
            active=bool(self.active),
            color=self.color,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "hourly_rate": f"{Decimal(self.hourly_rate):.2f}",
            "active": bool(self.active),
            "color": self.color,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


# ---------- Shift ----------
class Shift(Base):
    __tablename__ = "shifts"

    id = Column(Integer, primary_key=True)
    # not a foreign key: shifts outlive deleted employees
    employee_id = Column(Integer, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    is_leave = Column(Boolean, nullable=False, default=False)
    leave_type = Column(Enum(LeaveType), nullable=True)
    start = Column(String, nullable=True)           # "HH:mm"
    end = Column(String, nullable=True)
    break_min = Column(Integer, nullable=False, default=0)
    total_hours = Column(Numeric(6, 2), nullable=False, default=0)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_record(self) -> ShiftRecord:
        return ShiftRecord(
            id=str(self.id),
            employee_id=str(self.employee_id),
            date=self.date,
            is_leave=bool(self.is_leave),
            start=self.start,
            end=self.end,
            break_min=self.break_min or 0,
            total_hours=Decimal(self.total_hours or 0),
            leave_type=self.leave_type,
            notes=self.notes,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "date": self.date.isoformat(),
            "is_leave": bool(self.is_leave),
            "leave_type": self.leave_type.value if self.leave_type else None,
            "leave_label": self.leave_type.label if self.leave_type else None,
            "start": self.start,
            "end": self.end,
            "break_min": self.break_min,
            "total_hours": f"{Decimal(self.total_hours or 0):.2f}",
            "notes": self.notes,
        }
