"""
Value objects passed from the store to the report code.

ORM rows are converted into these (see ``to_record`` on the models) so the
calculator and aggregator only ever see plain, immutable data.
"""
import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

UNKNOWN_EMPLOYEE_NAME = "Unknown employee"


class LeaveType(str, enum.Enum):
    ANNUAL = "annual"
    UNPAID = "unpaid"
    WEEKLY = "weekly"
    EXCUSE = "excuse"
    MEDICAL = "medical"

    @property
    def label(self) -> str:
        return LEAVE_TYPE_LABELS[self]

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["LeaveType"]:
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


LEAVE_TYPE_LABELS = {
    LeaveType.ANNUAL: "Annual leave",
    LeaveType.UNPAID: "Unpaid leave",
    LeaveType.WEEKLY: "Weekly day off",
    LeaveType.EXCUSE: "Excused absence",
    LeaveType.MEDICAL: "Medical leave",
}


@dataclass(frozen=True)
class EmployeeRef:
    id: str
    full_name: str
    hourly_rate: Decimal
    active: bool = True
    color: Optional[str] = None


@dataclass(frozen=True)
class ShiftRecord:
    id: str
    employee_id: str
    date: date
    is_leave: bool = False
    start: Optional[str] = None        # "HH:mm", work only
    end: Optional[str] = None
    break_min: int = 0
    total_hours: Decimal = Decimal("0")
    leave_type: Optional[LeaveType] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class MonthlySummaryRow:
    employee: EmployeeRef
    total_hours: Decimal
    total_pay: Decimal

    def to_dict(self) -> dict:
        return {
            "employee": {
                "id": self.employee.id,
                "full_name": self.employee.full_name,
                "hourly_rate": f"{self.employee.hourly_rate:.2f}",
                "active": self.employee.active,
                "color": self.employee.color,
            },
            "total_hours": f"{self.total_hours:.2f}",
            "total_pay": f"{self.total_pay:.2f}",
        }


@dataclass(frozen=True)
class GrandTotal:
    total_hours: Decimal
    total_pay: Decimal
    average_hourly_rate: Decimal
    employee_count: int

    def to_dict(self) -> dict:
        return {
            "total_hours": f"{self.total_hours:.2f}",
            "total_pay": f"{self.total_pay:.2f}",
            "average_hourly_rate": f"{self.average_hourly_rate:.2f}",
            "employee_count": self.employee_count,
        }


@dataclass(frozen=True)
class ExportTable:
    data: list = field(default_factory=list)
    grand_total: Optional[GrandTotal] = None
    title_rows: int = 5


def unknown_employee(employee_id: str) -> EmployeeRef:
    return EmployeeRef(id=employee_id, full_name=UNKNOWN_EMPLOYEE_NAME,
                       hourly_rate=Decimal("0"), active=False)
