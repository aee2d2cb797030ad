import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from shiftbook.db.models import Employee, Shift, pick_color
from shiftbook.utils.timeutils import hours_worked, period_of

log = logging.getLogger(__name__)

DEMO_EMPLOYEES = [
    # full_name, hourly_rate, active
    ("Mustafa (1)", "150", True),
    ("Mustafa (2)", "150", True),
    ("Ayse Yilmaz", "140", True),
    ("Mehmet Demir", "160", False),
]

DEMO_SHIFTS = [
    # employee index, date, start, end, break, notes
    (0, date(2025, 9, 10), "10:00", "20:00", 60, "Regular shift"),
    (1, date(2025, 9, 11), "21:00", "05:00", 30, "Night shift"),
    (0, date(2025, 9, 12), "10:00", "00:00", 30, "Closing at midnight"),
    (1, date(2025, 9, 13), "08:00", "16:00", 45, "Morning shift"),
    (0, date(2025, 9, 14), "14:00", "22:00", 30, "Afternoon shift"),
    (2, date(2025, 9, 15), "09:00", "17:00", 60, "Weekend shift"),
    (2, date(2025, 9, 16), "12:00", "20:00", 30, None),
]


def seed_demo_data(db: Session) -> dict:
    """
    Insert the demo roster and a week of September 2025 shifts.

    Does nothing when the store already has employees; "seeded" tells which.
    """
    if db.query(Employee).first() is not None:
        log.info("Demo data skipped: store is not empty")
        return {"seeded": False, "employee_ids": [], "shifts": []}

    employees = []
    for name, rate, active in DEMO_EMPLOYEES:
        emp = Employee(full_name=name, hourly_rate=Decimal(rate), active=active, color=pick_color(name))
        db.add(emp)
        employees.append(emp)
    db.flush()

    shifts = []
    for idx, day, start, end, break_min, notes in DEMO_SHIFTS:
        s = Shift(
            employee_id=employees[idx].id,
            date=day,
            is_leave=False,
            start=start,
            end=end,
            break_min=break_min,
            total_hours=hours_worked(start, end, break_min),
            notes=notes,
        )
        db.add(s)
        shifts.append(s)
    db.commit()

    log.info("Demo data loaded: %d employees, %d shifts", len(employees), len(DEMO_SHIFTS))
    return {
        "seeded": True,
        "employee_ids": [e.id for e in employees],
        # (shift id, "YYYY-MM") pairs
        "shifts": [(s.id, period_of(s.date)) for s in shifts],
    }
