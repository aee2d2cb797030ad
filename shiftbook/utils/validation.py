from decimal import Decimal, InvalidOperation
from typing import Optional

from shiftbook.domain import LeaveType
from shiftbook.utils.timeutils import hours_worked, is_valid_calendar_date, is_valid_time_of_day

_HEX = set("0123456789abcdefABCDEF")


def parse_rate(raw) -> Optional[Decimal]:
    if raw is None or raw == "":
        return None
    try:
        value = Decimal(str(raw).replace(",", "."))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def is_valid_color(s: Optional[str]) -> bool:
    return isinstance(s, str) and len(s) == 7 and s[0] == "#" and all(c in _HEX for c in s[1:])


def employee_error(full_name: Optional[str], hourly_rate: Optional[Decimal],
                   color: Optional[str] = None) -> Optional[str]:
    if not full_name or not full_name.strip():
        return "full_name is required"
    if hourly_rate is None or hourly_rate <= 0:
        return "hourly_rate must be a positive number"
    if color and not is_valid_color(color):
        return "color must look like #RRGGBB"
    return None


def shift_error(employee_id, day: Optional[str], is_leave: bool,
                leave_type: Optional[str] = None, start: Optional[str] = None,
                end: Optional[str] = None, break_min: int = 0) -> Optional[str]:
    """First problem with a shift or leave entry, or None when it can be saved."""
    if not employee_id:
        return "employee_id is required"
    if not is_valid_calendar_date(day):
        return "date must be a valid YYYY-MM-DD date"
    if is_leave:
        if LeaveType.parse(leave_type) is None:
            return "leave_type must be one of: " + ", ".join(t.value for t in LeaveType)
        return None
    if not is_valid_time_of_day(start) or not is_valid_time_of_day(end):
        return "start and end must be HH:mm"
    if break_min is None or break_min < 0:
        return "break_min cannot be negative"
    if hours_worked(start, end, break_min) <= 0:
        return "worked hours must be greater than zero"
    return None
