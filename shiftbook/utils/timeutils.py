import calendar
import re
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Europe/Istanbul"

_TIME_RE = re.compile(r"([0-1]?[0-9]|2[0-3]):[0-5][0-9]")
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def round2(value) -> Decimal:
    """Round half-up to 2 decimals."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


# ----- predicates -----
def is_valid_time_of_day(s: Optional[str]) -> bool:
    return isinstance(s, str) and bool(_TIME_RE.fullmatch(s))


def is_valid_calendar_date(s: Optional[str]) -> bool:
    if not isinstance(s, str) or not _DATE_RE.fullmatch(s):
        return False
    try:
        datetime.strptime(s, "%Y-%m-%d")
    except ValueError:
        return False
    return True


# ----- conversions -----
def parse_hhmm(s: str) -> tuple[int, int]:
    hh, mm = s.split(":")
    return int(hh), int(mm)


def time_to_decimal(s: str) -> Decimal:
    hh, mm = parse_hhmm(s)
    return Decimal(hh) + Decimal(mm) / Decimal(60)


def decimal_to_time(value: Union[Decimal, float]) -> str:
    value = Decimal(str(value))
    hours = int(value)
    minutes = int(((value - hours) * 60).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if minutes == 60:
        hours, minutes = hours + 1, 0
    return f"{hours:02d}:{minutes:02d}"


def round_to_quarter_hour(minutes: int) -> int:
    quarters = (Decimal(minutes) / 15).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(quarters) * 15


# ----- calculator -----
def hours_worked(start: Optional[str], end: Optional[str], break_minutes=0) -> Decimal:
    """
    Decimal hours between start and end ("HH:mm") minus the break.

    "00:00" as the end means midnight at the end of the day and is checked
    before the overnight rule; an end earlier than the start rolls over to the
    next day. Bad or missing input gives 0; the result is never negative.
    """
    if not start or not end:
        return ZERO
    if not is_valid_time_of_day(start) or not is_valid_time_of_day(end):
        return ZERO

    sh, sm = parse_hhmm(start)
    eh, em = parse_hhmm(end)
    start_min = sh * 60 + sm
    end_min = eh * 60 + em

    if end == "00:00":
        end_min = 24 * 60
    elif end_min < start_min:
        end_min += 24 * 60

    worked = Decimal(end_min - start_min) - Decimal(str(break_minutes or 0))
    if worked < 0:
        worked = Decimal(0)
    return round2(worked / Decimal(60))


def shift_span(day: date, start: str, end: str) -> tuple[datetime, datetime]:
    """Start and end datetimes of a shift, with the same "00:00" and overnight rules."""
    sh, sm = parse_hhmm(start)
    eh, em = parse_hhmm(end)
    starts = datetime(day.year, day.month, day.day, sh, sm)
    if end == "00:00":
        ends = datetime(day.year, day.month, day.day) + timedelta(days=1)
    else:
        ends = datetime(day.year, day.month, day.day, eh, em)
        if ends < starts:
            ends += timedelta(days=1)
    return starts, ends


# ----- calendar helpers -----
def get_zone(name: Optional[str]) -> ZoneInfo:
    try:
        return ZoneInfo(name or DEFAULT_TIMEZONE)
    except Exception:
        return ZoneInfo(DEFAULT_TIMEZONE)


def today_in(tz_name: Optional[str], now: Optional[datetime] = None) -> date:
    tz = get_zone(tz_name)
    now = now or datetime.now(tz)
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    return now.astimezone(tz).date()


def today_string(tz_name: Optional[str], now: Optional[datetime] = None) -> str:
    return today_in(tz_name, now).strftime("%Y-%m-%d")


def month_bounds(y: int, m: int) -> tuple[date, date]:
    """First and last calendar day of the month (both inclusive)."""
    _, last_day = calendar.monthrange(y, m)
    return date(y, m, 1), date(y, m, last_day)


def week_start(d: date) -> date:
    # weeks start on Monday, like the shop's calendar view
    return d - timedelta(days=d.weekday())


def parse_period(s: str) -> Optional[tuple[int, int]]:
    """'2025-09' -> (2025, 9); None when malformed."""
    if not isinstance(s, str) or not re.fullmatch(r"\d{4}-\d{2}", s):
        return None
    y, m = int(s[:4]), int(s[5:])
    if not 1 <= m <= 12:
        return None
    return y, m


def period_of(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def format_date(d: date, fmt: str = "%d/%m/%Y") -> str:
    return d.strftime(fmt)


def month_label(y: int, m: int) -> str:
    return f"{calendar.month_name[m]} {y}"
