import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from shiftbook.domain import (
    EmployeeRef, ExportTable, GrandTotal, MonthlySummaryRow, ShiftRecord,
)
from shiftbook.utils.timeutils import ZERO, round2

log = logging.getLogger(__name__)

REPORT_TITLE = "Monthly Shift Report"
TOTAL_LABEL = "GRAND TOTAL"


def summarize(records: Iterable[ShiftRecord], roster: Sequence[EmployeeRef]) -> List[MonthlySummaryRow]:
    """
    One row per roster employee with the month's worked hours and pay.

    Leave records never count. Hours and pay are rounded once, after summing.
    Rows are sorted by hours (highest first); ties keep roster order.
    """
    by_employee: Dict[str, List[ShiftRecord]] = defaultdict(list)
    for rec in records:
        by_employee[rec.employee_id].append(rec)

    known = {e.id for e in roster}
    orphans = [emp_id for emp_id in by_employee if emp_id not in known]
    if orphans:
        log.warning("Shift records reference unknown employees, skipped: %s", sorted(orphans))

    rows = []
    for emp in roster:
        working = [r for r in by_employee.get(emp.id, []) if not r.is_leave]
        hours = sum((Decimal(r.total_hours) for r in working), Decimal(0))
        pay = hours * Decimal(emp.hourly_rate)
        rows.append(MonthlySummaryRow(employee=emp, total_hours=round2(hours), total_pay=round2(pay)))

    # sorted() is stable with reverse=True
    return sorted(rows, key=lambda r: r.total_hours, reverse=True)


def grand_total(rows: Sequence[MonthlySummaryRow]) -> GrandTotal:
    # sum of the displayed (already rounded) row values
    total_hours = sum((r.total_hours for r in rows), ZERO)
    total_pay = sum((r.total_pay for r in rows), ZERO)
    average = round2(total_pay / total_hours) if total_hours > 0 else ZERO
    return GrandTotal(
        total_hours=total_hours,
        total_pay=total_pay,
        average_hourly_rate=average,
        employee_count=sum(1 for r in rows if r.total_hours > 0),
    )


def column_headers(currency: str = "₺") -> List[str]:
    return ["Employee", "Total Hours", f"Hourly Rate ({currency})", f"Total Pay ({currency})"]


def export_table(rows: Sequence[MonthlySummaryRow], month_label: str, shop_name: str,
                 currency: str = "₺") -> ExportTable:
    """Title block, employee rows, blank separator and the grand-total row."""
    total = grand_total(rows)
    header = [
        [REPORT_TITLE],
        [shop_name],
        [month_label],
        [""],
        column_headers(currency),
    ]
    body = [
        [
            r.employee.full_name,
            f"{r.total_hours:.2f}",
            f"{Decimal(r.employee.hourly_rate):.2f}",
            f"{r.total_pay:.2f}",
        ]
        for r in rows
    ]
    total_row = [
        TOTAL_LABEL,
        f"{total.total_hours:.2f}",
        f"{total.average_hourly_rate:.2f}",
        f"{total.total_pay:.2f}",
    ]
    return ExportTable(data=header + body + [[""], total_row], grand_total=total, title_rows=len(header))
