import logging
from datetime import date
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Sequence, Union

from fastapi.templating import Jinja2Templates
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from shiftbook.domain import ExportTable, MonthlySummaryRow
from shiftbook.report.monthly import REPORT_TITLE, column_headers, export_table

log = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "admin" / "templates"
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))

SHEET_TITLE = "Monthly Report"
COLUMN_WIDTHS = {"A": 25, "B": 15, "C": 18, "D": 18}

_bold = Font(bold=True)
_title_font = Font(bold=True, size=14)
_total_fill = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")
_thin = Side(style="thin")
_thin_border = Border(left=_thin, right=_thin, top=_thin, bottom=_thin)


def build_workbook(table: ExportTable) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    last_row = len(table.data)
    for r, values in enumerate(table.data, start=1):
        for c, value in enumerate(values, start=1):
            cell = ws.cell(row=r, column=c, value=value)
            if r <= table.title_rows:
                cell.font = _bold
            # numbers stay as the pre-formatted strings, right aligned
            if c > 1 and r > table.title_rows:
                cell.alignment = Alignment(horizontal="right")
            if r == table.title_rows or (r > table.title_rows and values != [""]):
                cell.border = _thin_border
            if r == last_row:
                cell.font = _bold
                cell.fill = _total_fill

    ws.cell(row=1, column=1).font = _title_font
    for col, width in COLUMN_WIDTHS.items():
        ws.column_dimensions[col].width = width
    return wb


def write_workbook(table: ExportTable, target: Union[str, Path, BinaryIO]) -> None:
    build_workbook(table).save(target)
    log.debug("Workbook written with %d rows", len(table.data))


def workbook_bytes(table: ExportTable) -> bytes:
    buf = BytesIO()
    write_workbook(table, buf)
    return buf.getvalue()


def workbook_filename(y: int, m: int) -> str:
    return f"Monthly_Report_{y:04d}-{m:02d}.xlsx"


def render_print_html(rows: Sequence[MonthlySummaryRow], month_label: str, shop_name: str,
                      currency: str = "₺", printed_on: Optional[date] = None) -> str:
    """Printable HTML page for the month; values come from the export table as-is."""
    table = export_table(rows, month_label, shop_name, currency)
    body = table.data[table.title_rows:-2]
    total_row = table.data[-1]
    tmpl = templates.get_template("report_print.html")
    return tmpl.render(
        title=REPORT_TITLE,
        shop_name=shop_name,
        month_label=month_label,
        headers=column_headers(currency),
        body=body,
        total_row=total_row,
        total=table.grand_total,
        currency=currency,
        printed_on=printed_on.strftime("%d/%m/%Y") if printed_on else "",
    )

