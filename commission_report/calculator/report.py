# ==============================================================================
# commission_report/calculator/report.py
# ------------------------------------------------------------------------------
# Builds the exported commission report: header row, one row per table row
# and a total row, each cell tagged with its number-format category. Also
# writes the styled .xlsx workbook and the plain JSON data export.
# ==============================================================================

import io
import json
import logging
from dataclasses import dataclass, field
from datetime import date

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .cells import CellKind, CellValue, is_numeric
from .engine import total_of
from .schema import (
    ADJUSTED_AMOUNT_COLUMN, ADJUSTED_TOTAL_HEADER, AGENT_COLUMN, COLUMN_MIN_WIDTHS,
    DEFAULT_MIN_WIDTH, EARNED_AMOUNT_COLUMN, EXPORT_SHEET_NAME, FALLBACK_AGENT_NAME,
    HEADER_WIDTH_PADDING, ITEM_CODE_COLUMN, MONTH_NAMES, TOTAL_LABEL
)

# --- Formatting categories ---
CURRENCY = 'currency'
PERCENTAGE = 'percentage'
NUMBER = 'number'
LABEL = 'label'
BLANK = 'blank'

NUMBER_FORMATS = {
    CURRENCY: '"$"#,##0.00',
    PERCENTAGE: '0.00%',
    NUMBER: '#,##0.00',
}

TITLE_FONT = Font(bold=True, color="FFFFFFFF")
TITLE_FILL = PatternFill("solid", fgColor="FF0070C0")
TOTAL_FONT = Font(bold=True)
TOTAL_FILL = PatternFill("solid", fgColor="FFF2F2F2")
TOTAL_BORDER = Border(top=Side(style='medium', color="FF000000"))


@dataclass
class ReportCell:
    value: object
    category: str


@dataclass
class ReportOutput:
    headers: list
    data_rows: list = field(default_factory=list)
    total_row: list = field(default_factory=list)
    column_widths: list = field(default_factory=list)
    file_name: str = ''


def column_category(header):
    """
    Category decided by the header name alone: currency for MONTO/TOTAL/COLUMNA
    columns, percentage for %/UTIL columns, None when the values decide.
    """
    if 'MONTO' in header or 'TOTAL' in header or 'COLUMNA' in header:
        return CURRENCY
    if '%' in header or 'UTIL' in header:
        return PERCENTAGE
    return None


def _data_cell(value, header_category):
    if CellValue.of(value).kind is CellKind.EMPTY:
        return ReportCell(value, BLANK)
    if header_category:
        return ReportCell(value, header_category)
    if is_numeric(value):
        return ReportCell(value, NUMBER)
    return ReportCell(value, LABEL)


def build_total_row(rows, headers):
    total_row = []
    for header in headers:
        if header == EARNED_AMOUNT_COLUMN:
            total_row.append(ReportCell(total_of(rows, EARNED_AMOUNT_COLUMN), CURRENCY))
        elif header == ADJUSTED_TOTAL_HEADER:
            total_row.append(ReportCell(total_of(rows, ADJUSTED_AMOUNT_COLUMN), CURRENCY))
        elif header == ITEM_CODE_COLUMN:
            total_row.append(ReportCell(TOTAL_LABEL, LABEL))
        else:
            total_row.append(ReportCell('', BLANK))
    return total_row


def column_widths(headers):
    return [
        max(len(header) + HEADER_WIDTH_PADDING, COLUMN_MIN_WIDTHS.get(header, DEFAULT_MIN_WIDTH))
        for header in headers
    ]


def report_file_name(rows, today=None, fallback_agent=FALLBACK_AGENT_NAME):
    """
    "{agent} - {month} {year}", where the agent comes from the first row and
    the month and year from the current date, not from the worksheet.
    """
    today = today or date.today()
    agent_name = ''
    if rows:
        agent_value = CellValue.of(rows[0].get(AGENT_COLUMN))
        if agent_value.kind is not CellKind.EMPTY:
            agent_name = str(agent_value.value).strip()
    if not agent_name:
        agent_name = fallback_agent
    return f"{agent_name} - {MONTH_NAMES[today.month - 1]} {today.year}"


def build_report(rows, headers, today=None, fallback_agent=FALLBACK_AGENT_NAME):
    """
    Assembles the report for the current table.

    Args:
        rows (list): The NormalizedRow table, after any deletions.
        headers (list): The display projection, in output order.
        today (date): Date used for the file name; defaults to today.
        fallback_agent (str): Agent name used when the first row has none.

    Returns:
        ReportOutput: Header, data and total rows with their categories,
        column widths and the file name (without extension).
    """
    categories = [column_category(header) for header in headers]
    data_rows = [
        [_data_cell(row.get(header), categories[i]) for i, header in enumerate(headers)]
        for row in rows
    ]
    report = ReportOutput(
        headers=list(headers),
        data_rows=data_rows,
        total_row=build_total_row(rows, headers),
        column_widths=column_widths(headers),
        file_name=report_file_name(rows, today, fallback_agent),
    )
    logging.info(f"Built report '{report.file_name}' with {len(data_rows)} data rows.")
    return report


def _write_value(value):
    # openpyxl rejects timezone-aware datetimes
    if getattr(value, 'tzinfo', None) is not None:
        return value.replace(tzinfo=None)
    return value


def _keep_text(ws_cell):
    # openpyxl turns any string starting with '=' into a formula
    if isinstance(ws_cell.value, str) and ws_cell.value.startswith('='):
        ws_cell.data_type = 's'


def write_workbook(report):
    """Writes the report as a styled .xlsx workbook and returns its bytes."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = EXPORT_SHEET_NAME

    ws.append(report.headers)
    for cell in ws[1]:
        cell.font = TITLE_FONT
        cell.fill = TITLE_FILL
        cell.alignment = Alignment(horizontal='center')
        _keep_text(cell)

    for row_idx, report_row in enumerate(report.data_rows + [report.total_row], start=2):
        ws.append([_write_value(cell.value) for cell in report_row])
        for ws_cell, report_cell in zip(ws[row_idx], report_row):
            _keep_text(ws_cell)
            if report_cell.category in NUMBER_FORMATS:
                ws_cell.number_format = NUMBER_FORMATS[report_cell.category]

    if report.headers:
        for cell in ws[len(report.data_rows) + 2]:
            cell.font = TOTAL_FONT
            cell.fill = TOTAL_FILL
            cell.border = TOTAL_BORDER

    for i, width in enumerate(report.column_widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = width

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def export_json(rows):
    """Serializes the table without the sequence numbers as pretty-printed JSON."""
    records = [row.as_record() for row in rows]
    return json.dumps(records, ensure_ascii=False, indent=2, default=str)
