"""
Tabular export of qualification report rows.

CSV follows RFC 4180: comma delimiter, CRLF line endings, and a field is
quoted only when it contains a comma, a double quote, or a line break
(embedded quotes are doubled). Missing values are empty cells. The same
columns can also be written as an Excel workbook.

The suggested file name is stamped from the caller's "now":
    qualifications_export_20240601_0930.csv
"""

import csv
import io
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence, Union

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from qualtrack.qualifications.models import ColumnSpec, EnrichedRow, format_expiration

DEFAULT_FILENAME_PREFIX = "qualifications_export"

DEFAULT_COLUMNS = (
    ColumnSpec("Employee ID", "employee_id", width=16),
    ColumnSpec("Employee Name", "employee_name", width=22),
    ColumnSpec("Company", "company_name", width=22),
    ColumnSpec("Department", "department_name", width=20),
    ColumnSpec("Qualification", "qualification_name", width=36),
    ColumnSpec("Acquired Date", "acquired_date", width=14),
    ColumnSpec("Expiration Date", "expiration_date", formatter=format_expiration, width=16),
    ColumnSpec("Status", "status_label", width=12),
)

_HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
_HEADER_FILL = PatternFill(start_color="2F5496", end_color="2F5496", fill_type="solid")
_HEADER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)


@dataclass
class ExportResult:
    content: Union[str, bytes]
    suggested_filename: str
    row_count: int


def export_filename(
    now: datetime, extension: str = "csv", prefix: str = DEFAULT_FILENAME_PREFIX
) -> str:
    return f"{prefix}_{now:%Y%m%d}_{now:%H%M}.{extension}"


def export_rows(
    rows: Iterable[EnrichedRow],
    columns: Optional[Sequence[ColumnSpec]] = None,
    *,
    now: datetime,
    prefix: str = DEFAULT_FILENAME_PREFIX,
) -> ExportResult:
    """
    Render rows as CSV text: a header line of column labels, then one line
    per row, in the order given.

    An empty row list yields the header line alone.
    """
    columns = list(columns or DEFAULT_COLUMNS)
    buffer = io.StringIO(newline="")
    writer = csv.writer(
        buffer, delimiter=",", quotechar='"',
        quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n",
    )
    writer.writerow([column.label for column in columns])

    count = 0
    for row in rows:
        writer.writerow([column.value_for(row) for column in columns])
        count += 1

    return ExportResult(
        content=buffer.getvalue(),
        suggested_filename=export_filename(now, "csv", prefix),
        row_count=count,
    )


def export_rows_xlsx(
    rows: Iterable[EnrichedRow],
    columns: Optional[Sequence[ColumnSpec]] = None,
    *,
    now: datetime,
    prefix: str = DEFAULT_FILENAME_PREFIX,
    sheet_title: str = "Qualifications",
) -> ExportResult:
    """
    Same rows and columns as export_rows, as an .xlsx workbook (bytes).

    Every data cell is stored as text. Control characters that the xlsx
    format cannot hold are dropped.
    """
    columns = list(columns or DEFAULT_COLUMNS)

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    for col_idx, column in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=col_idx, value=column.label)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _HEADER_ALIGN
        ws.column_dimensions[get_column_letter(col_idx)].width = column.width

    count = 0
    for row_idx, row in enumerate(rows, start=2):
        for col_idx, column in enumerate(columns, start=1):
            text = ILLEGAL_CHARACTERS_RE.sub("", column.value_for(row))
            cell = ws.cell(row=row_idx, column=col_idx, value=text)
            # A leading "=" stays literal text, never a formula
            cell.data_type = "s"
        count += 1

    # Freeze header row
    ws.freeze_panes = "A2"

    buffer = io.BytesIO()
    wb.save(buffer)

    return ExportResult(
        content=buffer.getvalue(),
        suggested_filename=export_filename(now, "xlsx", prefix),
        row_count=count,
    )
