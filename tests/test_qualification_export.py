"""Tests for CSV and Excel export of report rows."""

import csv
import io
from datetime import date, datetime

from openpyxl import load_workbook

from qualtrack.qualifications.export import (
    DEFAULT_COLUMNS,
    export_filename,
    export_rows,
    export_rows_xlsx,
)
from qualtrack.qualifications.models import PERMANENT, ColumnSpec, EnrichedRow, ExpirationStatus

NOW = datetime(2024, 6, 1, 9, 30)

HEADER = [
    "Employee ID", "Employee Name", "Company", "Department",
    "Qualification", "Acquired Date", "Expiration Date", "Status",
]


def _row(**overrides):
    values = dict(
        qualification_id="qual-1",
        employee_id="emp-sato",
        employee_name="Hanako Sato",
        company_id="comp-a",
        company_name="Affiliate A",
        department_id="dept-a-tech",
        department_name="Engineering",
        qualification_name="Applied IT Engineer Examination",
        acquired_date=date(2022, 10, 20),
        expiration_date=PERMANENT,
        status=ExpirationStatus.NORMAL,
    )
    values.update(overrides)
    return EnrichedRow(**values)


def _parse(content):
    return list(csv.reader(io.StringIO(content, newline="")))


class TestExportRows:
    def test_header_only_for_empty_rows(self):
        result = export_rows([], now=NOW)
        assert result.content == ",".join(HEADER) + "\r\n"
        assert result.row_count == 0

    def test_header_matches_default_columns(self):
        assert [c.label for c in DEFAULT_COLUMNS] == HEADER

    def test_row_values(self):
        result = export_rows([_row()], now=NOW)
        parsed = _parse(result.content)
        assert parsed[1] == [
            "emp-sato", "Hanako Sato", "Affiliate A", "Engineering",
            "Applied IT Engineer Examination", "2022-10-20", "permanent", "Normal",
        ]
        assert result.row_count == 1

    def test_crlf_line_endings(self):
        result = export_rows([_row(), _row(qualification_id="qual-2")], now=NOW)
        assert result.content.count("\r\n") == 3
        assert "\n" not in result.content.replace("\r\n", "")

    def test_missing_department_is_empty_cell(self):
        result = export_rows([_row(department_id=None, department_name=None)], now=NOW)
        assert _parse(result.content)[1][3] == ""

    def test_special_characters_round_trip(self):
        name = 'Senior, "Engineer"\nGrade A'
        result = export_rows([_row(qualification_name=name)], now=NOW)
        assert '"Senior, ""Engineer""\nGrade A"' in result.content
        assert _parse(result.content)[1][4] == name

    def test_plain_fields_not_quoted(self):
        result = export_rows([_row()], now=NOW)
        line = result.content.split("\r\n")[1]
        assert line.startswith("emp-sato,Hanako Sato,")

    def test_row_order_preserved(self):
        rows = [_row(employee_name="B"), _row(employee_name="A")]
        parsed = _parse(export_rows(rows, now=NOW).content)
        assert [r[1] for r in parsed[1:]] == ["B", "A"]

    def test_date_expiration_and_status_label(self):
        row = _row(expiration_date=date(2024, 3, 15), status=ExpirationStatus.EXPIRED)
        parsed = _parse(export_rows([row], now=NOW).content)
        assert parsed[1][6:] == ["2024-03-15", "Expired"]

    def test_custom_columns(self):
        columns = [ColumnSpec("Name", "employee_name"), ColumnSpec("Status", "status")]
        parsed = _parse(export_rows([_row()], columns, now=NOW).content)
        assert parsed == [["Name", "Status"], ["Hanako Sato", "normal"]]

    def test_suggested_filename(self):
        result = export_rows([], now=NOW)
        assert result.suggested_filename == "qualifications_export_20240601_0930.csv"


class TestExportFilename:
    def test_zero_padded(self):
        assert export_filename(datetime(2025, 1, 2, 3, 4)) == "qualifications_export_20250102_0304.csv"

    def test_prefix_and_extension(self):
        assert export_filename(NOW, "xlsx", prefix="quals") == "quals_20240601_0930.xlsx"


class TestExportXlsx:
    def test_workbook_contents(self):
        result = export_rows_xlsx([_row(department_name=None)], now=NOW)
        assert result.suggested_filename.endswith(".xlsx")
        assert result.row_count == 1

        wb = load_workbook(io.BytesIO(result.content))
        ws = wb.active
        assert ws.title == "Qualifications"
        assert [c.value for c in ws[1]] == HEADER
        values = [c.value for c in ws[2]]
        assert values[1] == "Hanako Sato"
        assert values[3] in ("", None)
        assert values[6] == "permanent"
        assert ws.freeze_panes == "A2"

    def test_empty_workbook_has_header(self):
        result = export_rows_xlsx([], now=NOW, sheet_title="Report")
        ws = load_workbook(io.BytesIO(result.content))["Report"]
        assert ws.max_row == 1

    def test_formula_like_values_stay_text(self):
        name = '=HYPERLINK("http://example.invalid","x")'
        result = export_rows_xlsx([_row(qualification_name=name)], now=NOW)
        ws = load_workbook(io.BytesIO(result.content)).active
        cell = ws.cell(row=2, column=5)
        assert cell.data_type == "s"
        assert cell.value == name

    def test_control_characters_dropped(self):
        result = export_rows_xlsx([_row(employee_name="Hanako\x0bSato\x1f")], now=NOW)
        ws = load_workbook(io.BytesIO(result.content)).active
        assert ws.cell(row=2, column=2).value == "HanakoSato"
