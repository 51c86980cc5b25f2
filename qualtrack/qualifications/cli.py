"""Qualifications CLI sub-commands."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from qualtrack.core.output import OutputFormat, format_records

app = typer.Typer(no_args_is_help=True)

_REPORT_COLUMNS = [
    ("Company", "company_name"),
    ("Department", "department_name"),
    ("Employee", "employee_name"),
    ("Qualification", "qualification_name"),
    ("Acquired", "acquired_date"),
    ("Expires", "expiration_date"),
    ("Status", "status_label"),
]


def _now(as_of: Optional[str]) -> datetime:
    """Reference clock: --as-of date at midnight, else the system clock."""
    if not as_of:
        return datetime.now()
    from qualtrack.qualifications.lifecycle import parse_iso_date

    day = parse_iso_date(as_of)
    return datetime(day.year, day.month, day.day)


def _fail(exc: Exception):
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


def _params(company, department, status, keyword) -> dict:
    return {
        "company_id": company,
        "department_id": department,
        "expiration_status": status,
        "search_keyword": keyword,
    }


@app.command("list")
def list_report(
    company: Optional[str] = typer.Option(None, "--company", "-c", help="Company id"),
    department: Optional[str] = typer.Option(None, "--department", "-d", help="Department id"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="expired | warning | normal"),
    keyword: Optional[str] = typer.Option(None, "--keyword", "-k", help="Employee or qualification name"),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Reference date YYYY-MM-DD"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f"),
):
    """All-employee qualification report."""
    from qualtrack.core import get_db
    from qualtrack.qualifications.errors import QualificationError
    from qualtrack.qualifications.service import list_report_rows

    try:
        today = _now(as_of).date()
        with get_db(readonly=True) as conn:
            rows = list_report_rows(conn, _params(company, department, status, keyword), today)
    except QualificationError as exc:
        _fail(exc)

    typer.echo(format_records(rows, _REPORT_COLUMNS, fmt))


@app.command()
def export(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File or directory to write"),
    export_format: str = typer.Option("csv", "--format", "-f", help="csv | xlsx"),
    company: Optional[str] = typer.Option(None, "--company", "-c"),
    department: Optional[str] = typer.Option(None, "--department", "-d"),
    status: Optional[str] = typer.Option(None, "--status", "-s"),
    keyword: Optional[str] = typer.Option(None, "--keyword", "-k"),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Reference date YYYY-MM-DD"),
):
    """Export the report to CSV or Excel."""
    from qualtrack.core import get_db
    from qualtrack.qualifications.errors import QualificationError
    from qualtrack.qualifications.service import export_report

    try:
        now = _now(as_of)
        with get_db(readonly=True) as conn:
            result = export_report(
                conn, _params(company, department, status, keyword),
                today=now.date(), now=now, fmt=export_format,
            )
    except QualificationError as exc:
        _fail(exc)

    if output is None:
        target = Path.cwd() / result.suggested_filename
    elif output.is_dir():
        target = output / result.suggested_filename
    else:
        target = output

    target.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(result.content, bytes):
        target.write_bytes(result.content)
    else:
        target.write_text(result.content, encoding="utf-8", newline="")
    typer.echo(f"Wrote {result.row_count} row(s) to {target}")


@app.command()
def add(
    employee_id: str = typer.Argument(..., help="Employee id"),
    name: str = typer.Argument(..., help="Qualification name"),
    acquired: str = typer.Argument(..., help="Acquired date YYYY-MM-DD"),
    master: Optional[str] = typer.Option(None, "--master", "-m", help="Qualification master id"),
):
    """Register a qualification for an employee."""
    from qualtrack.core import get_db
    from qualtrack.qualifications.errors import QualificationError
    from qualtrack.qualifications.models import format_expiration
    from qualtrack.qualifications.service import create_qualification

    data = {
        "employee_id": employee_id,
        "qualification_name": name,
        "acquired_date": acquired,
        "master_id": master,
    }
    try:
        with get_db() as conn:
            record = create_qualification(conn, data, today=datetime.now().date())
    except QualificationError as exc:
        _fail(exc)

    typer.echo(
        f"Registered {record.qualification_id}: {record.qualification_name} "
        f"(expires {format_expiration(record.expiration_date)})"
    )


@app.command()
def delete(qualification_id: str = typer.Argument(..., help="Qualification id")):
    """Delete a qualification."""
    from qualtrack.core import get_db
    from qualtrack.qualifications.errors import QualificationError
    from qualtrack.qualifications.service import delete_qualification

    try:
        with get_db() as conn:
            delete_qualification(conn, qualification_id)
    except QualificationError as exc:
        _fail(exc)
    typer.echo(f"Deleted {qualification_id}")


@app.command()
def masters(
    category: Optional[str] = typer.Option(None, "--category", help="Filter by category"),
    include_inactive: bool = typer.Option(False, "--all", help="Include inactive masters"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f"),
):
    """List qualification masters."""
    from qualtrack.core import get_db
    from qualtrack.qualifications.masters import list_masters

    with get_db(readonly=True) as conn:
        rows = list_masters(conn, active_only=not include_inactive, category=category)

    typer.echo(format_records(
        rows,
        [("ID", "id"), ("Name", "name"), ("Category", "category"),
         ("Validity", "validity_period")],
        fmt,
    ))


@app.command()
def summary(as_of: Optional[str] = typer.Option(None, "--as-of", help="Reference date YYYY-MM-DD")):
    """Qualification counts by status and company."""
    from qualtrack.core import get_db
    from qualtrack.qualifications.errors import QualificationError
    from qualtrack.qualifications.service import expiring_summary

    try:
        today = _now(as_of).date()
        with get_db(readonly=True) as conn:
            data = expiring_summary(conn, today)
    except QualificationError as exc:
        _fail(exc)

    typer.echo(f"Qualification Status as of {data['as_of']}")
    typer.echo("=" * 40)
    typer.echo(f"  Total:    {data['total']}")
    for status, count in data["by_status"].items():
        marker = {"expired": "!!", "warning": "!"}.get(status, "")
        typer.echo(f"  {status.title():<9} {count:>4} {marker}")

    if data["by_company"]:
        typer.echo()
        typer.echo(f"  {'Company':<24} {'Normal':>7} {'Warning':>8} {'Expired':>8}")
        typer.echo("  " + "-" * 50)
        for company, counts in sorted(data["by_company"].items()):
            typer.echo(
                f"  {company:<24} {counts['normal']:>7} {counts['warning']:>8} {counts['expired']:>8}"
            )
