"""Workforce CLI sub-commands."""

from typing import Optional

import typer

from qualtrack.core.output import OutputFormat, format_records

app = typer.Typer(no_args_is_help=True)


@app.command()
def companies(
    include_inactive: bool = typer.Option(False, "--all", help="Include inactive companies"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f"),
):
    """List companies."""
    from qualtrack.core import get_db
    from qualtrack.workforce.organization import list_companies

    with get_db(readonly=True) as conn:
        rows = list_companies(conn, include_inactive=include_inactive)

    typer.echo(format_records(rows, [("ID", "id"), ("Company", "name")], fmt))


@app.command()
def departments(
    company: Optional[str] = typer.Option(None, "--company", "-c", help="Company id"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f"),
):
    """List departments."""
    from qualtrack.core import get_db
    from qualtrack.workforce.organization import list_departments

    with get_db(readonly=True) as conn:
        rows = list_departments(conn, company_id=company)

    typer.echo(format_records(
        rows, [("ID", "id"), ("Company", "company_name"), ("Department", "name")], fmt,
    ))


@app.command()
def employees(
    company: Optional[str] = typer.Option(None, "--company", "-c", help="Company id"),
    department: Optional[str] = typer.Option(None, "--department", "-d", help="Department id"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f"),
):
    """List employees."""
    from qualtrack.core import get_db
    from qualtrack.workforce.organization import list_employees

    with get_db(readonly=True) as conn:
        rows = list_employees(conn, company_id=company, department_id=department)

    typer.echo(format_records(
        rows,
        [("ID", "id"), ("Name", "name"), ("Company", "company_name"),
         ("Department", "department_name")],
        fmt,
    ))
