"""
QualTrack CLI - Main Entry Point

Unified Typer CLI that assembles all module sub-commands.

Usage:
    qualtrack version
    qualtrack migrate
    qualtrack seed
    qualtrack serve
    qualtrack workforce [command]
    qualtrack quals [command]
"""

import typer

import qualtrack

app = typer.Typer(
    name="qualtrack",
    help="Qualification tracking across the affiliated companies.",
    no_args_is_help=True,
)


@app.command()
def version():
    """Show QualTrack version."""
    typer.echo(f"qualtrack {qualtrack.__version__}")


@app.command()
def migrate():
    """Run database schema migrations for all modules."""
    from qualtrack.core.db import migrate_all

    migrate_all()
    typer.echo("Database migration complete.")


@app.command()
def seed():
    """Load the sample companies, employees, masters and qualifications."""
    from qualtrack.core import get_db
    from qualtrack.core.db import apply_schemas
    from qualtrack.workforce.seed import seed_sample_data

    with get_db() as conn:
        apply_schemas(conn)
        stats = seed_sample_data(conn)

    for table, count in stats.items():
        typer.echo(f"  {table:<24} {count:>4} inserted")


@app.command()
def serve(
    port: int = typer.Option(None, "--port", "-p", help="Port number (default: web.port)"),
    host: str = typer.Option(None, "--host", "-h", help="Host address (default: web.host)"),
    debug: bool = typer.Option(False, "--debug", help="Use Flask dev server with auto-reload"),
    threads: int = typer.Option(None, "--threads", "-t", help="Waitress worker threads"),
):
    """Launch the QualTrack JSON API.

    Default: Waitress server. With --debug: Flask dev server with auto-reload.
    """
    from waitress import serve as waitress_serve

    from qualtrack.api import create_app
    from qualtrack.core import get_config_value

    _host = host or get_config_value("web", "host", default="127.0.0.1")
    _port = port or get_config_value("web", "port", default=5000)
    _threads = threads or get_config_value("web", "threads", default=8)

    web = create_app()

    if debug:
        typer.echo(f"Starting Flask dev server at http://{_host}:{_port}")
        web.run(host=_host, port=_port, debug=True)
    else:
        typer.echo(f"Starting Waitress server on {_host}:{_port} ({_threads} threads)")
        waitress_serve(web, host=_host, port=_port, threads=_threads)


def _register_modules():
    """Register module CLI sub-apps."""
    from qualtrack.qualifications.cli import app as quals_app
    from qualtrack.workforce.cli import app as workforce_app

    app.add_typer(workforce_app, name="workforce", help="Companies, departments & employees")
    app.add_typer(quals_app, name="quals", help="Qualifications, masters & reports")


_register_modules()


def main():
    """Entry point for the qualtrack CLI."""
    app()


if __name__ == "__main__":
    main()
