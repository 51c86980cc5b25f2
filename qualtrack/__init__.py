"""
QualTrack - Qualification tracking across affiliated companies

Tracks which employee holds which qualification, when it was acquired,
when it expires, and which records are approaching or past expiration.

Modules:
    core            - Shared services (db, config, logging, output)
    workforce       - Companies, departments, employees
    qualifications  - Qualification masters, records, lifecycle engine, export
    api             - Flask JSON API
    cli             - Typer command line
"""

__version__ = "0.1.0"
