"""
Database access for QualTrack.

Provides connection management, query execution, and schema migration.
Single source of truth for all database operations.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from qualtrack.core.config import QT_PATHS
from qualtrack.core.logging import get_logger

logger = get_logger("qualtrack.migrate")


def get_db_path() -> Path:
    """Get database path from config."""
    return QT_PATHS.database


@contextmanager
def get_db(readonly: bool = False) -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.

    Enables foreign keys and Row factory automatically.

    Args:
        readonly: Open in read-only mode (useful for queries)

    Yields:
        sqlite3.Connection with Row factory enabled
    """
    db_path = get_db_path()

    if readonly:
        uri = f"file:{db_path}?mode=ro"
        conn = sqlite3.connect(uri, uri=True)
    else:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path))

    try:
        conn.execute("PRAGMA foreign_keys = ON")
        if not readonly:
            conn.execute("PRAGMA journal_mode = WAL")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


# Schema dependency order: foreign keys flow downhill through this list.
SCHEMA_ORDER = [
    "workforce",
    "qualifications",
]


def apply_schemas(conn: sqlite3.Connection) -> None:
    """Apply every module schema.sql to an open connection, in SCHEMA_ORDER."""
    package_dir = Path(__file__).parent.parent
    for module_name in SCHEMA_ORDER:
        schema_file = package_dir / module_name / "schema.sql"
        if schema_file.exists():
            logger.info(f"Applying schema: {module_name}/schema.sql")
            conn.executescript(schema_file.read_text(encoding="utf-8"))


def migrate_all():
    """
    Run all module schemas in dependency order.

    Each module's schema.sql uses CREATE TABLE IF NOT EXISTS,
    making this safe to run repeatedly (idempotent).
    """
    with get_db() as conn:
        apply_schemas(conn)
        conn.commit()
        logger.info("All schemas applied successfully")
