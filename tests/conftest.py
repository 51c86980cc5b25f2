"""
Shared test fixtures for QualTrack.

Provides an in-memory database with all schemas, a seeded variant, a
file-backed database for the API and CLI, a Flask test client, and a CLI
runner for isolated testing.
"""

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from unittest.mock import patch

import pytest

from qualtrack.api import create_app
from qualtrack.core.db import apply_schemas
from qualtrack.workforce.seed import seed_sample_data

# Reference clock used by the API and CLI tests
FIXED_NOW = datetime(2024, 6, 1, 9, 30)


@pytest.fixture
def memory_db():
    """Provide an in-memory SQLite database with ALL schemas applied in FK order."""
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    conn.row_factory = sqlite3.Row
    apply_schemas(conn)

    yield conn
    conn.close()


@pytest.fixture
def mock_db(memory_db):
    """Patch get_db everywhere to return the in-memory database."""

    @contextmanager
    def _get_db(readonly=False):
        yield memory_db

    with patch("qualtrack.core.db.get_db", _get_db), \
         patch("qualtrack.core.get_db", _get_db):
        yield memory_db


@pytest.fixture
def seeded_db(memory_db):
    """In-memory database holding the sample organisation and qualifications."""
    seed_sample_data(memory_db)
    return memory_db


@pytest.fixture
def db_file(tmp_path, monkeypatch):
    """Point QUALTRACK_DB at a seeded temporary database file. Returns its path."""
    path = tmp_path / "qualtrack.db"
    monkeypatch.setenv("QUALTRACK_DB", str(path))

    conn = sqlite3.connect(str(path))
    conn.execute("PRAGMA foreign_keys = ON")
    apply_schemas(conn)
    seed_sample_data(conn)
    conn.close()
    return path


@pytest.fixture
def app(db_file):
    return create_app({"TESTING": True, "FIXED_NOW": FIXED_NOW})


@pytest.fixture
def client(app):
    """Flask test client backed by the seeded database file."""
    return app.test_client()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
