"""
Qualification masters (validity policies).

A master names a qualification type, its category, and how many years a
holder stays qualified (or 'permanent'). Inactive masters stay readable
but cannot be referenced by new or edited qualifications.
"""

import sqlite3
from typing import Any, List, Optional

from qualtrack.qualifications.lifecycle import parse_validity_period
from qualtrack.qualifications.models import ValidityPolicy
from qualtrack.workforce.organization import generate_id


def row_to_policy(row: sqlite3.Row) -> ValidityPolicy:
    return ValidityPolicy(
        policy_id=row["id"],
        name=row["name"],
        validity_period=parse_validity_period(row["validity_period"]),
        category=row["category"],
        active=bool(row["is_active"]),
    )


def list_masters(
    conn: sqlite3.Connection,
    active_only: bool = False,
    category: Optional[str] = None,
) -> List[ValidityPolicy]:
    conditions = []
    params: List[Any] = []
    if active_only:
        conditions.append("is_active = 1")
    if category:
        conditions.append("category = ?")
        params.append(category)

    sql = "SELECT * FROM qualification_masters"
    if conditions:
        sql += " WHERE " + " AND ".join(conditions)
    sql += " ORDER BY category, name, id"
    return [row_to_policy(r) for r in conn.execute(sql, params).fetchall()]


def get_master(conn: sqlite3.Connection, master_id: str) -> Optional[ValidityPolicy]:
    row = conn.execute(
        "SELECT * FROM qualification_masters WHERE id = ?", (master_id,)
    ).fetchone()
    return row_to_policy(row) if row else None


def create_master(
    conn: sqlite3.Connection,
    name: str,
    validity_period: Any,
    category: Optional[str] = None,
    master_id: Optional[str] = None,
    is_active: bool = True,
) -> str:
    """Insert a master; validity_period is validated before it is stored."""
    period = parse_validity_period(validity_period)
    master_id = master_id or generate_id("qual-master")
    conn.execute(
        "INSERT INTO qualification_masters (id, name, validity_period, category, is_active) "
        "VALUES (?, ?, ?, ?, ?)",
        (master_id, name, str(period), category, 1 if is_active else 0),
    )
    conn.commit()
    return master_id


def set_master_active(conn: sqlite3.Connection, master_id: str, active: bool) -> bool:
    cursor = conn.execute(
        "UPDATE qualification_masters SET is_active = ?, updated_at = CURRENT_TIMESTAMP "
        "WHERE id = ?",
        (1 if active else 0, master_id),
    )
    conn.commit()
    return cursor.rowcount > 0
