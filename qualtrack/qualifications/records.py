"""
Qualification record storage.

SQL access for the qualifications table. Expiration dates arrive here
already computed; this module never derives or classifies anything.
"""

import sqlite3
from datetime import date
from typing import Any, Dict, List, Optional

from qualtrack.qualifications.errors import DuplicateQualificationError
from qualtrack.qualifications.lifecycle import parse_expiration, parse_iso_date
from qualtrack.qualifications.models import Expiration, QualificationRecord, format_expiration
from qualtrack.workforce.organization import generate_id

# Message sqlite3 gives for idx_qualifications_employee_name violations
_NAME_UNIQUE = "qualifications.employee_id, qualifications.qualification_name"


def _raise_if_duplicate(exc: sqlite3.IntegrityError, qualification_name: str) -> None:
    if _NAME_UNIQUE in str(exc):
        raise DuplicateQualificationError(
            f"Employee already holds a qualification named {qualification_name!r}"
        ) from exc


def row_to_record(row: sqlite3.Row) -> QualificationRecord:
    return QualificationRecord(
        qualification_id=row["id"],
        employee_id=row["employee_id"],
        qualification_name=row["qualification_name"],
        acquired_date=parse_iso_date(row["acquired_date"]),
        expiration_date=parse_expiration(row["expiration_date"]),
        master_id=row["master_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def insert_qualification(
    conn: sqlite3.Connection,
    employee_id: str,
    qualification_name: str,
    acquired_date: date,
    expiration_date: Expiration,
    master_id: Optional[str] = None,
    qualification_id: Optional[str] = None,
) -> str:
    qualification_id = qualification_id or generate_id("qual")
    try:
        conn.execute(
            """INSERT INTO qualifications (
                   id, employee_id, qualification_name, acquired_date,
                   expiration_date, master_id
               ) VALUES (?, ?, ?, ?, ?, ?)""",
            (qualification_id, employee_id, qualification_name,
             acquired_date.isoformat(), format_expiration(expiration_date), master_id),
        )
    except sqlite3.IntegrityError as exc:
        _raise_if_duplicate(exc, qualification_name)
        raise
    conn.commit()
    return qualification_id


def get_qualification(
    conn: sqlite3.Connection, qualification_id: str
) -> Optional[QualificationRecord]:
    row = conn.execute(
        "SELECT * FROM qualifications WHERE id = ?", (qualification_id,)
    ).fetchone()
    return row_to_record(row) if row else None


def list_by_employee(conn: sqlite3.Connection, employee_id: str) -> List[QualificationRecord]:
    """Newest acquisition first, then by name."""
    rows = conn.execute(
        """SELECT * FROM qualifications
           WHERE employee_id = ?
           ORDER BY acquired_date DESC, qualification_name ASC, id ASC""",
        (employee_id,),
    ).fetchall()
    return [row_to_record(r) for r in rows]


def update_qualification(
    conn: sqlite3.Connection,
    qualification_id: str,
    qualification_name: str,
    acquired_date: date,
    expiration_date: Expiration,
    master_id: Optional[str] = None,
) -> bool:
    try:
        cursor = conn.execute(
            """UPDATE qualifications
               SET qualification_name = ?,
                   acquired_date = ?,
                   expiration_date = ?,
                   master_id = ?,
                   updated_at = CURRENT_TIMESTAMP
               WHERE id = ?""",
            (qualification_name, acquired_date.isoformat(),
             format_expiration(expiration_date), master_id, qualification_id),
        )
    except sqlite3.IntegrityError as exc:
        _raise_if_duplicate(exc, qualification_name)
        raise
    conn.commit()
    return cursor.rowcount > 0


def delete_qualification(conn: sqlite3.Connection, qualification_id: str) -> bool:
    cursor = conn.execute("DELETE FROM qualifications WHERE id = ?", (qualification_id,))
    conn.commit()
    return cursor.rowcount > 0


def name_exists(
    conn: sqlite3.Connection,
    employee_id: str,
    qualification_name: str,
    exclude_id: Optional[str] = None,
) -> bool:
    """Case-sensitive duplicate check for one employee's qualification names."""
    sql = (
        "SELECT 1 FROM qualifications "
        "WHERE employee_id = ? AND qualification_name = ?"
    )
    params: List[Any] = [employee_id, qualification_name]
    if exclude_id:
        sql += " AND id != ?"
        params.append(exclude_id)
    return conn.execute(sql + " LIMIT 1", params).fetchone() is not None


def fetch_report_rows(
    conn: sqlite3.Connection,
    company_id: Optional[str] = None,
    department_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Qualifications joined with employee, company and department names.

    Company/department narrow the SQL scan only; status, keyword filtering
    and report ordering are applied by the filter engine.
    """
    conditions = []
    params: List[Any] = []
    if company_id:
        conditions.append("e.company_id = ?")
        params.append(company_id)
    if department_id:
        conditions.append("e.department_id = ?")
        params.append(department_id)

    sql = """
        SELECT q.id AS qualification_id,
               q.employee_id,
               e.name AS employee_name,
               e.company_id,
               c.name AS company_name,
               e.department_id,
               d.name AS department_name,
               q.qualification_name,
               q.acquired_date,
               q.expiration_date
        FROM qualifications q
        JOIN employees e ON e.id = q.employee_id
        JOIN companies c ON c.id = e.company_id
        LEFT JOIN departments d ON d.id = e.department_id
    """
    if conditions:
        sql += " WHERE " + " AND ".join(conditions)
    return [dict(r) for r in conn.execute(sql, params).fetchall()]
