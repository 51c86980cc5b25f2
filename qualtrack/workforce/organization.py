"""
Company / Department / Employee Records

Read-mostly repository functions over the workforce tables. Every function
takes an open sqlite3 connection and returns plain dicts.
"""

import sqlite3
import uuid
from typing import Any, Dict, List, Optional


def generate_id(prefix: str) -> str:
    """Short prefixed id for new rows, e.g. emp-1f3a9c2e."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _as_dict(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    result = dict(row)
    if "is_active" in result:
        result["is_active"] = bool(result["is_active"])
    return result


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------

def list_companies(conn: sqlite3.Connection, include_inactive: bool = False) -> List[Dict[str, Any]]:
    sql = "SELECT * FROM companies"
    if not include_inactive:
        sql += " WHERE is_active = 1"
    rows = conn.execute(sql + " ORDER BY name, id").fetchall()
    return [_as_dict(r) for r in rows]


def get_company(conn: sqlite3.Connection, company_id: str) -> Optional[Dict[str, Any]]:
    row = conn.execute("SELECT * FROM companies WHERE id = ?", (company_id,)).fetchone()
    return _as_dict(row)


def create_company(
    conn: sqlite3.Connection,
    name: str,
    company_id: Optional[str] = None,
    is_active: bool = True,
) -> str:
    company_id = company_id or generate_id("comp")
    conn.execute(
        "INSERT INTO companies (id, name, is_active) VALUES (?, ?, ?)",
        (company_id, name, 1 if is_active else 0),
    )
    conn.commit()
    return company_id


# ---------------------------------------------------------------------------
# Departments
# ---------------------------------------------------------------------------

def list_departments(
    conn: sqlite3.Connection,
    company_id: Optional[str] = None,
    include_inactive: bool = False,
) -> List[Dict[str, Any]]:
    """List departments with their company name, optionally for one company."""
    conditions = []
    params: List[Any] = []
    if company_id:
        conditions.append("d.company_id = ?")
        params.append(company_id)
    if not include_inactive:
        conditions.append("d.is_active = 1")

    sql = (
        "SELECT d.*, c.name AS company_name "
        "FROM departments d JOIN companies c ON c.id = d.company_id"
    )
    if conditions:
        sql += " WHERE " + " AND ".join(conditions)
    sql += " ORDER BY c.name, d.name, d.id"
    return [_as_dict(r) for r in conn.execute(sql, params).fetchall()]


def get_department(conn: sqlite3.Connection, department_id: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        "SELECT d.*, c.name AS company_name "
        "FROM departments d JOIN companies c ON c.id = d.company_id "
        "WHERE d.id = ?",
        (department_id,),
    ).fetchone()
    return _as_dict(row)


def create_department(
    conn: sqlite3.Connection,
    company_id: str,
    name: str,
    department_id: Optional[str] = None,
    is_active: bool = True,
) -> str:
    department_id = department_id or generate_id("dept")
    conn.execute(
        "INSERT INTO departments (id, company_id, name, is_active) VALUES (?, ?, ?, ?)",
        (department_id, company_id, name, 1 if is_active else 0),
    )
    conn.commit()
    return department_id


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

_EMPLOYEE_SELECT = """
    SELECT e.*, c.name AS company_name, d.name AS department_name
    FROM employees e
    JOIN companies c ON c.id = e.company_id
    LEFT JOIN departments d ON d.id = e.department_id
"""


def list_employees(
    conn: sqlite3.Connection,
    company_id: Optional[str] = None,
    department_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """List employees with company and department names."""
    conditions = []
    params: List[Any] = []
    if company_id:
        conditions.append("e.company_id = ?")
        params.append(company_id)
    if department_id:
        conditions.append("e.department_id = ?")
        params.append(department_id)

    sql = _EMPLOYEE_SELECT
    if conditions:
        sql += " WHERE " + " AND ".join(conditions)
    sql += " ORDER BY c.name, e.name, e.id"
    return [_as_dict(r) for r in conn.execute(sql, params).fetchall()]


def get_employee(conn: sqlite3.Connection, employee_id: str) -> Optional[Dict[str, Any]]:
    row = conn.execute(_EMPLOYEE_SELECT + " WHERE e.id = ?", (employee_id,)).fetchone()
    return _as_dict(row)


def create_employee(
    conn: sqlite3.Connection,
    name: str,
    company_id: str,
    department_id: Optional[str] = None,
    email: Optional[str] = None,
    employee_id: Optional[str] = None,
) -> str:
    employee_id = employee_id or generate_id("emp")
    conn.execute(
        "INSERT INTO employees (id, name, email, company_id, department_id) "
        "VALUES (?, ?, ?, ?, ?)",
        (employee_id, name, email, company_id, department_id),
    )
    conn.commit()
    return employee_id


def employee_options(
    conn: sqlite3.Connection, company_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Dropdown entries: 'Jane Smith (Head Office / Administration)'."""
    options = []
    for emp in list_employees(conn, company_id=company_id):
        place = emp["company_name"]
        if emp.get("department_name"):
            place = f"{place} / {emp['department_name']}"
        options.append({
            "employee_id": emp["id"],
            "name": emp["name"],
            "company_name": emp["company_name"],
            "department_name": emp.get("department_name"),
            "display_name": f"{emp['name']} ({place})",
        })
    return options
