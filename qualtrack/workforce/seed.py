"""
Sample data for the five affiliated companies.

Safe to run repeatedly: every insert is INSERT OR IGNORE on a fixed id.
Expiration dates are derived with the lifecycle engine, never typed in.
"""

import sqlite3
from typing import Dict

from qualtrack.core import get_logger
from qualtrack.qualifications.lifecycle import compute_expiration
from qualtrack.qualifications.models import PERMANENT, format_expiration

logger = get_logger("qualtrack.workforce.seed")

COMPANIES = [
    ("comp-honsha", "Head Office Co."),
    ("comp-a", "Affiliate A"),
    ("comp-b", "Affiliate B"),
    ("comp-c", "Affiliate C"),
    ("comp-d", "Affiliate D"),
]

DEPARTMENTS = [
    ("dept-honsha-kanri", "comp-honsha", "Administration"),
    ("dept-a-tech", "comp-a", "Engineering"),
    ("dept-b-sales", "comp-b", "Sales"),
    ("dept-c-hr", "comp-c", "Human Resources"),
]

# (id, name, email, company, department)
EMPLOYEES = [
    ("emp-tanaka", "Taro Tanaka", "tanaka@honsha.example", "comp-honsha", "dept-honsha-kanri"),
    ("emp-sato", "Hanako Sato", "sato@comp-a.example", "comp-a", "dept-a-tech"),
    ("emp-suzuki", "Jiro Suzuki", "suzuki@comp-b.example", "comp-b", "dept-b-sales"),
    ("emp-takahashi", "Misaki Takahashi", "takahashi@comp-c.example", "comp-c", "dept-c-hr"),
    ("emp-yamada", "Ken Yamada", "yamada@comp-d.example", "comp-d", None),
]

# (id, name, validity period, category)
MASTERS = [
    ("qual-master-fe", "Fundamental IT Engineer Examination", PERMANENT, "IT"),
    ("qual-master-ap", "Applied IT Engineer Examination", PERMANENT, "IT"),
    ("qual-master-license", "Ordinary Driver's License", 3, "License"),
    ("qual-master-boki", "Bookkeeping Certificate, Grade 2", PERMANENT, "Accounting"),
    ("qual-master-fp", "Financial Planner, Grade 2", PERMANENT, "Finance"),
    ("qual-master-toeic", "TOEIC Listening & Reading", 2, "Language"),
]

# (id, employee, name, acquired, master)
QUALIFICATIONS = [
    ("qual-tanaka-fe", "emp-tanaka", "Fundamental IT Engineer Examination", "2023-04-15", "qual-master-fe"),
    ("qual-sato-ap", "emp-sato", "Applied IT Engineer Examination", "2022-10-20", "qual-master-ap"),
    ("qual-suzuki-license", "emp-suzuki", "Ordinary Driver's License", "2021-03-15", "qual-master-license"),
    ("qual-takahashi-toeic", "emp-takahashi", "TOEIC Listening & Reading", "2020-01-15", "qual-master-toeic"),
    ("qual-yamada-first-aid", "emp-yamada", "First Aid Responder", "2024-06-01", None),
]


def seed_sample_data(conn: sqlite3.Connection) -> Dict[str, int]:
    """Insert the sample organisation. Returns rows inserted per table."""
    stats = {}

    before = conn.total_changes
    conn.executemany("INSERT OR IGNORE INTO companies (id, name) VALUES (?, ?)", COMPANIES)
    stats["companies"] = conn.total_changes - before

    before = conn.total_changes
    conn.executemany(
        "INSERT OR IGNORE INTO departments (id, company_id, name) VALUES (?, ?, ?)",
        DEPARTMENTS,
    )
    stats["departments"] = conn.total_changes - before

    before = conn.total_changes
    conn.executemany(
        "INSERT OR IGNORE INTO employees (id, name, email, company_id, department_id) "
        "VALUES (?, ?, ?, ?, ?)",
        EMPLOYEES,
    )
    stats["employees"] = conn.total_changes - before

    before = conn.total_changes
    conn.executemany(
        "INSERT OR IGNORE INTO qualification_masters (id, name, validity_period, category) "
        "VALUES (?, ?, ?, ?)",
        [(mid, name, str(period), category) for mid, name, period, category in MASTERS],
    )
    stats["qualification_masters"] = conn.total_changes - before

    periods = {mid: period for mid, _name, period, _category in MASTERS}
    before = conn.total_changes
    conn.executemany(
        "INSERT OR IGNORE INTO qualifications "
        "(id, employee_id, qualification_name, acquired_date, expiration_date, master_id) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        [
            (qid, emp, name, acquired,
             format_expiration(compute_expiration(acquired, periods.get(master))),
             master)
            for qid, emp, name, acquired, master in QUALIFICATIONS
        ],
    )
    stats["qualifications"] = conn.total_changes - before

    conn.commit()
    logger.info("Seeded sample data: %s", stats)
    return stats
