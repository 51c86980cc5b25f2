"""
Qualification Service

Write path and report queries used by the API and CLI. Validates input,
checks referenced employees and masters, enforces one name per employee,
and recomputes the expiration date on every create and update.

"today" and "now" are always passed in by the caller.
"""

import sqlite3
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from qualtrack.core import get_config_value, get_logger
from qualtrack.qualifications import masters, records
from qualtrack.qualifications.errors import (
    DuplicateQualificationError,
    NotFoundError,
    ValidationError,
)
from qualtrack.qualifications.export import (
    DEFAULT_FILENAME_PREFIX,
    ExportResult,
    export_rows,
    export_rows_xlsx,
)
from qualtrack.qualifications.filters import FilterCriteria, enrich_row, filter_rows
from qualtrack.qualifications.lifecycle import classify, compute_expiration, parse_iso_date
from qualtrack.qualifications.models import (
    EnrichedRow,
    ExpirationStatus,
    QualificationRecord,
    ValidityPolicy,
)
from qualtrack.workforce.organization import get_employee

logger = get_logger("qualtrack.qualifications.service")

_UNSET = object()

EXPORT_FORMATS = ("csv", "xlsx")

# Payload keys accepted for each field (snake_case or the camelCase web form)
_KEYS = {
    "employee_id": ("employee_id", "employeeId"),
    "qualification_name": ("qualification_name", "qualificationName"),
    "acquired_date": ("acquired_date", "acquiredDate"),
    "master_id": ("master_id", "qualificationMasterId", "qualification_master_id"),
}


def _field(data: Mapping[str, Any], name: str, default: Any = _UNSET) -> Any:
    for key in _KEYS[name]:
        if key in data:
            return data[key]
    return default


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _require_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be an object")
    return data


def _validate_name(value: Any) -> str:
    max_length = get_config_value("qualifications", "name_max_length", default=100)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("qualification_name is required")
    name = value.strip()
    if ILLEGAL_CHARACTERS_RE.search(name):
        raise ValidationError("qualification_name must not contain control characters")
    if len(name) > max_length:
        raise ValidationError(
            f"qualification_name must be at most {max_length} characters"
        )
    return name


def _validate_acquired(value: Any, today: date) -> date:
    if value is None or value == "":
        raise ValidationError("acquired_date is required")
    acquired = parse_iso_date(value)
    if acquired > today:
        raise ValidationError(
            f"acquired_date {acquired.isoformat()} is in the future (today is {today.isoformat()})"
        )
    return acquired


def _resolve_master(conn: sqlite3.Connection, master_id: Any) -> Optional[ValidityPolicy]:
    """Referenced master must exist and be active. Empty means none."""
    if master_id is None or master_id == "":
        return None
    if not isinstance(master_id, str):
        raise ValidationError("master_id must be a string")
    master = masters.get_master(conn, master_id)
    if master is None:
        logger.warning("Qualification master not found: %s", master_id)
        raise NotFoundError(f"Qualification master not found: {master_id}")
    if not master.active:
        logger.warning("Qualification master is inactive: %s", master_id)
        raise NotFoundError(f"Qualification master is inactive: {master_id}")
    return master


def _check_duplicate(
    conn: sqlite3.Connection,
    employee_id: str,
    name: str,
    exclude_id: Optional[str] = None,
) -> None:
    if records.name_exists(conn, employee_id, name, exclude_id=exclude_id):
        logger.warning("Duplicate qualification %r for employee %s", name, employee_id)
        raise DuplicateQualificationError(
            f"Employee {employee_id} already holds a qualification named {name!r}"
        )


def _require_employee(conn: sqlite3.Connection, employee_id: Any) -> Dict[str, Any]:
    if not isinstance(employee_id, str) or not employee_id.strip():
        raise ValidationError("employee_id is required")
    employee = get_employee(conn, employee_id.strip())
    if employee is None:
        logger.warning("Employee not found: %s", employee_id)
        raise NotFoundError(f"Employee not found: {employee_id}")
    return employee


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------

def create_qualification(
    conn: sqlite3.Connection, data: Any, today: date
) -> QualificationRecord:
    """
    Register a qualification for an employee.

    Raises:
        ValidationError: missing/oversized name, future acquisition date
        InvalidDateError: malformed acquisition date
        NotFoundError: unknown employee, unknown or inactive master
        DuplicateQualificationError: employee already has this name
    """
    data = _require_mapping(data)
    employee = _require_employee(conn, _field(data, "employee_id", None))
    name = _validate_name(_field(data, "qualification_name", None))
    acquired = _validate_acquired(_field(data, "acquired_date", None), today)
    master = _resolve_master(conn, _field(data, "master_id", None))
    _check_duplicate(conn, employee["id"], name)

    expiration = compute_expiration(acquired, master.validity_period if master else None)
    qualification_id = records.insert_qualification(
        conn, employee["id"], name, acquired, expiration,
        master_id=master.policy_id if master else None,
    )
    logger.info(
        "Registered qualification %s (%r) for employee %s, expires %s",
        qualification_id, name, employee["id"], expiration,
    )
    return records.get_qualification(conn, qualification_id)


def update_qualification(
    conn: sqlite3.Connection, qualification_id: str, data: Any, today: date
) -> QualificationRecord:
    """
    Change name, acquisition date and/or master of a qualification.

    Omitted fields keep their stored value; master_id null/"" clears the
    master. The expiration date is recomputed from the resulting inputs.
    """
    data = _require_mapping(data)
    existing = get_qualification(conn, qualification_id)

    raw_name = _field(data, "qualification_name")
    name = existing.qualification_name if raw_name is _UNSET else _validate_name(raw_name)

    raw_acquired = _field(data, "acquired_date")
    acquired = (
        existing.acquired_date if raw_acquired is _UNSET
        else _validate_acquired(raw_acquired, today)
    )

    raw_master = _field(data, "master_id")
    if raw_master is _UNSET:
        master = masters.get_master(conn, existing.master_id) if existing.master_id else None
    else:
        master = _resolve_master(conn, raw_master)

    _check_duplicate(conn, existing.employee_id, name, exclude_id=qualification_id)

    expiration = compute_expiration(acquired, master.validity_period if master else None)
    records.update_qualification(
        conn, qualification_id, name, acquired, expiration,
        master_id=master.policy_id if master else None,
    )
    logger.info(
        "Updated qualification %s (%r), expires %s", qualification_id, name, expiration,
    )
    return records.get_qualification(conn, qualification_id)


def delete_qualification(conn: sqlite3.Connection, qualification_id: str) -> None:
    existing = get_qualification(conn, qualification_id)
    records.delete_qualification(conn, qualification_id)
    logger.info(
        "Deleted qualification %s (%r) of employee %s",
        qualification_id, existing.qualification_name, existing.employee_id,
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def get_qualification(conn: sqlite3.Connection, qualification_id: str) -> QualificationRecord:
    if not isinstance(qualification_id, str) or not qualification_id.strip():
        raise ValidationError("qualification id is required")
    record = records.get_qualification(conn, qualification_id)
    if record is None:
        raise NotFoundError(f"Qualification not found: {qualification_id}")
    return record


def list_employee_qualifications(
    conn: sqlite3.Connection, employee_id: str, today: date
) -> List[Dict[str, Any]]:
    """One employee's qualifications, each with its current status."""
    employee = _require_employee(conn, employee_id)
    result = []
    for record in records.list_by_employee(conn, employee["id"]):
        item = record.to_dict()
        status = classify(record.expiration_date, today)
        item["status"] = status.value
        item["status_label"] = status.label
        result.append(item)
    return result


def _criteria(params: Union[FilterCriteria, Mapping[str, Any], None]) -> FilterCriteria:
    if isinstance(params, FilterCriteria):
        return params
    return FilterCriteria.from_params(params)


def list_report_rows(
    conn: sqlite3.Connection,
    params: Union[FilterCriteria, Mapping[str, Any], None],
    today: date,
) -> List[EnrichedRow]:
    """
    All-employee qualification report.

    Raises:
        InvalidFilterError: unrecognized expirationStatus
    """
    criteria = _criteria(params)
    stored = records.fetch_report_rows(
        conn, company_id=criteria.company_id, department_id=criteria.department_id,
    )
    rows = filter_rows((enrich_row(r, today) for r in stored), criteria)
    logger.debug(
        "Report rows: %d of %d (filter: %s)", len(rows), len(stored), criteria.to_dict(),
    )
    return rows


def export_report(
    conn: sqlite3.Connection,
    params: Union[FilterCriteria, Mapping[str, Any], None],
    today: date,
    now: datetime,
    fmt: str = "csv",
) -> ExportResult:
    """Run the report and render it as CSV text or an .xlsx workbook."""
    fmt = (fmt or "csv").lower()
    if fmt not in EXPORT_FORMATS:
        raise ValidationError(
            f"Unsupported export format: {fmt!r} (expected one of: {', '.join(EXPORT_FORMATS)})"
        )

    rows = list_report_rows(conn, params, today)
    prefix = get_config_value("export", "filename_prefix", default=DEFAULT_FILENAME_PREFIX)
    if fmt == "xlsx":
        sheet_title = get_config_value("export", "sheet_title", default="Qualifications")
        result = export_rows_xlsx(rows, now=now, prefix=prefix, sheet_title=sheet_title)
    else:
        result = export_rows(rows, now=now, prefix=prefix)

    logger.info(
        "Exported %d qualification rows as %s (%s)",
        result.row_count, fmt, result.suggested_filename,
    )
    return result


def expiring_summary(conn: sqlite3.Connection, today: date) -> Dict[str, Any]:
    """Counts per status, overall and per company."""
    rows = list_report_rows(conn, None, today)
    by_status = {status.value: 0 for status in ExpirationStatus}
    by_company: Dict[str, Dict[str, int]] = {}
    for row in rows:
        by_status[row.status.value] += 1
        company = by_company.setdefault(
            row.company_name, {status.value: 0 for status in ExpirationStatus}
        )
        company[row.status.value] += 1
    return {
        "as_of": today.isoformat(),
        "total": len(rows),
        "by_status": by_status,
        "by_company": by_company,
    }
