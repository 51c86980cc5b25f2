"""
Organization Blueprint — companies, departments, employees.

Thin delivery layer: queries live in workforce.organization.
"""

from flask import Blueprint, jsonify, request

from qualtrack.core import get_db
from qualtrack.qualifications.errors import NotFoundError
from qualtrack.workforce.organization import (
    employee_options,
    get_company,
    get_department,
    get_employee,
    list_companies,
    list_departments,
    list_employees,
)

bp = Blueprint("organization", __name__, url_prefix="/api")


def _include_inactive() -> bool:
    return request.args.get("include_inactive", "") in ("1", "true", "yes")


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------

@bp.route("/companies", methods=["GET"])
def api_list_companies():
    with get_db(readonly=True) as conn:
        rows = list_companies(conn, include_inactive=_include_inactive())
    return jsonify(rows)


@bp.route("/companies/<company_id>", methods=["GET"])
def api_company_detail(company_id):
    with get_db(readonly=True) as conn:
        company = get_company(conn, company_id)
    if company is None:
        raise NotFoundError(f"Company not found: {company_id}")
    return jsonify(company)


# ---------------------------------------------------------------------------
# Departments
# ---------------------------------------------------------------------------

@bp.route("/departments", methods=["GET"])
def api_list_departments():
    with get_db(readonly=True) as conn:
        rows = list_departments(
            conn,
            company_id=request.args.get("company_id") or request.args.get("companyId"),
            include_inactive=_include_inactive(),
        )
    return jsonify(rows)


@bp.route("/departments/company/<company_id>", methods=["GET"])
def api_company_departments(company_id):
    with get_db(readonly=True) as conn:
        if get_company(conn, company_id) is None:
            raise NotFoundError(f"Company not found: {company_id}")
        rows = list_departments(conn, company_id=company_id)
    return jsonify(rows)


@bp.route("/departments/<department_id>", methods=["GET"])
def api_department_detail(department_id):
    with get_db(readonly=True) as conn:
        department = get_department(conn, department_id)
    if department is None:
        raise NotFoundError(f"Department not found: {department_id}")
    return jsonify(department)


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

@bp.route("/employees", methods=["GET"])
def api_list_employees():
    with get_db(readonly=True) as conn:
        rows = list_employees(
            conn,
            company_id=request.args.get("company_id") or request.args.get("companyId"),
            department_id=request.args.get("department_id") or request.args.get("departmentId"),
        )
    return jsonify(rows)


@bp.route("/employees/options", methods=["GET"])
def api_employee_options():
    """Dropdown entries for the qualification registration form."""
    with get_db(readonly=True) as conn:
        rows = employee_options(
            conn, company_id=request.args.get("company_id") or request.args.get("companyId"),
        )
    return jsonify(rows)


@bp.route("/employees/company/<company_id>", methods=["GET"])
def api_company_employees(company_id):
    with get_db(readonly=True) as conn:
        if get_company(conn, company_id) is None:
            raise NotFoundError(f"Company not found: {company_id}")
        rows = list_employees(conn, company_id=company_id)
    return jsonify(rows)


@bp.route("/employees/<employee_id>", methods=["GET"])
def api_employee_detail(employee_id):
    with get_db(readonly=True) as conn:
        employee = get_employee(conn, employee_id)
    if employee is None:
        raise NotFoundError(f"Employee not found: {employee_id}")
    return jsonify(employee)
