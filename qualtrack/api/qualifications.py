"""
Qualifications Blueprint — masters, qualification CRUD, report, export.

Thin delivery layer: validation and business rules live in
qualifications.service. The request clock is read here and passed down.
"""

from flask import Blueprint, Response, jsonify, request

from qualtrack.api import current_now, current_today
from qualtrack.core import get_db
from qualtrack.qualifications import service
from qualtrack.qualifications.errors import NotFoundError
from qualtrack.qualifications.masters import get_master, list_masters

bp = Blueprint("qualifications", __name__, url_prefix="/api")


def _report_params():
    """Report filters from the query string (companyId, departmentId, ...)."""
    return request.args.to_dict()


# ---------------------------------------------------------------------------
# Qualification masters
# ---------------------------------------------------------------------------

@bp.route("/qualification-masters", methods=["GET"])
def api_list_masters():
    active_only = request.args.get("active_only", "") in ("1", "true", "yes")
    with get_db(readonly=True) as conn:
        rows = list_masters(
            conn, active_only=active_only, category=request.args.get("category") or None,
        )
    return jsonify([m.to_dict() for m in rows])


@bp.route("/qualification-masters/<master_id>", methods=["GET"])
def api_master_detail(master_id):
    with get_db(readonly=True) as conn:
        master = get_master(conn, master_id)
    if master is None:
        raise NotFoundError(f"Qualification master not found: {master_id}")
    return jsonify(master.to_dict())


# ---------------------------------------------------------------------------
# Qualification CRUD
# ---------------------------------------------------------------------------

@bp.route("/qualifications", methods=["POST"])
def api_create_qualification():
    data = request.get_json(silent=True)
    with get_db() as conn:
        record = service.create_qualification(conn, data, today=current_today())
    return jsonify(record.to_dict()), 201


@bp.route("/qualifications/<qualification_id>", methods=["GET"])
def api_qualification_detail(qualification_id):
    with get_db(readonly=True) as conn:
        record = service.get_qualification(conn, qualification_id)
    return jsonify(record.to_dict())


@bp.route("/qualifications/<qualification_id>", methods=["PUT"])
def api_update_qualification(qualification_id):
    data = request.get_json(silent=True)
    with get_db() as conn:
        record = service.update_qualification(
            conn, qualification_id, data, today=current_today(),
        )
    return jsonify(record.to_dict())


@bp.route("/qualifications/<qualification_id>", methods=["DELETE"])
def api_delete_qualification(qualification_id):
    with get_db() as conn:
        service.delete_qualification(conn, qualification_id)
    return jsonify({"id": qualification_id, "deleted": True})


@bp.route("/qualifications/employee/<employee_id>", methods=["GET"])
@bp.route("/employees/<employee_id>/qualifications", methods=["GET"])
def api_employee_qualifications(employee_id):
    with get_db(readonly=True) as conn:
        rows = service.list_employee_qualifications(conn, employee_id, today=current_today())
    return jsonify(rows)


# ---------------------------------------------------------------------------
# All-employee report + export
# ---------------------------------------------------------------------------

@bp.route("/qualifications/all-employees", methods=["GET"])
def api_all_employee_qualifications():
    with get_db(readonly=True) as conn:
        rows = service.list_report_rows(conn, _report_params(), today=current_today())
    return jsonify({
        "data": [r.to_dict() for r in rows],
        "total": len(rows),
    })


@bp.route("/qualifications/summary", methods=["GET"])
def api_qualification_summary():
    with get_db(readonly=True) as conn:
        summary = service.expiring_summary(conn, today=current_today())
    return jsonify(summary)


@bp.route("/qualifications/export", methods=["GET"])
def api_export_qualifications():
    params = _report_params()
    fmt = params.pop("format", "csv")
    now = current_now()
    with get_db(readonly=True) as conn:
        result = service.export_report(conn, params, today=now.date(), now=now, fmt=fmt)

    content = result.content
    if isinstance(content, str):
        content = content.encode("utf-8")
    return Response(
        content,
        mimetype="application/octet-stream",
        headers={
            "Content-Disposition": f'attachment; filename="{result.suggested_filename}"',
        },
    )
