"""
QualTrack Web Application Factory

Flask JSON API that registers module blueprints.
Mirrors how cli/main.py assembles module CLIs.

Authentication is not implemented; every route is open.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException

import qualtrack
from qualtrack.core import get_logger
from qualtrack.qualifications.errors import QualificationError

logger = get_logger("qualtrack.api")


def current_now() -> datetime:
    """Request clock. Tests pin it with app.config["FIXED_NOW"]."""
    fixed = current_app.config.get("FIXED_NOW")
    return fixed if fixed is not None else datetime.now()


def current_today() -> date:
    return current_now().date()


def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """Create and configure the QualTrack Flask application."""
    app = Flask(__name__)
    app.json.sort_keys = False
    app.config["FIXED_NOW"] = None
    if config_overrides:
        app.config.update(config_overrides)

    # ── Security headers ─────────────────────────────────────────────────
    @app.after_request
    def set_security_headers(response):
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    # ── Error translation ────────────────────────────────────────────────
    @app.errorhandler(QualificationError)
    def handle_qualification_error(exc: QualificationError):
        return jsonify({"error": str(exc)}), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return jsonify({"error": "Internal server error"}), 500

    # ── Register blueprints ──────────────────────────────────────────────
    from qualtrack.api.organization import bp as organization_bp
    app.register_blueprint(organization_bp)

    from qualtrack.api.qualifications import bp as qualifications_bp
    app.register_blueprint(qualifications_bp)

    @app.route("/api/health")
    def health():
        return jsonify({
            "status": "ok",
            "version": qualtrack.__version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    return app
