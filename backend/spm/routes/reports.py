# Overview: Flask API routes for reports; read-only aggregates.

from flask import Blueprint, current_app, jsonify

from ..decorators import require_auth, require_role
from ..models.auth import ROLE_JEFE
from ..services import reporting_service


reports_bp = Blueprint("reportes", __name__, url_prefix="/api/reportes")


@reports_bp.get("")
@require_auth
@require_role(ROLE_JEFE)
def report_route():
    """Dashboard summary: totals, stock levels, top sellers, last days."""
    report = reporting_service.build_report(
        low_stock_threshold=current_app.config["LOW_STOCK_THRESHOLD"],
    )
    return jsonify(report), 200
