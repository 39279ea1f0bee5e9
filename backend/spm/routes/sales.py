# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/spm/routes/sales.py
"""Sales (ventas) API routes with role enforcement"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth, require_role
from ..models.auth import ROLE_CAJERO, ROLE_JEFE
from ..services import sales_service
from ..services.request_schemas import parse_sale_request
from ..validation import NotFoundError, ValidationError, money_to_json
from .params import period_filters


sales_bp = Blueprint("ventas", __name__, url_prefix="/api/ventas")


def _error(e: Exception, status: int):
    body = {"error": str(e)}
    details = getattr(e, "details", None)
    if details:
        body["details"] = details
    return jsonify(body), status


@sales_bp.get("")
@require_auth
@require_role(ROLE_JEFE, ROLE_CAJERO)
def list_sales_route():
    """
    List sales newest first.

    Query params:
    - fecha: YYYY-MM-DD (optional) - exact day
    - mes, año: int (optional) - month of year; ignored when fecha is given
    """
    try:
        filters = period_filters(request.args)
        sales = sales_service.list_sales(**filters)
    except ValidationError as e:
        return _error(e, 400)
    return jsonify(sales), 200


@sales_bp.post("")
@require_auth
@require_role(ROLE_JEFE, ROLE_CAJERO)
def create_sale_route():
    """
    Record a sale.

    Body: {items: [{producto_id?, nombre?, cantidad, precio_unitario}],
           metodo_pago?, monto_pagado?}

    Every item is validated before any stock is touched; items are then
    committed one at a time, so a 404/400 on item k leaves 1..k-1 recorded.
    """
    try:
        sale_request = parse_sale_request(request.get_json(silent=True))
    except ValidationError as e:
        return _error(e, 400)

    try:
        result = sales_service.record_sale(sale_request)
    except NotFoundError as e:
        current_app.logger.warning("Sale rejected: %s", e)
        return _error(e, 404)
    except ValidationError as e:
        current_app.logger.warning("Sale rejected: %s %s", e, e.details)
        return _error(e, 400)

    return jsonify({
        "success": True,
        "ventas": result.ventas,
        "total": money_to_json(result.total),
        "monto_pagado": money_to_json(result.monto_pagado),
        "vuelto": money_to_json(result.vuelto),
    }), 201
