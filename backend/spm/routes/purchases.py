# Overview: Flask API routes for purchases (stock intake); parses input and returns JSON responses.

# backend/spm/routes/purchases.py
"""Purchase (compras) API routes with role enforcement"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth, require_role
from ..models.auth import ROLE_ALMACEN, ROLE_JEFE
from ..services import purchase_service
from ..services.request_schemas import parse_purchase_request
from ..validation import ConflictError, NotFoundError, ValidationError
from .params import period_filters


purchases_bp = Blueprint("compras", __name__, url_prefix="/api/compras")


@purchases_bp.get("")
@require_auth
@require_role(ROLE_JEFE, ROLE_ALMACEN)
def list_purchases_route():
    """
    List purchases newest first.

    Query params:
    - fecha: YYYY-MM-DD (optional) - exact day
    - mes, año: int (optional) - month of year; ignored when fecha is given
    """
    try:
        filters = period_filters(request.args)
        purchases = purchase_service.list_purchases(**filters)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(purchases), 200


@purchases_bp.post("")
@require_auth
@require_role(ROLE_JEFE, ROLE_ALMACEN)
def create_purchase_route():
    """
    Record a purchase and add its quantity to stock.

    Body: {producto_id? | nombre_producto, codigo_barras?, cantidad,
           costo_unitario, precio_venta?}
    """
    try:
        purchase_request = parse_purchase_request(request.get_json(silent=True))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        purchase = purchase_service.record_purchase(purchase_request)
    except NotFoundError as e:
        current_app.logger.warning("Purchase rejected: %s", e)
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409

    return jsonify(purchase), 201
