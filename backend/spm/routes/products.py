# Overview: Flask API routes for the product catalog; parses input and returns JSON responses.

# backend/spm/routes/products.py
"""
Product catalog routes.

SECURITY: All routes require authentication.
- Listing is open to every role (cashiers and warehouse staff pick products)
- Create/delete are restricted to jefe
"""
from flask import Blueprint, current_app, request

from ..decorators import require_auth, require_role
from ..models.auth import ROLES, ROLE_JEFE
from ..services import products_service
from ..validation import ConflictError, NotFoundError, ValidationError

products_bp = Blueprint("productos", __name__, url_prefix="/api/productos")


@products_bp.get("")
@require_auth
@require_role(*ROLES)
def list_products():
    """List all products ordered by id."""
    return products_service.list_products(), 200


@products_bp.post("")
@require_auth
@require_role(ROLE_JEFE)
def create_product_route():
    """
    Create a new product.

    Body: {codigo_barras?, nombre, precio, stock?}
    """
    payload = request.get_json(silent=True)

    try:
        patch = products_service.validate_product_payload(payload)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        created = products_service.create_product(patch=patch)
    except ConflictError as e:
        return {"error": str(e)}, 409

    current_app.logger.info("Product created: id=%s nombre=%r", created["id"], created["nombre"])
    return created, 201


def _delete(product_id: int):
    try:
        products_service.delete_product(product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ConflictError as e:
        return {"error": str(e)}, 409

    current_app.logger.info("Product deleted: id=%s", product_id)
    return {"success": True, "message": "Producto eliminado correctamente"}, 200


@products_bp.delete("")
@require_auth
@require_role(ROLE_JEFE)
def delete_product_by_query_route():
    """Delete a product given as ?id=N (cash-register client convention)."""
    raw_id = request.args.get("id")
    if not raw_id:
        return {"error": "Se requiere el ID del producto"}, 400
    try:
        product_id = int(raw_id)
    except ValueError:
        return {"error": "ID inválido"}, 400
    return _delete(product_id)


@products_bp.delete("/<int:product_id>")
@require_auth
@require_role(ROLE_JEFE)
def delete_product_route(product_id: int):
    """Delete a product by path id."""
    return _delete(product_id)
