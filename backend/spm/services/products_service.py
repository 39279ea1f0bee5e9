# backend/spm/services/products_service.py
"""
Products Service

Catalog reads and the product-management writes (create, delete).
Stock is never written here; see sales_service and purchase_service.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Product, Purchase, Sale
from ..validation import (
    ConflictError,
    NotFoundError,
    ValidationError,
    clean_text,
    parse_money,
    parse_non_negative_int,
)


def list_products() -> list[dict]:
    """All products ordered by id."""
    products = db.session.query(Product).order_by(Product.id.asc()).all()
    return [p.to_dict() for p in products]


def get_product(product_id: int) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Producto no encontrado")
    return product


def find_by_barcode(codigo_barras: str) -> Product | None:
    return db.session.query(Product).filter(Product.codigo_barras == codigo_barras).first()


def validate_product_payload(payload: Any) -> dict:
    """
    Validate a POST /api/productos body into a clean patch dict.

    Required: nombre (non-blank string), precio (>= 0).
    Optional: stock (>= 0, default 0), codigo_barras (blank -> None).
    """
    if not isinstance(payload, dict):
        raise ValidationError("Cuerpo JSON inválido")

    nombre = payload.get("nombre")
    precio = payload.get("precio")
    if not nombre or precio is None or precio == "":
        raise ValidationError("Datos incompletos. Se requieren: nombre y precio")

    if not isinstance(nombre, str) or not nombre.strip():
        raise ValidationError("El nombre debe ser un texto válido")
    if len(nombre.strip()) > 255:
        raise ValidationError("nombre excede la longitud máxima de 255")

    try:
        precio_num = parse_money(precio, "precio")
    except ValidationError:
        raise ValidationError("El precio debe ser un número positivo")

    try:
        stock = parse_non_negative_int(payload.get("stock"), "stock", default=0)
    except ValidationError:
        raise ValidationError("El stock debe ser un número positivo")

    raw_code = payload.get("codigo_barras")
    codigo_barras = clean_text(raw_code) if isinstance(raw_code, str) else None
    if codigo_barras is not None and len(codigo_barras) > 64:
        raise ValidationError("codigo_barras excede la longitud máxima de 64")

    return {
        "nombre": nombre.strip(),
        "precio": precio_num,
        "stock": stock,
        "codigo_barras": codigo_barras,
    }


def create_product(*, patch: dict) -> dict:
    """
    Create product using a validated patch dict.

    Raises:
        ConflictError: If codigo_barras already exists
    """
    codigo_barras = patch.get("codigo_barras")
    if codigo_barras and find_by_barcode(codigo_barras) is not None:
        raise ConflictError("El código de barras ya existe")

    product = Product(
        codigo_barras=codigo_barras,
        nombre=patch["nombre"],
        precio=patch["precio"],
        stock=patch.get("stock", 0),
    )
    db.session.add(product)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race on the unique barcode
        db.session.rollback()
        raise ConflictError("El código de barras ya existe")

    return product.to_dict()


def delete_product(product_id: int) -> None:
    """
    Hard-delete a product.

    Raises:
        NotFoundError: If the product does not exist
        ConflictError: If sales or purchases reference it
    """
    product = get_product(product_id)

    referenced = (
        db.session.query(Sale.id).filter(Sale.producto_id == product_id).first() is not None
        or db.session.query(Purchase.id).filter(Purchase.producto_id == product_id).first() is not None
    )
    if referenced:
        raise ConflictError("No se puede eliminar el producto porque tiene ventas o compras asociadas")

    db.session.delete(product)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("No se puede eliminar el producto porque tiene ventas o compras asociadas")
