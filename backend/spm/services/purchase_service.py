# Overview: Service-layer operations for purchases (stock intake); encapsulates business logic.

"""
Purchase Service

WHY: Every `compras` row must be backed by a stock increment of exactly
its quantity on the referenced product.

PRODUCT RESOLUTION (PurchaseByName):
1. codigo_barras given  -> exact barcode match
2. otherwise            -> case-insensitive exact name match
3. found                -> stock += cantidad (price untouched)
4. not found            -> new product, stock = cantidad,
                           precio = precio_venta or costo_unitario * 1.5,
                           codigo_barras = given value or AUTO-<millis>-<hex>

Resolution, the stock update and the insert are one transaction.
"""

from __future__ import annotations

import secrets
import time
from decimal import Decimal

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from ..extensions import db
from ..models import Product, Purchase
from ..validation import ConflictError, NotFoundError, quantize_money
from .concurrency import lock_for_update, run_with_retry
from .listing import apply_period_filter
from .request_schemas import PurchaseById, PurchaseByName, PurchaseRequest


# 50% markup when a purchase creates a product without an explicit sale price
DEFAULT_MARKUP = Decimal("1.5")

AUTO_BARCODE_PREFIX = "AUTO-"


def default_sale_price(costo_unitario: Decimal, precio_venta: Decimal | None = None) -> Decimal:
    if precio_venta is not None and precio_venta > 0:
        return precio_venta
    return quantize_money(costo_unitario * DEFAULT_MARKUP)


def generate_placeholder_barcode() -> str:
    # Random suffix keeps two creations in the same millisecond distinct
    return f"{AUTO_BARCODE_PREFIX}{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def _locked_product(query) -> Product | None:
    return lock_for_update(query).first()


def _resolve_by_id(target: PurchaseById, cantidad: int) -> Product:
    product = _locked_product(db.session.query(Product).filter(Product.id == target.producto_id))
    if product is None:
        raise NotFoundError("Producto no encontrado")
    product.stock = product.stock + cantidad
    return product


def _resolve_by_name(target: PurchaseByName, cantidad: int, costo_unitario: Decimal) -> Product:
    if target.codigo_barras:
        product = _locked_product(
            db.session.query(Product).filter(Product.codigo_barras == target.codigo_barras)
        )
    else:
        product = _locked_product(
            db.session.query(Product)
            .filter(db.func.lower(Product.nombre) == target.nombre_producto.lower())
            .order_by(Product.id.asc())
        )

    if product is not None:
        product.stock = product.stock + cantidad
        return product

    product = Product(
        codigo_barras=target.codigo_barras or generate_placeholder_barcode(),
        nombre=target.nombre_producto,
        precio=default_sale_price(costo_unitario, target.precio_venta),
        stock=cantidad,
    )
    db.session.add(product)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("El código de barras ya existe")
    current_app.logger.info("Product created from purchase: id=%s nombre=%r", product.id, product.nombre)
    return product


def record_purchase(request: PurchaseRequest) -> dict:
    """
    Resolve the product, add stock and insert the `compras` row.

    Raises:
        NotFoundError: unknown producto_id, or FK violation on insert
    """
    def _op():
        if isinstance(request.target, PurchaseById):
            product = _resolve_by_id(request.target, request.cantidad)
        else:
            product = _resolve_by_name(request.target, request.cantidad, request.costo_unitario)

        purchase = Purchase(
            producto_id=product.id,
            cantidad=request.cantidad,
            costo_unitario=request.costo_unitario,
            total=quantize_money(request.costo_unitario * request.cantidad),
        )
        db.session.add(purchase)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            if "foreign key" in str(exc.orig).lower():
                raise NotFoundError("Producto no encontrado")
            raise
        return purchase

    purchase = run_with_retry(_op)
    current_app.logger.info(
        "Purchase recorded: id=%s producto_id=%s cantidad=%s",
        purchase.id, purchase.producto_id, purchase.cantidad,
    )
    return purchase.to_dict()


def list_purchases(*, fecha=None, mes: int | None = None, anio: int | None = None) -> list[dict]:
    """Purchases newest first, optionally restricted to a day or a month."""
    query = db.session.query(Purchase).options(joinedload(Purchase.producto))
    query = apply_period_filter(query, Purchase.fecha, fecha=fecha, mes=mes, anio=anio)
    purchases = query.order_by(Purchase.fecha.desc(), Purchase.id.desc()).all()
    return [p.to_dict() for p in purchases]
