"""
Sales Service - stock depletion at the register.

Each sale item is its own unit of work: lock product row, check stock,
decrement, insert the `ventas` row, commit. Items are processed in list
order and a failure on item k stops processing, leaving items 1..k-1
committed. Validation of every item happens earlier, in
request_schemas.parse_sale_request, so malformed requests commit nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from flask import current_app
from sqlalchemy.orm import joinedload

from ..extensions import db
from ..models import Product, Sale
from ..validation import NotFoundError, ValidationError, quantize_money
from .concurrency import lock_for_update, run_with_retry
from .listing import apply_period_filter
from .request_schemas import CatalogSaleItem, ManualSaleItem, SaleItem, SaleRequest


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds the product's current stock."""

    def __init__(self, product: Product, requested: int):
        super().__init__(
            "Stock insuficiente",
            details={
                "producto_id": product.id,
                "producto": product.nombre,
                "disponible": product.stock,
                "solicitado": requested,
            },
        )


@dataclass
class SaleResult:
    ventas: list[dict] = field(default_factory=list)
    total: Decimal = Decimal("0.00")
    monto_pagado: Decimal | None = None

    @property
    def vuelto(self) -> Decimal:
        if self.monto_pagado is None:
            return Decimal("0.00")
        return max(self.monto_pagado - self.total, Decimal("0.00"))


def _sell_catalog_item(item: CatalogSaleItem, metodo_pago: str) -> Sale:
    def _op():
        product = lock_for_update(
            db.session.query(Product).filter(Product.id == item.producto_id)
        ).first()
        if product is None:
            raise NotFoundError("Producto no encontrado")

        if item.cantidad > product.stock:
            raise InsufficientStockError(product, item.cantidad)

        # version_id_col turns a concurrent write into StaleDataError -> retry
        product.stock = product.stock - item.cantidad

        sale = Sale(
            producto_id=product.id,
            cantidad=item.cantidad,
            precio_unitario=item.precio_unitario,
            total=quantize_money(item.subtotal),
            metodo_pago=metodo_pago,
        )
        db.session.add(sale)
        db.session.commit()
        return sale

    return run_with_retry(_op)


def _sell_manual_item(item: ManualSaleItem, metodo_pago: str) -> Sale:
    def _op():
        sale = Sale(
            producto_id=None,
            cantidad=item.cantidad,
            precio_unitario=item.precio_unitario,
            total=quantize_money(item.subtotal),
            metodo_pago=metodo_pago,
            notas=item.nombre[:255],
        )
        db.session.add(sale)
        db.session.commit()
        return sale

    return run_with_retry(_op)


def _sell_item(item: SaleItem, metodo_pago: str) -> Sale:
    if isinstance(item, CatalogSaleItem):
        return _sell_catalog_item(item, metodo_pago)
    return _sell_manual_item(item, metodo_pago)


def record_sale(request: SaleRequest) -> SaleResult:
    """
    Record every item of a validated sale request.

    Raises:
        NotFoundError: catalog item references an unknown product
        InsufficientStockError: catalog item asks for more than is in stock

    Items before the failing one stay committed.
    """
    result = SaleResult(monto_pagado=request.monto_pagado)

    for index, item in enumerate(request.items):
        try:
            sale = _sell_item(item, request.metodo_pago)
        except (NotFoundError, ValidationError):
            if result.ventas:
                current_app.logger.warning(
                    "Sale aborted at item %d after %d committed line(s)", index + 1, len(result.ventas)
                )
            raise

        result.ventas.append(sale.to_dict())
        result.total = result.total + quantize_money(item.subtotal)

    current_app.logger.info(
        "Sale recorded: %d line(s), total=%s, metodo_pago=%s",
        len(result.ventas), result.total, request.metodo_pago,
    )
    return result


def list_sales(*, fecha=None, mes: int | None = None, anio: int | None = None) -> list[dict]:
    """Sales newest first, optionally restricted to a day or a month."""
    query = db.session.query(Sale).options(joinedload(Sale.producto))
    query = apply_period_filter(query, Sale.fecha, fecha=fecha, mes=mes, anio=anio)
    sales = query.order_by(Sale.fecha.desc(), Sale.id.desc()).all()
    return [s.to_dict() for s in sales]
