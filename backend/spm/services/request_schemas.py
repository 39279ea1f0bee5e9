"""
Typed request variants for sale and purchase recording.

JSON bodies are parsed here, once, into frozen dataclasses. Services never
see raw dicts: a sale line is either a CatalogSaleItem or a ManualSaleItem,
a purchase target is either PurchaseById or PurchaseByName.

All numeric validation happens here so that a malformed request is
rejected before any database access.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from ..models.sales import DEFAULT_PAYMENT_METHOD
from ..validation import (
    ValidationError,
    clean_text,
    parse_money,
    parse_optional_money,
    parse_positive_int,
)


# Cash-register convention for lines typed in by hand: producto_id="MANUAL-<n>"
MANUAL_ID_PREFIX = "MANUAL"

DEFAULT_ITEM_NAME = "Producto"


@dataclass(frozen=True)
class CatalogSaleItem:
    producto_id: int
    nombre: str
    cantidad: int
    precio_unitario: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.precio_unitario * self.cantidad


@dataclass(frozen=True)
class ManualSaleItem:
    nombre: str
    cantidad: int
    precio_unitario: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.precio_unitario * self.cantidad


SaleItem = Union[CatalogSaleItem, ManualSaleItem]


@dataclass(frozen=True)
class SaleRequest:
    items: tuple[SaleItem, ...]
    metodo_pago: str = DEFAULT_PAYMENT_METHOD
    monto_pagado: Decimal | None = None


@dataclass(frozen=True)
class PurchaseById:
    producto_id: int


@dataclass(frozen=True)
class PurchaseByName:
    nombre_producto: str
    codigo_barras: str | None = None
    precio_venta: Decimal | None = None


PurchaseTarget = Union[PurchaseById, PurchaseByName]


@dataclass(frozen=True)
class PurchaseRequest:
    target: PurchaseTarget
    cantidad: int
    costo_unitario: Decimal


def _is_manual_reference(raw_id: Any) -> bool:
    if raw_id is None:
        return True
    if isinstance(raw_id, str):
        text = raw_id.strip()
        return not text or text.upper().startswith(MANUAL_ID_PREFIX)
    return False


def _parse_product_id(raw_id: Any) -> int:
    try:
        return parse_positive_int(raw_id, "producto_id")
    except ValidationError:
        raise ValidationError("producto_id inválido")


def parse_sale_item(raw: Any, index: int) -> SaleItem:
    if not isinstance(raw, dict):
        raise ValidationError(f"Item {index + 1} inválido", details={"item": index})

    raw_id = raw.get("producto_id")
    nombre = clean_text(raw.get("nombre"))
    label = nombre or (str(raw_id) if raw_id is not None else DEFAULT_ITEM_NAME)

    try:
        cantidad = parse_positive_int(raw.get("cantidad"), "cantidad")
    except ValidationError:
        raise ValidationError(
            f"Cantidad inválida para el producto {label}",
            details={"item": index, "nombre": label},
        )

    raw_price = raw.get("precio_unitario", raw.get("precio"))
    try:
        precio_unitario = parse_money(raw_price, "precio_unitario")
    except ValidationError:
        raise ValidationError(
            f"Precio inválido para el producto {label}",
            details={"item": index, "nombre": label},
        )

    if _is_manual_reference(raw_id):
        return ManualSaleItem(
            nombre=nombre or DEFAULT_ITEM_NAME,
            cantidad=cantidad,
            precio_unitario=precio_unitario,
        )

    try:
        producto_id = _parse_product_id(raw_id)
    except ValidationError as e:
        raise ValidationError(f"{e} para el producto {label}", details={"item": index, "nombre": label})

    return CatalogSaleItem(
        producto_id=producto_id,
        nombre=nombre or DEFAULT_ITEM_NAME,
        cantidad=cantidad,
        precio_unitario=precio_unitario,
    )


def parse_sale_request(payload: Any) -> SaleRequest:
    """
    Parse a POST /api/ventas body.

    Every item is validated before anything is returned, so an invalid
    item anywhere in the list rejects the whole request.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Cuerpo JSON inválido")

    raw_items = payload.get("items")
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError("Se requiere al menos un producto en la venta")

    items = tuple(parse_sale_item(raw, i) for i, raw in enumerate(raw_items))

    metodo_pago = clean_text(payload.get("metodo_pago")) or DEFAULT_PAYMENT_METHOD
    if len(metodo_pago) > 32:
        raise ValidationError("metodo_pago excede la longitud máxima de 32")

    monto_pagado = parse_optional_money(payload.get("monto_pagado"), "monto_pagado")

    return SaleRequest(items=items, metodo_pago=metodo_pago, monto_pagado=monto_pagado)


def parse_purchase_request(payload: Any) -> PurchaseRequest:
    """
    Parse a POST /api/compras body.

    Quantity and cost are checked first; the product identification
    strategy is producto_id if present, else nombre_producto.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Cuerpo JSON inválido")

    if payload.get("cantidad") is None or payload.get("costo_unitario") is None:
        raise ValidationError("Datos incompletos. Se requieren: cantidad y costo_unitario")

    try:
        cantidad = parse_positive_int(payload.get("cantidad"), "cantidad")
    except ValidationError:
        raise ValidationError("La cantidad debe ser un número positivo mayor a 0")

    try:
        costo_unitario = parse_money(payload.get("costo_unitario"), "costo_unitario")
    except ValidationError:
        raise ValidationError("El costo unitario debe ser un número positivo")

    raw_id = payload.get("producto_id")
    if raw_id is not None and raw_id != "":
        target: PurchaseTarget = PurchaseById(producto_id=_parse_product_id(raw_id))
    else:
        nombre_producto = clean_text(payload.get("nombre_producto"))
        if not nombre_producto:
            raise ValidationError("Se requiere producto_id o nombre_producto")
        if len(nombre_producto) > 255:
            raise ValidationError("nombre_producto excede la longitud máxima de 255")

        codigo_barras = clean_text(payload.get("codigo_barras"))
        if codigo_barras is not None and len(codigo_barras) > 64:
            raise ValidationError("codigo_barras excede la longitud máxima de 64")

        target = PurchaseByName(
            nombre_producto=nombre_producto,
            codigo_barras=codigo_barras,
            precio_venta=parse_optional_money(payload.get("precio_venta"), "precio_venta"),
        )

    return PurchaseRequest(target=target, cantidad=cantidad, costo_unitario=costo_unitario)
