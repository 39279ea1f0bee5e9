# Overview: Service-layer operations for reporting; read-only aggregates over ventas/compras/productos.

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import func

from ..extensions import db
from ..models import Product, Purchase, Sale
from ..time_utils import utcnow
from ..validation import money_to_json, quantize_money


TOP_SELLERS_DAYS = 30
TOP_SELLERS_LIMIT = 10
DAILY_SALES_DAYS = 7


def _as_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return quantize_money(Decimal(str(value)))


def summary() -> dict:
    total_ventas = _as_decimal(db.session.query(func.coalesce(func.sum(Sale.total), 0)).scalar())
    compras_row = db.session.query(
        func.coalesce(func.sum(Purchase.total), 0),
        func.count(Purchase.id),
    ).one()
    total_compras = _as_decimal(compras_row[0])

    return {
        "total_ventas": money_to_json(total_ventas),
        "total_compras": money_to_json(total_compras),
        "num_compras": int(compras_row[1] or 0),
        "ganancia_bruta": money_to_json(total_ventas - total_compras),
    }


def stock_levels(threshold: int) -> list[dict]:
    products = db.session.query(Product).order_by(Product.nombre.asc(), Product.id.asc()).all()
    rows = []
    for p in products:
        row = p.to_dict()
        row["bajo_stock"] = p.stock <= threshold
        rows.append(row)
    return rows


def low_stock(threshold: int) -> list[dict]:
    products = (
        db.session.query(Product)
        .filter(Product.stock <= threshold)
        .order_by(Product.stock.asc(), Product.id.asc())
        .all()
    )
    return [
        {
            "id": p.id,
            "nombre": p.nombre,
            "codigo_barras": p.codigo_barras,
            "stock": p.stock,
            "unidades_faltantes": threshold - p.stock,
        }
        for p in products
    ]


def top_sellers(now: datetime | None = None) -> list[dict]:
    since = (now or utcnow()) - timedelta(days=TOP_SELLERS_DAYS)
    rows = (
        db.session.query(
            Product.id,
            Product.nombre,
            Product.codigo_barras,
            func.sum(Sale.cantidad).label("total_vendido"),
            func.sum(Sale.total).label("ingresos_totales"),
            func.count(Sale.id).label("num_ventas"),
        )
        .join(Sale, Sale.producto_id == Product.id)
        .filter(Sale.fecha >= since)
        .group_by(Product.id, Product.nombre, Product.codigo_barras)
        .order_by(func.sum(Sale.cantidad).desc(), Product.id.asc())
        .limit(TOP_SELLERS_LIMIT)
        .all()
    )
    return [
        {
            "id": r.id,
            "nombre": r.nombre,
            "codigo_barras": r.codigo_barras,
            "total_vendido": int(r.total_vendido or 0),
            "ingresos_totales": money_to_json(_as_decimal(r.ingresos_totales)),
            "num_ventas": int(r.num_ventas or 0),
        }
        for r in rows
    ]


def sales_by_day(now: datetime | None = None) -> list[dict]:
    current = now or utcnow()
    since = datetime(current.year, current.month, current.day) - timedelta(days=DAILY_SALES_DAYS)
    day = func.date(Sale.fecha)
    rows = (
        db.session.query(
            day.label("fecha"),
            func.count(Sale.id).label("num_ventas"),
            func.sum(Sale.total).label("total_dia"),
            func.sum(Sale.cantidad).label("unidades_vendidas"),
        )
        .filter(Sale.fecha >= since)
        .group_by(day)
        .order_by(day.desc())
        .all()
    )
    return [
        {
            # SQLite returns 'YYYY-MM-DD', PostgreSQL a date object
            "fecha": str(r.fecha),
            "num_ventas": int(r.num_ventas or 0),
            "total_dia": money_to_json(_as_decimal(r.total_dia)),
            "unidades_vendidas": int(r.unidades_vendidas or 0),
        }
        for r in rows
    ]


def build_report(*, low_stock_threshold: int, now: datetime | None = None) -> dict:
    return {
        "resumen": summary(),
        "stock": stock_levels(low_stock_threshold),
        "productos_bajo_stock": low_stock(low_stock_threshold),
        "productos_mas_vendidos": top_sellers(now),
        "ventas_por_dia": sales_by_day(now),
    }
