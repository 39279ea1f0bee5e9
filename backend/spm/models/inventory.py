from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from ..validation import money_to_json


class Product(db.Model):
    """
    Catalog entry (`productos`).

    STOCK: `stock` is the authoritative on-hand count. It is only mutated by
    sales_service (decrement) and purchase_service (increment), always
    inside a per-item transaction guarded by version_id.

    BARCODE: optional, unique when present. Products created implicitly by a
    purchase without a barcode get an AUTO-<millis>-<hex> placeholder.
    """
    __tablename__ = "productos"
    __table_args__ = (
        db.CheckConstraint("stock >= 0", name="ck_productos_stock_non_negative"),
        db.CheckConstraint("precio >= 0", name="ck_productos_precio_non_negative"),
        db.Index("ix_productos_nombre", "nombre"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    codigo_barras = db.Column(db.String(64), nullable=True, unique=True)
    nombre = db.Column(db.String(255), nullable=False)

    precio = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    stock = db.Column(db.Integer, nullable=False, default=0)

    # Optimistic locking: concurrent stock writes raise StaleDataError
    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} nombre={self.nombre!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "codigo_barras": self.codigo_barras,
            "nombre": self.nombre,
            "precio": money_to_json(self.precio),
            "stock": self.stock,
        }


class Purchase(db.Model):
    """Stock intake record (`compras`). Immutable once written."""
    __tablename__ = "compras"
    __table_args__ = (
        db.CheckConstraint("cantidad > 0", name="ck_compras_cantidad_positive"),
        db.Index("ix_compras_fecha", "fecha"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    producto_id = db.Column(db.Integer, db.ForeignKey("productos.id"), nullable=False, index=True)

    cantidad = db.Column(db.Integer, nullable=False)
    costo_unitario = db.Column(db.Numeric(12, 2), nullable=False)
    total = db.Column(db.Numeric(14, 2), nullable=False)

    fecha = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    producto = db.relationship("Product", backref=db.backref("compras", lazy=True))

    def to_dict(self) -> dict:
        nombre = self.producto.nombre if self.producto is not None else None
        return {
            "id": self.id,
            "producto_id": self.producto_id,
            "producto": nombre,
            "producto_nombre": nombre,
            "codigo_barras": self.producto.codigo_barras if self.producto is not None else None,
            "cantidad": self.cantidad,
            "costo_unitario": money_to_json(self.costo_unitario),
            "total": money_to_json(self.total),
            "fecha": to_utc_z(self.fecha),
        }
