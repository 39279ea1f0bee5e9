from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from ..validation import money_to_json


DEFAULT_PAYMENT_METHOD = "efectivo"


class Sale(db.Model):
    """
    One sold line (`ventas`).

    producto_id is NULL for manual items (not backed by the catalog); their
    display name lives in `notas`. total is fixed at insert time as
    cantidad * precio_unitario and never recomputed.
    """
    __tablename__ = "ventas"
    __table_args__ = (
        db.CheckConstraint("cantidad > 0", name="ck_ventas_cantidad_positive"),
        db.Index("ix_ventas_fecha", "fecha"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    producto_id = db.Column(db.Integer, db.ForeignKey("productos.id"), nullable=True, index=True)

    cantidad = db.Column(db.Integer, nullable=False)
    precio_unitario = db.Column(db.Numeric(12, 2), nullable=False)
    total = db.Column(db.Numeric(14, 2), nullable=False)

    metodo_pago = db.Column(db.String(32), nullable=False, default=DEFAULT_PAYMENT_METHOD)
    fecha = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    notas = db.Column(db.String(255), nullable=True)

    producto = db.relationship("Product", backref=db.backref("ventas", lazy=True))

    @property
    def display_name(self) -> str | None:
        if self.producto is not None:
            return self.producto.nombre
        return self.notas

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "producto_id": self.producto_id,
            "producto_nombre": self.display_name,
            "codigo_barras": self.producto.codigo_barras if self.producto is not None else None,
            "cantidad": self.cantidad,
            "precio_unitario": money_to_json(self.precio_unitario),
            "total": money_to_json(self.total),
            "metodo_pago": self.metodo_pago,
            "fecha": to_utc_z(self.fecha),
            "notas": self.notas,
        }
