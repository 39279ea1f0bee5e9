"""
Sales (ventas) tests.

Verifies:
- Catalog sale decrements stock and records one row per item
- Insufficient stock rejects without mutation
- Items are committed one at a time (failure on item k keeps 1..k-1)
- Manual items never touch stock
- Validation rejects the whole request before any write
- Listing filters by day and by month
"""

from datetime import datetime
from decimal import Decimal

from spm.models import Product, Sale
from tests.conftest import reload


class TestCatalogSale:

    def test_sale_decrements_stock(self, client, cajero_headers, agua, db_session):
        resp = client.post("/api/ventas", json={
            "items": [{"producto_id": agua.id, "nombre": "Agua", "cantidad": 3, "precio_unitario": 1.50}],
        }, headers=cajero_headers)

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["success"] is True
        assert body["total"] == 4.50
        assert len(body["ventas"]) == 1
        assert body["ventas"][0]["producto_nombre"] == "Agua"
        assert body["ventas"][0]["total"] == 4.50
        assert body["ventas"][0]["metodo_pago"] == "efectivo"

        assert reload(Product, agua.id).stock == 7
        assert db_session.query(Sale).count() == 1

    def test_insufficient_stock_rejected_without_mutation(self, client, cajero_headers, agua, db_session):
        resp = client.post("/api/ventas", json={
            "items": [{"producto_id": agua.id, "cantidad": 11, "precio_unitario": 1.50}],
        }, headers=cajero_headers)

        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "Stock insuficiente"
        assert body["details"]["disponible"] == 10
        assert body["details"]["solicitado"] == 11

        assert reload(Product, agua.id).stock == 10
        assert db_session.query(Sale).count() == 0

    def test_selling_exact_stock_leaves_zero(self, client, cajero_headers, agua):
        resp = client.post("/api/ventas", json={
            "items": [{"producto_id": agua.id, "cantidad": 10, "precio_unitario": 1.50}],
        }, headers=cajero_headers)

        assert resp.status_code == 201
        assert reload(Product, agua.id).stock == 0

    def test_unknown_product_returns_404(self, client, cajero_headers, db_session):
        resp = client.post("/api/ventas", json={
            "items": [{"producto_id": 9999, "cantidad": 1, "precio_unitario": 1.00}],
        }, headers=cajero_headers)

        assert resp.status_code == 404
        assert resp.get_json()["error"] == "Producto no encontrado"
        assert db_session.query(Sale).count() == 0

    def test_partial_commit_keeps_earlier_items(self, client, cajero_headers, agua, db_session):
        resp = client.post("/api/ventas", json={
            "items": [
                {"producto_id": agua.id, "cantidad": 2, "precio_unitario": 1.50},
                {"producto_id": 9999, "cantidad": 1, "precio_unitario": 1.00},
            ],
        }, headers=cajero_headers)

        assert resp.status_code == 404
        assert reload(Product, agua.id).stock == 8
        sales = db_session.query(Sale).all()
        assert len(sales) == 1
        assert sales[0].producto_id == agua.id

    def test_insufficient_stock_on_second_item_keeps_first(self, client, cajero_headers, agua, galletas, db_session):
        resp = client.post("/api/ventas", json={
            "items": [
                {"producto_id": agua.id, "cantidad": 1, "precio_unitario": 1.50},
                {"producto_id": galletas.id, "cantidad": 4, "precio_unitario": 2.00},
            ],
        }, headers=cajero_headers)

        assert resp.status_code == 400
        assert reload(Product, agua.id).stock == 9
        assert reload(Product, galletas.id).stock == 3
        assert db_session.query(Sale).count() == 1

    def test_multiple_items_total_and_change(self, client, cajero_headers, agua, galletas):
        resp = client.post("/api/ventas", json={
            "items": [
                {"producto_id": agua.id, "cantidad": 2, "precio_unitario": 1.50},
                {"producto_id": galletas.id, "cantidad": 1, "precio_unitario": "2.00"},
            ],
            "metodo_pago": "tarjeta",
            "monto_pagado": 10,
        }, headers=cajero_headers)

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["total"] == 5.00
        assert body["monto_pagado"] == 10.0
        assert body["vuelto"] == 5.00
        assert {v["metodo_pago"] for v in body["ventas"]} == {"tarjeta"}

    def test_change_is_never_negative(self, client, cajero_headers, agua):
        resp = client.post("/api/ventas", json={
            "items": [{"producto_id": agua.id, "cantidad": 2, "precio_unitario": 1.50}],
            "monto_pagado": 1,
        }, headers=cajero_headers)

        assert resp.status_code == 201
        assert resp.get_json()["vuelto"] == 0.0

    def test_sold_price_is_kept_even_if_catalog_differs(self, client, cajero_headers, agua, db_session):
        resp = client.post("/api/ventas", json={
            "items": [{"producto_id": agua.id, "cantidad": 1, "precio_unitario": 1.20}],
        }, headers=cajero_headers)

        assert resp.status_code == 201
        sale = db_session.query(Sale).one()
        assert sale.precio_unitario == Decimal("1.20")
        assert reload(Product, agua.id).precio == Decimal("1.50")


class TestManualSale:

    def test_manual_item_without_product_id(self, client, cajero_headers, agua, db_session):
        resp = client.post("/api/ventas", json={
            "items": [{"nombre": "Bolsa", "cantidad": 2, "precio_unitario": 0.10}],
        }, headers=cajero_headers)

        assert resp.status_code == 201
        venta = resp.get_json()["ventas"][0]
        assert venta["producto_id"] is None
        assert venta["producto_nombre"] == "Bolsa"
        assert venta["total"] == 0.20
        assert reload(Product, agua.id).stock == 10

    def test_manual_sentinel_id(self, client, cajero_headers, db_session):
        resp = client.post("/api/ventas", json={
            "items": [{"producto_id": "MANUAL-1712345", "nombre": "Servicio", "cantidad": 1, "precio": 5}],
        }, headers=cajero_headers)

        assert resp.status_code == 201
        sale = db_session.query(Sale).one()
        assert sale.producto_id is None
        assert sale.notas == "Servicio"

    def test_mixed_manual_and_catalog(self, client, cajero_headers, agua):
        resp = client.post("/api/ventas", json={
            "items": [
                {"producto_id": "MANUAL-1", "nombre": "Bolsa", "cantidad": 1, "precio_unitario": 0.50},
                {"producto_id": agua.id, "cantidad": 1, "precio_unitario": 1.50},
            ],
        }, headers=cajero_headers)

        assert resp.status_code == 201
        assert resp.get_json()["total"] == 2.00
        assert reload(Product, agua.id).stock == 9


class TestSaleValidation:

    def test_empty_items_rejected(self, client, cajero_headers):
        resp = client.post("/api/ventas", json={"items": []}, headers=cajero_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Se requiere al menos un producto en la venta"

    def test_missing_body_rejected(self, client, cajero_headers):
        resp = client.post("/api/ventas", headers=cajero_headers)
        assert resp.status_code == 400

    def test_invalid_item_rejects_whole_request(self, client, cajero_headers, agua, db_session):
        resp = client.post("/api/ventas", json={
            "items": [
                {"producto_id": agua.id, "cantidad": 1, "precio_unitario": 1.50},
                {"producto_id": agua.id, "nombre": "Agua", "cantidad": 0, "precio_unitario": 1.50},
            ],
        }, headers=cajero_headers)

        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "Cantidad inválida para el producto Agua"
        assert body["details"]["item"] == 1
        assert reload(Product, agua.id).stock == 10
        assert db_session.query(Sale).count() == 0

    def test_negative_price_rejected(self, client, cajero_headers, agua):
        resp = client.post("/api/ventas", json={
            "items": [{"producto_id": agua.id, "nombre": "Agua", "cantidad": 1, "precio_unitario": -1}],
        }, headers=cajero_headers)

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Precio inválido para el producto Agua"

    def test_fractional_quantity_rejected(self, client, cajero_headers, agua):
        resp = client.post("/api/ventas", json={
            "items": [{"producto_id": agua.id, "cantidad": 1.5, "precio_unitario": 1.50}],
        }, headers=cajero_headers)

        assert resp.status_code == 400


class TestSaleListing:

    def _sale(self, db_session, product, fecha):
        sale = Sale(
            producto_id=product.id,
            cantidad=1,
            precio_unitario=product.precio,
            total=product.precio,
            fecha=fecha,
        )
        db_session.add(sale)
        db_session.commit()
        return sale

    def test_lists_newest_first(self, client, jefe_headers, agua, db_session):
        older = self._sale(db_session, agua, datetime(2024, 3, 1, 10, 0))
        newer = self._sale(db_session, agua, datetime(2024, 3, 2, 10, 0))

        resp = client.get("/api/ventas", headers=jefe_headers)

        assert resp.status_code == 200
        ids = [row["id"] for row in resp.get_json()]
        assert ids == [newer.id, older.id]
        assert resp.get_json()[0]["producto_nombre"] == "Agua"

    def test_filter_by_day(self, client, jefe_headers, agua, db_session):
        self._sale(db_session, agua, datetime(2024, 3, 1, 23, 59))
        target = self._sale(db_session, agua, datetime(2024, 3, 2, 0, 0))
        self._sale(db_session, agua, datetime(2024, 3, 3, 0, 0))

        resp = client.get("/api/ventas?fecha=2024-03-02", headers=jefe_headers)

        assert resp.status_code == 200
        assert [row["id"] for row in resp.get_json()] == [target.id]

    def test_filter_by_month(self, client, jefe_headers, agua, db_session):
        self._sale(db_session, agua, datetime(2024, 2, 29, 12, 0))
        march = self._sale(db_session, agua, datetime(2024, 3, 15, 12, 0))
        self._sale(db_session, agua, datetime(2024, 4, 1, 0, 0))

        resp = client.get("/api/ventas", query_string={"mes": 3, "año": 2024}, headers=jefe_headers)

        assert resp.status_code == 200
        assert [row["id"] for row in resp.get_json()] == [march.id]

    def test_ascii_year_alias(self, client, jefe_headers, agua, db_session):
        march = self._sale(db_session, agua, datetime(2024, 3, 15, 12, 0))

        resp = client.get("/api/ventas?mes=3&anio=2024", headers=jefe_headers)

        assert [row["id"] for row in resp.get_json()] == [march.id]

    def test_bad_date_rejected(self, client, jefe_headers):
        resp = client.get("/api/ventas?fecha=02/03/2024", headers=jefe_headers)
        assert resp.status_code == 400

    def test_last_representable_month_rejected_cleanly(self, client, jefe_headers):
        resp = client.get("/api/ventas", query_string={"mes": 12, "año": 9999}, headers=jefe_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "año inválido"

    def test_november_of_last_year_accepted(self, client, jefe_headers):
        resp = client.get("/api/ventas?mes=11&anio=9999", headers=jefe_headers)
        assert resp.status_code == 200
        assert resp.get_json() == []

    def test_month_out_of_range_rejected(self, client, jefe_headers):
        resp = client.get("/api/ventas?mes=13&anio=2024", headers=jefe_headers)
        assert resp.status_code == 400
