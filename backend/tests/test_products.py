"""
Product catalog tests.

Verifies:
- Listing is ordered by id and carries the public fields only
- Creation validation (400) and duplicate barcode (409)
- Deletion: 404 missing, 409 when referenced, 200 otherwise
"""

from decimal import Decimal

import pytest

from spm.models import Product, Sale


class TestListProducts:

    def test_empty_catalog(self, client, cajero_headers):
        resp = client.get("/api/productos", headers=cajero_headers)
        assert resp.status_code == 200
        assert resp.get_json() == []

    def test_ordered_by_id(self, client, cajero_headers, galletas, agua):
        resp = client.get("/api/productos", headers=cajero_headers)

        assert resp.status_code == 200
        rows = resp.get_json()
        assert [r["id"] for r in rows] == sorted(r["id"] for r in rows)
        assert set(rows[0]) == {"id", "codigo_barras", "nombre", "precio", "stock"}

    def test_money_as_number(self, client, cajero_headers, agua):
        [row] = client.get("/api/productos", headers=cajero_headers).get_json()
        assert row["precio"] == 1.5
        assert row["stock"] == 10


class TestCreateProduct:

    def test_create_and_list(self, client, jefe_headers):
        resp = client.post("/api/productos", json={
            "codigo_barras": "123", "nombre": "Chocolate", "precio": 2.75, "stock": 4,
        }, headers=jefe_headers)

        assert resp.status_code == 201
        created = resp.get_json()
        assert created["nombre"] == "Chocolate"
        assert created["precio"] == 2.75

        rows = client.get("/api/productos", headers=jefe_headers).get_json()
        assert rows == [created]

    def test_stock_defaults_to_zero(self, client, jefe_headers):
        resp = client.post("/api/productos", json={"nombre": "Chicle", "precio": "0.50"}, headers=jefe_headers)

        assert resp.status_code == 201
        assert resp.get_json()["stock"] == 0
        assert resp.get_json()["codigo_barras"] is None

    def test_duplicate_barcode_conflict(self, client, jefe_headers, agua, db_session):
        resp = client.post("/api/productos", json={
            "codigo_barras": agua.codigo_barras, "nombre": "Otra agua", "precio": 1,
        }, headers=jefe_headers)

        assert resp.status_code == 409
        assert resp.get_json()["error"] == "El código de barras ya existe"
        assert db_session.query(Product).count() == 1

    @pytest.mark.parametrize(
        "payload,message",
        [
            ({"precio": 1}, "Datos incompletos. Se requieren: nombre y precio"),
            ({"nombre": "X"}, "Datos incompletos. Se requieren: nombre y precio"),
            ({"nombre": 42, "precio": 1}, "El nombre debe ser un texto válido"),
            ({"nombre": "X", "precio": -1}, "El precio debe ser un número positivo"),
            ({"nombre": "X", "precio": "gratis"}, "El precio debe ser un número positivo"),
            ({"nombre": "X", "precio": 1, "stock": -3}, "El stock debe ser un número positivo"),
        ],
    )
    def test_rejected(self, client, jefe_headers, db_session, payload, message):
        resp = client.post("/api/productos", json=payload, headers=jefe_headers)

        assert resp.status_code == 400
        assert resp.get_json()["error"] == message
        assert db_session.query(Product).count() == 0


class TestDeleteProduct:

    def test_delete_by_query_param(self, client, jefe_headers, agua, db_session):
        product_id = agua.id
        resp = client.delete(f"/api/productos?id={product_id}", headers=jefe_headers)

        assert resp.status_code == 200
        assert resp.get_json() == {"success": True, "message": "Producto eliminado correctamente"}
        db_session.expire_all()
        assert db_session.get(Product, product_id) is None

    def test_delete_by_path(self, client, jefe_headers, agua):
        resp = client.delete(f"/api/productos/{agua.id}", headers=jefe_headers)
        assert resp.status_code == 200

    def test_missing_id(self, client, jefe_headers):
        resp = client.delete("/api/productos", headers=jefe_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Se requiere el ID del producto"

    def test_non_integer_id(self, client, jefe_headers):
        resp = client.delete("/api/productos?id=abc", headers=jefe_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "ID inválido"

    def test_unknown_id(self, client, jefe_headers, db_session):
        resp = client.delete("/api/productos/9999", headers=jefe_headers)
        assert resp.status_code == 404

    def test_referenced_product_conflict(self, client, jefe_headers, agua, db_session):
        db_session.add(Sale(
            producto_id=agua.id, cantidad=1, precio_unitario=Decimal("1.50"), total=Decimal("1.50"),
        ))
        db_session.commit()

        resp = client.delete(f"/api/productos/{agua.id}", headers=jefe_headers)

        assert resp.status_code == 409
        assert db_session.query(Product).count() == 1
