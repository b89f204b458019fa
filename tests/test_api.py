# tests/test_api.py
from fastapi.testclient import TestClient

from storefront.main import create_app
from storefront.sources import InMemoryDataSource


def test_list_products_filters_and_resets_page(client):
    r = client.get("/products", params={"page": 2})
    assert r.status_code == 200
    assert r.json()["page"] == 2

    body = client.get("/products", params={"search": "sedan"}).json()
    assert body["page"] == 1
    assert [p["id"] for p in body["items"]] == ["p1", "p4"]

    body = client.get("/products", params={"category": "car", "search": ""}).json()
    assert body["total_count"] == 2
    assert body["filters"]["category"] == "car"


def test_repeated_list_request_keeps_page(client):
    first = client.get("/products", params={"search": "", "page": 2}).json()
    again = client.get("/products", params={"search": "", "page": 2}).json()
    assert again["page"] == 2
    assert again["items"] == first["items"]
    assert client.get("/products").json()["page"] == 2


def test_category_filter_is_exact(client):
    body = client.get("/products", params={"category": "ca"}).json()
    assert body["total_count"] == 0
    assert body["items"] == []


def test_add_remove_clear_keep_stock_consistent(client):
    r = client.post("/cart/add", json={"product_id": "p1"})
    assert r.status_code == 200
    r = client.post("/cart/add", json={"product_id": "p1"})
    assert r.json()["cart"]["count"] == 2
    assert client.get("/products/p1").json()["stock"] == 1

    client.post("/cart/add", json={"product_id": "p4"})
    cart = client.get("/cart").json()
    assert cart["total"] == 240

    r = client.post("/cart/remove", json={"product_id": "p1"})
    assert r.json()["cart"]["count"] == 1
    assert client.get("/products/p1").json()["stock"] == 3

    r = client.post("/cart/clear")
    assert r.json()["cart"]["count"] == 0
    assert client.get("/products/p4").json()["stock"] == 5
    assert client.get("/debug/conservation").json() == {"ok": True, "broken": []}


def test_add_out_of_stock_is_409(client):
    r = client.post("/cart/add", json={"product_id": "p2"})
    assert r.status_code == 409
    assert r.json()["detail"] == "insufficient_stock"
    assert client.get("/products/p2").json()["stock"] == 0


def test_unknown_product_is_404(client):
    assert client.get("/products/ghost").status_code == 404
    assert client.post("/cart/add", json={"product_id": "ghost"}).status_code == 404


def test_remove_absent_line_is_idempotent(client):
    r = client.post("/cart/remove", json={"product_id": "p3"})
    assert r.status_code == 200
    assert r.json()["cart"]["count"] == 0


def test_admin_crud(client):
    form = {"name": "Pickup Z", "description": "Compact pickup", "price": 18000,
            "stock": 2, "category": "truck", "image": "pickup.png"}
    r = client.post("/admin/products", json=form)
    assert r.status_code == 201
    pid = r.json()["id"]
    assert r.json()["images"] == ["assets/images/pickup.png"]

    r = client.put(f"/admin/products/{pid}", json={**form, "stock": 6})
    assert r.status_code == 200
    assert client.get(f"/products/{pid}").json()["stock"] == 6

    body = client.delete(f"/admin/products/{pid}").json()
    assert body["product_id"] == pid
    assert body["deleted"] is True
    assert pid not in [p["id"] for p in body["view"]["items"]]
    assert body["view"]["total_count"] == 4
    assert client.get(f"/products/{pid}").status_code == 404


def test_admin_invalid_form_is_422(client):
    r = client.post("/admin/products", json={"name": "Z"})
    assert r.status_code == 422
    assert "name must be at least 2 characters" in r.json()["detail"]


def test_reload_failure_is_502(client, source):
    source.fail_next = "fetch_products"
    assert client.post("/reload").status_code == 502


def test_categories(client):
    assert [c["id"] for c in client.get("/categories").json()] == ["car", "truck", "accessory"]


def test_startup_survives_unreachable_catalog():
    source = InMemoryDataSource()
    source.fail_next = "fetch_products"
    with TestClient(create_app(source=source)) as c:
        assert c.get("/products").json()["total_count"] == 0
