from decimal import Decimal
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from schema import Product
from app import resolve_log_level
from helpers import post_product, make_product, put_product, search

# --- create ---

def test_create_returns_201_with_id_and_location(client):
    r = post_product(client, "Widget", 9.99)
    assert r.status_code == 201
    data = r.get_json()
    assert data == {"id": 1, "name": "Widget", "price": "9.99"}
    assert r.headers["Location"].endswith("/api/products/1")


def test_create_ignores_payload_id(client):
    first = make_product(client, "first")
    r = client.post("/api/products", json={"id": first, "name": "second", "price": 1})
    assert r.status_code == 201
    assert r.get_json()["id"] != first


def test_create_accepts_string_price(client):
    r = post_product(client, "Widget", "12.5")
    assert r.status_code == 201
    assert r.get_json()["price"] == "12.50"


def test_create_without_name(client):
    r = client.post("/api/products", json={"price": 3})
    assert r.status_code == 201
    assert r.get_json()["name"] is None


def test_create_missing_price(client):
    r = client.post("/api/products", json={"name": "Widget"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "price is required"


def test_create_rejects_bad_prices(client):
    for bad in ["abc", True, "NaN", "Infinity", 1.234, "10000000000", [1]]:
        r = post_product(client, "Widget", bad)
        assert r.status_code == 400, bad


def test_create_rejects_non_string_name(client):
    r = client.post("/api/products", json={"name": 42, "price": 1})
    assert r.status_code == 400


def test_create_rejects_non_json_body(client):
    r = client.post("/api/products", data="name=Widget", content_type="text/plain")
    assert r.status_code == 400


# --- read ---

def test_list_products(client):
    make_product(client, "a", 1)
    make_product(client, "b", 2)
    r = client.get("/api/products")
    assert r.status_code == 200
    assert [p["name"] for p in r.get_json()] == ["a", "b"]


def test_list_products_empty(client):
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.get_json() == []


def test_get_product(client):
    pid = make_product(client, "Widget", 9.99)
    r = client.get(f"/api/products/{pid}")
    assert r.status_code == 200
    assert r.get_json() == {"id": pid, "name": "Widget", "price": "9.99"}


def test_get_missing_product(client):
    r = client.get("/api/products/999")
    assert r.status_code == 404
    assert r.get_json()["error"] == "Product not found"


# --- update ---

def test_update_product(client):
    pid = make_product(client, "A", 1)
    r = put_product(client, pid, "B", 2)
    assert r.status_code == 204
    assert r.data == b""
    assert client.get(f"/api/products/{pid}").get_json() == {"id": pid, "name": "B", "price": "2.00"}


def test_update_id_mismatch(client):
    pid = make_product(client, "A", 1)
    r = put_product(client, pid, "B", 2, body_id=pid + 1)
    assert r.status_code == 400
    assert client.get(f"/api/products/{pid}").get_json()["name"] == "A"


def test_update_without_body_id(client):
    pid = make_product(client, "A", 1)
    r = client.put(f"/api/products/{pid}", json={"name": "B", "price": 2})
    assert r.status_code == 400


def test_update_mismatch_checked_before_store(client, app):
    with patch.object(app.extensions["product_store"], "update") as update:
        r = put_product(client, 1, "B", 2, body_id=2)
    assert r.status_code == 400
    update.assert_not_called()


def test_update_missing_product(client):
    r = put_product(client, 999, "ghost", 1)
    assert r.status_code == 404
    assert client.get("/api/products").get_json() == []


def test_update_invalid_price(client):
    pid = make_product(client, "A", 1)
    r = put_product(client, pid, "B", "lots")
    assert r.status_code == 400


# --- delete ---

def test_delete_product_twice(client):
    pid = make_product(client)
    assert client.delete(f"/api/products/{pid}").status_code == 204
    assert client.get(f"/api/products/{pid}").status_code == 404
    r = client.delete(f"/api/products/{pid}")
    assert r.status_code == 204
    assert r.data == b""


# --- search ---

def test_search_products(client):
    widget = make_product(client, "Widget")
    make_product(client, "Gadget")
    assert [p["id"] for p in search(client, "idg")] == [widget]
    assert search(client, "sprocket") == []


def test_search_without_query_returns_named(client, sql_store):
    make_product(client, "Widget")
    sql_store.add(Product(name=None, price=Decimal("1.00")))
    r = client.get("/api/products/search")
    assert r.status_code == 200
    assert [p["name"] for p in r.get_json()] == ["Widget"]


# --- ambient ---

def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok"}


def test_unknown_log_level_falls_back_to_info():
    assert resolve_log_level("verbose") == "INFO"
    assert resolve_log_level(None) == "INFO"
    assert resolve_log_level("debug") == "DEBUG"
    assert resolve_log_level(" warning ") == "WARNING"


def test_storage_failure_returns_500(client, app):
    failure = OperationalError("INSERT INTO products", {}, Exception("disk I/O error"))
    with patch.object(app.extensions["product_store"], "add", side_effect=failure):
        r = post_product(client)
    assert r.status_code == 500
    assert r.get_json()["error"] == "Storage failure"


def test_widget_lifecycle(client):
    r = post_product(client, "Widget", 9.99)
    assert r.status_code == 201
    assert r.get_json()["id"] == 1

    assert client.get("/api/products/1").get_json() == {"id": 1, "name": "Widget", "price": "9.99"}
    assert [p["id"] for p in search(client, "idg")] == [1]

    assert client.delete("/api/products/1").status_code == 204
    assert client.get("/api/products/1").status_code == 404
    assert client.delete("/api/products/1").status_code == 204


def test_huge_ids_are_not_found(client):
    make_product(client, "kept")
    huge = 99999999999999999999
    r = client.get(f"/api/products/{huge}")
    assert r.status_code == 404
    assert r.get_json()["error"] == "Product not found"
    assert client.delete(f"/api/products/{huge}").status_code == 204
    assert put_product(client, huge, "ghost", 1).status_code == 404
    assert [p["name"] for p in client.get("/api/products").get_json()] == ["kept"]


def test_update_rejects_non_integer_body_id(client):
    pid = make_product(client, "A", 1)
    for body_id in [float(pid), str(pid), True]:
        r = client.put(f"/api/products/{pid}", json={"id": body_id, "name": "B", "price": 2})
        assert r.status_code == 400, body_id
    assert client.get(f"/api/products/{pid}").get_json()["name"] == "A"
