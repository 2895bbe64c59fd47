# tests/test_api.py
from datetime import datetime

from models.log import Log
from utils.dates import to_epoch_ms


def _add(client, name="Royal Stag", type_="750ml", price=1200, quantity=5):
    r = client.post("/stock", json={"name": name, "type": type_, "price": price, "quantity": quantity})
    assert r.status_code == 200, r.text
    return r.json()["brand_id"]


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200


# ---------- stock ----------
def test_add_stock_and_read_back(client):
    r = client.post("/stock", json={"name": "Royal Stag", "type": "750ml", "price": 1200, "quantity": 5})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Added new brand: Royal Stag 750ml with 5 bottles"
    assert body["total_value"] == 6000

    brands = client.get("/brands").json()
    assert [(b["name"], b["quantity"]) for b in brands] == [("Royal Stag", 5)]

    levels = client.get("/stock/levels").json()
    assert levels[0]["stock_status"] == "low"
    assert levels[0]["total_value"] == 6000

    entries = client.get("/stock/entries", params={"brand_id": body["brand_id"]}).json()
    assert len(entries) == 1
    assert entries[0]["week_of_year"].count("-W") == 1

    weekly = client.get("/stock/history/weekly").json()
    assert len(weekly) == 1
    assert weekly[0]["entry_count"] == 1


def test_add_stock_validation_errors(client):
    assert client.post("/stock", json={"name": "X", "type": "750ml", "price": 0, "quantity": 1}).status_code == 422
    assert client.post("/stock", json={"name": "X", "type": "750ml", "price": 10, "quantity": -1}).status_code == 422
    assert client.post("/stock", json={"name": "", "type": "750ml", "price": 10, "quantity": 1}).status_code == 422
    # Whitespace passes the schema but not the ledger
    r = client.post("/stock", json={"name": "   ", "type": "750ml", "price": 10, "quantity": 1})
    assert r.status_code == 400
    assert r.json()["kind"] == "InvalidInput"


def test_remove_stock_with_owner_password(client, owner_password):
    brand_id = _add(client, quantity=10)
    r = client.post("/stock/remove", json={"brand_id": brand_id, "quantity": 3, "owner_password": owner_password})
    assert r.status_code == 200
    assert r.json()["remaining"] == 7

    r = client.post("/stock/remove", json={"brand_id": brand_id, "quantity": 99999, "owner_password": owner_password})
    assert r.json()["message"] == "Completely removed Royal Stag 750ml from inventory (removed 7 bottles)"
    assert client.get("/stock/levels").json()[0]["stock_status"] == "out"


def test_remove_stock_wrong_password_is_logged(client, db):
    brand_id = _add(client)
    r = client.post("/stock/remove", json={"brand_id": brand_id, "quantity": 1, "owner_password": "guess"})

    assert r.status_code == 401
    assert r.json() == {"success": False, "kind": "Unauthorized", "detail": "Unauthorized: Invalid owner password"}
    assert client.get("/brands").json()[0]["quantity"] == 5

    failed = db.query(Log).filter(Log.action == "STOCK_REMOVE", Log.status == "FAIL").all()
    assert len(failed) == 1
    assert failed[0].meta["brand_id"] == brand_id


def test_remove_stock_unknown_brand(client, owner_password):
    r = client.post("/stock/remove", json={"brand_id": 321, "quantity": 1, "owner_password": owner_password})
    assert r.status_code == 404
    assert r.json()["kind"] == "NotFound"


# ---------- brands ----------
def test_brand_search(client):
    _add(client, name="Johnnie Walker", type_="Black Label")
    _add(client, name="Old Monk")
    r = client.get("/brands/search", params={"q": "WALK"})
    assert [b["name"] for b in r.json()] == ["Johnnie Walker"]
    assert client.get("/brands/search", params={"q": ""}).status_code == 422


# ---------- transactions ----------
def test_single_sale_and_insufficient_stock(client):
    brand_id = _add(client, quantity=5)
    r = client.post("/transactions", json={"brand_id": brand_id, "quantity": 3, "payment_method": "cash"})
    assert r.status_code == 200
    assert r.json()["total_amount"] == 3600
    assert r.json()["remaining_stock"] == 2

    r = client.post("/transactions", json={"brand_id": brand_id, "quantity": 5, "payment_method": "cash"})
    assert r.status_code == 400
    assert r.json()["kind"] == "InsufficientStock"
    assert "Available: 2, Requested: 5" in r.json()["detail"]


def test_sale_rejects_unknown_payment_method(client):
    brand_id = _add(client)
    r = client.post("/transactions", json={"brand_id": brand_id, "quantity": 1, "payment_method": "card"})
    assert r.status_code == 422


def test_cart_checkout_and_listing(client):
    a = _add(client, name="Royal Stag", price=1200, quantity=5)
    b = _add(client, name="Old Monk", price=450, quantity=5)
    client.post("/transactions", json={"brand_id": a, "quantity": 1, "payment_method": "upi"})

    r = client.post("/transactions/cart", json={
        "items": [{"brand_id": a, "quantity": 2}, {"brand_id": b, "quantity": 1}],
        "payment_method": "cash",
        "customer_name": "Ravi",
    })
    assert r.status_code == 200
    cart = r.json()
    assert cart["item_count"] == 2
    assert cart["total_amount"] == 2850

    listed = client.get("/transactions").json()
    assert len(listed) == 2
    by_type = {t["transaction_type"]: t for t in listed}
    assert by_type["single"]["quantity"] == 1
    assert [i["brand_name"] for i in by_type["multi"]["items"]] == ["Royal Stag", "Old Monk"]
    assert by_type["multi"]["customer_name"] == "Ravi"

    assert len(client.get("/transactions/today").json()) == 2
    assert len(client.get("/transactions", params={"limit": 1}).json()) == 1


def test_cart_failure_reports_kind_and_changes_nothing(client):
    a = _add(client, name="Royal Stag", quantity=5)
    b = _add(client, name="Old Monk", quantity=1)
    r = client.post("/transactions/cart", json={
        "items": [{"brand_id": a, "quantity": 1}, {"brand_id": b, "quantity": 2}],
        "payment_method": "cash",
    })
    assert r.status_code == 400
    assert r.json()["kind"] == "InsufficientStock"
    assert {x["name"]: x["quantity"] for x in client.get("/brands").json()} == {"Royal Stag": 5, "Old Monk": 1}
    assert client.get("/transactions").json() == []


def test_empty_cart_rejected(client):
    r = client.post("/transactions/cart", json={"items": [], "payment_method": "cash"})
    assert r.status_code == 400
    assert r.json()["kind"] == "InvalidInput"


def test_delete_transaction_flow(client, db, owner_headers):
    brand_id = _add(client, quantity=5)
    single = client.post("/transactions", json={"brand_id": brand_id, "quantity": 2, "payment_method": "cash"}).json()
    multi = client.post("/transactions/cart", json={
        "items": [{"brand_id": brand_id, "quantity": 1}], "payment_method": "cash",
    }).json()

    r = client.delete(f"/transactions/{single['transaction_id']}")
    assert r.status_code == 401
    assert db.query(Log).filter(Log.action == "SALE_DELETE", Log.status == "FAIL").count() == 1

    r = client.delete(f"/transactions/{multi['transaction_id']}", headers=owner_headers)
    assert r.status_code == 501
    assert r.json()["kind"] == "NotImplemented"

    r = client.delete(f"/transactions/{single['transaction_id']}", headers=owner_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Transaction deleted and 2 bottles of Royal Stag 750ml restored to stock"
    assert client.get("/brands").json()[0]["quantity"] == 4

    r = client.delete(f"/transactions/{single['transaction_id']}", headers=owner_headers)
    assert r.status_code == 404


# ---------- analytics ----------
def test_analytics_with_epoch_ms_window(client):
    brand_id = _add(client, price=100, quantity=10)
    client.post("/transactions", json={"brand_id": brand_id, "quantity": 2, "payment_method": "cash"})
    client.post("/transactions", json={"brand_id": brand_id, "quantity": 1, "payment_method": "upi"})

    body = client.get("/stats/analytics").json()
    assert body["total_revenue"] == 300
    assert (body["cash_revenue"], body["upi_revenue"]) == (200, 100)
    assert body["top_selling_brands"][0]["label"] == "Royal Stag 750ml"

    past = to_epoch_ms(datetime(2000, 1, 1))
    body = client.get("/stats/analytics", params={"date_from": 0, "date_to": past}).json()
    assert body["total_transactions"] == 0
    # Stock metrics ignore the window
    assert body["total_stock"] == 7

    r = client.get("/stats/analytics", params={"date_from": past, "date_to": 0})
    assert r.status_code == 400


# ---------- admin & logs ----------
def test_backfill_endpoint_requires_owner(client, owner_headers):
    assert client.post("/admin/backfill-stock-entries").status_code == 401

    r = client.post("/admin/backfill-stock-entries", headers=owner_headers)
    assert r.status_code == 200
    assert r.json()["already_completed"] is False

    r = client.post("/admin/backfill-stock-entries", headers=owner_headers)
    assert r.json()["already_completed"] is True


def test_logs_endpoint(client, owner_headers):
    _add(client)
    assert client.get("/logs").status_code == 401
    assert client.get("/logs", headers={"X-Owner-Password": "nope"}).status_code == 401

    r = client.get("/logs", headers=owner_headers, params={"action": "stock_add"})
    assert r.status_code == 200
    page = r.json()
    assert page["total"] == 1
    assert page["items"][0]["resource"] == "stock"

    assert page["items"][0]["ip"] == "testclient"
    assert page["items"][0]["actor"] is None

    r = client.get("/logs", headers=owner_headers, params={"date_from": "not-a-date"})
    assert r.status_code == 400


def test_owner_actions_are_attributed(client, owner_headers):
    brand_id = _add(client, quantity=4)
    client.post("/stock/remove", json={"brand_id": brand_id, "quantity": 1, "owner_password": owner_headers["X-Owner-Password"]})

    page = client.get("/logs", headers=owner_headers, params={"actor": "owner"}).json()
    assert [item["action"] for item in page["items"]] == ["STOCK_REMOVE"]
    assert page["items"][0]["meta"]["remaining"] == 3
