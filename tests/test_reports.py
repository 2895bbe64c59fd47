# tests/test_reports.py
from datetime import datetime

import pytest

from models.transaction import Transaction
from services.inventory import add_stock
from services.reports import stock_status, stock_levels, weekly_stock_history, analytics, sold_lines
from services.sales import create_single_transaction, create_cart_transaction
from utils.dates import iso_week_key
from utils.errors import InvalidInput


def _brand(db, name, brand_type="750ml", price=100, quantity=10, at=None):
    return add_stock(db, name=name, brand_type=brand_type, price=price, quantity=quantity, at=at)["brand_id"]


# ---------- stock levels ----------
@pytest.mark.parametrize("quantity,expected", [
    (0, "out"), (1, "low"), (5, "low"), (6, "good"), (500, "good"),
])
def test_stock_status_thresholds(quantity, expected):
    assert stock_status(quantity) == expected


def test_stock_status_custom_threshold():
    assert stock_status(8, low_threshold=10) == "low"
    assert stock_status(8, low_threshold=2) == "good"


def test_stock_levels_sorted_with_status_and_value(db):
    _brand(db, "Signature", price=900, quantity=12)
    amrut = _brand(db, "Amrut", price=2500, quantity=3)
    _brand(db, "Amrut", brand_type="375ml", price=1300, quantity=1)
    create_single_transaction(db, brand_id=amrut, quantity=3, payment_method="cash")

    levels = stock_levels(db)
    assert [(r["name"], r["type"]) for r in levels] == [
        ("Amrut", "375ml"), ("Amrut", "750ml"), ("Signature", "750ml"),
    ]
    assert [r["stock_status"] for r in levels] == ["low", "out", "good"]
    assert [r["total_value"] for r in levels] == [1300, 0, 10800]


# ---------- weekly history ----------
def test_iso_week_key_around_year_boundaries():
    assert iso_week_key(datetime(2025, 1, 1)) == "2025-W01"
    assert iso_week_key(datetime(2024, 12, 30)) == "2025-W01"
    assert iso_week_key(datetime(2021, 1, 3)) == "2020-W53"
    assert iso_week_key(datetime(2025, 3, 3)) == "2025-W10"


def test_weekly_history_groups_newest_week_first(db):
    _brand(db, "Old Monk", price=450, quantity=10, at=datetime(2025, 3, 3, 9))
    _brand(db, "Old Monk", price=500, quantity=2, at=datetime(2025, 3, 7, 18))
    _brand(db, "Kingfisher", brand_type="650ml", price=180, quantity=24, at=datetime(2025, 3, 12, 11))
    _brand(db, "Royal Stag", price=1200, quantity=1, at=datetime(2024, 12, 31, 8))

    history = weekly_stock_history(db)

    assert [g["week"] for g in history] == ["2025-W11", "2025-W10", "2025-W01"]
    assert history[0]["total_value"] == 24 * 180
    assert history[1]["entry_count"] == 2
    assert history[1]["total_value"] == 10 * 450 + 2 * 500
    # Newest entry first within a week
    assert [e["price_per_bottle"] for e in history[1]["entries"]] == [500, 450]
    for group in history:
        assert group["total_value"] == sum(e["total_value"] for e in group["entries"])


def test_weekly_history_empty(db):
    assert weekly_stock_history(db) == []


# ---------- analytics ----------
def test_analytics_combines_single_multi_and_legacy_sales(db):
    rs = _brand(db, "Royal Stag", price=1200, quantity=20)
    om = _brand(db, "Old Monk", price=450, quantity=20)
    kf = _brand(db, "Kingfisher", brand_type="650ml", price=180, quantity=3)

    create_single_transaction(db, brand_id=rs, quantity=2, payment_method="cash")
    create_cart_transaction(
        db, items=[{"brand_id": om, "quantity": 4}, {"brand_id": kf, "quantity": 3}], payment_method="upi"
    )
    db.add(Transaction(
        brand_id=om, brand_name="Old Monk", brand_type="750ml", quantity=1,
        price_per_bottle=450, total_amount=450, payment_method="cash",
    ))
    db.commit()

    res = analytics(db)

    assert res["total_transactions"] == 3
    assert res["total_revenue"] == 2400 + 1800 + 540 + 450
    assert res["cash_revenue"] == 2400 + 450
    assert res["upi_revenue"] == 1800 + 540
    assert res["cash_revenue"] + res["upi_revenue"] == res["total_revenue"]
    assert res["total_bottles_sold"] == 2 + 4 + 3 + 1

    top = [(s["name"], s["quantity"], s["revenue"]) for s in res["top_selling_brands"]]
    assert top == [("Old Monk", 5, 2250), ("Kingfisher", 3, 540), ("Royal Stag", 2, 2400)]

    assert res["total_brands"] == 3
    # The legacy row was inserted directly, so it never touched stock
    assert res["total_stock"] == 18 + 16 + 0
    assert res["out_of_stock_brands"] == 1
    assert res["low_stock_brands"] == 0


def test_analytics_date_window_is_inclusive(db):
    brand_id = _brand(db, "Royal Stag", price=100, quantity=50)
    for day in (1, 2, 3, 4):
        create_single_transaction(
            db, brand_id=brand_id, quantity=day, payment_method="cash", at=datetime(2025, 5, day, 12),
        )

    res = analytics(db, datetime(2025, 5, 2, 12), datetime(2025, 5, 3, 12))
    assert res["total_transactions"] == 2
    assert res["total_bottles_sold"] == 5
    assert res["date_from"] == datetime(2025, 5, 2, 12)

    assert analytics(db, date_from=datetime(2025, 5, 4))["total_transactions"] == 1
    assert analytics(db, date_to=datetime(2025, 5, 1, 23))["total_transactions"] == 1


def test_analytics_top_sellers_tie_break_and_limit(db):
    ids = {}
    for name, price in [("Brand A", 100), ("Brand B", 300), ("Brand C", 200),
                        ("Brand D", 100), ("Brand E", 100), ("Brand F", 100)]:
        ids[name] = _brand(db, name, price=price, quantity=10)
    for name in ids:
        create_single_transaction(db, brand_id=ids[name], quantity=2, payment_method="cash")

    top = analytics(db)["top_selling_brands"]
    assert len(top) == 5
    # Equal bottles: higher revenue first, then name
    assert [s["name"] for s in top] == ["Brand B", "Brand C", "Brand A", "Brand D", "Brand E"]
    assert len(analytics(db, top_limit=2)["top_selling_brands"]) == 2


def test_analytics_stock_counts(db):
    emptied = _brand(db, "Empty", quantity=1)
    _brand(db, "Low", quantity=5)
    _brand(db, "Plenty", quantity=6)
    create_single_transaction(db, brand_id=emptied, quantity=1, payment_method="upi")

    res = analytics(db)
    assert (res["out_of_stock_brands"], res["low_stock_brands"]) == (1, 1)
    assert res["total_stock"] == 11
    assert analytics(db, low_threshold=10)["low_stock_brands"] == 2


def test_analytics_with_no_sales(db):
    res = analytics(db)
    assert res["total_revenue"] == 0
    assert res["total_transactions"] == 0
    assert res["top_selling_brands"] == []


def test_sold_lines_rejects_unknown_shape():
    txn = Transaction(id=9, transaction_type="refund", total_amount=1, payment_method="cash")
    with pytest.raises(InvalidInput):
        list(sold_lines(txn))
