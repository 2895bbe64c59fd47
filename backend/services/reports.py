# backend/services/reports.py
"""Read-only aggregations over the catalog, stock entries and sales."""
from datetime import datetime
from itertools import groupby
from typing import Iterator, List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from config import settings
from models.brand import Brand
from models.stock import StockEntry
from models.transaction import Transaction, SINGLE, MULTI
from utils.errors import InvalidInput


def stock_status(quantity: int, low_threshold: Optional[int] = None) -> str:
    threshold = settings.LOW_STOCK_THRESHOLD if low_threshold is None else low_threshold
    if quantity <= 0:
        return "out"
    if quantity <= threshold:
        return "low"
    return "good"


def stock_levels(db: Session, low_threshold: Optional[int] = None) -> List[dict]:
    brands = db.query(Brand).order_by(Brand.name.asc(), Brand.type.asc()).all()
    return [
        {
            "id": b.id,
            "name": b.name,
            "type": b.type,
            "price": b.price,
            "quantity": b.quantity,
            "created_at": b.created_at,
            "updated_at": b.updated_at,
            "stock_status": stock_status(b.quantity, low_threshold),
            "total_value": b.quantity * b.price,
        }
        for b in brands
    ]


def entry_to_out(entry: StockEntry) -> dict:
    return {
        "id": entry.id,
        "brand_id": entry.brand_id,
        "brand_name": entry.brand_name,
        "brand_type": entry.brand_type,
        "quantity": entry.quantity,
        "price_per_bottle": entry.price_per_bottle,
        "total_value": entry.total_value,
        "added_date": entry.added_date,
        "week_of_year": entry.week_of_year,
        "created_at": entry.created_at,
    }


def weekly_stock_history(db: Session) -> List[dict]:
    """Stock entries grouped by ISO week, newest week first."""
    # Zero-padded `YYYY-Www` keys sort chronologically as strings
    entries = (
        db.query(StockEntry)
        .order_by(StockEntry.week_of_year.desc(), StockEntry.added_date.desc(), StockEntry.id.desc())
        .all()
    )
    groups = []
    for week, rows in groupby(entries, key=lambda e: e.week_of_year):
        rows = list(rows)
        groups.append({
            "week": week,
            "total_value": sum(e.total_value for e in rows),
            "entry_count": len(rows),
            "entries": [entry_to_out(e) for e in rows],
        })
    return groups


def sold_lines(txn: Transaction) -> Iterator[Tuple[Optional[int], str, str, int, float]]:
    """(brand_id, name, type, quantity, revenue) for each brand a sale touched."""
    if txn.shape == SINGLE:
        yield txn.brand_id, txn.brand_name, txn.brand_type, txn.quantity or 0, txn.total_amount
    elif txn.shape == MULTI:
        for item in txn.items:
            yield item.brand_id, item.brand_name, item.brand_type, item.quantity, item.item_total
    else:
        raise InvalidInput(f"Unknown transaction type {txn.shape!r} on transaction {txn.id}")


def analytics(
    db: Session,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    *,
    top_limit: Optional[int] = None,
    low_threshold: Optional[int] = None,
) -> dict:
    """
    Sales metrics over [date_from, date_to] (both optional, inclusive) plus
    stock metrics over the whole catalog.

    Top sellers are ranked by bottles sold, then revenue, then name and type.
    """
    threshold = settings.LOW_STOCK_THRESHOLD if low_threshold is None else low_threshold

    query = db.query(Transaction).options(selectinload(Transaction.items))
    if date_from is not None:
        query = query.filter(Transaction.created_at >= date_from)
    if date_to is not None:
        query = query.filter(Transaction.created_at <= date_to)
    transactions = query.all()
    brands = db.query(Brand).all()

    total_revenue = 0
    cash_revenue = 0
    upi_revenue = 0
    total_bottles_sold = 0
    brand_sales = {}

    for txn in transactions:
        total_revenue += txn.total_amount
        if txn.payment_method == "cash":
            cash_revenue += txn.total_amount
        elif txn.payment_method == "upi":
            upi_revenue += txn.total_amount

        for brand_id, name, brand_type, quantity, revenue in sold_lines(txn):
            total_bottles_sold += quantity
            key = (name, brand_type)
            agg = brand_sales.setdefault(key, {
                "brand_id": brand_id,
                "name": name,
                "type": brand_type,
                "label": f"{name} {brand_type}",
                "quantity": 0,
                "revenue": 0,
            })
            agg["quantity"] += quantity
            agg["revenue"] += revenue

    top_selling = sorted(
        brand_sales.values(),
        key=lambda s: (-s["quantity"], -s["revenue"], s["name"], s["type"]),
    )[: top_limit or settings.TOP_SELLERS_LIMIT]

    return {
        "date_from": date_from,
        "date_to": date_to,
        "total_revenue": total_revenue,
        "total_transactions": len(transactions),
        "total_bottles_sold": total_bottles_sold,
        "cash_revenue": cash_revenue,
        "upi_revenue": upi_revenue,
        "total_brands": len(brands),
        "total_stock": sum(b.quantity for b in brands),
        "out_of_stock_brands": sum(1 for b in brands if b.quantity == 0),
        "low_stock_brands": sum(1 for b in brands if 0 < b.quantity <= threshold),
        "top_selling_brands": top_selling,
    }
