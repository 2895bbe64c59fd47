# backend/services/sales.py
"""
Sales: single-item sales, cart checkout and owner-gated deletion.

A sale inserts the transaction and decrements stock inside one database
transaction. Decrements are conditional (``WHERE quantity >= n``); if any of
them matches no row the transaction insert and every decrement already
applied are rolled back together.
"""
import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session, selectinload

from config import settings
from models.transaction import Transaction, TransactionItem, SINGLE, MULTI
from services.inventory import (
    get_brand, decrement_stock, increment_stock, current_quantity,
    require_positive_quantity,
)
from utils.dates import resolve_timestamp, start_of_day
from utils.errors import NotFound, InsufficientStock, InvalidInput, NotSupported
from utils.owner_auth import OwnerAuthorizer

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ("cash", "upi")


def _normalize_payment_method(payment_method) -> str:
    pm = str(payment_method or "").strip().lower()
    if pm not in PAYMENT_METHODS:
        raise InvalidInput(f"Invalid payment method {payment_method!r}. Use 'cash' or 'upi'.")
    return pm

def _normalize_customer(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s if s else None

def format_amount(amount: float) -> str:
    # 3600.0 -> "3600", 99.5 -> "99.5"
    return f"{amount:.2f}".rstrip("0").rstrip(".")


# ---- SERIALIZATION ----
def transaction_to_out(txn: Transaction) -> dict:
    common = {
        "id": txn.id,
        "transaction_type": txn.shape,
        "total_amount": txn.total_amount,
        "payment_method": txn.payment_method,
        "customer_name": txn.customer_name,
        "customer_phone": txn.customer_phone,
        "created_at": txn.created_at,
    }
    if txn.shape == SINGLE:
        common.update({
            "brand_id": txn.brand_id,
            "brand_name": txn.brand_name,
            "brand_type": txn.brand_type,
            "quantity": txn.quantity,
            "price_per_bottle": txn.price_per_bottle,
        })
        return common
    if txn.shape == MULTI:
        common["items"] = [_item_to_out(it) for it in txn.items]
        return common
    raise InvalidInput(f"Unknown transaction type {txn.shape!r} on transaction {txn.id}")

def _item_to_out(item: TransactionItem) -> dict:
    return {
        "brand_id": item.brand_id,
        "brand_name": item.brand_name,
        "brand_type": item.brand_type,
        "quantity": item.quantity,
        "price_per_bottle": item.price_per_bottle,
        "item_total": item.item_total,
    }


# ---- LEDGER OPERATIONS ----
def create_single_transaction(
    db: Session,
    *,
    brand_id: int,
    quantity: int,
    payment_method: str,
    customer_name: Optional[str] = None,
    customer_phone: Optional[str] = None,
    at: Optional[datetime] = None,
) -> dict:
    quantity = require_positive_quantity(quantity)
    payment_method = _normalize_payment_method(payment_method)
    now = resolve_timestamp(at)

    try:
        brand = get_brand(db, brand_id, lock=True)
        label = brand.label
        if brand.quantity < quantity:
            raise InsufficientStock(brand.quantity, quantity, label)

        # Price is read at sale time
        total_amount = quantity * brand.price
        txn = Transaction(
            transaction_type=SINGLE,
            brand_id=brand.id,
            brand_name=brand.name,
            brand_type=brand.type,
            quantity=quantity,
            price_per_bottle=brand.price,
            total_amount=total_amount,
            payment_method=payment_method,
            customer_name=_normalize_customer(customer_name),
            customer_phone=_normalize_customer(customer_phone),
            created_at=now,
        )
        db.add(txn)
        db.flush()

        if not decrement_stock(db, brand.id, quantity, now):
            raise InsufficientStock(current_quantity(db, brand.id), quantity, label)

        db.commit()
    except InsufficientStock as exc:
        db.rollback()
        logger.warning("Sale rejected: brand_id=%s %s", brand_id, exc)
        raise
    except Exception:
        db.rollback()
        raise

    remaining = current_quantity(db, brand_id)
    logger.info("Sale recorded: transaction_id=%s brand_id=%s qty=%s total=%s", txn.id, brand_id, quantity, total_amount)
    return {
        "success": True,
        "transaction_id": txn.id,
        "total_amount": total_amount,
        "message": f"Sale recorded: {quantity} x {label} = ₹{format_amount(total_amount)}",
        "remaining_stock": remaining,
    }


def _parse_cart_item(raw: Mapping) -> tuple:
    try:
        brand_id = raw["brand_id"]
        quantity = raw["quantity"]
    except (KeyError, TypeError):
        raise InvalidInput("Each cart item needs brand_id and quantity")
    return brand_id, require_positive_quantity(quantity)


def create_cart_transaction(
    db: Session,
    *,
    items: Iterable[Mapping],
    payment_method: str,
    customer_name: Optional[str] = None,
    customer_phone: Optional[str] = None,
    at: Optional[datetime] = None,
) -> dict:
    """
    Check out a multi-item cart.

    All lines are validated before anything is written; a brand that appears
    on several lines is checked against the sum of its requested quantities.
    The transaction row and all stock decrements commit together or not at
    all.
    """
    lines = [_parse_cart_item(raw) for raw in (items or [])]
    if not lines:
        raise InvalidInput("Cart cannot be empty")
    payment_method = _normalize_payment_method(payment_method)
    now = resolve_timestamp(at)

    try:
        # Phase 1: validate every line
        brands = {}
        requested = {}
        for brand_id, quantity in lines:
            if brand_id not in brands:
                brands[brand_id] = get_brand(db, brand_id, lock=True)
            brand = brands[brand_id]
            requested[brand_id] = requested.get(brand_id, 0) + quantity
            if brand.quantity < requested[brand_id]:
                raise InsufficientStock(brand.quantity, requested[brand_id], brand.label)

        # Phase 2: record the sale and deduct stock
        processed = []
        total_amount = 0
        for position, (brand_id, quantity) in enumerate(lines):
            brand = brands[brand_id]
            item_total = quantity * brand.price
            total_amount += item_total
            processed.append(TransactionItem(
                position=position,
                brand_id=brand.id,
                brand_name=brand.name,
                brand_type=brand.type,
                quantity=quantity,
                price_per_bottle=brand.price,
                item_total=item_total,
            ))

        txn = Transaction(
            transaction_type=MULTI,
            items=processed,
            total_amount=total_amount,
            payment_method=payment_method,
            customer_name=_normalize_customer(customer_name),
            customer_phone=_normalize_customer(customer_phone),
            created_at=now,
        )
        db.add(txn)
        db.flush()

        for brand_id, quantity in requested.items():
            if not decrement_stock(db, brand_id, quantity, now):
                raise InsufficientStock(current_quantity(db, brand_id), quantity, brands[brand_id].label)

        items_out = [_item_to_out(it) for it in processed]
        db.commit()
    except InsufficientStock as exc:
        db.rollback()
        logger.warning("Cart checkout rejected: %s", exc)
        raise
    except Exception:
        db.rollback()
        raise

    summary = ", ".join(
        f"{it['quantity']} x {it['brand_name']} {it['brand_type']} = ₹{format_amount(it['item_total'])}"
        for it in items_out
    )
    logger.info("Cart sale recorded: transaction_id=%s lines=%s total=%s", txn.id, len(items_out), total_amount)
    return {
        "success": True,
        "transaction_id": txn.id,
        "total_amount": total_amount,
        "item_count": len(items_out),
        "message": f"Multi-item sale recorded: {summary}. Total: ₹{format_amount(total_amount)}",
        "items": items_out,
    }


def delete_transaction(
    db: Session,
    authorizer: OwnerAuthorizer,
    *,
    transaction_id: int,
    owner_password: Optional[str],
    at: Optional[datetime] = None,
) -> dict:
    """
    Owner-only deletion of a sale, putting its bottles back on the shelf.

    Only single-item sales can be reversed. Cart sales are refused until
    per-item restoration is agreed on.
    """
    authorizer.require(owner_password, "transactions.delete")
    now = resolve_timestamp(at)

    txn = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not txn:
        raise NotFound("Transaction not found")

    if txn.shape == MULTI:
        raise NotSupported(
            f"Transaction {transaction_id} is a multi-item sale; deleting it would not restore per-item stock"
        )
    if txn.shape != SINGLE:
        raise InvalidInput(f"Unknown transaction type {txn.shape!r} on transaction {transaction_id}")

    brand_id, quantity = txn.brand_id, txn.quantity or 0
    label = f"{txn.brand_name} {txn.brand_type}"
    try:
        restored = False
        if brand_id is not None and quantity > 0:
            restored = increment_stock(db, brand_id, quantity, now)
        db.delete(txn)
        db.commit()
    except Exception:
        db.rollback()
        raise

    if not restored:
        logger.warning("Transaction %s deleted without restoring stock to brand %s", transaction_id, brand_id)
    logger.info("Transaction deleted: id=%s restored=%s", transaction_id, quantity if restored else 0)
    return {
        "success": True,
        "message": f"Transaction deleted and {quantity} bottles of {label} restored to stock",
    }


# ---- READ QUERIES ----
def list_transactions(
    db: Session,
    *,
    limit: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> List[Transaction]:
    query = db.query(Transaction).options(selectinload(Transaction.items))
    if date_from is not None:
        query = query.filter(Transaction.created_at >= date_from)
    if date_to is not None:
        query = query.filter(Transaction.created_at <= date_to)
    return (
        query.order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .limit(limit or settings.TRANSACTIONS_PAGE_LIMIT)
        .all()
    )

def todays_transactions(db: Session, at: Optional[datetime] = None) -> List[Transaction]:
    day_start = start_of_day(resolve_timestamp(at))
    return (
        db.query(Transaction)
        .options(selectinload(Transaction.items))
        .filter(Transaction.created_at >= day_start, Transaction.created_at < day_start + timedelta(days=1))
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .all()
    )
