# backend/services/inventory.py
"""
Brand catalog and stock entry log.

Every write here runs as one unit of work on the given session: it either
commits once or is rolled back entirely. Quantities only move through SQL
expressions (``quantity = quantity +/- n``) so a stale read can never push
stock below zero.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import update, or_, func
from sqlalchemy.orm import Session

from config import settings
from models.brand import Brand
from models.stock import StockEntry
from utils.dates import resolve_timestamp, iso_week_key
from utils.errors import NotFound, InsufficientStock, InvalidInput
from utils.owner_auth import OwnerAuthorizer

logger = logging.getLogger(__name__)


# ---- VALIDATION ----
def require_label(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"Brand {field} must not be empty")
    return value.strip()

def require_positive_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidInput(f"Quantity must be a positive whole number, got {quantity!r}")
    return quantity

def require_positive_price(price) -> float:
    if isinstance(price, bool) or not isinstance(price, (int, float)) or price <= 0:
        raise InvalidInput(f"Price must be greater than zero, got {price!r}")
    return float(price)


# ---- STOCK PRIMITIVES ----
def get_brand(db: Session, brand_id: int, *, lock: bool = False) -> Brand:
    query = db.query(Brand).filter(Brand.id == brand_id).populate_existing()
    if lock:
        query = query.with_for_update()
    brand = query.first()
    if not brand:
        raise NotFound(f"Brand {brand_id} not found")
    return brand

def decrement_stock(db: Session, brand_id: int, quantity: int, at: datetime) -> bool:
    """Take `quantity` bottles only if that many are on hand. Returns False otherwise."""
    result = db.execute(
        update(Brand)
        .where(Brand.id == brand_id, Brand.quantity >= quantity)
        .values(quantity=Brand.quantity - quantity, updated_at=at)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1

def increment_stock(db: Session, brand_id: int, quantity: int, at: datetime) -> bool:
    result = db.execute(
        update(Brand)
        .where(Brand.id == brand_id)
        .values(quantity=Brand.quantity + quantity, updated_at=at)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1

def current_quantity(db: Session, brand_id: int) -> int:
    return db.query(Brand.quantity).filter(Brand.id == brand_id).scalar() or 0


# ---- LEDGER OPERATIONS ----
def add_stock(
    db: Session,
    *,
    name: str,
    brand_type: str,
    price: float,
    quantity: int,
    at: Optional[datetime] = None,
) -> dict:
    """
    Add bottles of (name, type) to the catalog.

    An existing brand gets its quantity increased and its price replaced by
    `price`; an unknown pair creates a new brand. A stock entry is always
    appended.
    """
    name = require_label(name, "name")
    brand_type = require_label(brand_type, "type")
    price = require_positive_price(price)
    quantity = require_positive_quantity(quantity)
    now = resolve_timestamp(at)

    try:
        brand = (
            db.query(Brand)
            .filter(Brand.name == name, Brand.type == brand_type)
            .populate_existing()
            .with_for_update()
            .first()
        )
        is_new = brand is None
        if is_new:
            brand = Brand(name=name, type=brand_type, price=price, quantity=quantity, created_at=now, updated_at=now)
            db.add(brand)
            db.flush()
        else:
            db.execute(
                update(Brand)
                .where(Brand.id == brand.id)
                .values(quantity=Brand.quantity + quantity, price=price, updated_at=now)
                .execution_options(synchronize_session=False)
            )

        total_value = quantity * price
        entry = StockEntry(
            brand_id=brand.id,
            brand_name=name,
            brand_type=brand_type,
            quantity=quantity,
            price_per_bottle=price,
            total_value=total_value,
            added_date=now,
            week_of_year=iso_week_key(now),
            created_at=now,
        )
        db.add(entry)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(brand)
    if is_new:
        message = f"Added new brand: {name} {brand_type} with {quantity} bottles"
    else:
        message = f"Updated {name} {brand_type}. New quantity: {brand.quantity}"
    logger.info("Stock added: brand_id=%s qty=%s price=%s entry_id=%s", brand.id, quantity, price, entry.id)

    return {
        "success": True,
        "message": message,
        "brand_id": brand.id,
        "stock_entry_id": entry.id,
        "total_value": total_value,
    }


def remove_stock(
    db: Session,
    authorizer: OwnerAuthorizer,
    *,
    brand_id: int,
    quantity: int,
    owner_password: Optional[str],
    complete_removal_threshold: Optional[int] = None,
    at: Optional[datetime] = None,
) -> dict:
    """
    Owner-only stock removal.

    A quantity at or above the complete-removal threshold zeroes the brand
    whatever its stock; the row itself is kept.
    """
    authorizer.require(owner_password, "stock.remove")
    quantity = require_positive_quantity(quantity)
    threshold = complete_removal_threshold or settings.COMPLETE_REMOVAL_THRESHOLD
    now = resolve_timestamp(at)

    try:
        brand = get_brand(db, brand_id, lock=True)
        label = brand.label
        before = brand.quantity

        if quantity >= threshold:
            db.execute(
                update(Brand)
                .where(Brand.id == brand.id)
                .values(quantity=0, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            removed, remaining = before, 0
            message = f"Completely removed {label} from inventory (removed {removed} bottles)"
        else:
            if before < quantity:
                raise InsufficientStock(before, quantity, label)
            if not decrement_stock(db, brand.id, quantity, now):
                raise InsufficientStock(current_quantity(db, brand.id), quantity, label)
            removed, remaining = quantity, before - quantity
            message = f"Removed {removed} bottles of {label}. Remaining: {remaining}"

        db.commit()
    except InsufficientStock as exc:
        db.rollback()
        logger.warning("Stock removal rejected: brand_id=%s %s", brand_id, exc)
        raise
    except Exception:
        db.rollback()
        raise

    logger.info("Stock removed: brand_id=%s removed=%s remaining=%s", brand_id, removed, remaining)
    return {"success": True, "message": message, "removed": removed, "remaining": remaining}


# ---- READ QUERIES ----
def list_brands(db: Session) -> List[Brand]:
    return db.query(Brand).order_by(Brand.updated_at.desc(), Brand.id.desc()).all()

def search_brands(db: Session, term: str, limit: Optional[int] = None) -> List[Brand]:
    term = (term or "").strip().lower()
    if not term:
        return []
    like = f"%{term}%"
    return (
        db.query(Brand)
        .filter(or_(func.lower(Brand.name).like(like), func.lower(Brand.type).like(like)))
        .order_by(Brand.name.asc(), Brand.type.asc())
        .limit(limit or settings.SEARCH_LIMIT)
        .all()
    )

def list_stock_entries(db: Session, brand_id: Optional[int] = None) -> List[StockEntry]:
    query = db.query(StockEntry)
    if brand_id is not None:
        query = query.filter(StockEntry.brand_id == brand_id)
    return query.order_by(StockEntry.added_date.desc(), StockEntry.id.desc()).all()
