# backend/services/backfill.py
import logging

from sqlalchemy import exists
from sqlalchemy.orm import Session

from models.brand import Brand
from models.stock import StockEntry
from models.migration import MigrationMarker
from utils.dates import utc_now, iso_week_key

logger = logging.getLogger(__name__)

STOCK_ENTRIES_BACKFILL = "stock_entries_backfill"


def backfill_stock_entries(db: Session, marker_name: str = STOCK_ENTRIES_BACKFILL) -> dict:
    """
    One-time synthesis of stock entries for brands created before the stock
    entry log existed.

    Each stocked brand without any entry gets one entry built from its
    current quantity and price, dated at the brand's creation. This is a best
    effort reconstruction, so the job records a completion marker and refuses
    to run twice.
    """
    existing_entries = db.query(StockEntry).count()
    brands_total = db.query(Brand).count()

    marker = db.query(MigrationMarker).filter(MigrationMarker.name == marker_name).first()
    if marker:
        logger.info("Backfill %s already completed at %s, skipping", marker_name, marker.completed_at)
        return {
            "success": True,
            "message": f"Migration already completed on {marker.completed_at:%Y-%m-%d %H:%M}. Nothing to do.",
            "brands_processed": 0,
            "stock_entries_created": 0,
            "existing_stock_entries": existing_entries,
            "already_completed": True,
        }

    now = utc_now()
    has_entry = exists().where(StockEntry.brand_id == Brand.id)
    candidates = (
        db.query(Brand)
        .filter(Brand.quantity > 0, ~has_entry)
        .order_by(Brand.id.asc())
        .all()
    )

    try:
        for brand in candidates:
            added = brand.created_at or now
            db.add(StockEntry(
                brand_id=brand.id,
                brand_name=brand.name,
                brand_type=brand.type,
                quantity=brand.quantity,
                price_per_bottle=brand.price,
                total_value=brand.quantity * brand.price,
                added_date=added,
                week_of_year=iso_week_key(added),
                created_at=now,
            ))
            logger.info("Backfilled stock entry for %s %s (brand_id=%s)", brand.name, brand.type, brand.id)

        db.add(MigrationMarker(
            name=marker_name,
            completed_at=now,
            meta={"stock_entries_created": len(candidates), "brands_processed": brands_total},
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Backfill %s completed: %s entries created", marker_name, len(candidates))
    return {
        "success": True,
        "message": f"Migration completed successfully. Created {len(candidates)} stock entries for existing brands.",
        "brands_processed": brands_total,
        "stock_entries_created": len(candidates),
        "existing_stock_entries": existing_entries,
        "already_completed": False,
    }
