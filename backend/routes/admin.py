# backend/routes/admin.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from utils.audit import write_log, OWNER_ACTOR
from utils.owner_auth import owner_required
from schemas.reports import BackfillResponse
from services.backfill import backfill_stock_entries

router = APIRouter(prefix="/admin", tags=["Admin"])


# One-time creation of stock entries for brands that predate the stock log
@router.post(
    "/backfill-stock-entries",
    response_model=BackfillResponse,
    dependencies=[Depends(owner_required("admin.backfill"))],
)
def run_stock_entries_backfill(
    request: Request,
    db: Session = Depends(get_db),
):
    result = backfill_stock_entries(db)
    write_log(
        db, request,
        action="BACKFILL_STOCK_ENTRIES",
        resource="admin",
        status="SUCCESS",
        actor=OWNER_ACTOR,
        meta={"created": result["stock_entries_created"], "already_completed": result["already_completed"]},
    )
    return result
