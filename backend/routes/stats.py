# backend/routes/stats.py

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from utils.dates import from_epoch_ms
from schemas.reports import AnalyticsResponse
import services.reports as reports_service

router = APIRouter(
    prefix="/stats",
    tags=["Stats"]
)


# === Analytics dashboard ===

@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(
    date_from: Optional[int] = Query(None, ge=0, description="Epoch milliseconds, inclusive"),
    date_to: Optional[int] = Query(None, ge=0, description="Epoch milliseconds, inclusive"),
    db: Session = Depends(get_db),
):
    if date_from is not None and date_to is not None and date_from > date_to:
        raise HTTPException(status_code=400, detail="date_from must not be after date_to")

    return reports_service.analytics(db, from_epoch_ms(date_from), from_epoch_ms(date_to))
