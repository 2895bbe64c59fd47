# backend/routes/logs.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from database import get_db
from models.log import Log
from utils.owner_auth import owner_required

router = APIRouter(prefix="/logs", tags=["Logs"])

# --- SCHEMAS ---
class LogResponse(BaseModel):
    id: int
    actor: Optional[str] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    ts: datetime
    meta: Optional[Any] = None

    model_config = ConfigDict(from_attributes=True)

class LogPage(BaseModel):
    items: List[LogResponse]
    total: int
    page: int
    page_size: int


def _parse_day(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    if not value:
        return None
    text = value
    # A bare YYYY-MM-DD upper bound covers the whole day
    if end_of_day and len(text) == 10:
        text += " 23:59:59"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Bad datetime format: {value}")


# --- ENDPOINT ---
@router.get("", response_model=LogPage, dependencies=[Depends(owner_required("logs.read"))])
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Filter by action"),
    actor: Optional[str] = Query(None, description="Filter by actor (e.g. owner)"),
    resource: Optional[str] = Query(None, description="Filter by resource"),
    status: Optional[str] = Query(None, description="Filter by status (SUCCESS/FAIL)"),
    date_from: Optional[str] = Query(None, description="From date (YYYY-MM-DD or ISO datetime)"),
    date_to: Optional[str] = Query(None, description="To date (YYYY-MM-DD or ISO datetime)"),
    db: Session = Depends(get_db),
):
    query = db.query(Log)

    if action:
        query = query.filter(Log.action.ilike(f"%{action}%"))
    if actor:
        query = query.filter(Log.actor == actor)
    if resource:
        query = query.filter(Log.resource.ilike(f"%{resource}%"))
    if status:
        query = query.filter(Log.status == status)

    dt_from = _parse_day(date_from)
    dt_to = _parse_day(date_to, end_of_day=True)
    if dt_from:
        query = query.filter(Log.ts >= dt_from)
    if dt_to:
        query = query.filter(Log.ts <= dt_to)

    # Newest first
    query = query.order_by(Log.ts.desc(), Log.id.desc())

    total = query.count()
    logs = query.offset((page - 1) * page_size).limit(page_size).all()

    return {
        "items": logs,
        "total": total,
        "page": page,
        "page_size": page_size,
    }
