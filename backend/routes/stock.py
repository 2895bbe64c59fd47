# backend/routes/stock.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import Optional, List

from database import get_db
from utils.audit import write_log, OWNER_ACTOR
from utils.errors import Unauthorized
from utils.owner_auth import OwnerAuthorizer, get_owner_authorizer
import schemas.stock as stock_schemas
import services.inventory as inventory_service
import services.reports as reports_service

router = APIRouter(prefix="/stock", tags=["Stock"])


@router.post("", response_model=stock_schemas.StockAddResponse)
def add_stock(
    payload: stock_schemas.StockAdd,
    request: Request,
    db: Session = Depends(get_db),
):
    result = inventory_service.add_stock(
        db, name=payload.name, brand_type=payload.type, price=payload.price, quantity=payload.quantity
    )
    write_log(
        db, request,
        action="STOCK_ADD",
        resource="stock",
        status="SUCCESS",
        meta={"brand_id": result["brand_id"], "qty": payload.quantity, "price": payload.price},
    )
    return result


@router.post("/remove", response_model=stock_schemas.StockRemoveResponse)
def remove_stock(
    payload: stock_schemas.StockRemove,
    request: Request,
    db: Session = Depends(get_db),
    authorizer: OwnerAuthorizer = Depends(get_owner_authorizer),
):
    try:
        result = inventory_service.remove_stock(
            db, authorizer,
            brand_id=payload.brand_id, quantity=payload.quantity, owner_password=payload.owner_password,
        )
    except Unauthorized:
        # Record rejected owner attempts
        write_log(
            db, request, action="STOCK_REMOVE", resource="stock", status="FAIL",
            meta={"brand_id": payload.brand_id, "reason": "unauthorized"},
        )
        raise

    write_log(
        db, request,
        action="STOCK_REMOVE",
        resource="stock",
        status="SUCCESS",
        actor=OWNER_ACTOR,
        meta={"brand_id": payload.brand_id, "removed": result["removed"], "remaining": result["remaining"]},
    )
    return result


@router.get("/levels", response_model=List[stock_schemas.StockLevelOut])
def get_stock_levels(db: Session = Depends(get_db)):
    return reports_service.stock_levels(db)


@router.get("/history/weekly", response_model=List[stock_schemas.WeeklyStockGroup])
def get_weekly_stock_history(db: Session = Depends(get_db)):
    return reports_service.weekly_stock_history(db)


@router.get("/entries", response_model=List[stock_schemas.StockEntryOut])
def list_stock_entries(
    brand_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return inventory_service.list_stock_entries(db, brand_id=brand_id)
