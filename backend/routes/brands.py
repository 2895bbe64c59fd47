# backend/routes/brands.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from database import get_db
import schemas.stock as stock_schemas
import services.inventory as inventory_service

router = APIRouter(prefix="/brands", tags=["Brands"])


@router.get("", response_model=List[stock_schemas.BrandOut])
def list_brands(db: Session = Depends(get_db)):
    return inventory_service.list_brands(db)


# Lookup for the sale screen: matches name or type, case-insensitive
@router.get("/search", response_model=List[stock_schemas.BrandOut])
def search_brands(
    q: str = Query(..., min_length=1, description="Part of the brand name or type"),
    db: Session = Depends(get_db),
):
    return inventory_service.search_brands(db, q)
