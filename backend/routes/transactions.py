# backend/routes/transactions.py
from fastapi import APIRouter, Depends, Header, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from utils.audit import write_log, OWNER_ACTOR
from utils.dates import from_epoch_ms
from utils.errors import Unauthorized
from utils.owner_auth import OwnerAuthorizer, get_owner_authorizer
import schemas.transaction as txn_schemas
import services.sales as sales_service

router = APIRouter(prefix="/transactions", tags=["Transactions"])


# Single-item sale
@router.post("", response_model=txn_schemas.SingleSaleResponse)
def create_transaction(
    payload: txn_schemas.SingleSaleCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    result = sales_service.create_single_transaction(
        db,
        brand_id=payload.brand_id,
        quantity=payload.quantity,
        payment_method=payload.payment_method,
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
    )
    write_log(
        db, request,
        action="SALE_CREATE",
        resource="transactions",
        status="SUCCESS",
        meta={"transaction_id": result["transaction_id"], "brand_id": payload.brand_id, "total": result["total_amount"]},
    )
    return result


# Multi-item cart checkout
@router.post("/cart", response_model=txn_schemas.CartSaleResponse)
def create_cart_transaction(
    payload: txn_schemas.CartSaleCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    result = sales_service.create_cart_transaction(
        db,
        items=[line.model_dump() for line in payload.items],
        payment_method=payload.payment_method,
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
    )
    write_log(
        db, request,
        action="CART_CHECKOUT",
        resource="transactions",
        status="SUCCESS",
        meta={"transaction_id": result["transaction_id"], "items": result["item_count"], "total": result["total_amount"]},
    )
    return result


@router.delete("/{transaction_id}", response_model=txn_schemas.DeleteTransactionResponse)
def delete_transaction(
    transaction_id: int,
    request: Request,
    x_owner_password: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    authorizer: OwnerAuthorizer = Depends(get_owner_authorizer),
):
    try:
        result = sales_service.delete_transaction(
            db, authorizer, transaction_id=transaction_id, owner_password=x_owner_password
        )
    except Unauthorized:
        write_log(
            db, request, action="SALE_DELETE", resource="transactions", status="FAIL",
            meta={"transaction_id": transaction_id, "reason": "unauthorized"},
        )
        raise

    write_log(
        db, request,
        action="SALE_DELETE",
        resource="transactions",
        status="SUCCESS",
        actor=OWNER_ACTOR,
        meta={"transaction_id": transaction_id},
    )
    return result


@router.get("", response_model=List[txn_schemas.TransactionOut])
def list_transactions(
    limit: Optional[int] = Query(None, ge=1, le=500),
    date_from: Optional[int] = Query(None, ge=0, description="Epoch milliseconds, inclusive"),
    date_to: Optional[int] = Query(None, ge=0, description="Epoch milliseconds, inclusive"),
    db: Session = Depends(get_db),
):
    rows = sales_service.list_transactions(
        db, limit=limit, date_from=from_epoch_ms(date_from), date_to=from_epoch_ms(date_to)
    )
    return [sales_service.transaction_to_out(t) for t in rows]


@router.get("/today", response_model=List[txn_schemas.TransactionOut])
def todays_transactions(db: Session = Depends(get_db)):
    return [sales_service.transaction_to_out(t) for t in sales_service.todays_transactions(db)]
