# backend/schemas/transaction.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

PaymentMethod = Literal["cash", "upi"]

# Request schema for a single-item sale
class SingleSaleCreate(BaseModel):
    brand_id: int
    quantity: int = Field(gt=0)
    payment_method: PaymentMethod
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None

class SingleSaleResponse(BaseModel):
    success: bool
    transaction_id: int
    total_amount: float
    message: str
    remaining_stock: int

# Cart line requested at checkout
class CartLine(BaseModel):
    brand_id: int
    quantity: int = Field(gt=0)

# Request schema for a multi-item sale
class CartSaleCreate(BaseModel):
    items: List[CartLine]
    payment_method: PaymentMethod
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None

# Snapshot of a cart line as sold
class SoldItemOut(BaseModel):
    brand_id: int
    brand_name: str
    brand_type: str
    quantity: int
    price_per_bottle: float
    item_total: float

class CartSaleResponse(BaseModel):
    success: bool
    transaction_id: int
    total_amount: float
    item_count: int
    message: str
    items: List[SoldItemOut]

class DeleteTransactionResponse(BaseModel):
    success: bool
    message: str

# --- Stored transactions: tagged union on transaction_type ---
class TransactionBase(BaseModel):
    id: int
    total_amount: float
    payment_method: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    created_at: datetime

class SingleTransactionOut(TransactionBase):
    transaction_type: Literal["single"]
    brand_id: Optional[int] = None
    brand_name: Optional[str] = None
    brand_type: Optional[str] = None
    quantity: int
    price_per_bottle: float

class MultiTransactionOut(TransactionBase):
    transaction_type: Literal["multi"]
    items: List[SoldItemOut]

TransactionOut = Annotated[
    Union[SingleTransactionOut, MultiTransactionOut],
    Field(discriminator="transaction_type"),
]
