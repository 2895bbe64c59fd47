# backend/schemas/stock.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import List, Literal

StockStatus = Literal["out", "low", "good"]

# Catalog row
class BrandOut(BaseModel):
    id: int
    name: str
    type: str
    price: float
    quantity: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

# Brand annotated with its stock status and value on hand
class StockLevelOut(BrandOut):
    stock_status: StockStatus
    total_value: float

# Request schema for adding stock
class StockAdd(BaseModel):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    price: float = Field(gt=0)
    quantity: int = Field(gt=0)

class StockAddResponse(BaseModel):
    success: bool
    message: str
    brand_id: int
    stock_entry_id: int
    total_value: float

# Request schema for owner stock removal
class StockRemove(BaseModel):
    brand_id: int
    quantity: int = Field(gt=0)
    owner_password: str

class StockRemoveResponse(BaseModel):
    success: bool
    message: str
    removed: int
    remaining: int

# Single stock addition record
class StockEntryOut(BaseModel):
    id: int
    brand_id: int
    brand_name: str
    brand_type: str
    quantity: int
    price_per_bottle: float
    total_value: float
    added_date: datetime
    week_of_year: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

# Stock entries of one ISO week
class WeeklyStockGroup(BaseModel):
    week: str
    total_value: float
    entry_count: int
    entries: List[StockEntryOut]
