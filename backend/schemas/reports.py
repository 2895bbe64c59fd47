# schemas/reports.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

# Sales ranking per (name, type)
class TopSellingBrand(BaseModel):
    brand_id: Optional[int] = None
    name: str
    type: str
    label: str
    quantity: int
    revenue: float

# Sales and stock dashboard figures
class AnalyticsResponse(BaseModel):
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    total_revenue: float
    total_transactions: int
    total_bottles_sold: int
    cash_revenue: float
    upi_revenue: float
    total_brands: int
    total_stock: int
    out_of_stock_brands: int
    low_stock_brands: int
    top_selling_brands: List[TopSellingBrand]

# Result of the stock entry backfill job
class BackfillResponse(BaseModel):
    success: bool
    message: str
    brands_processed: int
    stock_entries_created: int
    existing_stock_entries: int
    already_completed: bool
