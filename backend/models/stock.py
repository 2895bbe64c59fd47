# backend/models/stock.py
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from database import Base
from utils.dates import utc_now

# One row per stock addition. Brand name/type/price are frozen at insert
# time; rows are never updated or deleted.
class StockEntry(Base):
    __tablename__ = "stock_entries"

    id = Column(Integer, primary_key=True, index=True)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False, index=True)

    brand_name = Column(String, nullable=False)
    brand_type = Column(String, nullable=False)

    # Quantity added in this entry
    quantity = Column(Integer, nullable=False)
    price_per_bottle = Column(Float, nullable=False)
    total_value = Column(Float, nullable=False)

    added_date = Column(DateTime, nullable=False, index=True)
    # ISO week key, e.g. "2025-W32"
    week_of_year = Column(String(8), nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)

    brand = relationship("Brand")
