# backend/models/brand.py
from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint, UniqueConstraint
from database import Base
from utils.dates import utc_now

# Model Brand
# A sellable catalog item identified by the (name, type) pair.
# The catalog is the source of truth for current quantity and price;
# a "deleted" brand keeps its row with quantity 0.
class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False, index=True)

    # Price per bottle, overwritten by the latest stock addition.
    price = Column(Float, CheckConstraint("price > 0", name="ck_brands_price_positive"), nullable=False)

    # Bottles on hand.
    quantity = Column(Integer, CheckConstraint("quantity >= 0", name="ck_brands_quantity_non_negative"), nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now)

    __table_args__ = (
        UniqueConstraint("name", "type", name="uq_brands_name_type"),
    )

    @property
    def label(self) -> str:
        return f"{self.name} {self.type}"
