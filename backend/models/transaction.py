# backend/models/transaction.py
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base
from utils.dates import utc_now

SINGLE = "single"
MULTI = "multi"

# Completed sale. Two payload shapes share this table:
#   single - brand_id / brand_name / brand_type / quantity / price_per_bottle
#   multi  - rows in transaction_items
# Legacy rows without transaction_type are single sales.
class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    transaction_type = Column(String(10), nullable=True)

    # Single-item payload
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=True, index=True)
    brand_name = Column(String, nullable=True)
    brand_type = Column(String, nullable=True)
    quantity = Column(Integer, nullable=True)
    price_per_bottle = Column(Float, nullable=True)

    # Common fields
    total_amount = Column(Float, nullable=False)
    payment_method = Column(
        String(10),
        CheckConstraint("payment_method IN ('cash', 'upi')", name="ck_transactions_payment_method"),
        nullable=False,
        index=True,
    )
    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now, index=True)

    items = relationship(
        "TransactionItem",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionItem.position",
    )

    @property
    def shape(self) -> str:
        return self.transaction_type or SINGLE


# Line of a multi-item (cart) sale with a snapshot of the brand at sale time
class TransactionItem(Base):
    __tablename__ = "transaction_items"

    id = Column(Integer, primary_key=True, index=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False, index=True)
    brand_name = Column(String, nullable=False)
    brand_type = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    price_per_bottle = Column(Float, nullable=False)
    item_total = Column(Float, nullable=False)

    transaction = relationship("Transaction", back_populates="items")
