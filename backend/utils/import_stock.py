import os
import sys

import pandas as pd
from sqlalchemy.orm import Session

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from database import SessionLocal, init_db
from services.inventory import add_stock
from utils.errors import InvalidInput

REQUIRED_COLUMNS = ["name", "type", "price", "quantity"]


def load_stock_csv(path: str) -> pd.DataFrame:
    """Read a stock sheet and keep only complete, positive rows."""
    df = pd.read_csv(path)
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise InvalidInput(f"Missing columns in {path}: {', '.join(missing)}")

    df = df[REQUIRED_COLUMNS].dropna().copy()
    df["name"] = df["name"].astype(str).str.strip()
    df["type"] = df["type"].astype(str).str.strip()
    df["price"] = pd.to_numeric(df["price"], errors="coerce")
    df["quantity"] = pd.to_numeric(df["quantity"], errors="coerce")
    df = df.dropna(subset=["price", "quantity"])
    df = df[(df["name"] != "") & (df["type"] != "") & (df["price"] > 0) & (df["quantity"] > 0)]
    # Fractional bottle counts are not stock
    df = df[df["quantity"] == df["quantity"].round()]
    return df


def import_stock_csv(db: Session, path: str) -> int:
    df = load_stock_csv(path)
    count = 0
    for row in df.itertuples(index=False):
        add_stock(db, name=row.name, brand_type=row.type, price=float(row.price), quantity=int(row.quantity))
        count += 1
    return count


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python utils/import_stock.py <stock.csv>")
        sys.exit(1)

    init_db()
    session = SessionLocal()
    try:
        imported = import_stock_csv(session, sys.argv[1])
        print(f"Imported {imported} stock rows.")
    finally:
        session.close()
