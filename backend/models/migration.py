# backend/models/migration.py
from sqlalchemy import Column, Integer, String, DateTime, JSON
from database import Base
from utils.dates import utc_now

# Completion marker for one-time data reconciliation jobs
class MigrationMarker(Base):
    __tablename__ = "migration_markers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    completed_at = Column(DateTime, nullable=False, default=utc_now)
    meta = Column(JSON, nullable=True)
