# utils/dates.py
from datetime import datetime, timezone
from typing import Optional

# All timestamps are stored as naive UTC datetimes.

def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

def resolve_timestamp(candidate: Optional[datetime] = None) -> datetime:
    """Return `candidate` as naive UTC, or the current time when missing."""
    if candidate is None:
        return utc_now()
    if candidate.tzinfo is not None:
        return candidate.astimezone(timezone.utc).replace(tzinfo=None)
    return candidate

def iso_week_key(moment: datetime) -> str:
    """ISO 8601 week key in `YYYY-Www` form, e.g. 2025-W01."""
    iso_year, iso_week, _ = moment.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"

def from_epoch_ms(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).replace(tzinfo=None)

def to_epoch_ms(moment: datetime) -> int:
    return int(moment.replace(tzinfo=timezone.utc).timestamp() * 1000)

def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)
