# utils/audit.py
import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from models.log import Log

logger = logging.getLogger(__name__)

OWNER_ACTOR = "owner"


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None or request.client is None:
        return None
    return request.client.host


def write_log(
    db: Session,
    request: Optional[Request] = None,
    *,
    action: str,
    resource: str,
    status: str = "SUCCESS",
    actor: Optional[str] = None,
    meta: Optional[dict] = None,
) -> Log:
    """Append one audit row in its own commit, after the ledger change is settled."""
    entry = Log(
        actor=actor,
        action=action,
        resource=resource,
        status=status,
        ip=client_ip(request),
        meta=meta or {},
    )
    db.add(entry)
    db.commit()
    logger.debug("Audit %s %s %s meta=%s", action, resource, status, entry.meta)
    return entry
