# utils/owner_auth.py
import secrets
from typing import Optional, Protocol

from fastapi import Depends, Header

from config import settings
from utils.errors import Unauthorized

# Permission check for destructive ledger operations. Ledger services only
# see this interface, so the shared secret can be swapped for real per-user
# authorization without touching them.
class OwnerAuthorizer(Protocol):
    def require(self, credential: Optional[str], action: str) -> None:
        ...


class SharedSecretAuthorizer:
    """Accepts exactly one process-wide owner password."""

    def __init__(self, secret: str):
        self._secret = secret or ""

    def require(self, credential: Optional[str], action: str) -> None:
        # An unset secret locks every gated action
        if not self._secret or credential is None:
            raise Unauthorized()
        if not secrets.compare_digest(credential.encode("utf-8"), self._secret.encode("utf-8")):
            raise Unauthorized()


def get_owner_authorizer() -> OwnerAuthorizer:
    return SharedSecretAuthorizer(settings.OWNER_PASSWORD)


# Dependency factory for routes gated by the X-Owner-Password header
def owner_required(action: str):
    def _checker(
        x_owner_password: Optional[str] = Header(None),
        authorizer: OwnerAuthorizer = Depends(get_owner_authorizer),
    ):
        authorizer.require(x_owner_password, action)
        return authorizer
    return _checker
