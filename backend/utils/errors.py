# utils/errors.py
from typing import Optional

# Ledger failures. Each kind maps to one HTTP status in main.py.

class LedgerError(Exception):
    kind = "LedgerError"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(LedgerError):
    kind = "NotFound"
    status_code = 404


class InsufficientStock(LedgerError):
    kind = "InsufficientStock"
    status_code = 400

    def __init__(self, available: int, requested: int, label: Optional[str] = None):
        target = f" for {label}" if label else ""
        super().__init__(f"Not enough stock{target}. Available: {available}, Requested: {requested}")
        self.available = available
        self.requested = requested
        self.label = label


class Unauthorized(LedgerError):
    kind = "Unauthorized"
    status_code = 401

    def __init__(self, message: str = "Unauthorized: Invalid owner password"):
        super().__init__(message)


class InvalidInput(LedgerError):
    kind = "InvalidInput"
    status_code = 400


class NotSupported(LedgerError):
    kind = "NotImplemented"
    status_code = 501
