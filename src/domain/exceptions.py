"""Invoice domain errors

Each error carries a stable code, a kind used by the API to choose a status
code, and details naming the entity and offending field.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"


class InvoiceError(Exception):
    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(
        self,
        code: str,
        message: str,
        *,
        invoice_id: Optional[str] = None,
        field: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.reason = reason
        self.details: Dict[str, Any] = {}
        if invoice_id is not None:
            self.details["invoice_id"] = invoice_id
        if field is not None:
            self.details["field"] = field


class InvoiceNotFoundError(InvoiceError):
    kind = ErrorKind.NOT_FOUND


class InvoiceValidationError(InvoiceError):
    kind = ErrorKind.VALIDATION


class InvoiceConflictError(InvoiceError):
    kind = ErrorKind.CONFLICT


class InvoiceUnauthorizedError(InvoiceError):
    kind = ErrorKind.UNAUTHORIZED
