from .base import BaseModel, DomainModel, generate_uuid
from .actor import Actor, UserActor, ClientActor, SystemActor, SYSTEM
from .client import Client
from .email_log import EmailLogEntry, EmailStatus, EmailType
from .exceptions import (
    ErrorKind,
    InvoiceError,
    InvoiceNotFoundError,
    InvoiceValidationError,
    InvoiceConflictError,
    InvoiceUnauthorizedError,
)
from .invoice import Invoice
from .invoice_counter import InvoiceCounter
from .invoice_line import LineItem
from .invoice_status import InvoiceStatus
from .payment import Payment, PaymentMethod
from .recalculation import recalculate
from .status_change import StatusChange

__all__ = [
    "BaseModel",
    "DomainModel",
    "generate_uuid",
    "Actor",
    "UserActor",
    "ClientActor",
    "SystemActor",
    "SYSTEM",
    "Client",
    "EmailLogEntry",
    "EmailStatus",
    "EmailType",
    "ErrorKind",
    "InvoiceError",
    "InvoiceNotFoundError",
    "InvoiceValidationError",
    "InvoiceConflictError",
    "InvoiceUnauthorizedError",
    "Invoice",
    "InvoiceCounter",
    "LineItem",
    "InvoiceStatus",
    "Payment",
    "PaymentMethod",
    "recalculate",
    "StatusChange",
]
