from .invoice_repository import InvoiceRepository
from .counter_repository import CounterRepository
from .client_repository import ClientRepository

__all__ = [
    "InvoiceRepository",
    "CounterRepository",
    "ClientRepository",
]
