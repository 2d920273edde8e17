from .invoice_repository import SqlAlchemyInvoiceRepository
from .counter_repository import SqlAlchemyCounterRepository
from .client_repository import SqlAlchemyClientRepository
from .records import InvoiceRecord

__all__ = [
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyCounterRepository",
    "SqlAlchemyClientRepository",
    "InvoiceRecord",
]
