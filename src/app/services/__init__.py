from .unit_of_work import UnitOfWork
from .notification_service import NotificationService, NotificationError
from .pdf_service import PdfService
from .document_storage import DocumentStorage
from .invoice_number import InvoiceNumberGenerator

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "NotificationError",
    "PdfService",
    "DocumentStorage",
    "InvoiceNumberGenerator",
]
