from .unit_of_work import SqlAlchemyUnitOfWork
from .document_storage import LocalFileDocumentStorage
from .pdf_service import ReportLabPdfService
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LocalFileDocumentStorage",
    "ReportLabPdfService",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
]
