"""Invoicing use cases"""
from .create_invoice import CreateInvoice
from .update_invoice import UpdateInvoice
from .add_payment import AddPayment
from .change_status import ChangeInvoiceStatus
from .delete_invoice import DeleteInvoice
from .get_invoice import GetInvoice, ListInvoices
from .invoice_stats import GetInvoiceStats
from .documents import GenerateInvoiceDocument, GetInvoiceDocument, DeleteInvoiceDocument
from .send_invoice import SendInvoice
from .send_reminder import SendPaymentReminder, SendBulkReminders
from .mark_viewed import MarkInvoiceViewed
from .sweep_overdue import SweepOverdueInvoices
from .clients import CreateClient, GetClient, ListClients
from .dtos import (
    LineItemDTO,
    CreateInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
    AddPaymentCommandDTO,
    ChangeStatusCommandDTO,
    ReminderType,
    SendInvoiceCommandDTO,
    SendReminderCommandDTO,
    BulkReminderCommandDTO,
    CreateClientCommandDTO,
    InvoiceResponseDTO,
    InvoiceSummaryDTO,
    ListInvoicesResponseDTO,
    NotificationResultDTO,
    PaymentResultDTO,
    BulkReminderResultDTO,
    DeletedInvoiceDTO,
    DocumentResponseDTO,
    DocumentContentDTO,
    DeletedDocumentDTO,
    InvoiceStatsDTO,
    SweepResultDTO,
    ClientResponseDTO,
)

__all__ = [
    "CreateInvoice",
    "UpdateInvoice",
    "AddPayment",
    "ChangeInvoiceStatus",
    "DeleteInvoice",
    "GetInvoice",
    "ListInvoices",
    "GetInvoiceStats",
    "GenerateInvoiceDocument",
    "GetInvoiceDocument",
    "DeleteInvoiceDocument",
    "SendInvoice",
    "SendPaymentReminder",
    "SendBulkReminders",
    "MarkInvoiceViewed",
    "SweepOverdueInvoices",
    "CreateClient",
    "GetClient",
    "ListClients",
    "LineItemDTO",
    "CreateInvoiceCommandDTO",
    "UpdateInvoiceCommandDTO",
    "AddPaymentCommandDTO",
    "ChangeStatusCommandDTO",
    "ReminderType",
    "SendInvoiceCommandDTO",
    "SendReminderCommandDTO",
    "BulkReminderCommandDTO",
    "CreateClientCommandDTO",
    "InvoiceResponseDTO",
    "InvoiceSummaryDTO",
    "ListInvoicesResponseDTO",
    "NotificationResultDTO",
    "PaymentResultDTO",
    "BulkReminderResultDTO",
    "DeletedInvoiceDTO",
    "DocumentResponseDTO",
    "DocumentContentDTO",
    "DeletedDocumentDTO",
    "InvoiceStatsDTO",
    "SweepResultDTO",
    "ClientResponseDTO",
]
