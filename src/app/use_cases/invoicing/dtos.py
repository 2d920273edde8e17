"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.actor import Actor, PaymentActor
from src.domain.email_log import EmailLogEntry
from src.domain.invoice import Invoice
from src.domain.invoice_line import LineItem
from src.domain.payment import Payment, PaymentMethod
from src.domain.status_change import StatusChange


class LineItemDTO(BaseModel):
    """Line item as supplied by the caller"""

    description: str = Field(..., min_length=1, description="Line item description")
    quantity: Decimal = Field(..., ge=0, description="Quantity")
    rate: Decimal = Field(..., ge=0, description="Price per unit")
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, description="Tax rate in percent")
    amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Explicit amount (defaults to quantity * rate)"
    )

    def to_line_item(self) -> LineItem:
        return LineItem(**self.model_dump())


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case.
    """

    owner_id: str = Field(..., description="Issuing user")
    client_id: str = Field(..., description="Invoiced client (must belong to owner)")
    due_date: date = Field(..., description="Payment due date")
    items: List[LineItemDTO] = Field(default_factory=list, description="Line items in display order")
    notes: str = Field(default="", description="Free-form notes")
    terms: str = Field(default="", description="Terms and conditions")
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0, description="Flat discount")

    class Config:
        json_schema_extra = {
            "example": {
                "owner_id": "user_123",
                "client_id": "client_456",
                "due_date": "2024-02-15",
                "items": [
                    {"description": "Design work", "quantity": "2", "rate": "100.00"},
                    {"description": "Hosting", "quantity": "1", "rate": "50.00", "tax_rate": "18"},
                ],
                "notes": "",
                "terms": "Net 15",
                "discount_amount": "0",
            }
        }


class UpdateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for editing an invoice

    Fields left as None are not touched.
    """

    invoice_id: str
    owner_id: str
    due_date: Optional[date] = None
    items: Optional[List[LineItemDTO]] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    discount_amount: Optional[Decimal] = Field(default=None, ge=0)


class AddPaymentCommandDTO(BaseModel):
    """
    Command DTO for recording a payment

    Amount and transaction id are validated by the invoice aggregate so a bad
    payment surfaces as a validation error naming the field.
    """

    invoice_id: str = Field(..., description="Invoice being paid")
    amount: Decimal = Field(..., description="Amount received (must be > 0)")
    transaction_id: Optional[str] = Field(default=None, description="External transaction reference")
    method: Optional[PaymentMethod] = Field(default=None, description="Defaults to bank_transfer")
    paid_at: Optional[datetime] = Field(default=None, description="Defaults to now")
    actor: PaymentActor = Field(..., description="User or client recording the payment")
    notify: bool = Field(default=False, description="Send a payment confirmation to the client")


class ChangeStatusCommandDTO(BaseModel):
    """Command DTO for a manual status change"""

    invoice_id: str
    new_status: str = Field(..., description="One of the seven invoice statuses")
    actor: Actor
    reason: Optional[str] = Field(default=None, description="Defaults to 'Manual status change'")


class ReminderType(str, Enum):
    GENTLE = "gentle"
    URGENT = "urgent"
    FINAL = "final"


class SendInvoiceCommandDTO(BaseModel):
    invoice_id: str
    owner_id: str
    custom_message: Optional[str] = None


class SendReminderCommandDTO(BaseModel):
    invoice_id: str
    owner_id: str
    reminder_type: ReminderType = ReminderType.GENTLE
    custom_message: Optional[str] = None


class BulkReminderCommandDTO(BaseModel):
    owner_id: str
    invoice_ids: List[str] = Field(..., min_length=1)
    reminder_type: ReminderType = ReminderType.GENTLE


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for invoice operations

    The full aggregate including payment, status and email histories.
    """

    id: str
    invoice_number: str
    owner_id: str
    client_id: str
    invoice_date: date
    due_date: date
    status: str
    items: List[LineItem]
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    total_paid: Decimal
    remaining_amount: Decimal
    payments: List[Payment]
    status_log: List[StatusChange]
    email_log: List[EmailLogEntry]
    notes: str
    terms: str
    pdf_path: Optional[str] = None
    client_viewed_at: Optional[datetime] = None
    last_client_access: Optional[datetime] = None
    allow_client_edit: bool
    created_at: datetime
    updated_at: datetime
    version: int

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceResponseDTO":
        data = invoice.model_dump()
        data["status"] = invoice.status.value
        return cls(**data)


class InvoiceSummaryDTO(BaseModel):
    id: str
    invoice_number: str
    client_id: str
    status: str
    total_amount: Decimal
    remaining_amount: Decimal
    due_date: date

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceSummaryDTO":
        return cls(
            id=invoice.id,
            invoice_number=invoice.invoice_number,
            client_id=invoice.client_id,
            status=invoice.status.value,
            total_amount=invoice.total_amount,
            remaining_amount=invoice.remaining_amount,
            due_date=invoice.due_date,
        )


class ListInvoicesResponseDTO(BaseModel):
    count: int
    invoices: List[InvoiceResponseDTO]


class NotificationResultDTO(BaseModel):
    """Outcome of one notification attempt"""

    invoice_id: str
    invoice_number: str
    email_type: str
    sent_to: str
    delivered: bool
    email_id: Optional[str] = None
    error: Optional[str] = None


class PaymentResultDTO(BaseModel):
    invoice: InvoiceResponseDTO
    payment_id: str
    notification: Optional[NotificationResultDTO] = None


class BulkReminderErrorDTO(BaseModel):
    invoice_id: str
    error: str


class BulkReminderResultDTO(BaseModel):
    results: List[NotificationResultDTO]
    errors: List[BulkReminderErrorDTO]
    total_sent: int
    total_errors: int


class DeletedInvoiceDTO(BaseModel):
    invoice_id: str
    invoice_number: str
    deleted_at: datetime


class DocumentResponseDTO(BaseModel):
    invoice_id: str
    invoice_number: str
    pdf_path: str
    filename: str
    generated_at: datetime


class DeletedDocumentDTO(BaseModel):
    invoice_id: str
    invoice_number: str
    pdf_path: str
    file_removed: bool
    deleted_at: datetime


class DocumentContentDTO(BaseModel):
    invoice_id: str
    invoice_number: str
    filename: str
    content: bytes


class FinancialStatsDTO(BaseModel):
    total_invoices: int
    total_amount: Decimal
    total_paid: Decimal
    total_pending: Decimal


class MonthlyStatsDTO(BaseModel):
    month: int = Field(..., ge=1, le=12)
    total_amount: Decimal
    total_paid: Decimal
    count: int


class StatsSummaryDTO(BaseModel):
    total_invoices: int
    paid_invoices: int
    pending_invoices: int
    draft_invoices: int


class InvoiceStatsDTO(BaseModel):
    status_counts: Dict[str, int]
    financial: FinancialStatsDTO
    monthly: List[MonthlyStatsDTO]
    overdue_invoices: List[InvoiceSummaryDTO]
    summary: StatsSummaryDTO


class SweepResultDTO(BaseModel):
    """Result of one overdue sweep run"""

    invoices_checked: int
    invoices_updated: int
    updated_invoice_ids: List[str]
    swept_at: datetime
    execution_time_ms: int


class CreateClientCommandDTO(BaseModel):
    owner_id: str
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, description="Notification recipient")
    company_name: str = ""
    company_address: str = ""
    gst_no: str = ""


class ClientResponseDTO(BaseModel):
    id: str
    owner_id: str
    name: str
    email: str
    company_name: str
    company_address: str
    gst_no: str
    created_at: datetime
