"""Invoice Aggregate

The invoice with its embedded items, payments, status log and email log,
treated as one consistency boundary.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union
from pydantic import Field
from src.domain.actor import Actor, ClientActor, PaymentActor
from src.domain.base import DomainModel, generate_uuid
from src.domain.email_log import EmailLogEntry, EmailStatus, EmailType
from src.domain.exceptions import InvoiceValidationError
from src.domain.invoice_line import LineItem
from src.domain.invoice_status import DELETABLE_STATUSES, InvoiceStatus
from src.domain.payment import Payment, PaymentMethod
from src.domain.status_change import StatusChange

ZERO = Decimal("0")

MANUAL_STATUS_REASON = "Manual status change"


def parse_status(value: Union[str, InvoiceStatus], invoice_id: Optional[str] = None) -> InvoiceStatus:
    try:
        return InvoiceStatus(value)
    except ValueError:
        raise InvoiceValidationError(
            "INVALID_STATUS",
            f"Invalid status '{value}'. Expected one of: "
            f"{', '.join(s.value for s in InvoiceStatus)}",
            invoice_id=invoice_id,
            field="status",
        )


class Invoice(DomainModel):
    """
    Invoice - aggregate root

    Domain Rules:
    - invoice_number, owner_id and client_id are assigned once at creation
    - subtotal, tax_amount, total_amount, total_paid and remaining_amount are
      derived by recalculate() and never set by callers
    - payments, status_log and email_log are append-only
      (payments are only ever wiped by an explicit reset)
    - every status change appends one StatusChange
    - only draft or cancelled invoices without payments may be deleted
    """

    id: str = Field(default_factory=generate_uuid, frozen=True)

    invoice_number: str = Field(
        ...,
        frozen=True,
        description="Unique invoice number (e.g., INV-2024-0001)"
    )

    owner_id: str = Field(..., frozen=True, description="Issuing user")
    client_id: str = Field(..., frozen=True, description="Invoiced client")

    invoice_date: date = Field(default_factory=date.today, frozen=True)
    due_date: date

    status: InvoiceStatus = InvoiceStatus.DRAFT

    items: List[LineItem] = Field(default_factory=list)

    subtotal: Decimal = ZERO
    tax_amount: Decimal = ZERO
    discount_amount: Decimal = Field(default=ZERO, ge=0)
    total_amount: Decimal = ZERO
    total_paid: Decimal = ZERO
    remaining_amount: Decimal = ZERO

    payments: List[Payment] = Field(default_factory=list)
    status_log: List[StatusChange] = Field(default_factory=list)
    email_log: List[EmailLogEntry] = Field(default_factory=list)

    notes: str = ""
    terms: str = ""

    pdf_path: Optional[str] = Field(
        default=None,
        description="Reference to the last generated document"
    )
    client_viewed_at: Optional[datetime] = None
    last_client_access: Optional[datetime] = None
    allow_client_edit: bool = True

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    version: int = Field(
        default=0,
        description="Stored document version (0 = never persisted)"
    )

    def add_item(
        self,
        description: str,
        quantity: Decimal,
        rate: Decimal,
        tax_rate: Optional[Decimal] = None,
    ) -> LineItem:
        item = LineItem(
            description=description,
            quantity=quantity,
            rate=rate,
            tax_rate=tax_rate if tax_rate is not None else ZERO,
            amount=Decimal(quantity) * Decimal(rate),
        )
        self.items.append(item)
        return item

    def record_payment(
        self,
        amount: Decimal,
        transaction_id: Optional[str],
        recorded_by: PaymentActor,
        method: Optional[PaymentMethod] = None,
        paid_at: Optional[datetime] = None,
    ) -> Payment:
        """
        Append a payment record

        Totals and status are not touched here; they follow on the next
        recalculation.

        Raises:
            InvoiceValidationError: amount is not positive or the transaction id is missing
        """
        if amount is None or amount <= 0:
            raise InvoiceValidationError(
                "INVALID_PAYMENT_AMOUNT",
                "Payment amount must be greater than 0",
                invoice_id=self.id,
                field="amount",
            )
        if not transaction_id or not transaction_id.strip():
            raise InvoiceValidationError(
                "MISSING_TRANSACTION_ID",
                "Payment transaction id is required",
                invoice_id=self.id,
                field="transaction_id",
            )

        payment = Payment(
            amount_paid=amount,
            payment_method=method or PaymentMethod.BANK_TRANSFER,
            transaction_id=transaction_id.strip(),
            paid_at=paid_at or datetime.utcnow(),
            recorded_by=recorded_by,
        )
        self.payments.append(payment)
        return payment

    def change_status(
        self,
        new_status: Union[str, InvoiceStatus],
        changed_by: Actor,
        reason: Optional[str] = None,
    ) -> StatusChange:
        """Set the status and append the matching audit entry"""
        status = parse_status(new_status, self.id)
        entry = StatusChange(
            old_status=self.status,
            new_status=status,
            changed_by=changed_by,
            reason=reason or MANUAL_STATUS_REASON,
        )
        self.status = status
        self.status_log.append(entry)
        return entry

    def clear_payments(self) -> None:
        """Wipe the payment history (destructive, used by manual resets)"""
        self.payments = []
        self.total_paid = ZERO

    def log_email(
        self,
        email_type: EmailType,
        sent_to: str,
        status: EmailStatus = EmailStatus.SENT,
        email_id: Optional[str] = None,
        pdf_generated: bool = False,
    ) -> EmailLogEntry:
        entry = EmailLogEntry(
            email_type=email_type,
            sent_to=sent_to,
            status=status,
            email_id=email_id,
            pdf_generated=pdf_generated,
        )
        self.email_log.append(entry)
        return entry

    def mark_viewed(self, client: ClientActor, at: Optional[datetime] = None) -> Optional[StatusChange]:
        """Record a client view; a sent invoice becomes viewed"""
        at = at or datetime.utcnow()
        self.client_viewed_at = at
        self.last_client_access = at
        if self.status == InvoiceStatus.SENT:
            return self.change_status(InvoiceStatus.VIEWED, client, "Viewed by client")
        return None

    def can_delete(self) -> bool:
        return not self.payments and self.status in DELETABLE_STATUSES

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready copy handed to collaborators and storage"""
        return self.model_dump(mode="json")
