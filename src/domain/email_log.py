"""Email Log Entry

Record of a notification attempt made for an invoice.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import Field
from src.domain.base import DomainModel, generate_uuid


class EmailType(str, Enum):
    """Notification templates"""
    INVOICE_SENT = "invoice_sent"
    PAYMENT_REMINDER = "payment_reminder"
    PAYMENT_RECEIVED = "payment_received"
    STATUS_UPDATE = "status_update"


class EmailStatus(str, Enum):
    """Delivery outcome"""
    SENT = "sent"
    FAILED = "failed"
    DELIVERED = "delivered"
    OPENED = "opened"


class EmailLogEntry(DomainModel):
    id: str = Field(default_factory=generate_uuid)
    email_type: EmailType
    sent_to: str
    sent_at: datetime = Field(default_factory=datetime.utcnow)
    status: EmailStatus = EmailStatus.SENT
    email_id: Optional[str] = Field(
        default=None,
        description="Delivery id returned by the email service"
    )
    pdf_generated: bool = Field(
        default=False,
        description="Whether the invoice document was attached"
    )
