"""Request schemas for Invoice API

Pydantic models for validating incoming HTTP requests. Ownership and actor
come from the bearer token, never from the body.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from src.app.use_cases.invoicing.dtos import LineItemDTO, ReminderType
from src.domain.payment import PaymentMethod


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating an invoice

    Used for POST /invoices endpoint.
    """

    client_id: str = Field(..., min_length=1, description="Invoiced client")
    due_date: date = Field(..., description="Payment due date")
    items: List[LineItemDTO] = Field(default_factory=list, description="Line items")
    notes: str = Field(default="", description="Free-form notes")
    terms: str = Field(default="", description="Terms and conditions")
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0, description="Flat discount")

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "3f2b9c0e8d7a4b1c9e6f5a4d3c2b1a09",
                "due_date": "2024-02-15",
                "items": [
                    {"description": "Design work", "quantity": "2", "rate": "100.00"},
                    {"description": "Hosting", "quantity": "1", "rate": "50.00"},
                ],
                "terms": "Net 15",
            }
        }


class UpdateInvoiceRequestSchema(BaseModel):
    """Request schema for PATCH /invoices/{invoice_id}; omitted fields stay unchanged"""

    due_date: Optional[date] = None
    items: Optional[List[LineItemDTO]] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    discount_amount: Optional[Decimal] = Field(default=None, ge=0)


class AddPaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /invoices/{invoice_id}/payments endpoint. Amount and
    transaction id are checked by the invoice so the error names the field.
    """

    amount: Decimal = Field(..., description="Amount received (must be > 0)")
    transaction_id: Optional[str] = Field(default=None, description="External transaction reference")
    method: Optional[PaymentMethod] = Field(default=None, description="Defaults to bank_transfer")
    paid_at: Optional[datetime] = Field(default=None, description="Defaults to now")
    notify: bool = Field(default=False, description="Send a payment confirmation to the client")

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "250.00",
                "transaction_id": "UTR123456789",
                "method": "upi",
                "notify": True,
            }
        }


class ChangeStatusRequestSchema(BaseModel):
    """Request schema for PATCH /invoices/{invoice_id}/status"""

    status: str = Field(..., description="draft | sent | viewed | partial_paid | paid | overdue | cancelled")
    reason: Optional[str] = Field(default=None, description="Logged with the change")


class SendInvoiceRequestSchema(BaseModel):
    custom_message: Optional[str] = Field(default=None, max_length=2000)


class SendReminderRequestSchema(BaseModel):
    reminder_type: ReminderType = ReminderType.GENTLE
    custom_message: Optional[str] = Field(default=None, max_length=2000)


class BulkReminderRequestSchema(BaseModel):
    invoice_ids: List[str] = Field(..., description="Invoices to remind about")
    reminder_type: ReminderType = ReminderType.GENTLE

    @field_validator('invoice_ids')
    @classmethod
    def validate_invoice_ids(cls, v):
        """Ensure at least one invoice is selected"""
        if not v:
            raise ValueError("No invoices selected")
        return v


class CreateClientRequestSchema(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    company_name: str = ""
    company_address: str = ""
    gst_no: str = ""
