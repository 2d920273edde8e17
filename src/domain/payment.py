"""Payment Value Object

A recorded payment fact. Payments are appended, never edited.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import Field
from src.domain.actor import PaymentActor
from src.domain.base import DomainModel, generate_uuid


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    UPI = "upi"
    CARD = "card"
    OTHER = "other"


class Payment(DomainModel):
    id: str = Field(default_factory=generate_uuid)

    amount_paid: Decimal = Field(
        ...,
        ge=0,
        description="Amount received"
    )

    payment_method: PaymentMethod = Field(
        default=PaymentMethod.BANK_TRANSFER,
        description="How the payment was made"
    )

    transaction_id: Optional[str] = Field(
        default=None,
        description="External transaction reference"
    )

    paid_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the money was paid"
    )

    recorded_by: PaymentActor = Field(
        ...,
        description="User or client who recorded the payment"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
