"""Line Item Value Object

An entry on an invoice. Order is preserved for rendering only.
"""

from decimal import Decimal
from typing import Optional
from pydantic import Field
from src.domain.base import DomainModel, generate_uuid


class LineItem(DomainModel):
    """
    Line Item - one billable entry on an invoice

    Domain Rules:
    - quantity, rate, tax_rate and amount are never negative
    - amount defaults to quantity * rate when not supplied
    - tax_rate is a percentage and defaults to 0
    """

    id: str = Field(default_factory=generate_uuid)

    description: str = Field(
        ...,
        min_length=1,
        description="Line item description (e.g., 'Website redesign')"
    )

    quantity: Decimal = Field(
        ...,
        ge=0,
        description="Quantity (hours, units, ...)"
    )

    rate: Decimal = Field(
        ...,
        ge=0,
        description="Price per unit"
    )

    tax_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Tax rate in percent (None = 0)"
    )

    amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Line amount (None = quantity * rate)"
    )
