"""Status Change Audit Entry"""

from datetime import datetime
from typing import Optional
from pydantic import Field
from src.domain.actor import Actor
from src.domain.base import DomainModel, generate_uuid
from src.domain.invoice_status import InvoiceStatus


class StatusChange(DomainModel):
    """One entry of the append-only status log"""

    id: str = Field(default_factory=generate_uuid)
    old_status: Optional[InvoiceStatus] = None
    new_status: InvoiceStatus
    changed_by: Actor
    reason: Optional[str] = None
    changed_at: datetime = Field(default_factory=datetime.utcnow)
