"""Invoice storage record

Invoices are stored as documents: the full aggregate lives in a JSON column
and a few projection columns are kept for lookups and ordering.
"""

from datetime import date, datetime
from typing import Any, Dict
from sqlmodel import Field, Column, Index, SQLModel
from sqlalchemy import JSON, Date, DateTime, Integer, String


class InvoiceRecord(SQLModel, table=True):
    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_owner_id_created_at', 'owner_id', 'created_at'),
        Index('ix_invoices_client_id', 'client_id'),
        Index('ix_invoices_status_due_date', 'status', 'due_date'),
    )

    id: str = Field(sa_column=Column(String(32), primary_key=True))

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number"
    )

    owner_id: str = Field(sa_column=Column(String(64), nullable=False))
    client_id: str = Field(sa_column=Column(String(32), nullable=False))

    status: str = Field(sa_column=Column(String(20), nullable=False))
    due_date: date = Field(sa_column=Column(Date, nullable=False))

    version: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Incremented on every write; guards concurrent updates"
    )

    document: Dict[str, Any] = Field(
        sa_column=Column(JSON, nullable=False),
        description="Full invoice aggregate"
    )

    created_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
