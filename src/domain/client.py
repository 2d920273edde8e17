"""Client Domain Entity

A customer of an issuing user. Invoices reference exactly one client.
"""

from datetime import datetime
from sqlmodel import Field, Column, Index
from sqlalchemy import String
from src.domain.base import BaseModel, generate_uuid


class Client(BaseModel, table=True):
    """
    Client - invoiced party

    Domain Rules:
    - Each client belongs to exactly one issuing user (owner_id)
    - email is the notification recipient
    """

    __tablename__ = "clients"
    __table_args__ = (
        Index('ix_clients_owner_id', 'owner_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(32), primary_key=True),
        description="Unique client identifier"
    )

    owner_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Issuing user that owns this client"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Contact name"
    )

    email: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Notification recipient"
    )

    company_name: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
        description="Company name shown on documents"
    )

    company_address: str = Field(
        default="",
        sa_column=Column(String(500), nullable=False, default=""),
        description="Billing address"
    )

    gst_no: str = Field(
        default="",
        sa_column=Column(String(32), nullable=False, default=""),
        description="GST registration number"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Client creation timestamp"
    )

    @property
    def display_name(self) -> str:
        return self.company_name or self.name
