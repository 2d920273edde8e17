"""Invoice Counter Domain Entity

Per-scope sequence state used to allocate invoice numbers.
"""

from sqlmodel import Field, Column
from sqlalchemy import BigInteger, String
from src.domain.base import BaseModel


class InvoiceCounter(BaseModel, table=True):
    """
    Invoice Counter - monotonically increasing sequence per scope

    Domain Rules:
    - key identifies the scope (issuing user + year)
    - Created on first use, incremented atomically, never decremented or reset
    - Written only through CounterRepository.increment
    """

    __tablename__ = "invoice_counters"

    key: str = Field(
        sa_column=Column(String(128), primary_key=True),
        description="Scope key (e.g., invoice_<owner>_2024)"
    )

    value: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Last allocated value"
    )
