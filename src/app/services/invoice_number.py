"""Invoice Number Generator

Allocates invoice numbers from a per-user, per-year counter.
"""

import logging
from datetime import datetime
from typing import Optional
from src.app.repositories.counter_repository import CounterRepository

logger = logging.getLogger(__name__)


def counter_key(owner_id: str, year: int) -> str:
    return f"invoice_{owner_id}_{year}"


def format_invoice_number(year: int, value: int) -> str:
    return f"INV-{year}-{value:04d}"


class InvoiceNumberGenerator:
    """
    Sequence generator for invoice numbers

    Format: INV-YYYY-NNNN (e.g., INV-2024-0001), restarting at 1 every
    calendar year for each issuing user. Uniqueness rests entirely on the
    atomic CounterRepository.increment; a failure there propagates so no
    invoice is created without a number.
    """

    def __init__(self, counter_repo: CounterRepository):
        self.counter_repo = counter_repo

    async def next(self, scope_key: str) -> int:
        return await self.counter_repo.increment(scope_key)

    async def next_invoice_number(self, owner_id: str, now: Optional[datetime] = None) -> str:
        year = (now or datetime.utcnow()).year
        value = await self.next(counter_key(owner_id, year))
        invoice_number = format_invoice_number(year, value)
        logger.debug(f"Allocated invoice number {invoice_number} for owner {owner_id}")
        return invoice_number
