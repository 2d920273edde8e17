"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
The whole aggregate is read and written as one document.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, List, Optional
from src.domain.invoice import Invoice
from src.domain.invoice_status import InvoiceStatus


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Writes are atomic per document. update() is guarded by the invoice
    version so a stale read cannot overwrite a newer save.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Persist a new invoice

        Args:
            invoice: Recalculated invoice (version 0)

        Returns:
            Stored Invoice (version 1)
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_owner(
        self,
        owner_id: str,
        status: Optional[InvoiceStatus] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Invoice]:
        """
        Retrieve an issuing user's invoices, newest first

        Args:
            owner_id: Issuing user
            status: Optional filter by status
            limit: Maximum number of invoices to return (None = all)
            offset: Offset for pagination

        Returns:
            List of invoices
        """
        pass

    @abstractmethod
    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        pass

    @abstractmethod
    async def find_due_before(
        self, due_date: date, statuses: Iterable[InvoiceStatus]
    ) -> List[Invoice]:
        """
        Find invoices in one of the given statuses whose due date is before due_date

        Used by the overdue sweep.
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Replace the stored document

        Args:
            invoice: Invoice carrying the version it was read at

        Returns:
            Stored Invoice with the version incremented

        Raises:
            InvoiceConflictError: the stored version moved on since the read
        """
        pass

    @abstractmethod
    async def delete(self, invoice_id: str) -> None:
        pass
