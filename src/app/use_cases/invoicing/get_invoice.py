"""Invoice read use cases

GetInvoice and ListInvoices. Read-only, no unit of work.
"""

from typing import Optional
from libs.result import Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.actor import Actor
from src.domain.exceptions import InvoiceError, InvoiceNotFoundError
from src.domain.invoice import parse_status
from .common import is_party, load_invoice, to_error
from .dtos import InvoiceResponseDTO, ListInvoicesResponseDTO


class GetInvoice:
    """
    Read a single invoice

    The issuing user and the invoiced client may read it; anyone else gets
    INVOICE_NOT_FOUND so the invoice's existence is not disclosed.
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: str, actor: Actor) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await load_invoice(self.invoice_repo, invoice_id)
            if not is_party(invoice, actor):
                raise InvoiceNotFoundError(
                    "INVOICE_NOT_FOUND",
                    f"Invoice with ID {invoice_id} not found",
                    invoice_id=invoice_id,
                )
        except InvoiceError as e:
            return Return.err(to_error(e))

        return Return.ok(InvoiceResponseDTO.from_invoice(invoice))


class ListInvoices:
    """
    List an issuing user's invoices

    Ordered by created_at DESC (most recent first), optionally filtered by status.
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(
        self,
        owner_id: str,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Result[ListInvoicesResponseDTO]:
        """
        Args:
            owner_id: Issuing user
            status: Optional status filter (validated)
            limit: Maximum number of invoices (None = all)
            offset: Number of invoices to skip

        Returns:
            Result[ListInvoicesResponseDTO]: Invoices and their count
        """
        try:
            status_filter = parse_status(status) if status else None
        except InvoiceError as e:
            return Return.err(to_error(e))

        invoices = await self.invoice_repo.get_by_owner(
            owner_id=owner_id,
            status=status_filter,
            limit=limit,
            offset=offset,
        )

        return Return.ok(
            ListInvoicesResponseDTO(
                count=len(invoices),
                invoices=[InvoiceResponseDTO.from_invoice(invoice) for invoice in invoices],
            )
        )
