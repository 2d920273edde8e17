"""DeleteInvoice Use Case"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.document_storage import DocumentStorage
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import InvoiceConflictError, InvoiceError
from .common import load_owned_invoice, to_error
from .dtos import DeletedInvoiceDTO

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete invoice

    Business Rules:
    1. Only invoices without payments in draft or cancelled status may be
       deleted; anything else must be cancelled instead (Conflict)
    2. The stored document, if any, is removed after the delete commits

    Flow:
    1. Load invoice owned by the caller
    2. Check deletion guard
    3. Delete and commit
    4. Remove stored document
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        document_storage: Optional[DocumentStorage] = None,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.document_storage = document_storage

    async def execute(self, invoice_id: str, owner_id: str) -> Result[DeletedInvoiceDTO]:
        try:
            # Step 1: Load invoice
            invoice = await load_owned_invoice(self.invoice_repo, invoice_id, owner_id)

            # Step 2: Deletion guard
            if not invoice.can_delete():
                raise InvoiceConflictError(
                    "INVOICE_NOT_DELETABLE",
                    "Only draft or cancelled invoices without payments can be deleted",
                    invoice_id=invoice_id,
                    reason=f"status={invoice.status.value}, payments={len(invoice.payments)}",
                )

            # Step 3: Delete and commit
            await self.invoice_repo.delete(invoice_id)
            await self.uow.commit()

            logger.info(f"Invoice {invoice.invoice_number} deleted by owner {owner_id}")

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete invoice {invoice_id}: {e}")
            return Return.err(
                Error(
                    code="DELETE_INVOICE_FAILED",
                    message="Failed to delete invoice",
                    reason=str(e),
                )
            )

        # Step 4: Remove stored document
        if invoice.pdf_path and self.document_storage:
            try:
                await self.document_storage.delete(invoice.pdf_path)
            except OSError as e:
                logger.warning(f"Could not remove document {invoice.pdf_path}: {e}")

        return Return.ok(
            DeletedInvoiceDTO(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                deleted_at=datetime.utcnow(),
            )
        )
