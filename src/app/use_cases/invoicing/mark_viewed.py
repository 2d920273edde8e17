"""MarkInvoiceViewed Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor import ClientActor
from src.domain.exceptions import InvoiceError, InvoiceNotFoundError
from .common import load_invoice, save_invoice, to_error
from .dtos import InvoiceResponseDTO

logger = logging.getLogger(__name__)


class MarkInvoiceViewed:
    """
    Use Case: Client opens an invoice

    Records client_viewed_at and last_client_access. A sent invoice moves to
    viewed with a status log entry by the client; that save skips automatic
    derivation, later saves may move it on (e.g. to overdue or partial_paid).
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: str, client: ClientActor) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await load_invoice(self.invoice_repo, invoice_id)
            if invoice.client_id != client.client_id:
                raise InvoiceNotFoundError(
                    "INVOICE_NOT_FOUND",
                    f"Invoice with ID {invoice_id} not found",
                    invoice_id=invoice_id,
                )

            change = invoice.mark_viewed(client)
            updated_invoice = await save_invoice(
                self.invoice_repo, invoice, skip_status_derivation=change is not None
            )
            await self.uow.commit()

            if change:
                logger.info(f"Invoice {updated_invoice.invoice_number} viewed by client {client.client_id}")

            return Return.ok(InvoiceResponseDTO.from_invoice(updated_invoice))

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to mark invoice {invoice_id} viewed: {e}")
            return Return.err(
                Error(
                    code="MARK_VIEWED_FAILED",
                    message="Failed to record invoice view",
                    reason=str(e),
                )
            )
