"""UpdateInvoice Use Case

Edits the mutable fields of an invoice and re-derives its totals.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import InvoiceConflictError, InvoiceError
from src.domain.invoice_status import InvoiceStatus
from .common import load_owned_invoice, save_invoice, to_error
from .dtos import InvoiceResponseDTO, UpdateInvoiceCommandDTO

logger = logging.getLogger(__name__)


class UpdateInvoice:
    """
    Use Case: Edit invoice

    Business Rules:
    1. Paid invoices cannot be edited (Conflict)
    2. due_date can only be changed while no payments are recorded (Conflict)
    3. Only fields present on the command are touched
    4. Totals and status are re-derived on save, so a smaller total can
       promote a partially paid invoice to paid

    Flow:
    1. Load invoice owned by the caller
    2. Check edit guards
    3. Apply changes
    4. Recalculate, persist and commit
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, command: UpdateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            # Step 1: Load invoice
            invoice = await load_owned_invoice(self.invoice_repo, command.invoice_id, command.owner_id)

            # Step 2: Edit guards
            if invoice.status == InvoiceStatus.PAID:
                raise InvoiceConflictError(
                    "INVOICE_ALREADY_PAID",
                    "Paid invoices cannot be edited",
                    invoice_id=invoice.id,
                )
            if command.due_date is not None and command.due_date != invoice.due_date and invoice.payments:
                raise InvoiceConflictError(
                    "DUE_DATE_LOCKED",
                    "Due date cannot be changed once payments are recorded",
                    invoice_id=invoice.id,
                    field="due_date",
                )

            # Step 3: Apply changes
            if command.due_date is not None:
                invoice.due_date = command.due_date
            if command.items is not None:
                invoice.items = [item.to_line_item() for item in command.items]
            if command.notes is not None:
                invoice.notes = command.notes
            if command.terms is not None:
                invoice.terms = command.terms
            if command.discount_amount is not None:
                invoice.discount_amount = command.discount_amount

            # Step 4: Recalculate and persist
            updated_invoice = await save_invoice(self.invoice_repo, invoice)
            await self.uow.commit()

            logger.info(
                f"Invoice {updated_invoice.invoice_number} updated "
                f"(total={updated_invoice.total_amount}, status={updated_invoice.status.value})"
            )

            return Return.ok(InvoiceResponseDTO.from_invoice(updated_invoice))

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update invoice {command.invoice_id}: {e}")
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_FAILED",
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )
