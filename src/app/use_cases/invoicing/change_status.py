"""ChangeInvoiceStatus Use Case

Manual status transition by the issuing user.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor import UserActor
from src.domain.exceptions import InvoiceError, InvoiceUnauthorizedError
from src.domain.invoice import parse_status
from src.domain.invoice_status import PAYMENT_RESET_STATUSES
from .common import load_owned_invoice, save_invoice, to_error
from .dtos import ChangeStatusCommandDTO, InvoiceResponseDTO

logger = logging.getLogger(__name__)


class ChangeInvoiceStatus:
    """
    Use Case: Manual status change

    Business Rules:
    1. new_status must be one of the seven invoice statuses
    2. Only the issuing user may change the status; clients and the system
       actor are rejected
    3. Moving to draft, cancelled, sent or overdue wipes the payment history
       and resets total_paid to 0
    4. The save that follows skips automatic status derivation; totals are
       still recomputed
    5. Exactly one StatusChange is appended (default reason "Manual status change")

    Flow:
    1. Validate status
    2. Check actor role
    3. Load invoice owned by the actor
    4. Reset payments if required
    5. Apply status change
    6. Persist and commit
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, command: ChangeStatusCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            # Step 1: Validate status
            new_status = parse_status(command.new_status, command.invoice_id)

            # Step 2: Only the issuing user may change status
            if not isinstance(command.actor, UserActor):
                raise InvoiceUnauthorizedError(
                    "STATUS_CHANGE_FORBIDDEN",
                    f"Role '{command.actor.role}' may not change invoice status",
                    invoice_id=command.invoice_id,
                    field="status",
                )

            # Step 3: Load invoice
            invoice = await load_owned_invoice(
                self.invoice_repo, command.invoice_id, command.actor.user_id
            )

            # Step 4: Reset financial history
            cleared = len(invoice.payments)
            if new_status in PAYMENT_RESET_STATUSES and cleared:
                invoice.clear_payments()
                logger.warning(
                    f"Clearing {cleared} payment(s) on invoice {invoice.invoice_number} "
                    f"on manual change to {new_status.value}"
                )

            # Step 5: Apply status change
            old_status = invoice.status
            invoice.change_status(new_status, command.actor, command.reason)

            # Step 6: Persist and commit
            updated_invoice = await save_invoice(
                self.invoice_repo, invoice, skip_status_derivation=True
            )
            await self.uow.commit()

            logger.info(
                f"Invoice {updated_invoice.invoice_number} status changed "
                f"{old_status.value} -> {new_status.value} by user {command.actor.user_id}"
            )

            return Return.ok(InvoiceResponseDTO.from_invoice(updated_invoice))

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to change status of invoice {command.invoice_id}: {e}")
            return Return.err(
                Error(
                    code="CHANGE_STATUS_FAILED",
                    message="Failed to change invoice status",
                    reason=str(e),
                )
            )
