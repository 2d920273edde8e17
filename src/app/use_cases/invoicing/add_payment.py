"""AddPayment Use Case

Records a payment against an invoice and confirms full settlement with an
explicit status change.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.notification_service import NotificationService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.email_log import EmailType
from src.domain.exceptions import InvoiceError, InvoiceUnauthorizedError
from src.domain.invoice_status import InvoiceStatus
from .common import is_party, load_client, load_invoice, notify_client, save_invoice, to_error
from .dtos import AddPaymentCommandDTO, InvoiceResponseDTO, PaymentResultDTO

logger = logging.getLogger(__name__)

# Settlement never moves an invoice out of these
SETTLED_OR_CLOSED = (InvoiceStatus.PAID, InvoiceStatus.CANCELLED)


class AddPayment:
    """
    Use Case: Record a payment

    Business Rules:
    1. Amount must be > 0 and a transaction id is required
    2. Only the issuing user or the invoiced client may record a payment
    3. Recalculation may promote the status to partial_paid or paid
       (draft and cancelled invoices keep their status)
    4. If nothing remains to be paid and the status is not paid yet, the
       invoice is explicitly moved to paid with a reason naming the payment.
       A cancelled invoice stays cancelled
    5. A confirmation notification failure never undoes the payment

    Flow:
    1. Load invoice and check the actor is a party to it
    2. Append payment
    3. Recalculate and persist
    4. Confirm settlement if needed
    5. Commit transaction
    6. Optionally notify the client and log the outcome
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        client_repo: Optional[ClientRepository] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.notification_service = notification_service

    async def execute(self, command: AddPaymentCommandDTO) -> Result[PaymentResultDTO]:
        """
        Execute payment recording

        Args:
            command: AddPaymentCommandDTO with amount, transaction id and actor

        Returns:
            Result[PaymentResultDTO]: Updated invoice, payment id and notification outcome
        """
        try:
            # Step 1: Load invoice
            invoice = await load_invoice(self.invoice_repo, command.invoice_id)
            if not is_party(invoice, command.actor):
                raise InvoiceUnauthorizedError(
                    "PAYMENT_FORBIDDEN",
                    "Only the issuing user or the invoiced client may record payments",
                    invoice_id=command.invoice_id,
                )

            # Step 2: Append payment
            payment = invoice.record_payment(
                amount=command.amount,
                transaction_id=command.transaction_id,
                recorded_by=command.actor,
                method=command.method,
                paid_at=command.paid_at,
            )

            # Step 3: Recalculate and persist
            invoice = await save_invoice(self.invoice_repo, invoice)

            # Step 4: Explicit settlement confirmation
            if invoice.remaining_amount == 0 and invoice.status not in SETTLED_OR_CLOSED:
                invoice.change_status(
                    InvoiceStatus.PAID,
                    command.actor,
                    f"Payment of {payment.amount_paid} received",
                )
                invoice = await save_invoice(
                    self.invoice_repo, invoice, skip_status_derivation=True
                )

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Payment of {payment.amount_paid} recorded on invoice {invoice.invoice_number} "
                f"by {command.actor.role} {command.actor.identity} "
                f"(paid={invoice.total_paid}, remaining={invoice.remaining_amount}, "
                f"status={invoice.status.value})"
            )

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to record payment on invoice {command.invoice_id}: {e}")
            return Return.err(
                Error(
                    code="ADD_PAYMENT_FAILED",
                    message="Failed to record payment",
                    reason=str(e),
                )
            )

        # Step 6: Notify client (payment is already committed)
        notification = None
        if command.notify and self.notification_service and self.client_repo:
            try:
                client = await load_client(self.client_repo, invoice.client_id)
                notification = await notify_client(
                    self.notification_service,
                    invoice,
                    client,
                    EmailType.PAYMENT_RECEIVED,
                    context={
                        "amount_received": str(payment.amount_paid),
                        "payment_method": payment.payment_method.value,
                        "payment_date": payment.paid_at.isoformat(),
                        "remaining_amount": str(invoice.remaining_amount),
                    },
                )
                invoice = await save_invoice(self.invoice_repo, invoice)
                await self.uow.commit()
            except Exception as e:
                await self.uow.rollback()
                logger.error(
                    f"Payment confirmation for invoice {invoice.invoice_number} could not be logged: {e}"
                )

        return Return.ok(
            PaymentResultDTO(
                invoice=InvoiceResponseDTO.from_invoice(invoice),
                payment_id=payment.id,
                notification=notification,
            )
        )
