"""SendInvoice Use Case

Delivers the generated invoice document to the client.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.notification_service import NotificationService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor import UserActor
from src.domain.email_log import EmailType
from src.domain.exceptions import InvoiceError, InvoiceNotFoundError
from src.domain.invoice_status import InvoiceStatus
from .common import load_client, load_owned_invoice, notify_client, save_invoice, to_error
from .dtos import NotificationResultDTO, SendInvoiceCommandDTO

logger = logging.getLogger(__name__)

SENT_REASON = "Invoice sent to client"


class SendInvoice:
    """
    Use Case: Send invoice to client

    Business Rules:
    1. A PDF must have been generated first (DOCUMENT_NOT_FOUND otherwise)
    2. Every attempt is appended to the email log, delivered or failed
    3. On delivery a draft invoice moves to sent with a logged change by the
       issuing user
    4. A failed delivery is still committed (the email log keeps it) and
       reported as NOTIFICATION_FAILED

    Flow:
    1. Load invoice and check the document reference
    2. Load client
    3. Deliver invoice_sent template with the artifact reference
    4. Move draft to sent if delivered
    5. Persist and commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        client_repo: ClientRepository,
        notification_service: NotificationService,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.notification_service = notification_service

    async def execute(self, command: SendInvoiceCommandDTO) -> Result[NotificationResultDTO]:
        try:
            # Step 1: Load invoice
            invoice = await load_owned_invoice(self.invoice_repo, command.invoice_id, command.owner_id)
            if not invoice.pdf_path:
                raise InvoiceNotFoundError(
                    "DOCUMENT_NOT_FOUND",
                    f"Invoice {invoice.invoice_number} PDF not created",
                    invoice_id=invoice.id,
                    field="pdf_path",
                )

            # Step 2: Load client
            client = await load_client(self.client_repo, invoice.client_id)

            # Step 3: Deliver
            notification = await notify_client(
                self.notification_service,
                invoice,
                client,
                EmailType.INVOICE_SENT,
                context={
                    "custom_message": command.custom_message,
                    "attachment": invoice.pdf_path,
                },
                pdf_attached=True,
            )

            # Step 4: Draft becomes sent once delivered
            status_changed = False
            if notification.delivered and invoice.status == InvoiceStatus.DRAFT:
                invoice.change_status(
                    InvoiceStatus.SENT, UserActor(user_id=command.owner_id), SENT_REASON
                )
                status_changed = True

            # Step 5: Persist and commit
            await save_invoice(
                self.invoice_repo, invoice, skip_status_derivation=status_changed
            )
            await self.uow.commit()

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to send invoice {command.invoice_id}: {e}")
            return Return.err(
                Error(
                    code="SEND_INVOICE_FAILED",
                    message="Failed to send invoice",
                    reason=str(e),
                )
            )

        if not notification.delivered:
            return Return.err(
                Error(
                    code="NOTIFICATION_FAILED",
                    message=f"Failed to send invoice {notification.invoice_number}",
                    reason=notification.error,
                    details={"invoice_id": notification.invoice_id, "sent_to": notification.sent_to},
                )
            )

        return Return.ok(notification)
