"""Payment reminder use cases

SendPaymentReminder for one invoice, SendBulkReminders for a selection.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.notification_service import NotificationService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.email_log import EmailType
from src.domain.exceptions import InvoiceConflictError, InvoiceError
from src.domain.invoice_status import REMINDABLE_STATUSES
from .common import load_client, load_owned_invoice, notify_client, save_invoice, to_error
from .dtos import (
    BulkReminderCommandDTO,
    BulkReminderErrorDTO,
    BulkReminderResultDTO,
    NotificationResultDTO,
    ReminderType,
    SendReminderCommandDTO,
)

logger = logging.getLogger(__name__)

REMINDER_MESSAGES = {
    ReminderType.GENTLE: "This is a gentle reminder that your invoice is due.",
    ReminderType.URGENT: "URGENT: Your invoice is overdue. Please arrange payment immediately.",
    ReminderType.FINAL: "FINAL NOTICE: This is the final reminder for your overdue invoice.",
}


class SendPaymentReminder:
    """
    Use Case: Remind a client of an outstanding invoice

    Business Rules:
    1. Only invoices in sent, viewed, partial_paid or overdue status can be
       reminded (INVOICE_NOT_OUTSTANDING otherwise)
    2. The reminder wording follows the reminder type (gentle, urgent, final)
    3. The attempt is appended to the email log; a failed delivery is
       committed and reported as NOTIFICATION_FAILED
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

    async def remind(
        self,
        invoice_id: str,
        owner_id: str,
        reminder_type: ReminderType,
        custom_message: Optional[str] = None,
    ) -> NotificationResultDTO:
        """
        Deliver one reminder and commit its email log entry

        Raises:
            InvoiceError: invoice missing, not owned or not outstanding
        """
        invoice = await load_owned_invoice(self.invoice_repo, invoice_id, owner_id)
        if invoice.status not in REMINDABLE_STATUSES:
            raise InvoiceConflictError(
                "INVOICE_NOT_OUTSTANDING",
                f"Invoice {invoice.invoice_number} is {invoice.status.value}; nothing to remind about",
                invoice_id=invoice.id,
                field="status",
            )

        client = await load_client(self.client_repo, invoice.client_id)
        days_overdue = max(0, (datetime.utcnow().date() - invoice.due_date).days)

        notification = await notify_client(
            self.notification_service,
            invoice,
            client,
            EmailType.PAYMENT_REMINDER,
            context={
                "reminder_type": reminder_type.value,
                "message": REMINDER_MESSAGES[reminder_type],
                "custom_message": custom_message,
                "amount_due": str(invoice.remaining_amount),
                "days_overdue": days_overdue,
            },
        )

        await save_invoice(self.invoice_repo, invoice)
        await self.uow.commit()
        return notification

    async def execute(self, command: SendReminderCommandDTO) -> Result[NotificationResultDTO]:
        try:
            notification = await self.remind(
                command.invoice_id,
                command.owner_id,
                command.reminder_type,
                command.custom_message,
            )

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to send reminder for invoice {command.invoice_id}: {e}")
            return Return.err(
                Error(
                    code="SEND_REMINDER_FAILED",
                    message="Failed to send reminder",
                    reason=str(e),
                )
            )

        if not notification.delivered:
            return Return.err(
                Error(
                    code="NOTIFICATION_FAILED",
                    message=f"Failed to send reminder for invoice {notification.invoice_number}",
                    reason=notification.error,
                    details={"invoice_id": notification.invoice_id, "sent_to": notification.sent_to},
                )
            )

        return Return.ok(notification)


class SendBulkReminders:
    """
    Use Case: Remind clients of several invoices

    Each invoice is handled in its own transaction; a failure on one is
    reported in errors and does not stop the others.
    """

    def __init__(self, reminder: SendPaymentReminder):
        self.reminder = reminder

    async def execute(self, command: BulkReminderCommandDTO) -> Result[BulkReminderResultDTO]:
        results = []
        errors = []

        for invoice_id in command.invoice_ids:
            try:
                notification = await self.reminder.remind(
                    invoice_id, command.owner_id, command.reminder_type
                )
            except InvoiceError as e:
                await self.reminder.uow.rollback()
                errors.append(BulkReminderErrorDTO(invoice_id=invoice_id, error=e.message))
                continue
            except Exception as e:
                await self.reminder.uow.rollback()
                logger.error(f"Bulk reminder for invoice {invoice_id} failed: {e}")
                errors.append(BulkReminderErrorDTO(invoice_id=invoice_id, error=str(e)))
                continue

            if notification.delivered:
                results.append(notification)
            else:
                errors.append(BulkReminderErrorDTO(invoice_id=invoice_id, error=notification.error or "Delivery failed"))

        logger.info(
            f"Bulk reminders for owner {command.owner_id}: "
            f"{len(results)} sent, {len(errors)} failed"
        )

        return Return.ok(
            BulkReminderResultDTO(
                results=results,
                errors=errors,
                total_sent=len(results),
                total_errors=len(errors),
            )
        )
