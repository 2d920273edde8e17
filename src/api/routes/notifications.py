"""Notification API Routes

Send invoices and payment reminders to clients.
"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_current_user
from src.api.error import ClientError
from src.api.schemas.invoice_request import (
    BulkReminderRequestSchema,
    SendInvoiceRequestSchema,
    SendReminderRequestSchema,
)
from src.app.services.notification_service import NotificationService
from src.app.use_cases.invoicing import SendBulkReminders, SendInvoice, SendPaymentReminder
from src.app.use_cases.invoicing.dtos import (
    BulkReminderCommandDTO,
    BulkReminderResultDTO,
    NotificationResultDTO,
    SendInvoiceCommandDTO,
    SendReminderCommandDTO,
)
from src.adapter.repositories.client_repository import SqlAlchemyClientRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_notification_service, get_session
from src.domain.actor import UserActor

router = APIRouter(prefix="/invoices", tags=["Notifications"])


def _reminder_use_case(session: AsyncSession, notification_service: NotificationService) -> SendPaymentReminder:
    return SendPaymentReminder(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyClientRepository(session),
        notification_service,
    )


@router.post("/reminders/bulk", response_model=BulkReminderResultDTO)
async def send_bulk_reminders(
    request: BulkReminderRequestSchema,
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Send reminders for several invoices.

    Only invoices in sent, viewed, partial_paid or overdue status are
    reminded; the others are reported in `errors`.
    """
    command = BulkReminderCommandDTO(
        owner_id=user.user_id,
        invoice_ids=request.invoice_ids,
        reminder_type=request.reminder_type,
    )
    use_case = SendBulkReminders(_reminder_use_case(session, notification_service))
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{invoice_id}/send", response_model=NotificationResultDTO)
async def send_invoice(
    invoice_id: str,
    request: SendInvoiceRequestSchema,
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Email the generated PDF to the client.

    **Returns:**
    - 200: Sent; a draft invoice is now sent
    - 404: Invoice not found or PDF not generated yet
    - 502: Delivery failed (recorded in the email log)
    """
    command = SendInvoiceCommandDTO(
        invoice_id=invoice_id,
        owner_id=user.user_id,
        custom_message=request.custom_message,
    )
    use_case = SendInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyClientRepository(session),
        notification_service,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{invoice_id}/reminders", response_model=NotificationResultDTO)
async def send_payment_reminder(
    invoice_id: str,
    request: SendReminderRequestSchema,
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """Send a gentle, urgent or final payment reminder."""
    command = SendReminderCommandDTO(
        invoice_id=invoice_id,
        owner_id=user.user_id,
        reminder_type=request.reminder_type,
        custom_message=request.custom_message,
    )
    result = await _reminder_use_case(session, notification_service).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
