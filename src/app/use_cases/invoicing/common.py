"""Helpers shared by the invoicing use cases

Every write of an invoice goes through save_new_invoice/save_invoice so the
derived fields are recomputed before the document is persisted.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional
from libs.result import Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.notification_service import NotificationError, NotificationService
from src.domain.actor import Actor, ClientActor, UserActor
from src.domain.client import Client
from src.domain.email_log import EmailStatus, EmailType
from src.domain.exceptions import InvoiceError, InvoiceNotFoundError
from src.domain.invoice import Invoice
from src.domain.recalculation import recalculate
from .dtos import NotificationResultDTO

logger = logging.getLogger(__name__)


async def save_new_invoice(
    invoice_repo: InvoiceRepository,
    invoice: Invoice,
    now: Optional[datetime] = None,
) -> Invoice:
    return await invoice_repo.create(recalculate(invoice, is_new=True, now=now))


async def save_invoice(
    invoice_repo: InvoiceRepository,
    invoice: Invoice,
    *,
    skip_status_derivation: bool = False,
    now: Optional[datetime] = None,
) -> Invoice:
    """
    Recalculate and persist an existing invoice

    Args:
        skip_status_derivation: True only for the save right after a manual
            status change; totals are still recomputed
    """
    recalculated = recalculate(invoice, derive_status=not skip_status_derivation, now=now)
    return await invoice_repo.update(recalculated)


async def load_invoice(invoice_repo: InvoiceRepository, invoice_id: str) -> Invoice:
    invoice = await invoice_repo.get_by_id(invoice_id)
    if not invoice:
        raise InvoiceNotFoundError(
            "INVOICE_NOT_FOUND",
            f"Invoice with ID {invoice_id} not found",
            invoice_id=invoice_id,
        )
    return invoice


async def load_owned_invoice(invoice_repo: InvoiceRepository, invoice_id: str, owner_id: str) -> Invoice:
    """Load an invoice issued by owner_id; other users' invoices read as missing"""
    invoice = await load_invoice(invoice_repo, invoice_id)
    if invoice.owner_id != owner_id:
        raise InvoiceNotFoundError(
            "INVOICE_NOT_FOUND",
            f"Invoice with ID {invoice_id} not found",
            invoice_id=invoice_id,
        )
    return invoice


def is_party(invoice: Invoice, actor: Actor) -> bool:
    """True for the issuing user and the invoiced client"""
    if isinstance(actor, UserActor):
        return actor.user_id == invoice.owner_id
    if isinstance(actor, ClientActor):
        return actor.client_id == invoice.client_id
    return False


def to_error(exc: InvoiceError) -> Error:
    return Error(
        code=exc.code,
        message=exc.message,
        reason=exc.reason,
        kind=exc.kind.value,
        details=exc.details,
    )


async def notify_client(
    notification_service: NotificationService,
    invoice: Invoice,
    client: Client,
    template: EmailType,
    context: Optional[Dict[str, Any]] = None,
    pdf_attached: bool = False,
) -> NotificationResultDTO:
    """
    Send a templated message and append the outcome to the invoice email log

    The caller persists the invoice afterwards. Delivery failures are
    recorded, not raised.
    """
    try:
        email_id = await notification_service.send(
            invoice=invoice,
            client=client,
            template=template,
            recipient=client.email,
            context=context or {},
        )
    except NotificationError as e:
        logger.warning(
            f"{template.value} notification for invoice {invoice.invoice_number} "
            f"to {client.email} failed: {e}"
        )
        invoice.log_email(template, client.email, EmailStatus.FAILED, pdf_generated=pdf_attached)
        return NotificationResultDTO(
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            email_type=template.value,
            sent_to=client.email,
            delivered=False,
            error=str(e),
        )

    invoice.log_email(template, client.email, EmailStatus.SENT, email_id=email_id, pdf_generated=pdf_attached)
    logger.info(
        f"{template.value} notification for invoice {invoice.invoice_number} sent to {client.email}"
    )
    return NotificationResultDTO(
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        email_type=template.value,
        sent_to=client.email,
        delivered=True,
        email_id=email_id,
    )


async def load_client(client_repo, client_id: str) -> Client:
    client = await client_repo.get_by_id(client_id)
    if not client:
        raise InvoiceNotFoundError(
            "CLIENT_NOT_FOUND",
            f"Client with ID {client_id} not found",
            field="client_id",
        )
    return client
