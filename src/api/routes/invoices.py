"""Invoice API Routes

FastAPI routes for the invoice lifecycle: create, edit, payments, status
changes and deletion.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import RequestActor, get_current_actor, get_current_client, get_current_user
from src.api.error import ClientError
from src.api.schemas.invoice_request import (
    AddPaymentRequestSchema,
    ChangeStatusRequestSchema,
    CreateInvoiceRequestSchema,
    UpdateInvoiceRequestSchema,
)
from src.app.services.invoice_number import InvoiceNumberGenerator
from src.app.services.document_storage import DocumentStorage
from src.app.services.notification_service import NotificationService
from src.app.use_cases.invoicing import (
    AddPayment,
    ChangeInvoiceStatus,
    CreateInvoice,
    DeleteInvoice,
    GetInvoice,
    GetInvoiceStats,
    ListInvoices,
    MarkInvoiceViewed,
    UpdateInvoice,
)
from src.app.use_cases.invoicing.dtos import (
    AddPaymentCommandDTO,
    ChangeStatusCommandDTO,
    CreateInvoiceCommandDTO,
    DeletedInvoiceDTO,
    InvoiceResponseDTO,
    InvoiceStatsDTO,
    ListInvoicesResponseDTO,
    PaymentResultDTO,
    UpdateInvoiceCommandDTO,
)
from src.adapter.repositories.client_repository import SqlAlchemyClientRepository
from src.adapter.repositories.counter_repository import SqlAlchemyCounterRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_document_storage, get_notification_service, get_session
from src.domain.actor import ClientActor, UserActor

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.post(
    "",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {
            "description": "Client not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "CLIENT_NOT_FOUND",
                            "message": "Client with ID 3f2b... not found"
                        }
                    }
                }
            }
        }
    }
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    Create a draft invoice.

    The invoice number (INV-YYYY-NNNN) is allocated from the caller's yearly
    counter. Totals are computed from the items and discount.

    **Returns:**
    - 201: Invoice created with status draft
    - 404: Client does not exist or belongs to another user
    """
    uow = SqlAlchemyUnitOfWork(session)
    invoice_repo = SqlAlchemyInvoiceRepository(session)
    client_repo = SqlAlchemyClientRepository(session)
    number_generator = InvoiceNumberGenerator(SqlAlchemyCounterRepository(session))

    command = CreateInvoiceCommandDTO(
        owner_id=user.user_id,
        client_id=request.client_id,
        due_date=request.due_date,
        items=request.items,
        notes=request.notes,
        terms=request.terms,
        discount_amount=request.discount_amount,
    )

    use_case = CreateInvoice(uow, invoice_repo, client_repo, number_generator)
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("", response_model=ListInvoicesResponseDTO)
async def list_invoices(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """List the caller's invoices, newest first."""
    use_case = ListInvoices(SqlAlchemyInvoiceRepository(session))
    result = await use_case.execute(user.user_id, status_filter, limit, offset)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/stats", response_model=InvoiceStatsDTO)
async def get_invoice_stats(
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    Dashboard statistics: counts per status, financial totals, monthly
    totals for the current year and the oldest overdue invoices.
    """
    use_case = GetInvoiceStats(SqlAlchemyInvoiceRepository(session))
    result = await use_case.execute(user.user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{invoice_id}", response_model=InvoiceResponseDTO)
async def get_invoice(
    invoice_id: str,
    actor: RequestActor = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
):
    """Invoice with its payment, status and email history (issuing user or client)."""
    use_case = GetInvoice(SqlAlchemyInvoiceRepository(session))
    result = await use_case.execute(invoice_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch("/{invoice_id}", response_model=InvoiceResponseDTO)
async def update_invoice(
    invoice_id: str,
    request: UpdateInvoiceRequestSchema,
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    Edit due date, items, notes, terms or discount.

    **Returns:**
    - 200: Updated invoice with re-derived totals
    - 409: Invoice is paid, or the due date changed after payments
    """
    uow = SqlAlchemyUnitOfWork(session)
    command = UpdateInvoiceCommandDTO(
        invoice_id=invoice_id,
        owner_id=user.user_id,
        **request.model_dump(exclude_unset=True),
    )

    use_case = UpdateInvoice(uow, SqlAlchemyInvoiceRepository(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete("/{invoice_id}", response_model=DeletedInvoiceDTO)
async def delete_invoice(
    invoice_id: str,
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    document_storage: DocumentStorage = Depends(get_document_storage),
):
    """
    Delete an invoice.

    Only draft or cancelled invoices without payments can be deleted;
    anything else must be cancelled instead (409).
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = DeleteInvoice(uow, SqlAlchemyInvoiceRepository(session), document_storage)
    result = await use_case.execute(invoice_id, user.user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{invoice_id}/payments",
    response_model=PaymentResultDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Invalid payment",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_PAYMENT_AMOUNT",
                            "message": "Payment amount must be greater than 0",
                            "details": {"field": "amount"}
                        }
                    }
                }
            }
        }
    }
)
async def add_payment(
    invoice_id: str,
    request: AddPaymentRequestSchema,
    actor: RequestActor = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Record a payment (issuing user or invoiced client).

    The status follows the payments: partial_paid while a balance remains,
    paid once the total is covered. With `notify` the client receives a
    payment confirmation; a delivery failure does not undo the payment.
    """
    uow = SqlAlchemyUnitOfWork(session)
    command = AddPaymentCommandDTO(
        invoice_id=invoice_id,
        amount=request.amount,
        transaction_id=request.transaction_id,
        method=request.method,
        paid_at=request.paid_at,
        actor=actor,
        notify=request.notify,
    )

    use_case = AddPayment(
        uow,
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyClientRepository(session),
        notification_service,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch("/{invoice_id}/status", response_model=InvoiceResponseDTO)
async def change_invoice_status(
    invoice_id: str,
    request: ChangeStatusRequestSchema,
    actor: RequestActor = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
):
    """
    Manually set the invoice status (issuing user only).

    Moving to draft, cancelled, sent or overdue clears all recorded payments.
    """
    uow = SqlAlchemyUnitOfWork(session)
    command = ChangeStatusCommandDTO(
        invoice_id=invoice_id,
        new_status=request.status,
        actor=actor,
        reason=request.reason,
    )

    use_case = ChangeInvoiceStatus(uow, SqlAlchemyInvoiceRepository(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{invoice_id}/viewed", response_model=InvoiceResponseDTO)
async def mark_invoice_viewed(
    invoice_id: str,
    client: ClientActor = Depends(get_current_client),
    session: AsyncSession = Depends(get_session),
):
    """Record that the client opened the invoice (sent becomes viewed)."""
    uow = SqlAlchemyUnitOfWork(session)
    use_case = MarkInvoiceViewed(uow, SqlAlchemyInvoiceRepository(session))
    result = await use_case.execute(invoice_id, client)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
