"""Invoice Document API Routes

Generate, download and delete the rendered PDF of an invoice.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import RequestActor, get_current_actor, get_current_user
from src.api.error import ClientError
from src.app.services.document_storage import DocumentStorage
from src.app.services.pdf_service import PdfService
from src.app.use_cases.invoicing import (
    DeleteInvoiceDocument,
    GenerateInvoiceDocument,
    GetInvoiceDocument,
)
from src.app.use_cases.invoicing.dtos import DeletedDocumentDTO, DocumentResponseDTO
from src.adapter.repositories.client_repository import SqlAlchemyClientRepository
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_document_storage, get_pdf_service, get_session
from src.domain.actor import UserActor

router = APIRouter(prefix="/invoices", tags=["Documents"])


@router.post(
    "/{invoice_id}/pdf",
    response_model=DocumentResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def generate_invoice_pdf(
    invoice_id: str,
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    pdf_service: PdfService = Depends(get_pdf_service),
    document_storage: DocumentStorage = Depends(get_document_storage),
):
    """
    Render and store the invoice PDF.

    Regenerating replaces the stored document and removes the previous file.

    **Example response:**
    ```json
    {
      "invoice_id": "9c1e...",
      "invoice_number": "INV-2024-0001",
      "pdf_path": "/uploadPdf/invoice-INV-2024-0001-20240201.pdf",
      "filename": "invoice-INV-2024-0001-20240201.pdf",
      "generated_at": "2024-02-01T12:00:00"
    }
    ```
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = GenerateInvoiceDocument(
        uow,
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyClientRepository(session),
        pdf_service,
        document_storage,
    )
    result = await use_case.execute(invoice_id, user.user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{invoice_id}/pdf",
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "PDF document"
        },
        404: {
            "description": "No document generated",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "DOCUMENT_NOT_FOUND",
                            "message": "No document for invoice INV-2024-0001. Generate the PDF first."
                        }
                    }
                }
            }
        }
    }
)
async def download_invoice_pdf(
    invoice_id: str,
    inline: bool = False,
    actor: RequestActor = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
    document_storage: DocumentStorage = Depends(get_document_storage),
):
    """Download the stored PDF (issuing user or client); `inline=true` for viewing."""
    use_case = GetInvoiceDocument(SqlAlchemyInvoiceRepository(session), document_storage)
    result = await use_case.execute(invoice_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    document = result.value
    disposition = "inline" if inline else f'attachment; filename="{document.filename}"'
    return Response(
        content=document.content,
        media_type="application/pdf",
        headers={"Content-Disposition": disposition},
    )


@router.delete("/{invoice_id}/pdf", response_model=DeletedDocumentDTO)
async def delete_invoice_pdf(
    invoice_id: str,
    user: UserActor = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    document_storage: DocumentStorage = Depends(get_document_storage),
):
    """Delete the stored PDF and clear the invoice's document reference."""
    uow = SqlAlchemyUnitOfWork(session)
    use_case = DeleteInvoiceDocument(uow, SqlAlchemyInvoiceRepository(session), document_storage)
    result = await use_case.execute(invoice_id, user.user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
