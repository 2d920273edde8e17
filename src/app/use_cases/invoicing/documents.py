"""Invoice document use cases

Generate, fetch and delete the rendered PDF of an invoice. The invoice only
stores the artifact reference returned by DocumentStorage.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.document_storage import DocumentStorage
from src.app.services.pdf_service import PdfService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.actor import Actor
from src.domain.exceptions import InvoiceError, InvoiceNotFoundError
from src.domain.invoice import Invoice
from .common import is_party, load_client, load_invoice, load_owned_invoice, save_invoice, to_error
from .dtos import DeletedDocumentDTO, DocumentContentDTO, DocumentResponseDTO

logger = logging.getLogger(__name__)


def document_filename(invoice: Invoice, now: Optional[datetime] = None) -> str:
    """invoice-<number>-<YYYYMMDD>.pdf"""
    now = now or datetime.utcnow()
    return f"invoice-{invoice.invoice_number}-{now.strftime('%Y%m%d')}.pdf"


def _document_missing(invoice: Invoice, code: str = "DOCUMENT_NOT_FOUND") -> InvoiceNotFoundError:
    return InvoiceNotFoundError(
        code,
        f"No document for invoice {invoice.invoice_number}. Generate the PDF first.",
        invoice_id=invoice.id,
        field="pdf_path",
    )


class GenerateInvoiceDocument:
    """
    Use Case: Render and store the invoice PDF

    Business Rules:
    1. The document is rendered from the recalculated invoice
    2. Regenerating replaces pdf_path and removes the previous artifact
    3. The stored file is named invoice-<number>-<YYYYMMDD>.pdf
    4. If the reference cannot be saved, the newly stored file is removed
       (a same-day regeneration reuses the name and keeps the new render)

    Flow:
    1. Load invoice and client
    2. Render PDF
    3. Store artifact
    4. Persist the new reference and commit
    5. Remove the previous artifact
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        client_repo: ClientRepository,
        pdf_service: PdfService,
        document_storage: DocumentStorage,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.pdf_service = pdf_service
        self.document_storage = document_storage

    async def _discard(self, reference: Optional[str], previous_reference: Optional[str]) -> None:
        """Remove an artifact stored by a failed generation"""
        if not reference or reference == previous_reference:
            return
        try:
            await self.document_storage.delete(reference)
        except OSError as e:
            logger.warning(f"Could not remove orphaned document {reference}: {e}")

    async def execute(self, invoice_id: str, owner_id: str) -> Result[DocumentResponseDTO]:
        reference = None
        previous_reference = None
        try:
            # Step 1: Load invoice and client
            invoice = await load_owned_invoice(self.invoice_repo, invoice_id, owner_id)
            previous_reference = invoice.pdf_path
            client = await load_client(self.client_repo, invoice.client_id)

            # Step 2: Render PDF
            now = datetime.utcnow()
            content = self.pdf_service.render_invoice(invoice, client)

            # Step 3: Store artifact
            filename = document_filename(invoice, now)
            reference = await self.document_storage.save(filename, content)

            # Step 4: Persist reference
            invoice.pdf_path = reference
            updated_invoice = await save_invoice(self.invoice_repo, invoice)
            await self.uow.commit()

            logger.info(
                f"Document {reference} generated for invoice {updated_invoice.invoice_number} "
                f"({len(content)} bytes)"
            )

        except InvoiceError as e:
            await self.uow.rollback()
            await self._discard(reference, previous_reference)
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            await self._discard(reference, previous_reference)
            logger.error(f"Failed to generate document for invoice {invoice_id}: {e}")
            return Return.err(
                Error(
                    code="GENERATE_DOCUMENT_FAILED",
                    message="Error generating PDF",
                    reason=str(e),
                )
            )

        # Step 5: Remove previous artifact
        if previous_reference and previous_reference != reference:
            try:
                await self.document_storage.delete(previous_reference)
            except OSError as e:
                logger.warning(f"Could not remove previous document {previous_reference}: {e}")

        return Return.ok(
            DocumentResponseDTO(
                invoice_id=updated_invoice.id,
                invoice_number=updated_invoice.invoice_number,
                pdf_path=reference,
                filename=filename,
                generated_at=now,
            )
        )


class GetInvoiceDocument:
    """
    Fetch the stored PDF of an invoice

    Readable by the issuing user and the invoiced client.
    """

    def __init__(self, invoice_repo: InvoiceRepository, document_storage: DocumentStorage):
        self.invoice_repo = invoice_repo
        self.document_storage = document_storage

    async def execute(self, invoice_id: str, actor: Actor) -> Result[DocumentContentDTO]:
        try:
            invoice = await load_invoice(self.invoice_repo, invoice_id)
            if not is_party(invoice, actor):
                raise InvoiceNotFoundError(
                    "INVOICE_NOT_FOUND",
                    f"Invoice with ID {invoice_id} not found",
                    invoice_id=invoice_id,
                )
            if not invoice.pdf_path:
                raise _document_missing(invoice)

            content = await self.document_storage.read(invoice.pdf_path)
            if content is None:
                raise _document_missing(invoice, "DOCUMENT_FILE_MISSING")

        except InvoiceError as e:
            return Return.err(to_error(e))

        return Return.ok(
            DocumentContentDTO(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                filename=f"invoice-{invoice.invoice_number}.pdf",
                content=content,
            )
        )


class DeleteInvoiceDocument:
    """
    Use Case: Delete the stored PDF

    Removes the artifact (a file already gone is not an error) and clears
    pdf_path. Fails with DOCUMENT_NOT_FOUND when there is no reference.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        document_storage: DocumentStorage,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.document_storage = document_storage

    async def execute(self, invoice_id: str, owner_id: str) -> Result[DeletedDocumentDTO]:
        try:
            invoice = await load_owned_invoice(self.invoice_repo, invoice_id, owner_id)
            if not invoice.pdf_path:
                raise _document_missing(invoice)

            reference = invoice.pdf_path
            removed = await self.document_storage.delete(reference)

            invoice.pdf_path = None
            updated_invoice = await save_invoice(self.invoice_repo, invoice)
            await self.uow.commit()

            logger.info(
                f"Document {reference} of invoice {updated_invoice.invoice_number} deleted "
                f"(file removed: {removed})"
            )

            return Return.ok(
                DeletedDocumentDTO(
                    invoice_id=updated_invoice.id,
                    invoice_number=updated_invoice.invoice_number,
                    pdf_path=reference,
                    file_removed=removed,
                    deleted_at=datetime.utcnow(),
                )
            )

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete document of invoice {invoice_id}: {e}")
            return Return.err(
                Error(
                    code="DELETE_DOCUMENT_FAILED",
                    message="Error deleting PDF",
                    reason=str(e),
                )
            )
