"""CreateInvoice Use Case

Creates a draft invoice with a freshly allocated invoice number.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.invoice_number import InvoiceNumberGenerator
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import InvoiceError, InvoiceNotFoundError
from src.domain.invoice import Invoice
from src.domain.invoice_status import InvoiceStatus
from .common import save_new_invoice, to_error
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create draft invoice

    Business Rules:
    1. Client must exist and belong to the issuing user
    2. Invoice number is allocated from the owner's yearly counter (INV-YYYY-NNNN)
    3. Invoice is created with status=draft
    4. Derived totals are computed before the first save

    Flow:
    1. Verify client ownership
    2. Allocate invoice number
    3. Build invoice with status=draft
    4. Recalculate and persist
    5. Commit transaction
    6. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        client_repo: ClientRepository,
        number_generator: InvoiceNumberGenerator,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.number_generator = number_generator

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with owner, client, due date and items

        Returns:
            Result[InvoiceResponseDTO]: Success with invoice details or error
        """
        try:
            # Step 1: Verify client ownership
            client = await self.client_repo.get_for_owner(command.client_id, command.owner_id)
            if not client:
                raise InvoiceNotFoundError(
                    "CLIENT_NOT_FOUND",
                    f"Client with ID {command.client_id} not found",
                    field="client_id",
                )

            # Step 2: Allocate invoice number (failure aborts creation)
            invoice_number = await self.number_generator.next_invoice_number(command.owner_id)

            # Step 3: Build draft invoice
            invoice = Invoice(
                invoice_number=invoice_number,
                owner_id=command.owner_id,
                client_id=client.id,
                due_date=command.due_date,
                status=InvoiceStatus.DRAFT,
                items=[item.to_line_item() for item in command.items],
                notes=command.notes,
                terms=command.terms,
                discount_amount=command.discount_amount,
            )

            # Step 4: Recalculate and persist
            created_invoice = await save_new_invoice(self.invoice_repo, invoice)

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Invoice {created_invoice.invoice_number} created for client {client.id} "
                f"(total={created_invoice.total_amount})"
            )

            # Step 6: Build response
            return Return.ok(InvoiceResponseDTO.from_invoice(created_invoice))

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create invoice for owner {command.owner_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
