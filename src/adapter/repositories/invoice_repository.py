"""SQLAlchemy Invoice Repository Implementation

Stores each invoice aggregate as one JSON document with projection columns.
"""

from typing import Iterable, List, Optional
from datetime import date, datetime
from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.records import InvoiceRecord
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.exceptions import InvoiceConflictError
from src.domain.invoice import Invoice
from src.domain.invoice_status import InvoiceStatus


def _to_invoice(record: InvoiceRecord) -> Invoice:
    return Invoice.model_validate({**record.document, "version": record.version})


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Features:
    - Whole-document writes (the aggregate is never partially persisted)
    - Optimistic concurrency: UPDATE ... WHERE version = <read version>
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _select(self):
        return select(InvoiceRecord).execution_options(populate_existing=True)

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Recalculated invoice

        Returns:
            Stored Invoice (version 1)
        """
        now = datetime.utcnow()
        stored = invoice.model_copy(update={"version": 1, "updated_at": now})

        record = InvoiceRecord(
            id=stored.id,
            invoice_number=stored.invoice_number,
            owner_id=stored.owner_id,
            client_id=stored.client_id,
            status=stored.status.value,
            due_date=stored.due_date,
            version=stored.version,
            document=stored.snapshot(),
            created_at=stored.created_at,
            updated_at=now,
        )
        self.session.add(record)
        await self.session.flush()
        return stored

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        statement = self._select().where(InvoiceRecord.id == invoice_id)
        result = await self.session.execute(statement)
        record = result.scalar_one_or_none()
        return _to_invoice(record) if record else None

    async def get_by_owner(
        self,
        owner_id: str,
        status: Optional[InvoiceStatus] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Invoice]:
        statement = self._select().where(InvoiceRecord.owner_id == owner_id)

        if status:
            statement = statement.where(InvoiceRecord.status == status.value)

        statement = statement.order_by(InvoiceRecord.created_at.desc())
        if limit is not None:
            statement = statement.limit(limit)
        if offset:
            statement = statement.offset(offset)

        result = await self.session.execute(statement)
        return [_to_invoice(record) for record in result.scalars().all()]

    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        statement = self._select().where(InvoiceRecord.invoice_number == invoice_number)
        result = await self.session.execute(statement)
        record = result.scalar_one_or_none()
        return _to_invoice(record) if record else None

    async def find_due_before(
        self, due_date: date, statuses: Iterable[InvoiceStatus]
    ) -> List[Invoice]:
        statement = (
            self._select()
            .where(InvoiceRecord.due_date < due_date)
            .where(InvoiceRecord.status.in_([s.value for s in statuses]))
            .order_by(InvoiceRecord.due_date)
        )
        result = await self.session.execute(statement)
        return [_to_invoice(record) for record in result.scalars().all()]

    async def update(self, invoice: Invoice) -> Invoice:
        """
        Replace the stored document if nobody saved since it was read

        Raises:
            InvoiceConflictError: stored version differs from invoice.version
        """
        now = datetime.utcnow()
        expected_version = invoice.version
        stored = invoice.model_copy(update={"version": expected_version + 1, "updated_at": now})

        statement = (
            update(InvoiceRecord)
            .where(InvoiceRecord.id == stored.id)
            .where(InvoiceRecord.version == expected_version)
            .values(
                status=stored.status.value,
                due_date=stored.due_date,
                version=stored.version,
                document=stored.snapshot(),
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)

        if result.rowcount == 0:
            raise InvoiceConflictError(
                "INVOICE_VERSION_CONFLICT",
                f"Invoice {invoice.invoice_number} was modified concurrently; reload and retry",
                invoice_id=invoice.id,
                reason=f"expected version {expected_version}",
            )

        return stored

    async def delete(self, invoice_id: str) -> None:
        statement = (
            delete(InvoiceRecord)
            .where(InvoiceRecord.id == invoice_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(statement)
