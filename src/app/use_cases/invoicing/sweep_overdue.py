"""SweepOverdueInvoices Use Case

Moves unpaid invoices past their due date to overdue without waiting for
the next edit to trigger recalculation.
"""

import logging
import time
from datetime import datetime
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import InvoiceError
from src.domain.invoice_status import OVERDUE_CANDIDATE_STATUSES
from src.domain.recalculation import recalculate
from .dtos import SweepResultDTO

logger = logging.getLogger(__name__)


class SweepOverdueInvoices:
    """
    Use Case: Overdue sweep

    Business Rules:
    1. Candidates are invoices in sent, viewed or partial_paid whose due date
       has passed
    2. Each candidate goes through the regular recalculation path; only
       invoices whose status actually changes are written
    3. Each invoice is committed on its own; a version conflict skips that
       invoice until the next run

    Flow:
    1. Find candidates due before today
    2. Recalculate each one
    3. Persist and commit the ones that changed
    4. Return sweep summary
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, now: Optional[datetime] = None) -> Result[SweepResultDTO]:
        start_time = time.time()
        now = now or datetime.utcnow()

        try:
            # Step 1: Find candidates
            candidates = await self.invoice_repo.find_due_before(
                now.date(), OVERDUE_CANDIDATE_STATUSES
            )
            logger.info(f"Overdue sweep found {len(candidates)} candidate invoices")

            updated_ids: List[str] = []
            for invoice in candidates:
                # Step 2: Recalculate
                recalculated = recalculate(invoice, now=now)
                if recalculated.status == invoice.status:
                    continue

                # Step 3: Persist
                try:
                    await self.invoice_repo.update(recalculated)
                    await self.uow.commit()
                except InvoiceError as e:
                    await self.uow.rollback()
                    logger.warning(f"Skipping invoice {invoice.invoice_number} in overdue sweep: {e.message}")
                    continue

                updated_ids.append(invoice.id)
                logger.info(
                    f"Invoice {invoice.invoice_number} moved "
                    f"{invoice.status.value} -> {recalculated.status.value}"
                )

            # Step 4: Summary
            execution_time_ms = int((time.time() - start_time) * 1000)
            return Return.ok(
                SweepResultDTO(
                    invoices_checked=len(candidates),
                    invoices_updated=len(updated_ids),
                    updated_invoice_ids=updated_ids,
                    swept_at=now,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Overdue sweep failed: {e}")
            return Return.err(
                Error(
                    code="OVERDUE_SWEEP_FAILED",
                    message="Failed to sweep overdue invoices",
                    reason=str(e),
                )
            )
