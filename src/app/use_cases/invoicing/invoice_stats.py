"""GetInvoiceStats Use Case

Dashboard figures for one issuing user, aggregated from their invoices.
"""

import logging
from collections import Counter, defaultdict
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import ZERO
from src.domain.invoice_status import InvoiceStatus
from .dtos import (
    FinancialStatsDTO,
    InvoiceStatsDTO,
    InvoiceSummaryDTO,
    MonthlyStatsDTO,
    StatsSummaryDTO,
)

logger = logging.getLogger(__name__)

OVERDUE_PREVIEW_LIMIT = 5

PENDING_STATUSES = (
    InvoiceStatus.SENT,
    InvoiceStatus.VIEWED,
    InvoiceStatus.PARTIAL_PAID,
    InvoiceStatus.OVERDUE,
)


class GetInvoiceStats:
    """
    Use Case: Invoice statistics

    - status_counts: every status present, zero when unused
    - financial: invoice count and sums of total, paid and remaining amounts
    - monthly: per-month totals for invoices dated in the current year
    - overdue_invoices: the five overdue invoices with the oldest due date
    - summary: total, paid, pending (sent/viewed/partial_paid/overdue) and draft counts
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, owner_id: str, now: Optional[datetime] = None) -> Result[InvoiceStatsDTO]:
        now = now or datetime.utcnow()
        try:
            invoices = await self.invoice_repo.get_by_owner(owner_id)
        except Exception as e:
            logger.error(f"Failed to load invoices for stats of owner {owner_id}: {e}")
            return Return.err(
                Error(
                    code="INVOICE_STATS_FAILED",
                    message="Failed to fetch invoice statistics",
                    reason=str(e),
                )
            )

        counts = Counter(invoice.status for invoice in invoices)
        status_counts = {status.value: counts.get(status, 0) for status in InvoiceStatus}

        financial = FinancialStatsDTO(
            total_invoices=len(invoices),
            total_amount=sum((i.total_amount for i in invoices), ZERO),
            total_paid=sum((i.total_paid for i in invoices), ZERO),
            total_pending=sum((i.remaining_amount for i in invoices), ZERO),
        )

        by_month = defaultdict(list)
        for invoice in invoices:
            if invoice.invoice_date.year == now.year:
                by_month[invoice.invoice_date.month].append(invoice)
        monthly = [
            MonthlyStatsDTO(
                month=month,
                total_amount=sum((i.total_amount for i in month_invoices), ZERO),
                total_paid=sum((i.total_paid for i in month_invoices), ZERO),
                count=len(month_invoices),
            )
            for month, month_invoices in sorted(by_month.items())
        ]

        overdue = sorted(
            (i for i in invoices if i.status == InvoiceStatus.OVERDUE),
            key=lambda i: i.due_date,
        )[:OVERDUE_PREVIEW_LIMIT]

        summary = StatsSummaryDTO(
            total_invoices=sum(status_counts.values()),
            paid_invoices=status_counts[InvoiceStatus.PAID.value],
            pending_invoices=sum(status_counts[s.value] for s in PENDING_STATUSES),
            draft_invoices=status_counts[InvoiceStatus.DRAFT.value],
        )

        return Return.ok(
            InvoiceStatsDTO(
                status_counts=status_counts,
                financial=financial,
                monthly=monthly,
                overdue_invoices=[InvoiceSummaryDTO.from_invoice(i) for i in overdue],
                summary=summary,
            )
        )
