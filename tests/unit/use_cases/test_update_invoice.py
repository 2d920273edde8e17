"""Unit tests for UpdateInvoice use case"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.use_cases.invoicing.dtos import LineItemDTO, UpdateInvoiceCommandDTO
from src.app.use_cases.invoicing.update_invoice import UpdateInvoice
from src.domain.invoice_status import InvoiceStatus
from src.domain.payment import Payment


@pytest.fixture
def update_invoice_use_case(mock_uow, mock_invoice_repo):
    return UpdateInvoice(uow=mock_uow, invoice_repo=mock_invoice_repo)


def _payment(owner, amount="100"):
    return Payment(amount_paid=Decimal(amount), transaction_id="txn_1", recorded_by=owner)


@pytest.mark.asyncio
class TestUpdateInvoice:

    async def test_replace_items_recomputes_totals(
        self, update_invoice_use_case, mock_invoice_repo, mock_uow, make_invoice
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice())
        command = UpdateInvoiceCommandDTO(
            invoice_id="inv_1",
            owner_id="user_1",
            items=[LineItemDTO(description="Audit", quantity=Decimal("4"), rate=Decimal("75"),
                               tax_rate=Decimal("10"))],
        )

        result = await update_invoice_use_case.execute(command)

        assert result.is_ok()
        assert result.value.subtotal == Decimal("300")
        assert result.value.tax_amount == Decimal("30")
        assert result.value.total_amount == Decimal("330")
        assert result.value.status == "draft"
        mock_uow.commit.assert_awaited_once()

    async def test_unset_fields_are_untouched(self, update_invoice_use_case, mock_invoice_repo, make_invoice):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(notes="keep me"))

        result = await update_invoice_use_case.execute(
            UpdateInvoiceCommandDTO(invoice_id="inv_1", owner_id="user_1", terms="Net 30")
        )

        assert result.value.notes == "keep me"
        assert result.value.terms == "Net 30"
        assert len(result.value.items) == 2

    async def test_lower_total_settles_partial_invoice(
        self, update_invoice_use_case, mock_invoice_repo, make_invoice, owner
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(
            status=InvoiceStatus.PARTIAL_PAID, payments=[_payment(owner, "200")]
        ))

        result = await update_invoice_use_case.execute(
            UpdateInvoiceCommandDTO(invoice_id="inv_1", owner_id="user_1", discount_amount=Decimal("50"))
        )

        assert result.value.status == "paid"
        assert result.value.remaining_amount == Decimal("0")

    async def test_paid_invoice_is_locked(
        self, update_invoice_use_case, mock_invoice_repo, mock_uow, make_invoice
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(status=InvoiceStatus.PAID))

        result = await update_invoice_use_case.execute(
            UpdateInvoiceCommandDTO(invoice_id="inv_1", owner_id="user_1", notes="late edit")
        )

        assert result.error.code == "INVOICE_ALREADY_PAID"
        assert result.error.kind == "conflict"
        mock_invoice_repo.update.assert_not_called()
        mock_uow.rollback.assert_awaited_once()

    async def test_due_date_locked_once_paid_into(
        self, update_invoice_use_case, mock_invoice_repo, make_invoice, owner
    ):
        invoice = make_invoice(status=InvoiceStatus.PARTIAL_PAID, payments=[_payment(owner)])
        mock_invoice_repo.get_by_id = AsyncMock(return_value=invoice)

        result = await update_invoice_use_case.execute(UpdateInvoiceCommandDTO(
            invoice_id="inv_1", owner_id="user_1", due_date=invoice.due_date + timedelta(days=7)
        ))

        assert result.error.code == "DUE_DATE_LOCKED"
        assert result.error.details["field"] == "due_date"

    async def test_due_date_change_without_payments(
        self, update_invoice_use_case, mock_invoice_repo, make_invoice
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(status=InvoiceStatus.SENT))

        result = await update_invoice_use_case.execute(UpdateInvoiceCommandDTO(
            invoice_id="inv_1", owner_id="user_1", due_date=date.today() - timedelta(days=3)
        ))

        assert result.value.status == "overdue"
        assert result.value.due_date == date.today() - timedelta(days=3)
