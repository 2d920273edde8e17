"""Unit tests for ChangeInvoiceStatus use case"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.use_cases.invoicing.change_status import ChangeInvoiceStatus
from src.app.use_cases.invoicing.dtos import ChangeStatusCommandDTO
from src.domain.actor import ClientActor, SYSTEM, UserActor
from src.domain.invoice_status import InvoiceStatus
from src.domain.payment import Payment


@pytest.fixture
def change_status_use_case(mock_uow, mock_invoice_repo):
    return ChangeInvoiceStatus(uow=mock_uow, invoice_repo=mock_invoice_repo)


@pytest.fixture
def paid_twice_invoice(make_invoice, owner):
    """Partially paid invoice with two payments (100 + 50)"""
    return make_invoice(
        status=InvoiceStatus.PARTIAL_PAID,
        payments=[
            Payment(amount_paid=Decimal("100"), transaction_id="txn_1", recorded_by=owner),
            Payment(amount_paid=Decimal("50"), transaction_id="txn_2", recorded_by=owner),
        ],
    )


@pytest.mark.asyncio
class TestChangeStatus:

    async def test_cancel_clears_payments(
        self, change_status_use_case, mock_invoice_repo, mock_uow, paid_twice_invoice, owner
    ):
        """
        Given: An invoice with two payments
        When: The owner cancels it with reason "client backed out"
        Then: Payments are wiped, total_paid is 0 and exactly one entry is logged
        """
        # Arrange
        mock_invoice_repo.get_by_id = AsyncMock(return_value=paid_twice_invoice)
        command = ChangeStatusCommandDTO(
            invoice_id="inv_1", new_status="cancelled", actor=owner, reason="client backed out"
        )

        # Act
        result = await change_status_use_case.execute(command)

        # Assert
        assert result.is_ok()
        invoice = result.value
        assert invoice.status == "cancelled"
        assert invoice.payments == []
        assert invoice.total_paid == Decimal("0")
        assert invoice.remaining_amount == Decimal("250")
        assert len(invoice.status_log) == 1
        entry = invoice.status_log[0]
        assert entry.old_status == InvoiceStatus.PARTIAL_PAID
        assert entry.new_status == InvoiceStatus.CANCELLED
        assert entry.reason == "client backed out"
        assert entry.changed_by == owner
        mock_uow.commit.assert_awaited_once()

    @pytest.mark.parametrize("status", ["draft", "sent", "overdue"])
    async def test_other_reset_statuses_clear_payments(
        self, change_status_use_case, mock_invoice_repo, paid_twice_invoice, owner, status
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=paid_twice_invoice)

        result = await change_status_use_case.execute(
            ChangeStatusCommandDTO(invoice_id="inv_1", new_status=status, actor=owner)
        )

        assert result.value.status == status
        assert result.value.payments == []
        assert result.value.status_log[-1].reason == "Manual status change"

    async def test_manual_status_survives_its_save(
        self, change_status_use_case, mock_invoice_repo, make_invoice, owner
    ):
        """
        Given: An unpaid sent invoice
        When: The owner marks it paid manually
        Then: The save does not derive the status back to sent
        """
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(status=InvoiceStatus.SENT))

        result = await change_status_use_case.execute(
            ChangeStatusCommandDTO(invoice_id="inv_1", new_status="paid", actor=owner)
        )

        assert result.value.status == "paid"
        assert result.value.total_paid == Decimal("0")
        assert len(result.value.status_log) == 1

    async def test_viewed_keeps_payments(
        self, change_status_use_case, mock_invoice_repo, paid_twice_invoice, owner
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=paid_twice_invoice)

        result = await change_status_use_case.execute(
            ChangeStatusCommandDTO(invoice_id="inv_1", new_status="viewed", actor=owner)
        )

        assert len(result.value.payments) == 2
        assert result.value.total_paid == Decimal("150")


@pytest.mark.asyncio
class TestChangeStatusFailures:

    async def test_invalid_status(self, change_status_use_case, mock_invoice_repo, mock_uow, owner):
        mock_invoice_repo.get_by_id = AsyncMock()

        result = await change_status_use_case.execute(
            ChangeStatusCommandDTO(invoice_id="inv_1", new_status="archived", actor=owner)
        )

        assert result.error.code == "INVALID_STATUS"
        assert result.error.kind == "validation"
        assert result.error.details["field"] == "status"
        mock_invoice_repo.get_by_id.assert_not_called()
        mock_uow.rollback.assert_awaited_once()

    @pytest.mark.parametrize("actor", [ClientActor(client_id="client_1"), SYSTEM])
    async def test_only_users_may_change_status(
        self, change_status_use_case, mock_invoice_repo, actor
    ):
        mock_invoice_repo.get_by_id = AsyncMock()

        result = await change_status_use_case.execute(
            ChangeStatusCommandDTO(invoice_id="inv_1", new_status="paid", actor=actor)
        )

        assert result.error.code == "STATUS_CHANGE_FORBIDDEN"
        assert result.error.kind == "unauthorized"
        mock_invoice_repo.update.assert_not_called()

    async def test_other_users_invoice_is_not_found(
        self, change_status_use_case, mock_invoice_repo, make_invoice
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice())

        result = await change_status_use_case.execute(
            ChangeStatusCommandDTO(
                invoice_id="inv_1", new_status="sent", actor=UserActor(user_id="intruder")
            )
        )

        assert result.error.code == "INVOICE_NOT_FOUND"
        mock_invoice_repo.update.assert_not_called()
