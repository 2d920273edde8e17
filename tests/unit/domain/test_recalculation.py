"""Unit tests for the recalculation engine

Tests cover:
- Derived money fields (subtotal, tax, discount, clamp at zero)
- Payment-driven status derivation and overdue detection
- Frozen statuses and the derive_status switch
- Audit entries for automatic changes
- Purity and idempotence
"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal

from src.domain.actor import SystemActor, UserActor
from src.domain.invoice import Invoice
from src.domain.invoice_line import LineItem
from src.domain.invoice_status import InvoiceStatus
from src.domain.payment import Payment
from src.domain.recalculation import AUTO_STATUS_REASON, recalculate

NOW = datetime(2024, 3, 15, 12, 0, 0)


def _invoice(status=InvoiceStatus.SENT, due_date=date(2024, 4, 1), items=None, payments=None, **kwargs):
    return Invoice(
        invoice_number="INV-2024-0001",
        owner_id="user_1",
        client_id="client_1",
        invoice_date=date(2024, 3, 1),
        due_date=due_date,
        status=status,
        items=items if items is not None else [
            LineItem(description="Design work", quantity=Decimal("2"), rate=Decimal("100")),
            LineItem(description="Hosting", quantity=Decimal("1"), rate=Decimal("50")),
        ],
        payments=payments or [],
        version=1,
        **kwargs,
    )


def _payment(amount):
    return Payment(
        amount_paid=Decimal(amount),
        transaction_id=f"txn_{amount}",
        recorded_by=UserActor(user_id="user_1"),
    )


class TestDerivedAmounts:
    """Money fields computed from items, discount and payments"""

    def test_new_draft_totals(self):
        """
        Given: Items 2 x 100 and 1 x 50, no discount
        When: The new invoice is recalculated
        Then: subtotal=250, tax=0, total=250 and the draft status is kept
        """
        invoice = _invoice(status=InvoiceStatus.DRAFT)

        result = recalculate(invoice, is_new=True, now=NOW)

        assert result.subtotal == Decimal("250")
        assert result.tax_amount == Decimal("0")
        assert result.total_amount == Decimal("250")
        assert result.remaining_amount == Decimal("250")
        assert result.status == InvoiceStatus.DRAFT
        assert result.status_log == []

    def test_missing_amount_defaults_to_quantity_times_rate(self):
        invoice = _invoice()

        result = recalculate(invoice, now=NOW)

        assert [item.amount for item in result.items] == [Decimal("200"), Decimal("50")]
        assert all(item.tax_rate == Decimal("0") for item in result.items)

    def test_explicit_line_amount_is_kept(self):
        invoice = _invoice(items=[
            LineItem(description="Fixed fee", quantity=Decimal("3"), rate=Decimal("10"), amount=Decimal("25")),
        ])

        result = recalculate(invoice, now=NOW)

        assert result.subtotal == Decimal("25")

    def test_tax_is_percentage_of_line_amount(self):
        invoice = _invoice(items=[
            LineItem(description="Consulting", quantity=Decimal("2"), rate=Decimal("100"), tax_rate=Decimal("18")),
            LineItem(description="Hosting", quantity=Decimal("1"), rate=Decimal("50")),
        ])

        result = recalculate(invoice, now=NOW)

        assert result.tax_amount == Decimal("36")
        assert result.total_amount == Decimal("286")

    def test_discount_reduces_total(self):
        invoice = _invoice(discount_amount=Decimal("30"))

        result = recalculate(invoice, now=NOW)

        assert result.total_amount == Decimal("220")

    def test_total_is_clamped_at_zero(self):
        """
        Given: A discount larger than subtotal plus tax
        When: Recalculated
        Then: total_amount is 0, never negative
        """
        invoice = _invoice(status=InvoiceStatus.DRAFT, discount_amount=Decimal("1000"))

        result = recalculate(invoice, now=NOW)

        assert result.total_amount == Decimal("0")
        assert result.remaining_amount == Decimal("0")

    def test_remaining_never_negative_on_overpayment(self):
        invoice = _invoice(payments=[_payment("300")])

        result = recalculate(invoice, now=NOW)

        assert result.total_paid == Decimal("300")
        assert result.remaining_amount == Decimal("0")

    def test_empty_invoice_totals_are_zero(self):
        invoice = _invoice(status=InvoiceStatus.DRAFT, items=[])

        result = recalculate(invoice, now=NOW)

        assert result.subtotal == Decimal("0")
        assert result.total_amount == Decimal("0")


class TestStatusDerivation:
    """Payment-driven status of non-frozen invoices"""

    def test_unpaid_past_due_becomes_overdue(self):
        """
        Given: A sent invoice with total 250, due yesterday and no payments
        When: Recalculated
        Then: Status is overdue and one system entry is logged
        """
        invoice = _invoice(due_date=NOW.date() - timedelta(days=1))

        result = recalculate(invoice, now=NOW)

        assert result.status == InvoiceStatus.OVERDUE
        assert len(result.status_log) == 1
        entry = result.status_log[0]
        assert entry.old_status == InvoiceStatus.SENT
        assert entry.new_status == InvoiceStatus.OVERDUE
        assert isinstance(entry.changed_by, SystemActor)
        assert entry.reason == AUTO_STATUS_REASON
        assert entry.changed_at == NOW

    def test_due_today_is_not_overdue(self):
        invoice = _invoice(due_date=NOW.date())

        result = recalculate(invoice, now=NOW)

        assert result.status == InvoiceStatus.SENT
        assert result.status_log == []

    def test_partial_payment(self):
        invoice = _invoice(payments=[_payment("100")])

        result = recalculate(invoice, now=NOW)

        assert result.status == InvoiceStatus.PARTIAL_PAID
        assert result.total_paid == Decimal("100")
        assert result.remaining_amount == Decimal("150")

    def test_full_payment(self):
        invoice = _invoice(payments=[_payment("100"), _payment("150")])

        result = recalculate(invoice, now=NOW)

        assert result.status == InvoiceStatus.PAID
        assert result.remaining_amount == Decimal("0")

    def test_overdue_invoice_paid_in_full(self):
        invoice = _invoice(
            status=InvoiceStatus.OVERDUE,
            due_date=date(2024, 1, 1),
            payments=[_payment("250")],
        )

        result = recalculate(invoice, now=NOW)

        assert result.status == InvoiceStatus.PAID
        assert result.status_log[-1].old_status == InvoiceStatus.OVERDUE

    def test_viewed_invoice_follows_payments(self):
        invoice = _invoice(status=InvoiceStatus.VIEWED, payments=[_payment("50")])

        result = recalculate(invoice, now=NOW)

        assert result.status == InvoiceStatus.PARTIAL_PAID

    def test_viewed_unpaid_invoice_returns_to_sent(self):
        invoice = _invoice(status=InvoiceStatus.VIEWED)

        result = recalculate(invoice, now=NOW)

        assert result.status == InvoiceStatus.SENT

    def test_paid_invoice_with_removed_payments_reverts(self):
        invoice = _invoice(status=InvoiceStatus.PAID)

        result = recalculate(invoice, now=NOW)

        assert result.status == InvoiceStatus.SENT

    def test_zero_total_with_no_payment_is_not_paid(self):
        invoice = _invoice(discount_amount=Decimal("500"))

        result = recalculate(invoice, now=NOW)

        assert result.status == InvoiceStatus.SENT

    @pytest.mark.parametrize("status", [InvoiceStatus.DRAFT, InvoiceStatus.CANCELLED])
    def test_frozen_statuses_are_kept(self, status):
        """
        Given: A draft or cancelled invoice fully paid and past due
        When: Recalculated
        Then: Status is untouched and nothing is logged
        """
        invoice = _invoice(status=status, due_date=date(2024, 1, 1), payments=[_payment("250")])

        result = recalculate(invoice, now=NOW)

        assert result.status == status
        assert result.status_log == []
        assert result.total_paid == Decimal("250")
        assert result.remaining_amount == Decimal("0")

    def test_derive_status_false_keeps_manual_status(self):
        invoice = _invoice(status=InvoiceStatus.SENT, payments=[_payment("250")])

        result = recalculate(invoice, derive_status=False, now=NOW)

        assert result.status == InvoiceStatus.SENT
        assert result.total_paid == Decimal("250")
        assert result.status_log == []

    def test_first_save_change_is_not_logged(self):
        invoice = _invoice(due_date=date(2024, 1, 1))

        result = recalculate(invoice, is_new=True, now=NOW)

        assert result.status == InvoiceStatus.OVERDUE
        assert result.status_log == []


class TestPurity:
    """recalculate returns a new aggregate and settles after one run"""

    def test_input_is_not_mutated(self):
        invoice = _invoice(due_date=date(2024, 1, 1), payments=[_payment("100")])
        before = invoice.model_dump()

        recalculate(invoice, now=NOW)

        assert invoice.model_dump() == before

    def test_idempotent(self):
        """
        Given: An invoice recalculated once
        When: Recalculated again with unchanged data
        Then: The result is identical and no further entry is logged
        """
        invoice = _invoice(due_date=date(2024, 1, 1), payments=[_payment("100")])

        once = recalculate(invoice, now=NOW)
        twice = recalculate(once, now=NOW)

        assert twice.model_dump() == once.model_dump()
        assert len(twice.status_log) == 1
