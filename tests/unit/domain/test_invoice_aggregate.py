"""Unit tests for the Invoice aggregate and its value objects"""

import pytest
from datetime import datetime
from decimal import Decimal
from pydantic import ValidationError

from src.domain.actor import ClientActor, SystemActor, UserActor
from src.domain.email_log import EmailStatus, EmailType
from src.domain.exceptions import ErrorKind, InvoiceValidationError
from src.domain.invoice import MANUAL_STATUS_REASON, parse_status
from src.domain.invoice_status import InvoiceStatus
from src.domain.payment import Payment, PaymentMethod
from src.domain.status_change import StatusChange


class TestRecordPayment:

    def test_appends_payment_with_defaults(self, make_invoice, owner):
        invoice = make_invoice(status=InvoiceStatus.SENT)

        payment = invoice.record_payment(Decimal("100"), " txn_1 ", recorded_by=owner)

        assert invoice.payments == [payment]
        assert payment.payment_method == PaymentMethod.BANK_TRANSFER
        assert payment.transaction_id == "txn_1"
        assert payment.paid_at is not None
        assert payment.recorded_by == owner

    def test_totals_wait_for_recalculation(self, make_invoice, owner):
        invoice = make_invoice(status=InvoiceStatus.SENT)

        invoice.record_payment(Decimal("100"), "txn_1", recorded_by=owner)

        assert invoice.total_paid == Decimal("0")
        assert invoice.status == InvoiceStatus.SENT

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
    def test_rejects_non_positive_amount(self, make_invoice, owner, amount):
        invoice = make_invoice(status=InvoiceStatus.SENT)

        with pytest.raises(InvoiceValidationError) as exc_info:
            invoice.record_payment(amount, "txn_1", recorded_by=owner)

        assert exc_info.value.code == "INVALID_PAYMENT_AMOUNT"
        assert exc_info.value.kind == ErrorKind.VALIDATION
        assert exc_info.value.details == {"invoice_id": invoice.id, "field": "amount"}
        assert invoice.payments == []

    @pytest.mark.parametrize("transaction_id", [None, "", "   "])
    def test_requires_transaction_id(self, make_invoice, client_actor, transaction_id):
        invoice = make_invoice(status=InvoiceStatus.SENT)

        with pytest.raises(InvoiceValidationError) as exc_info:
            invoice.record_payment(Decimal("10"), transaction_id, recorded_by=client_actor)

        assert exc_info.value.code == "MISSING_TRANSACTION_ID"
        assert exc_info.value.details["field"] == "transaction_id"

    def test_system_cannot_record_payment(self):
        with pytest.raises(ValidationError):
            Payment(amount_paid=Decimal("10"), transaction_id="txn", recorded_by=SystemActor())


class TestChangeStatus:

    def test_appends_one_entry(self, make_invoice, owner):
        invoice = make_invoice()

        entry = invoice.change_status("sent", owner, "Ready to go")

        assert invoice.status == InvoiceStatus.SENT
        assert invoice.status_log == [entry]
        assert entry.old_status == InvoiceStatus.DRAFT
        assert entry.new_status == InvoiceStatus.SENT
        assert entry.changed_by == owner
        assert entry.reason == "Ready to go"

    def test_default_reason(self, make_invoice, owner):
        invoice = make_invoice()

        entry = invoice.change_status(InvoiceStatus.CANCELLED, owner)

        assert entry.reason == MANUAL_STATUS_REASON

    def test_same_status_still_logged(self, make_invoice, owner):
        invoice = make_invoice(status=InvoiceStatus.SENT)

        invoice.change_status(InvoiceStatus.SENT, owner)

        assert len(invoice.status_log) == 1

    def test_invalid_status(self, make_invoice, owner):
        invoice = make_invoice()

        with pytest.raises(InvoiceValidationError) as exc_info:
            invoice.change_status("archived", owner)

        assert exc_info.value.code == "INVALID_STATUS"
        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.status_log == []

    def test_parse_status_accepts_enum_and_value(self):
        assert parse_status("partial_paid") == InvoiceStatus.PARTIAL_PAID
        assert parse_status(InvoiceStatus.PAID) == InvoiceStatus.PAID


class TestAggregateOperations:

    def test_clear_payments(self, make_invoice, owner):
        invoice = make_invoice(status=InvoiceStatus.SENT)
        invoice.record_payment(Decimal("100"), "txn_1", recorded_by=owner)
        invoice.total_paid = Decimal("100")

        invoice.clear_payments()

        assert invoice.payments == []
        assert invoice.total_paid == Decimal("0")

    @pytest.mark.parametrize("status,deletable", [
        (InvoiceStatus.DRAFT, True),
        (InvoiceStatus.CANCELLED, True),
        (InvoiceStatus.SENT, False),
        (InvoiceStatus.VIEWED, False),
        (InvoiceStatus.PARTIAL_PAID, False),
        (InvoiceStatus.PAID, False),
        (InvoiceStatus.OVERDUE, False),
    ])
    def test_can_delete_by_status(self, make_invoice, status, deletable):
        assert make_invoice(status=status).can_delete() is deletable

    def test_cannot_delete_with_payments(self, make_invoice, owner):
        invoice = make_invoice()
        invoice.record_payment(Decimal("1"), "txn_1", recorded_by=owner)

        assert invoice.can_delete() is False

    def test_mark_viewed_moves_sent_to_viewed(self, make_invoice, client_actor):
        invoice = make_invoice(status=InvoiceStatus.SENT)
        at = datetime(2024, 3, 1, 9, 30)

        entry = invoice.mark_viewed(client_actor, at=at)

        assert invoice.status == InvoiceStatus.VIEWED
        assert invoice.client_viewed_at == at
        assert invoice.last_client_access == at
        assert entry.changed_by == client_actor
        assert entry.reason == "Viewed by client"

    def test_mark_viewed_keeps_other_statuses(self, make_invoice, client_actor):
        invoice = make_invoice(status=InvoiceStatus.PARTIAL_PAID)

        entry = invoice.mark_viewed(client_actor)

        assert entry is None
        assert invoice.status == InvoiceStatus.PARTIAL_PAID
        assert invoice.last_client_access is not None
        assert invoice.status_log == []

    def test_log_email(self, make_invoice):
        invoice = make_invoice()

        entry = invoice.log_email(
            EmailType.INVOICE_SENT, "jane@example.com", email_id="msg_1", pdf_generated=True
        )

        assert invoice.email_log == [entry]
        assert entry.status == EmailStatus.SENT
        assert entry.pdf_generated is True

    def test_snapshot_round_trips(self, make_invoice, owner):
        invoice = make_invoice()
        invoice.change_status(InvoiceStatus.SENT, owner)

        snapshot = invoice.snapshot()

        assert snapshot["status"] == "sent"
        assert snapshot["status_log"][0]["changed_by"] == {"role": "user", "user_id": "user_1"}
        assert type(invoice).model_validate(snapshot).status_log == invoice.status_log


class TestActor:

    @pytest.mark.parametrize("data,expected", [
        ({"role": "user", "user_id": "u1"}, UserActor),
        ({"role": "client", "client_id": "c1"}, ClientActor),
        ({"role": "system"}, SystemActor),
    ])
    def test_changed_by_is_discriminated_by_role(self, data, expected):
        entry = StatusChange.model_validate({"new_status": "sent", "changed_by": data})

        assert isinstance(entry.changed_by, expected)

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValidationError):
            StatusChange.model_validate({"new_status": "sent", "changed_by": {"role": "admin"}})

    def test_identity(self):
        assert UserActor(user_id="u1").identity == "u1"
        assert ClientActor(client_id="c1").identity == "c1"
        assert SystemActor().identity == "system"
