"""Invoice Recalculation Engine

Derives the monetary fields of an invoice from its items, payments and
discount, and the payment-driven status. Pure: the input invoice is left
untouched and running it twice on unchanged data is a no-op.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from src.domain.actor import SYSTEM
from src.domain.invoice import Invoice, ZERO
from src.domain.invoice_status import FROZEN_STATUSES, InvoiceStatus
from src.domain.status_change import StatusChange

HUNDRED = Decimal("100")

AUTO_STATUS_REASON = "Auto-updated based on payment status"


def _derived_status(invoice: Invoice, total_paid: Decimal, total_amount: Decimal, now: datetime) -> InvoiceStatus:
    if total_paid == 0:
        return InvoiceStatus.OVERDUE if invoice.due_date < now.date() else InvoiceStatus.SENT
    if total_paid >= total_amount:
        return InvoiceStatus.PAID
    return InvoiceStatus.PARTIAL_PAID


def recalculate(
    invoice: Invoice,
    *,
    derive_status: bool = True,
    is_new: bool = False,
    now: Optional[datetime] = None,
) -> Invoice:
    """
    Recompute derived fields and, when allowed, the status

    Args:
        invoice: Current aggregate state
        derive_status: False for the single save that follows a
            manual status change
        is_new: True on the first save; an automatic change is then not logged
        now: Clock used for the overdue check (defaults to utcnow)

    Returns:
        A new Invoice with canonical derived fields
    """
    now = now or datetime.utcnow()
    result = invoice.model_copy(deep=True)

    items = [
        item.model_copy(update={
            "amount": item.amount if item.amount is not None else item.quantity * item.rate,
            "tax_rate": item.tax_rate if item.tax_rate is not None else ZERO,
        })
        for item in result.items
    ]

    subtotal = sum((item.amount for item in items), ZERO)
    tax_amount = sum((item.amount * item.tax_rate / HUNDRED for item in items), ZERO)
    # Discount is not validated against the subtotal
    total_amount = max(ZERO, subtotal + tax_amount - result.discount_amount)
    total_paid = sum((payment.amount_paid for payment in result.payments), ZERO)
    remaining_amount = max(ZERO, total_amount - total_paid)

    result.items = items
    result.subtotal = subtotal
    result.tax_amount = tax_amount
    result.total_amount = total_amount
    result.total_paid = total_paid

    if derive_status and result.status not in FROZEN_STATUSES:
        old_status = result.status
        new_status = _derived_status(result, total_paid, total_amount, now)

        if new_status == InvoiceStatus.PAID:
            remaining_amount = ZERO

        if new_status != old_status:
            result.status = new_status
            if not is_new:
                result.status_log.append(
                    StatusChange(
                        old_status=old_status,
                        new_status=new_status,
                        changed_by=SYSTEM,
                        reason=AUTO_STATUS_REASON,
                        changed_at=now,
                    )
                )

    result.remaining_amount = remaining_amount
    return result
