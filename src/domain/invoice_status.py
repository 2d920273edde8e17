"""Invoice lifecycle statuses and the groups the lifecycle rules refer to"""

from enum import Enum


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    PARTIAL_PAID = "partial_paid"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


# Automatic status derivation never moves an invoice out of these
FROZEN_STATUSES = frozenset({InvoiceStatus.DRAFT, InvoiceStatus.CANCELLED})

# A manual move into one of these wipes the payment history
PAYMENT_RESET_STATUSES = frozenset({
    InvoiceStatus.DRAFT,
    InvoiceStatus.CANCELLED,
    InvoiceStatus.SENT,
    InvoiceStatus.OVERDUE,
})

DELETABLE_STATUSES = FROZEN_STATUSES

# Outstanding invoices a reminder can be sent for
REMINDABLE_STATUSES = frozenset({
    InvoiceStatus.SENT,
    InvoiceStatus.OVERDUE,
    InvoiceStatus.PARTIAL_PAID,
    InvoiceStatus.VIEWED,
})

# Invoices the overdue sweep re-evaluates
OVERDUE_CANDIDATE_STATUSES = frozenset({
    InvoiceStatus.SENT,
    InvoiceStatus.VIEWED,
    InvoiceStatus.PARTIAL_PAID,
})
