import pytest
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.domain.actor import ClientActor, UserActor
from src.domain.client import Client
from src.domain.invoice import Invoice
from src.domain.invoice_line import LineItem
from src.domain.invoice_status import InvoiceStatus
from src.domain.recalculation import recalculate

OWNER_ID = "user_1"
CLIENT_ID = "client_1"


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_invoice_repo():
    """Mock invoice repository; create/update hand back what they were given"""
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda invoice: invoice)
    repo.update = AsyncMock(side_effect=lambda invoice: invoice)
    repo.delete = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def owner():
    return UserActor(user_id=OWNER_ID)


@pytest.fixture
def client_actor():
    return ClientActor(client_id=CLIENT_ID)


@pytest.fixture
def sample_client():
    return Client(
        id=CLIENT_ID,
        owner_id=OWNER_ID,
        name="Jane Doe",
        email="jane@example.com",
        company_name="Acme Ltd",
        company_address="1 Market Street",
        gst_no="",
    )


@pytest.fixture
def make_invoice():
    """
    Build a persisted-looking invoice (version 1) with canonical totals.

    Default items: 2 x 100 + 1 x 50, total 250.
    """
    def _make(status=InvoiceStatus.DRAFT, due_date=None, items=None, **kwargs):
        invoice = Invoice(
            id=kwargs.pop("id", "inv_1"),
            invoice_number=kwargs.pop("invoice_number", "INV-2024-0001"),
            owner_id=kwargs.pop("owner_id", OWNER_ID),
            client_id=kwargs.pop("client_id", CLIENT_ID),
            due_date=due_date or date.today() + timedelta(days=30),
            status=status,
            items=items if items is not None else [
                LineItem(description="Design work", quantity=Decimal("2"), rate=Decimal("100")),
                LineItem(description="Hosting", quantity=Decimal("1"), rate=Decimal("50")),
            ],
            version=kwargs.pop("version", 1),
            **kwargs,
        )
        return recalculate(invoice, derive_status=False)

    return _make
