"""PDF Generation Service Interface

Defines the contract for rendering invoice documents.
"""

from abc import ABC, abstractmethod
from src.domain.client import Client
from src.domain.invoice import Invoice


class PdfService(ABC):
    """
    Service interface for PDF generation

    Renders a finalized invoice snapshot; never mutates the invoice.
    """

    @abstractmethod
    def render_invoice(self, invoice: Invoice, client: Client) -> bytes:
        """
        Render an invoice PDF

        Args:
            invoice: Recalculated invoice
            client: Invoiced client (Bill To block)

        Returns:
            PDF document as bytes
        """
        pass
