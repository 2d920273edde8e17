"""ReportLab PDF Generation Service Implementation

Implements invoice rendering using ReportLab library.
"""

from io import BytesIO
from decimal import Decimal
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import PdfService
from src.domain.client import Client
from src.domain.invoice import Invoice

# Line items: description, qty, rate, tax, amount
ITEM_COL_WIDTHS = [70 * mm, 20 * mm, 27 * mm, 18 * mm, 35 * mm]


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Layout: title, From/To blocks with invoice details, line items,
    totals (discount and paid/balance rows only when non-zero), terms and notes.
    """

    def __init__(self, company_name: str = "Invoice Ledger", currency: str = "INR"):
        self.company_name = company_name
        self.currency = currency

    def _money(self, value: Decimal) -> str:
        return f"{self.currency} {value:,.2f}"

    def render_invoice(self, invoice: Invoice, client: Client) -> bytes:
        """
        Render an invoice PDF

        Args:
            invoice: Recalculated invoice
            client: Invoiced client

        Returns:
            PDF document as bytes
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=f"Invoice {invoice.invoice_number}",
        )

        styles = getSampleStyleSheet()
        elements = []

        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=24,
            spaceAfter=10,
            textColor=colors.HexColor("#2C3E50"),
        )
        normal_style = ParagraphStyle(
            "NormalStyle",
            parent=styles["Normal"],
            fontSize=10,
        )
        small_style = ParagraphStyle(
            "SmallStyle",
            parent=styles["Normal"],
            fontSize=8,
            textColor=colors.HexColor("#7F8C8D"),
        )

        elements.append(Paragraph("INVOICE", title_style))
        elements.append(Spacer(1, 5 * mm))

        # From / To and invoice details
        party_data = [
            ["From:", "To:", ""],
            [self.company_name, client.name, f"Invoice #: {invoice.invoice_number}"],
            ["", client.company_name, f"Date: {invoice.invoice_date.strftime('%d/%m/%Y')}"],
            ["", client.company_address, f"Due Date: {invoice.due_date.strftime('%d/%m/%Y')}"],
            ["", client.email, f"Status: {invoice.status.value.upper()}"],
            ["", f"GST: {client.gst_no or 'N/A'}", ""],
        ]
        party_table = Table(party_data, colWidths=[50 * mm, 60 * mm, 60 * mm])
        party_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#7F8C8D")),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
                ]
            )
        )
        elements.append(party_table)
        elements.append(Spacer(1, 10 * mm))

        # Line items
        line_data = [["Description", "Qty", "Rate", "Tax %", "Amount"]]
        for item in invoice.items:
            amount = item.amount if item.amount is not None else item.quantity * item.rate
            line_data.append(
                [
                    item.description,
                    f"{item.quantity:,.6f}".rstrip("0").rstrip("."),
                    f"{item.rate:,.2f}",
                    f"{item.tax_rate or 0:,.2f}",
                    f"{amount:,.2f}",
                ]
            )

        line_table = Table(line_data, colWidths=ITEM_COL_WIDTHS, repeatRows=1)
        line_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#BDC3C7")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    (
                        "ROWBACKGROUNDS",
                        (0, 1),
                        (-1, -1),
                        [colors.white, colors.HexColor("#F8F9F9")],
                    ),
                ]
            )
        )
        elements.append(line_table)
        elements.append(Spacer(1, 5 * mm))

        # Totals
        total_data = [
            ["Subtotal:", self._money(invoice.subtotal)],
            ["Tax:", self._money(invoice.tax_amount)],
        ]
        if invoice.discount_amount > 0:
            total_data.append(["Discount:", self._money(invoice.discount_amount)])
        total_row = len(total_data)
        total_data.append(["Total:", self._money(invoice.total_amount)])
        if invoice.total_paid > 0:
            total_data.append(["Paid:", self._money(invoice.total_paid)])
            total_data.append(["Balance:", self._money(invoice.remaining_amount)])

        total_table = Table(total_data, colWidths=[135 * mm, 35 * mm])
        total_table.setStyle(
            TableStyle(
                [
                    ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("FONTNAME", (0, total_row), (-1, total_row), "Helvetica-Bold"),
                    ("FONTSIZE", (0, total_row), (-1, total_row), 12),
                    ("LINEABOVE", (1, total_row), (1, total_row), 1.5, colors.HexColor("#2C3E50")),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(total_table)
        elements.append(Spacer(1, 10 * mm))

        if invoice.terms:
            elements.append(Paragraph("<b>Terms &amp; Conditions:</b>", small_style))
            elements.append(Paragraph(escape(invoice.terms), small_style))
            elements.append(Spacer(1, 5 * mm))

        if invoice.notes:
            elements.append(Paragraph("<b>Notes:</b>", small_style))
            elements.append(Paragraph(escape(invoice.notes), small_style))
            elements.append(Spacer(1, 5 * mm))

        elements.append(Spacer(1, 10 * mm))
        elements.append(Paragraph("<i>Thank you for your business!</i>", normal_style))

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes
