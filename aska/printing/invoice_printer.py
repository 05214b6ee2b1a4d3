"""A4 invoice rendering, printing and PDF export via QTextDocument."""

from __future__ import annotations

import logging
from html import escape
from pathlib import Path
from typing import List, Optional

from PyQt5.QtGui import QTextDocument
from PyQt5.QtPrintSupport import QPrinter

from aska import config
from aska.models import Customer, Invoice, InvoiceType, Settings
from aska.totals import format_currency

logger = logging.getLogger(__name__)

TITLE_BY_TYPE = {
    InvoiceType.CASH: "فاتورة نقدية",
    InvoiceType.CREDIT: "فاتورة آجل",
    InvoiceType.QUOTE: "عرض سعر",
}


def _money(amount: float) -> str:
    return f"{format_currency(amount)} {config.CURRENCY_LABEL}"


class InvoicePrinter:
    """Render invoices as HTML and send them to a printer or a PDF file."""

    def __init__(self, printer_name: str | None = None) -> None:
        self.printer_name = printer_name or config.PRINTER_NAME

    def build_html(self, invoice: Invoice, customer: Optional[Customer], settings: Settings) -> str:
        """Return the printable document; a missing customer shows as deleted."""
        customer_name = customer.name if customer else config.DELETED_CUSTOMER_LABEL

        rows: List[str] = []
        for index, item in enumerate(invoice.items, start=1):
            description = escape(item.description_ar)
            if item.description_en:
                description += f"<br/><small>{escape(item.description_en)}</small>"
            if item.notes:
                description += f"<br/><small style='color:#999'>{escape(item.notes)}</small>"
            rows.append(
                f"<tr><td align='center'>{index}</td>"
                f"<td align='right'>{description}</td>"
                f"<td align='center'>{item.qty}</td>"
                f"<td align='center'>{_money(item.unit_price)}</td>"
                f"<td align='center'>{_money(item.line_total)}</td></tr>"
            )

        info_rows = [("التاريخ", invoice.issue_date)]
        if invoice.due_date:
            info_rows.append(("تاريخ الاستحقاق", invoice.due_date))
        info_rows.append(("اسم العميل", customer_name))
        if customer and customer.tax_number:
            info_rows.append(("الرقم الضريبي", customer.tax_number))
        info_rows.append(
            ("طريقة الدفع", "نقداً" if invoice.type == InvoiceType.CASH else "تحويل/آجل")
        )
        info_html = "".join(
            f"<tr><td>{escape(label)}:</td><td>{escape(str(value))}</td></tr>"
            for label, value in info_rows
        )

        discount_row = ""
        if invoice.discount_amount:
            discount_row = (
                f"<tr><td>الخصم ({invoice.discount_percent:g}%)</td>"
                f"<td align='left'>-{_money(invoice.discount_amount)}</td></tr>"
            )
        notes_html = f"<p>{escape(invoice.notes)}</p>" if invoice.notes else ""

        return f"""
        <html dir='rtl'>
        <head>
            <style>
                body {{ font-family: 'Arial'; font-size: 11pt; }}
                h2 {{ margin: 0 0 4px 0; }}
                table {{ width: 100%; border-collapse: collapse; }}
                th {{ background: #ffcc00; padding: 6px; }}
                td {{ padding: 4px; }}
                .items td {{ border-bottom: 1px solid #eee; }}
                .grand td {{ font-weight: bold; font-size: 13pt; border-top: 2px solid #ff99cc; }}
            </style>
        </head>
        <body>
            <h2>{escape(settings.company_name)}</h2>
            <div>{escape(settings.company_address)}</div>
            <div>هاتف: {escape(settings.company_phone)}</div>
            <h3>{TITLE_BY_TYPE.get(invoice.type, escape(invoice.type))}</h3>
            <div>رقم الفاتورة: {escape(invoice.number)}</div>
            <hr />
            <table>{info_html}</table>
            <table class='items'>
                <tr><th>م</th><th>وصف المنتج</th><th>الكمية</th><th>السعر</th><th>الإجمالي</th></tr>
                {''.join(rows)}
            </table>
            <table>
                <tr><td>المجموع الفرعي</td><td align='left'>{_money(invoice.subtotal)}</td></tr>
                {discount_row}
                <tr><td>الضريبة ({invoice.tax_percent:g}%)</td><td align='left'>{_money(invoice.tax_amount)}</td></tr>
                <tr class='grand'><td>الإجمالي</td><td align='left'>{_money(invoice.total)}</td></tr>
            </table>
            {notes_html}
        </body>
        </html>
        """

    def _document(self, invoice: Invoice, customer: Optional[Customer], settings: Settings) -> QTextDocument:
        doc = QTextDocument()
        doc.setHtml(self.build_html(invoice, customer, settings))
        return doc

    def export_pdf(
        self,
        invoice: Invoice,
        customer: Optional[Customer],
        settings: Settings,
        path: Path | str | None = None,
    ) -> Path:
        """Write an A4 PDF, named after the invoice number by default."""
        target = Path(path) if path else Path(f"{invoice.number}.pdf")
        target.parent.mkdir(parents=True, exist_ok=True)

        printer = QPrinter(QPrinter.HighResolution)
        printer.setOutputFormat(QPrinter.PdfFormat)
        printer.setPageSize(QPrinter.A4)
        printer.setOutputFileName(str(target))

        self._document(invoice, customer, settings).print_(printer)
        logger.info("Exported %s to %s", invoice.number, target)
        return target

    def print_invoice(self, invoice: Invoice, customer: Optional[Customer], settings: Settings) -> bool:
        """Send the invoice to the printer; returns False if it is unavailable."""
        printer = QPrinter(QPrinter.HighResolution)
        if self.printer_name:
            printer.setPrinterName(self.printer_name)
        if not printer.isValid():
            logger.warning("Printer %r is not available", self.printer_name)
            return False

        printer.setPageSize(QPrinter.A4)
        self._document(invoice, customer, settings).print_(printer)
        return printer.isValid()
