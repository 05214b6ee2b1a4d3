"""Excel ledger export for invoices."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from aska.models import Customer, Invoice
from aska.reports import customer_display_name

logger = logging.getLogger(__name__)

INVOICE_COLUMNS = [
    "رقم الفاتورة",
    "النوع",
    "العميل",
    "التاريخ",
    "تاريخ الاستحقاق",
    "المجموع الفرعي",
    "الخصم",
    "الضريبة",
    "الإجمالي",
]

ITEM_COLUMNS = ["رقم الفاتورة", "الوصف", "Description", "الكمية", "السعر", "الإجمالي"]

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(start_color="FFCC00", end_color="FFCC00", fill_type="solid")
MONEY_FORMAT = "#,##0.00"


def _write_header(sheet: Worksheet, columns: List[str]) -> None:
    for col, title in enumerate(columns, start=1):
        cell = sheet.cell(row=1, column=col, value=title)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center")
        sheet.column_dimensions[get_column_letter(col)].width = max(14, len(title) + 4)


def export_invoices_excel(
    invoices: Iterable[Invoice],
    customers: Iterable[Customer],
    output_path: Path | str,
) -> Path:
    """Write one row per invoice plus an items sheet; returns the saved path."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    invoices = list(invoices)
    customers = list(customers)

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Invoices"
    sheet.sheet_view.rightToLeft = True
    _write_header(sheet, INVOICE_COLUMNS)

    for row, invoice in enumerate(invoices, start=2):
        values = [
            invoice.number,
            invoice.type_label,
            customer_display_name(customers, invoice.customer_id),
            invoice.issue_date,
            invoice.due_date,
            invoice.subtotal,
            invoice.discount_amount,
            invoice.tax_amount,
            invoice.total,
        ]
        for col, value in enumerate(values, start=1):
            cell = sheet.cell(row=row, column=col, value=value)
            if col >= 6:
                cell.number_format = MONEY_FORMAT

    if invoices:
        totals_row = len(invoices) + 2
        sheet.cell(row=totals_row, column=1, value="المجموع").font = HEADER_FONT
        for col in range(6, len(INVOICE_COLUMNS) + 1):
            letter = get_column_letter(col)
            cell = sheet.cell(
                row=totals_row, column=col, value=f"=SUM({letter}2:{letter}{totals_row - 1})"
            )
            cell.font = HEADER_FONT
            cell.number_format = MONEY_FORMAT

    items_sheet = workbook.create_sheet("Items")
    items_sheet.sheet_view.rightToLeft = True
    _write_header(items_sheet, ITEM_COLUMNS)
    row = 2
    for invoice in invoices:
        for item in invoice.items:
            values = [
                invoice.number,
                item.description_ar,
                item.description_en,
                item.qty,
                item.unit_price,
                item.line_total,
            ]
            for col, value in enumerate(values, start=1):
                cell = items_sheet.cell(row=row, column=col, value=value)
                if col >= 5:
                    cell.number_format = MONEY_FORMAT
            row += 1

    workbook.save(output_path)
    logger.info("Exported %d invoices to %s", len(invoices), output_path)
    return output_path
