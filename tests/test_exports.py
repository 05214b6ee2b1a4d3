import pytest
from openpyxl import load_workbook

from aska import config
from aska.billing import ItemDraft
from aska.data.excel_export import INVOICE_COLUMNS, export_invoices_excel
from aska.models import InvoiceType


@pytest.fixture
def invoices(book):
    customer = book.customers.create(name="شركة النور", phone="777", address="تعز", tax_number="555")
    cash = book.create_invoice(
        customer.id,
        InvoiceType.CASH,
        [ItemDraft("دهان داخلي", 3, 50, description_en="Interior Paint", notes="أبيض")],
        15,
        0,
        "2025-03-14",
        notes="شكراً <لكم>",
    )
    credit = book.create_invoice(
        "deleted-customer",
        InvoiceType.CREDIT,
        [ItemDraft("بلاط", 10, 10)],
        0,
        10,
        "2025-03-14",
        due_date="2025-04-14",
    )
    return customer, cash, credit


def test_excel_export(book, invoices, tmp_path):
    customer, cash, credit = invoices
    path = export_invoices_excel([cash, credit], [customer], tmp_path / "out" / "invoices.xlsx")

    workbook = load_workbook(path)
    sheet = workbook["Invoices"]
    assert [cell.value for cell in sheet[1]] == INVOICE_COLUMNS
    assert [cell.value for cell in sheet[2]] == [
        "INV-2025-0001", "نقداً", "شركة النور", "2025-03-14", None, 150, 0, 22.5, 172.5,
    ]
    assert sheet.cell(row=3, column=3).value == config.DELETED_CUSTOMER_LABEL
    assert sheet.cell(row=3, column=5).value == "2025-04-14"
    assert sheet.cell(row=4, column=9).value == "=SUM(I2:I3)"

    items = workbook["Items"]
    assert items.max_row == 3
    assert items.cell(row=2, column=3).value == "Interior Paint"


def test_excel_export_empty(tmp_path):
    path = export_invoices_excel([], [], tmp_path / "empty.xlsx")
    sheet = load_workbook(path)["Invoices"]
    assert sheet.max_row == 1


def test_invoice_html(book, invoices):
    printing = pytest.importorskip("aska.printing.invoice_printer")
    customer, cash, credit = invoices
    printer = printing.InvoicePrinter(printer_name="test")
    settings = book.settings.get()

    html = printer.build_html(cash, customer, settings)
    assert settings.company_name in html
    assert "فاتورة نقدية" in html
    assert "INV-2025-0001" in html
    assert "Interior Paint" in html
    assert "555" in html
    assert "172.50" in html
    assert "شكراً &lt;لكم&gt;" in html
    assert "تاريخ الاستحقاق" not in html
    assert "الخصم (" not in html


def test_invoice_html_for_deleted_customer(book, invoices):
    printing = pytest.importorskip("aska.printing.invoice_printer")
    _customer, _cash, credit = invoices

    html = printing.InvoicePrinter().build_html(credit, None, book.settings.get())
    assert config.DELETED_CUSTOMER_LABEL in html
    assert "فاتورة آجل" in html
    assert "2025-04-14" in html
    assert "الخصم (10%)" in html
