"""First-run demo customer and invoice."""

from __future__ import annotations

import logging

from aska.billing import InvoiceBook
from aska.data.record_store import iso_timestamp
from aska.models import InvoiceItem, InvoiceType

logger = logging.getLogger(__name__)

SAMPLE_INVOICE_NUMBER = "INV-2025-0001"


def initialize_sample_data(book: InvoiceBook) -> None:
    """Seed a customer and an invoice when the respective store is empty.

    The sample invoice carries a fixed number and does not touch the counter.
    """
    if not book.customers.get_all():
        book.customers.create(
            name="شركة المثال",
            phone="777777777",
            address="تعز",
            tax_number="123456789",
            notes="عميل مهم",
        )
        logger.info("Seeded sample customer")

    if book.invoices.get_all():
        return
    customers = book.customers.get_all()
    if not customers:
        return

    now = book.invoices.clock()
    book.invoices.create(
        number=SAMPLE_INVOICE_NUMBER,
        type=InvoiceType.CASH,
        customer_id=customers[0].id,
        issue_date=now.date().isoformat(),
        items=[
            InvoiceItem(
                id=book.invoices.id_factory(),
                description_ar="دهان داخلي",
                description_en="Interior Paint",
                qty=3,
                unit_price=50,
                line_total=150,
            )
        ],
        subtotal=150,
        tax_percent=15,
        discount_percent=0,
        tax_amount=22.5,
        discount_amount=0,
        total=172.5,
        notes="شكراً لتعاملكم معنا",
        updated_at=iso_timestamp(now),
    )
    logger.info("Seeded sample invoice %s", SAMPLE_INVOICE_NUMBER)
