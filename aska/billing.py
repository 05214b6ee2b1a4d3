"""Wires the stores together and finalizes new invoices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from aska import config
from aska.data.local_storage import KeyValueStorage
from aska.data.record_store import RecordStore, iso_timestamp, new_id, utc_now
from aska.data.settings_store import SettingsStore
from aska.models import Customer, CustomerPatch, Invoice, InvoiceItem, InvoiceType
from aska.numbering import InvoiceNumbering
from aska.totals import compute_totals, round_currency

logger = logging.getLogger(__name__)


@dataclass
class ItemDraft:
    """An invoice line as typed into the new-invoice form."""

    description_ar: str
    qty: int = 1
    unit_price: float = 0.0
    description_en: str = ""
    notes: Optional[str] = None

    @property
    def line_total(self) -> float:
        return round_currency(self.qty * self.unit_price)


class InvoiceBook:
    """Customer and invoice stores, settings and numbering for one data location."""

    def __init__(
        self,
        customers: RecordStore[Customer],
        invoices: RecordStore[Invoice],
        settings: SettingsStore,
        numbering: InvoiceNumbering,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.customers = customers
        self.invoices = invoices
        self.settings = settings
        self.numbering = numbering
        self._id_factory = id_factory
        self._clock = clock

    @classmethod
    def open(
        cls,
        storage: KeyValueStorage,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ) -> "InvoiceBook":
        customers = RecordStore(storage, config.STORAGE_KEYS["customers"], Customer, id_factory, clock)
        invoices = RecordStore(storage, config.STORAGE_KEYS["invoices"], Invoice, id_factory, clock)
        settings = SettingsStore(storage)
        numbering = InvoiceNumbering(settings, clock)
        return cls(customers, invoices, settings, numbering, id_factory, clock)

    def customer_for(self, invoice: Invoice) -> Optional[Customer]:
        """Return the invoice's customer, or None if it was deleted."""
        return self.customers.get(invoice.customer_id)

    def save_customer(
        self,
        name: str,
        phone: str,
        address: str,
        tax_number: str = "",
        notes: str = "",
        customer_id: Optional[str] = None,
    ) -> Optional[Customer]:
        """Create a customer, or update ``customer_id`` when given.

        Fields are trimmed and blank optional fields are stored as None.
        Returns None when ``customer_id`` no longer exists.
        """
        fields = dict(
            name=name.strip(),
            phone=phone.strip(),
            address=address.strip(),
            tax_number=(tax_number or "").strip() or None,
            notes=(notes or "").strip() or None,
        )
        if customer_id is None:
            customer = self.customers.create(**fields)
            logger.info("Added customer %s", customer.id)
            return customer
        customer = self.customers.update(customer_id, CustomerPatch(**fields))
        if customer is None:
            logger.warning("Customer %s vanished before it could be updated", customer_id)
        return customer

    def create_invoice(
        self,
        customer_id: str,
        invoice_type: str,
        items: Iterable[ItemDraft],
        tax_percent: float,
        discount_percent: float,
        issue_date: str,
        due_date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Invoice:
        """Number, total and store a new invoice.

        Input is expected to be validated already (see ``aska.validation``).
        The invoice number is consumed before the invoice is written.
        """
        line_items: List[InvoiceItem] = [
            InvoiceItem(
                id=self._id_factory(),
                description_ar=draft.description_ar,
                description_en=draft.description_en,
                qty=draft.qty,
                unit_price=draft.unit_price,
                notes=draft.notes or None,
            )
            for draft in items
        ]
        totals = compute_totals(line_items, tax_percent, discount_percent)

        invoice = self.invoices.create(
            number=self.numbering.next(),
            type=invoice_type,
            customer_id=customer_id,
            issue_date=issue_date,
            due_date=(due_date or None) if invoice_type == InvoiceType.CREDIT else None,
            items=line_items,
            subtotal=totals.subtotal,
            tax_percent=tax_percent,
            discount_percent=discount_percent,
            tax_amount=totals.tax_amount,
            discount_amount=totals.discount_amount,
            total=totals.total,
            notes=notes or None,
            updated_at=iso_timestamp(self._clock()),
        )
        logger.info("Created invoice %s (%s) total %.2f", invoice.number, invoice.type, invoice.total)
        return invoice
