"""Customer, invoice and settings records."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Mapping, Optional

from aska import config
from aska.totals import round_currency


class InvoiceType:
    CASH = "cash"
    QUOTE = "quote"
    CREDIT = "credit"


INVOICE_TYPES = (InvoiceType.CASH, InvoiceType.QUOTE, InvoiceType.CREDIT)

INVOICE_TYPE_LABELS: Dict[str, str] = {
    InvoiceType.CASH: "نقداً",
    InvoiceType.QUOTE: "عرض سعر",
    InvoiceType.CREDIT: "آجل",
}


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


# Marks a patch field the caller did not touch; None is a real value.
UNSET: Any = _Unset()


class Record:
    """JSON mapping shared by all persisted records.

    Attribute names are snake_case; ``_json_keys`` maps them to the keys
    stored on disk. Optional attributes left at None are omitted.
    """

    _json_keys: ClassVar[Dict[str, str]] = {}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and f.default is None:
                continue
            if isinstance(value, list):
                value = [v.to_dict() if isinstance(v, Record) else v for v in value]
            data[self._json_keys.get(f.name, f.name)] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """Build a record; raises TypeError when a required key is missing."""
        kwargs = {}
        for f in fields(cls):
            key = cls._json_keys.get(f.name, f.name)
            if key in data:
                kwargs[f.name] = data[key]
        return cls(**kwargs)


@dataclass
class Customer(Record):
    id: str
    name: str
    phone: str
    address: str
    created_at: str
    tax_number: Optional[str] = None
    notes: Optional[str] = None
    updated_at: Optional[str] = None

    _json_keys: ClassVar[Dict[str, str]] = {
        "tax_number": "taxNumber",
        "created_at": "createdAt",
        "updated_at": "updatedAt",
    }


@dataclass
class InvoiceItem(Record):
    id: str
    description_ar: str
    qty: int
    unit_price: float
    description_en: str = ""
    line_total: Optional[float] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if self.line_total is None:
            self.line_total = round_currency(self.qty * self.unit_price)


@dataclass
class Invoice(Record):
    id: str
    number: str
    type: str
    customer_id: str
    issue_date: str
    created_at: str
    items: List[InvoiceItem] = field(default_factory=list)
    subtotal: float = 0.0
    tax_percent: float = 0.0
    discount_percent: float = 0.0
    tax_amount: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0
    due_date: Optional[str] = None
    notes: Optional[str] = None
    updated_at: Optional[str] = None

    _json_keys: ClassVar[Dict[str, str]] = {
        "customer_id": "customerId",
        "issue_date": "issueDate",
        "due_date": "dueDate",
        "tax_percent": "taxPercent",
        "discount_percent": "discountPercent",
        "tax_amount": "taxAmount",
        "discount_amount": "discountAmount",
        "created_at": "createdAt",
        "updated_at": "updatedAt",
    }

    def __post_init__(self) -> None:
        items: List[InvoiceItem] = []
        for item in self.items:
            if isinstance(item, Mapping):
                item = InvoiceItem.from_dict(item)
            elif not isinstance(item, InvoiceItem):
                raise TypeError(f"Invoice item must be an object, got {item!r}")
            items.append(item)
        self.items = items

    @property
    def type_label(self) -> str:
        return INVOICE_TYPE_LABELS.get(self.type, self.type)


@dataclass
class Settings(Record):
    last_invoice_number: int = config.DEFAULT_SETTINGS["lastInvoiceNumber"]
    default_tax_percent: float = config.DEFAULT_SETTINGS["defaultTaxPercent"]
    company_name: str = config.DEFAULT_SETTINGS["companyName"]
    company_address: str = config.DEFAULT_SETTINGS["companyAddress"]
    company_phone: str = config.DEFAULT_SETTINGS["companyPhone"]

    _json_keys: ClassVar[Dict[str, str]] = {
        "last_invoice_number": "lastInvoiceNumber",
        "default_tax_percent": "defaultTaxPercent",
        "company_name": "companyName",
        "company_address": "companyAddress",
        "company_phone": "companyPhone",
    }


class Patch:
    def changes(self) -> Dict[str, Any]:
        """Return only the fields that were set, keyed by attribute name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


@dataclass
class CustomerPatch(Patch):
    name: str = UNSET
    phone: str = UNSET
    address: str = UNSET
    tax_number: Optional[str] = UNSET
    notes: Optional[str] = UNSET


@dataclass
class InvoicePatch(Patch):
    type: str = UNSET
    customer_id: str = UNSET
    issue_date: str = UNSET
    due_date: Optional[str] = UNSET
    items: List[InvoiceItem] = UNSET
    subtotal: float = UNSET
    tax_percent: float = UNSET
    discount_percent: float = UNSET
    tax_amount: float = UNSET
    discount_amount: float = UNSET
    total: float = UNSET
    notes: Optional[str] = UNSET


@dataclass
class SettingsPatch(Patch):
    last_invoice_number: int = UNSET
    default_tax_percent: float = UNSET
    company_name: str = UNSET
    company_address: str = UNSET
    company_phone: str = UNSET
