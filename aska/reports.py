"""Listing filters and dashboard figures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from aska import config
from aska.models import Customer, Invoice
from aska.totals import round_currency


def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def newest_first(records: Iterable) -> List:
    return sorted(records, key=lambda record: parse_timestamp(record.created_at), reverse=True)


def customer_display_name(customers: Iterable[Customer], customer_id: str) -> str:
    for customer in customers:
        if customer.id == customer_id:
            return customer.name
    return config.DELETED_CUSTOMER_LABEL


def search_customers(customers: Iterable[Customer], term: str = "") -> List[Customer]:
    ordered = newest_first(customers)
    needle = term.strip().lower()
    if not needle:
        return ordered
    return [
        customer
        for customer in ordered
        if needle in customer.name.lower()
        or needle in customer.phone
        or needle in customer.address.lower()
    ]


def search_invoices(
    invoices: Iterable[Invoice],
    customers: Iterable[Customer],
    term: str = "",
    invoice_type: Optional[str] = None,
) -> List[Invoice]:
    """Filter by number, customer name or notes, and optionally by type."""
    names = {customer.id: customer.name.lower() for customer in customers}
    needle = term.strip().lower()
    matches: List[Invoice] = []
    for invoice in newest_first(invoices):
        if invoice_type and invoice.type != invoice_type:
            continue
        if needle and not (
            needle in invoice.number.lower()
            or needle in names.get(invoice.customer_id, "")
            or needle in (invoice.notes or "").lower()
        ):
            continue
        matches.append(invoice)
    return matches


@dataclass
class DashboardStats:
    total_invoices: int
    total_customers: int
    recent_revenue: float
    type_breakdown: Dict[str, int] = field(default_factory=dict)
    recent_invoices: List[Invoice] = field(default_factory=list)


def dashboard_stats(
    invoices: List[Invoice],
    customers: List[Customer],
    now: Optional[datetime] = None,
) -> DashboardStats:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    since = now - timedelta(days=config.RECENT_REVENUE_DAYS)

    revenue = sum(
        invoice.total for invoice in invoices if parse_timestamp(invoice.created_at) >= since
    )
    breakdown: Dict[str, int] = {}
    for invoice in invoices:
        breakdown[invoice.type] = breakdown.get(invoice.type, 0) + 1

    return DashboardStats(
        total_invoices=len(invoices),
        total_customers=len(customers),
        recent_revenue=round_currency(revenue),
        type_breakdown=breakdown,
        recent_invoices=newest_first(invoices)[: config.RECENT_INVOICES_LIMIT],
    )
