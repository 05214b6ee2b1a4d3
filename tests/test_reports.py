from datetime import datetime, timezone

from aska import config
from aska.billing import ItemDraft
from aska.models import InvoiceType
from aska.reports import customer_display_name, dashboard_stats, search_customers, search_invoices


def _seed(book, clock):
    nour = book.customers.create(name="شركة النور", phone="777000111", address="تعز")
    clock.advance(days=1)
    sana = book.customers.create(name="Sana Trading", phone="711222333", address="Sanaa")
    clock.advance(days=1)
    old = book.create_invoice(nour.id, InvoiceType.CASH, [ItemDraft("a", 1, 100)], 0, 0, "2025-03-16")
    clock.advance(days=40)
    quote = book.create_invoice(
        sana.id, InvoiceType.QUOTE, [ItemDraft("b", 2, 50)], 15, 0, "2025-04-25", notes="paint order"
    )
    clock.advance(days=1)
    credit = book.create_invoice(nour.id, InvoiceType.CREDIT, [ItemDraft("c", 1, 20)], 0, 0, "2025-04-26")
    return nour, sana, old, quote, credit


def test_customer_display_name_placeholder(book, clock):
    nour, *_ = _seed(book, clock)
    customers = book.customers.get_all()
    assert customer_display_name(customers, nour.id) == "شركة النور"
    assert customer_display_name(customers, "gone") == config.DELETED_CUSTOMER_LABEL


def test_search_customers(book, clock):
    nour, sana, *_ = _seed(book, clock)
    customers = book.customers.get_all()

    assert search_customers(customers) == [sana, nour]
    assert search_customers(customers, "sana") == [sana]
    assert search_customers(customers, "7770") == [nour]
    assert search_customers(customers, "تعز") == [nour]
    assert search_customers(customers, "nothing") == []


def test_search_invoices(book, clock):
    nour, sana, old, quote, credit = _seed(book, clock)
    invoices = book.invoices.get_all()
    customers = book.customers.get_all()

    assert [i.id for i in search_invoices(invoices, customers)] == [credit.id, quote.id, old.id]
    assert search_invoices(invoices, customers, "0002") == [quote]
    assert search_invoices(invoices, customers, "PAINT") == [quote]
    assert [i.id for i in search_invoices(invoices, customers, "النور")] == [credit.id, old.id]
    assert search_invoices(invoices, customers, invoice_type=InvoiceType.CREDIT) == [credit]
    assert search_invoices(invoices, customers, "النور", InvoiceType.QUOTE) == []


def test_search_invoices_with_deleted_customer(book, clock):
    nour, _sana, old, _quote, credit = _seed(book, clock)
    book.customers.delete(nour.id)
    found = search_invoices(book.invoices.get_all(), book.customers.get_all(), "النور")
    assert found == []


def test_dashboard_stats(book, clock):
    _seed(book, clock)
    stats = dashboard_stats(book.invoices.get_all(), book.customers.get_all(), now=clock())

    assert stats.total_invoices == 3
    assert stats.total_customers == 2
    # The cash invoice is older than thirty days.
    assert stats.recent_revenue == 115 + 20
    assert stats.type_breakdown == {"cash": 1, "quote": 1, "credit": 1}
    assert [i.type for i in stats.recent_invoices] == ["credit", "quote", "cash"]


def test_dashboard_stats_accepts_naive_now(book, clock):
    _seed(book, clock)
    naive = clock().replace(tzinfo=None)
    stats = dashboard_stats(book.invoices.get_all(), book.customers.get_all(), now=naive)
    assert stats.recent_revenue == 135


def test_dashboard_limits_recent_invoices(book, clock):
    customer = book.customers.create(name="n", phone="p", address="a")
    for _ in range(config.RECENT_INVOICES_LIMIT + 2):
        clock.advance(minutes=1)
        book.create_invoice(customer.id, InvoiceType.CASH, [ItemDraft("a", 1, 1)], 0, 0, "2025-03-14")

    stats = dashboard_stats(book.invoices.get_all(), book.customers.get_all(), now=clock())
    assert len(stats.recent_invoices) == config.RECENT_INVOICES_LIMIT
    assert stats.recent_invoices[0].number == "INV-2025-0007"


def test_dashboard_on_empty_data():
    stats = dashboard_stats([], [], now=datetime(2025, 1, 1, tzinfo=timezone.utc))
    assert stats.total_invoices == 0
    assert stats.recent_revenue == 0
    assert stats.type_breakdown == {}
