import pytest

from aska.billing import ItemDraft
from aska.validation import validate_customer, validate_invoice_draft


def test_valid_customer():
    assert validate_customer("شركة", "777", "تعز") == []


def test_customer_requires_name_phone_address():
    assert len(validate_customer("  ", "", None)) == 3


def test_valid_invoice_draft():
    assert validate_invoice_draft("c-1", [ItemDraft("دهان", 1, 0)]) == []


@pytest.mark.parametrize(
    "customer_id, items",
    [
        (None, [ItemDraft("دهان", 1, 10)]),
        ("c-1", []),
        ("c-1", [ItemDraft("  ", 1, 10)]),
        ("c-1", [ItemDraft("دهان", 0, 10)]),
        ("c-1", [ItemDraft("دهان", 1, -1)]),
    ],
)
def test_invalid_invoice_drafts(customer_id, items):
    assert len(validate_invoice_draft(customer_id, items)) == 1
