"""Form checks run by the UI before anything reaches the stores."""

from __future__ import annotations

from typing import List, Optional, Sequence

from aska.billing import ItemDraft


def validate_customer(name: str, phone: str, address: str) -> List[str]:
    """Return error messages; empty when the customer can be saved."""
    errors: List[str] = []
    if not (name or "").strip():
        errors.append("يرجى إدخال اسم العميل")
    if not (phone or "").strip():
        errors.append("يرجى إدخال رقم الهاتف")
    if not (address or "").strip():
        errors.append("يرجى إدخال العنوان")
    return errors


def validate_invoice_draft(customer_id: Optional[str], items: Sequence[ItemDraft]) -> List[str]:
    errors: List[str] = []
    if not customer_id:
        errors.append("يرجى اختيار العميل")
    if not items:
        errors.append("يرجى إضافة عنصر واحد على الأقل")
    if any(not (item.description_ar or "").strip() for item in items):
        errors.append("يرجى ملء وصف جميع العناصر")
    if any(item.qty <= 0 or item.unit_price < 0 for item in items):
        errors.append("يرجى التأكد من صحة الكميات والأسعار")
    return errors
