"""Sequential invoice numbers such as ``INV-2025-0001``."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from aska import config
from aska.data.record_store import utc_now
from aska.data.settings_store import SettingsStore
from aska.models import SettingsPatch

logger = logging.getLogger(__name__)


def format_invoice_number(year: int, sequence: int) -> str:
    return f"{config.INVOICE_NUMBER_PREFIX}-{year}-{sequence:04d}"


class InvoiceNumbering:
    """Derives invoice numbers from the counter kept in settings.

    The counter is persisted as soon as a number is handed out, so a number
    is never reused even when the invoice is deleted or never saved.
    """

    def __init__(self, settings_store: SettingsStore, clock: Callable[[], datetime] = utc_now) -> None:
        self.settings_store = settings_store
        self._clock = clock

    def _year(self) -> int:
        # Numbers follow the local calendar year, not UTC.
        return self._clock().astimezone().year

    def peek(self) -> str:
        """Return the number ``next()`` would give, without consuming it."""
        sequence = self.settings_store.get().last_invoice_number + 1
        return format_invoice_number(self._year(), sequence)

    def next(self) -> str:
        sequence = self.settings_store.get().last_invoice_number + 1
        number = format_invoice_number(self._year(), sequence)
        self.settings_store.update(SettingsPatch(last_invoice_number=sequence))
        logger.debug("Issued invoice number %s", number)
        return number
