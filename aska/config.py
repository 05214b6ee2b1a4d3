"""Configuration constants for the ASKA invoicing app."""

import logging
import os
from pathlib import Path
from typing import Dict

# Directory holding one JSON file per storage key.
DATA_DIR: Path = Path(os.getenv("ASKA_DATA_DIR", "data"))

# Storage namespaces for the persisted collections.
STORAGE_KEYS: Dict[str, str] = {
    "customers": "aska.customers",
    "invoices": "aska.invoices",
    "settings": "aska.settings",
}

# Settings used until the user saves their own.
DEFAULT_SETTINGS: Dict[str, object] = {
    "lastInvoiceNumber": 0,
    "defaultTaxPercent": 15,
    "companyName": "أسكا المغربي للتجارة والديكور",
    "companyAddress": "تعز، اليمن",
    "companyPhone": "+967 777 777 777",
}

INVOICE_NUMBER_PREFIX: str = "INV"

# Dashboard revenue window.
RECENT_REVENUE_DAYS: int = 30
RECENT_INVOICES_LIMIT: int = 5

# Shown wherever an invoice points to a customer that no longer exists.
DELETED_CUSTOMER_LABEL: str = "عميل محذوف"

# Stored in place of a company field saved blank.
BLANK_FIELD: str = "—"

CURRENCY_LABEL: str = "ريال"

# Name of the printer used by the Print button.
PRINTER_NAME: str = os.getenv("ASKA_PRINTER", "")

LOG_PATH: Path = Path("aska_invoice.log")
LOG_LEVEL: int = getattr(logging, os.getenv("ASKA_LOG_LEVEL", "INFO").upper(), logging.INFO)
