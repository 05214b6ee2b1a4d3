"""Singleton settings record with built-in defaults."""

from __future__ import annotations

import json
import logging
from dataclasses import fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from aska import config
from aska.data.local_storage import KeyValueStorage
from aska.models import Settings, SettingsPatch

logger = logging.getLogger(__name__)

_FIELD_TYPES: Dict[str, Tuple[type, ...]] = {
    "last_invoice_number": (int,),
    "default_tax_percent": (int, float),
    "company_name": (str,),
    "company_address": (str,),
    "company_phone": (str,),
}


def _settings_from(data: Mapping[str, Any]) -> Settings:
    """Keep stored values of the right type; anything else falls back to its default."""
    kwargs = {}
    for f in fields(Settings):
        key = Settings._json_keys.get(f.name, f.name)
        if key not in data:
            continue
        value = data[key]
        # bool is an int subclass but never a valid counter or percentage.
        if isinstance(value, bool) or not isinstance(value, _FIELD_TYPES[f.name]):
            logger.warning("Ignoring stored setting %s=%r; using default", key, value)
            continue
        kwargs[f.name] = value
    return Settings(**kwargs)


class SettingsStore:
    """Reads and merges the company profile, default tax and invoice counter."""

    def __init__(self, storage: KeyValueStorage, key: Optional[str] = None) -> None:
        self.storage = storage
        self.key = key or config.STORAGE_KEYS["settings"]

    def get(self) -> Settings:
        """Return stored settings, or the defaults when absent or unreadable."""
        data = self.storage.get_item(self.key)
        if not data:
            return Settings()
        try:
            parsed = json.loads(data)
        except ValueError:
            logger.warning("Stored settings are not valid JSON; using defaults")
            return Settings()
        if not isinstance(parsed, dict):
            logger.warning("Stored settings are not an object; using defaults")
            return Settings()
        return _settings_from(parsed)

    def update(self, patch: SettingsPatch) -> Settings:
        updated = replace(self.get(), **patch.changes())
        self.storage.set_item(self.key, json.dumps(updated.to_dict(), ensure_ascii=False))
        logger.debug("Settings updated: %s", sorted(patch.changes()))
        return updated

    def save_profile(
        self,
        company_name: str,
        company_address: str,
        company_phone: str,
        default_tax_percent: float,
    ) -> Settings:
        """Save the settings form; blank company fields are stored as a dash."""
        return self.update(SettingsPatch(
            company_name=company_name.strip() or config.BLANK_FIELD,
            company_address=company_address.strip() or config.BLANK_FIELD,
            company_phone=company_phone.strip() or config.BLANK_FIELD,
            default_tax_percent=default_tax_percent,
        ))

    def reset_defaults(self) -> Settings:
        """Restore the company profile and default tax; the invoice counter is kept."""
        defaults = Settings()
        settings = self.update(SettingsPatch(
            default_tax_percent=defaults.default_tax_percent,
            company_name=defaults.company_name,
            company_address=defaults.company_address,
            company_phone=defaults.company_phone,
        ))
        logger.info("Settings reset to defaults (counter kept at %d)", settings.last_invoice_number)
        return settings
