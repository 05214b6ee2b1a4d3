"""Generic JSON-backed collection of records."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from aska.data.local_storage import KeyValueStorage
from aska.models import Patch, Record

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Record)


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Format as ``2025-01-31T09:15:00.000Z``."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class RecordStore(Generic[T]):
    """Create/read/update/delete over one storage key.

    The whole collection is rewritten on every change.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str,
        record_type: Type[T],
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.storage = storage
        self.key = key
        self.record_type = record_type
        self.id_factory = id_factory
        self.clock = clock

    def _load_raw(self) -> List[Dict[str, Any]]:
        data = self.storage.get_item(self.key)
        if not data:
            return []
        try:
            parsed = json.loads(data)
        except ValueError:
            logger.warning("Stored value for %s is not valid JSON; treating as empty", self.key)
            return []
        if not isinstance(parsed, list):
            logger.warning("Stored value for %s is not a list; treating as empty", self.key)
            return []
        return parsed

    def _save(self, records: List[T]) -> None:
        payload = json.dumps([record.to_dict() for record in records], ensure_ascii=False)
        self.storage.set_item(self.key, payload)
        logger.debug("Wrote %d records to %s", len(records), self.key)

    def get_all(self) -> List[T]:
        records: List[T] = []
        for entry in self._load_raw():
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed entry in %s: %r", self.key, entry)
                continue
            try:
                records.append(self.record_type.from_dict(entry))
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping malformed entry in %s: %s", self.key, exc)
        return records

    def get(self, record_id: str) -> Optional[T]:
        for record in self.get_all():
            if record.id == record_id:
                return record
        return None

    def create(self, **fields: Any) -> T:
        """Store a new record built from ``fields``; id and created_at are assigned here."""
        record = self.record_type(
            id=self.id_factory(),
            created_at=iso_timestamp(self.clock()),
            **fields,
        )
        records = self.get_all()
        records.append(record)
        self._save(records)
        return record

    def update(self, record_id: str, patch: Patch) -> Optional[T]:
        """Apply the fields set on ``patch``; returns None when the id is unknown."""
        records = self.get_all()
        for index, existing in enumerate(records):
            if existing.id == record_id:
                updated = replace(
                    existing,
                    **patch.changes(),
                    updated_at=iso_timestamp(self.clock()),
                )
                records[index] = updated
                self._save(records)
                return updated
        return None

    def delete(self, record_id: str) -> bool:
        records = self.get_all()
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False
        self._save(remaining)
        return True
