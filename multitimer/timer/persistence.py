"""Persistence adapter: the whole timer collection as one JSON blob.

Storage problems never reach the caller.  A missing or unreadable blob
loads as an empty collection and a failed write is logged; the in-memory
state stays authoritative for the rest of the session.
"""

from __future__ import annotations

import json
import logging
from typing import Callable, Iterable

from sqlalchemy.exc import SQLAlchemyError

from ..database import db
from .models import TimerRecord

logger = logging.getLogger(__name__)

STORAGE_KEY = "timers"


class TimerPersistence:
    """Reads and writes the serialized timer list under a single key.

    *getter* / *setter* default to the SQLite key-value table; tests may
    pass plain callables instead.
    """

    def __init__(
        self,
        key: str = STORAGE_KEY,
        *,
        getter: Callable[[str], str | None] | None = None,
        setter: Callable[[str, str], None] | None = None,
    ) -> None:
        self._key = key
        self._get = getter or db.get_item
        self._set = setter or db.set_item

    @property
    def key(self) -> str:
        return self._key

    def read(self) -> list[TimerRecord]:
        """Return the stored records in order (``[]`` when unavailable)."""
        try:
            raw = self._get(self._key)
        except (SQLAlchemyError, OSError):
            logger.exception("Failed to read timers from storage")
            return []
        if not raw:
            return []

        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Stored timers are not valid JSON; starting empty")
            return []
        if not isinstance(payload, list):
            logger.warning("Stored timers are not a list; starting empty")
            return []

        records: list[TimerRecord] = []
        seen: set[str] = set()
        for entry in payload:
            try:
                record = TimerRecord.from_dict(entry)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed timer entry %r: %s", entry, exc)
                continue
            if record.id in seen:
                logger.warning("Skipping duplicate timer id %s", record.id)
                continue
            seen.add(record.id)
            records.append(record)
        return records

    def write(self, records: Iterable[TimerRecord]) -> bool:
        """Serialize and store the full collection.  Returns success."""
        try:
            blob = json.dumps([r.to_dict() for r in records])
            self._set(self._key, blob)
        except (SQLAlchemyError, OSError, TypeError, ValueError):
            logger.exception("Failed to save timers")
            return False
        return True
