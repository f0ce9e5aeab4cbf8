"""In-memory rate collection with write-through JSON persistence."""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from rates_api.core.utils import new_id, utc_timestamp
from rates_api.domain.errors import DuplicateError, NotFoundError, ValidationError
from rates_api.domain.rates import (
    Rate,
    apply_changes,
    check_list_args,
    matches,
    normalize_id,
    validate_rate,
)
from rates_api.repositories import json_storage

logger = logging.getLogger(__name__)


class FileRateStore:
    """
    Authoritative CRUD over rates keyed by id.

    The collection is loaded once at construction (see json_storage.bootstrap)
    and every successful mutation rewrites the data file. Deletes are soft: the
    entry stays in the file with disabled=True and is hidden from list/read/count.
    """

    def __init__(
        self,
        seed_file: Path,
        data_file: Path,
        *,
        persistent: bool = True,
        actor: str = "system",
    ) -> None:
        self.seed_file = Path(seed_file)
        self.data_file = Path(data_file)
        self.persistent = persistent
        self.actor = actor
        self._data: dict[str, Rate] = {}
        self._lock = threading.RLock()
        for rate in json_storage.bootstrap(self.seed_file, self.data_file, persistent):
            self._data[rate.id] = rate
        logger.info("FileRateStore initialized with %d rates from %s", len(self._data), self.data_file)

    # -------------------------- queries --------------------------
    def list(
        self,
        query_type: Optional[str] = None,
        query: Optional[str] = None,
        position: int = 0,
        size: Optional[int] = None,
    ) -> list[Rate]:
        check_list_args(query_type, position, size)
        with self._lock:
            found = [
                r.copy()
                for r in self._data.values()
                if not r.disabled and matches(r, query_type, query)
            ]
        end = None if size is None else position + size
        result = found[position:end]
        logger.info("list() -> %d of %d values", len(result), len(found))
        return result

    def read(self, id: str) -> Rate:
        with self._lock:
            rate = self._get_active(id)
            logger.info("read(%s) -> %s", id, rate.title)
            return rate.copy()

    def count(self) -> int:
        with self._lock:
            return sum(1 for r in self._data.values() if not r.disabled)

    # -------------------------- mutations --------------------------
    def create(self, rate: Rate, actor: Optional[str] = None) -> Rate:
        validate_rate(rate)
        now = utc_timestamp()
        who = actor or self.actor
        with self._lock:
            rate_id = normalize_id(rate.id)
            if rate_id and rate_id in self._data:
                raise DuplicateError(f"rate with ID <{rate_id}> exists already")
            stored = rate.copy()
            stored.id = rate_id or self._fresh_id()
            stored.title = stored.title.strip()
            stored.created_at = stored.modified_at = now
            stored.created_by = stored.modified_by = who
            stored.disabled = False
            self._data[stored.id] = stored
            try:
                self._export()
            except Exception:
                del self._data[stored.id]
                raise
            logger.info("create(%s) by %s", stored.id, who)
            return stored.copy()

    def update(self, id: str, rate: Rate, actor: Optional[str] = None) -> Rate:
        id = normalize_id(id)
        body_id = normalize_id(rate.id)
        if body_id and body_id != id:
            raise ValidationError(f"id in body <{body_id}> does not match <{id}>")
        validate_rate(rate)
        with self._lock:
            current = self._get_active(id)
            previous = current.copy()
            apply_changes(current, rate)
            current.modified_at = utc_timestamp()
            current.modified_by = actor or self.actor
            try:
                self._export()
            except Exception:
                self._data[previous.id] = previous
                raise
            logger.info("update(%s) by %s", id, current.modified_by)
            return current.copy()

    def delete(self, id: str, actor: Optional[str] = None) -> None:
        with self._lock:
            current = self._get_active(id)
            previous = current.copy()
            current.disabled = True
            current.modified_at = utc_timestamp()
            current.modified_by = actor or self.actor
            try:
                self._export()
            except Exception:
                self._data[previous.id] = previous
                raise
            logger.info("delete(%s) by %s", id, current.modified_by)

    # -------------------------- helpers --------------------------
    def _get_active(self, id: str) -> Rate:
        rate = self._data.get(normalize_id(id))
        if rate is None or rate.disabled:
            raise NotFoundError(f"no rate with ID <{id}> was found.")
        return rate

    def _fresh_id(self) -> str:
        rate_id = new_id()
        while rate_id in self._data:
            rate_id = new_id()
        return rate_id

    def _export(self) -> None:
        if self.persistent:
            json_storage.save_rates(self.data_file, self._data.values())
