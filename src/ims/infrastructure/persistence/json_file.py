"""Shared plumbing for the JSON-file-backed repositories.

Each repository owns one file holding a JSON list of records. Every
read-modify-write runs under a re-entrant lock shared by all
repositories pointing at the same file, and writes go to a temporary
file that atomically replaces the original.
"""

from __future__ import annotations

import json
import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Generic, TypeVar

from ims.domain.model.value_objects import Money

T = TypeVar("T")

_registry_guard = threading.Lock()
_file_locks: dict[Path, threading.RLock] = {}


def _lock_for(path: Path) -> threading.RLock:
    with _registry_guard:
        return _file_locks.setdefault(path.resolve(), threading.RLock())


class JsonFileRepository(ABC, Generic[T]):
    """Base class: subclasses supply ``_to_raw`` and ``_to_domain``."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = _lock_for(file_path)
        self._ensure_file()

    # --- Serialization hooks --------------------------------------------------

    @staticmethod
    @abstractmethod
    def _to_raw(entity: T) -> dict:
        """Convert an entity to a JSON-ready dict."""

    @staticmethod
    @abstractmethod
    def _to_domain(raw: dict) -> T:
        """Rebuild an entity from its stored dict."""

    # --- Generic queries and writes -------------------------------------------

    def _find_one(self, predicate: Callable[[dict], bool]) -> T | None:
        for raw in self._load_raw():
            if predicate(raw):
                return self._to_domain(raw)
        return None

    def _find_all(self, predicate: Callable[[dict], bool] | None = None) -> list[T]:
        return [
            self._to_domain(raw)
            for raw in self._load_raw()
            if predicate is None or predicate(raw)
        ]

    def _upsert(self, entity_id: str, entity: T) -> None:
        with self._transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == entity_id:
                    records[i] = self._to_raw(entity)
                    break
            else:
                records.append(self._to_raw(entity))

    def _remove(self, predicate: Callable[[dict], bool]) -> int:
        with self._transaction() as records:
            kept = [raw for raw in records if not predicate(raw)]
            removed = len(records) - len(kept)
            records[:] = kept
        return removed

    @contextmanager
    def _transaction(self) -> Iterator[list[dict]]:
        """Load, let the caller mutate the list in place, then persist.

        Nothing is written if the body raises.
        """
        with self._lock:
            records = self._load_raw()
            yield records
            self._persist_raw(records)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self._file_path)

    def _ensure_file(self) -> None:
        with self._lock:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_path.write_text("[]", encoding="utf-8")


# --- Field codecs -------------------------------------------------------------


def money_to_raw(money: Money) -> dict:
    return {"amount": str(money.amount), "currency": money.currency}


def money_from_raw(raw: dict) -> Money:
    return Money(Decimal(raw["amount"]), raw.get("currency", "USD"))


def datetime_to_raw(moment: datetime) -> str:
    return moment.isoformat()


def datetime_from_raw(raw: str) -> datetime:
    return datetime.fromisoformat(raw)
