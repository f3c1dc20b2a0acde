"""
storage.py - on-device key-value persistence

The whole expense collection is stored as one serialized JSON array under a
fixed key. Two key-value backends are available:
 - LocalStorage: a JSON object on disk mapping keys to string values,
   rewritten atomically on every set_item
 - MemoryStorage: a plain dict, used for tests and session-only runs

ExpenseStore sits on top of a backend and converts between the stored blob
and Expense objects. There are no partial writes, no migrations and no schema
version field.
"""

from typing import Dict, List, Optional
import json
import logging
import os
import shutil
import tempfile

from explog.errors import CorruptStoredData, StorageUnavailable
from explog.models import Expense

STORAGE_KEY = "explog_expenses"

logger = logging.getLogger(__name__)


class MemoryStorage:
    """In-process key-value storage. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class LocalStorage:
    """
    Key-value storage persisted as a JSON object in a single file.

    Reads tolerate a missing file (no keys). A file that is not a JSON object
    raises CorruptStoredData on read and is replaced wholesale by the next write.
    Write failures raise StorageUnavailable.
    """

    def __init__(self, path: str):
        self.path = os.path.abspath(path)

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
            raise CorruptStoredData(f"Unreadable storage file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CorruptStoredData(f"Storage file {self.path} does not hold a JSON object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is None:
            return None
        return str(value)

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except CorruptStoredData:
            logger.warning("Discarding corrupt storage file %s", self.path)
            data = {}
        data[key] = value
        self._write_all(data)

    def _write_all(self, data: Dict[str, str]) -> None:
        dirn = os.path.dirname(self.path)
        tmp_path = None
        try:
            os.makedirs(dirn, exist_ok=True)
            # atomic write: write to temp file then move
            fd, tmp_path = tempfile.mkstemp(prefix="tmp_explog_", dir=dirn, text=True)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            shutil.move(tmp_path, self.path)
        except OSError as exc:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp_path)
            raise StorageUnavailable(f"Cannot write {self.path}: {exc}") from exc


def encode_expenses(expenses: List[Expense]) -> str:
    return json.dumps([e.to_dict() for e in expenses], ensure_ascii=False)


def decode_expenses(blob: str) -> List[Expense]:
    """
    Parse a stored blob into Expense objects.
    Raises CorruptStoredData when the blob is not a JSON array of valid records.
    """
    try:
        data = json.loads(blob)
    except (TypeError, ValueError, RecursionError) as exc:
        raise CorruptStoredData(f"Stored expenses are not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise CorruptStoredData("Stored expenses are not a JSON array")
    try:
        return [Expense.from_dict(d) for d in data]
    except (AttributeError, KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
        raise CorruptStoredData(f"Stored expense record is malformed: {exc}") from exc


class ExpenseStore:
    """Reads/writes the full expense collection under one storage key."""

    def __init__(self, backend, key: str = STORAGE_KEY):
        self.backend = backend
        self.key = key

    def load(self) -> List[Expense]:
        """
        Return the stored collection, newest first.
        Absent or corrupt data yields an empty list; corruption is logged, never raised.
        """
        try:
            blob = self.backend.get_item(self.key)
            if blob is None:
                return []
            return decode_expenses(blob)
        except CorruptStoredData as exc:
            logger.warning("Ignoring corrupt stored expenses: %s", exc)
            return []

    def save(self, expenses: List[Expense]) -> None:
        """Persist the full collection. Raises StorageUnavailable on failure."""
        self.backend.set_item(self.key, encode_expenses(expenses))

    @staticmethod
    def from_settings(settings) -> "ExpenseStore":
        if settings.storage_backend == "memory":
            logger.info("Using in-memory storage; expenses will not survive a restart")
            return ExpenseStore(MemoryStorage())
        logger.info("Using local storage file %s", os.path.abspath(settings.data_file))
        return ExpenseStore(LocalStorage(settings.data_file))
