"""
tracker.py - core application logic and persistence

Responsibilities:
 - keep the authoritative newest-first list of Expense objects for the session
 - hold the single-slot undo memory for the last removal
 - mirror every mutation to the ExpenseStore synchronously
 - provide helper APIs consumed by the UI:
     add_expense, remove_expense, undo_last_removal, dismiss_undo,
     list_expenses, month_total, storage_status
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
import logging
import math

from explog.aggregation import month_to_date_total, now_ms
from explog.config import Settings
from explog.errors import InvalidInput, NotFound, StorageUnavailable
from explog.models import CATEGORIES, Expense, category_label, new_expense_id
from explog.storage import ExpenseStore

logger = logging.getLogger(__name__)


@dataclass
class RemovedEntry:
    """An expense taken out of the collection together with the index it occupied."""
    expense: Expense
    index: int


def parse_amount(value) -> float:
    """
    Parse a user-supplied amount (number or numeric string) rounded to two decimals.
    Raises InvalidInput for blank, unparsable, non-finite or non-positive values.
    """
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid amount: {value!r}")
    try:
        amount = float(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid amount: {value!r}")
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidInput(f"Amount must be greater than 0, got {value!r}")
    return round(amount, 2)


class ExpenseTracker:
    """
    Owns the expense collection and the undo slot for one session.
    The UI keeps one instance in session state; tests build their own
    instance around a MemoryStorage or a temporary LocalStorage.
    """

    def __init__(self, store: Optional[ExpenseStore] = None, clock: Optional[Callable[[], int]] = None):
        # in-memory list of Expense objects, newest first
        self.expenses: List[Expense] = []
        # most recent removal, capacity one
        self._last_removed: Optional[RemovedEntry] = None
        self._store = store if store is not None else ExpenseStore.from_settings(Settings.from_env())
        self._clock = clock or now_ms
        self._storage_error = ""
        self.load()

    @property
    def pending_undo(self) -> Optional[RemovedEntry]:
        return self._last_removed

    def storage_status(self) -> Tuple[bool, str]:
        """
        Return (durable, message) for the UI.
        durable is False once a write has failed and no later write succeeded.
        """
        if self._storage_error:
            return False, f"Changes are not being saved: {self._storage_error}"
        return True, "Saved on this device."

    def add_expense(self, amount, note: str = "", category: str = "general",
                    timestamp: Optional[int] = None) -> Expense:
        """
        Create an Expense, prepend it to the collection and persist.
        A blank note takes the category's display label.
        Raises InvalidInput (and changes nothing) for a bad amount or category.
        """
        value = parse_amount(amount)
        if category not in CATEGORIES:
            raise InvalidInput(f"Unknown category: {category!r}")
        exp = Expense(
            id=new_expense_id(),
            amount=value,
            note=(note or "").strip() or category_label(category),
            category=category,
            timestamp=int(timestamp) if timestamp is not None else self._clock(),
        )
        self.expenses.insert(0, exp)
        logger.info("Added expense id=%s (category=%s, amount=%.2f)", exp.id, exp.category, exp.amount)
        self.save()
        return exp

    def list_expenses(self) -> List[Expense]:
        """Return a copy of the collection, newest first."""
        return list(self.expenses)

    def month_total(self, reference=None) -> float:
        return month_to_date_total(self.expenses, reference)

    def remove_expense(self, expense_id: str) -> RemovedEntry:
        """
        Remove expense by id and remember it (with its index) as the only undo target.
        Raises NotFound, leaving the collection and undo slot untouched, if the id is absent.
        """
        for i, e in enumerate(self.expenses):
            if e.id == expense_id:
                removed = RemovedEntry(expense=self.expenses.pop(i), index=i)
                if self._last_removed is not None:
                    logger.info("Undo for expense id=%s superseded", self._last_removed.expense.id)
                self._last_removed = removed
                logger.info("Deleted expense id=%s at index %d. Remaining expenses=%d.",
                            expense_id, i, len(self.expenses))
                self.save()
                return removed
        logger.info("Expense id=%s not found", expense_id)
        raise NotFound(expense_id)

    def undo_last_removal(self) -> bool:
        """
        Reinsert the last removed expense at its original index.

        The index is not adjusted for expenses added after the removal, so the
        record can land in a different relative position in that case.
        Returns False when there is nothing to undo.
        """
        entry = self._last_removed
        if entry is None:
            return False
        index = min(entry.index, len(self.expenses))
        self.expenses.insert(index, entry.expense)
        self._last_removed = None
        logger.info("Restored expense id=%s at index %d", entry.expense.id, index)
        self.save()
        return True

    def dismiss_undo(self) -> None:
        """Forget the pending undo without restoring it."""
        if self._last_removed is not None:
            logger.debug("Undo for expense id=%s dismissed", self._last_removed.expense.id)
        self._last_removed = None

    def save(self) -> bool:
        """
        Persist the full collection.
        A storage failure is logged and reported via storage_status(); the
        in-memory collection stays as it is. Returns True on success.
        """
        try:
            self._store.save(self.expenses)
        except StorageUnavailable as exc:
            self._storage_error = str(exc)
            logger.warning("Failed to persist expenses (kept in memory only): %s", exc)
            return False
        self._storage_error = ""
        return True

    def load(self):
        """
        Replace the in-memory collection with the stored one.
        Missing or corrupt data gives an empty collection.
        """
        self.expenses = self._store.load()
        self._last_removed = None
        logger.info("Loaded %d expenses", len(self.expenses))
