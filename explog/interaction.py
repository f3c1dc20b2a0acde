"""
interaction.py - adapter between user gestures and the tracker

The UI never mutates the tracker directly. It feeds events to an
ExpenseController and renders whatever state the controller exposes
(toast, prepared downloads, storage warning).

Every way of deleting (delete button, swipe, long press) ends up as a single
DeleteRequest, so the undo behaviour is identical whatever the input.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional
import datetime
import logging

from explog.aggregation import now_ms, to_local
from explog.errors import InvalidInput, NotFound
from explog.export import ExportFile, export_csv, export_xlsx
from explog.models import Expense
from explog.tracker import ExpenseTracker, RemovedEntry

logger = logging.getLogger(__name__)

SWIPE_THRESHOLD_PX = 50
LONG_PRESS_MS = 600
TOAST_DURATION_MS = 4000


@dataclass
class DeleteRequest:
    expense_id: str
    source: str = "button"


@dataclass
class Toast:
    message: str
    with_undo: bool
    expires_at: int

    def visible(self, now: int) -> bool:
        return now < self.expires_at


class SwipeGesture:
    """
    Tracks one horizontal touch drag on a list row.
    Dragging left by more than SWIPE_THRESHOLD_PX reveals the delete control;
    the row stays revealed after the touch ends until reset().
    """

    def __init__(self, expense_id: str, threshold: int = SWIPE_THRESHOLD_PX):
        self.expense_id = expense_id
        self.threshold = threshold
        self.revealed = False
        self._start_x: Optional[float] = None

    def start(self, x: float) -> None:
        self._start_x = x

    def move(self, x: float) -> bool:
        if self._start_x is None:
            return self.revealed
        self.revealed = (self._start_x - x) > self.threshold
        return self.revealed

    def end(self) -> None:
        self._start_x = None

    def reset(self) -> None:
        # touch elsewhere on the page
        self._start_x = None
        self.revealed = False

    def confirm(self) -> Optional[DeleteRequest]:
        """Tap on the revealed delete control."""
        if not self.revealed:
            return None
        return DeleteRequest(self.expense_id, source="swipe")


class LongPress:
    """Fires a delete request once a press has been held for LONG_PRESS_MS."""

    def __init__(self, expense_id: str, duration: int = LONG_PRESS_MS):
        self.expense_id = expense_id
        self.duration = duration
        self._pressed_at: Optional[int] = None

    def press(self, at: int) -> None:
        self._pressed_at = at

    def release(self) -> None:
        self._pressed_at = None

    # leaving the row cancels the press like a release
    leave = release

    def poll(self, now: int) -> Optional[DeleteRequest]:
        if self._pressed_at is None or now - self._pressed_at < self.duration:
            return None
        self._pressed_at = None
        return DeleteRequest(self.expense_id, source="long_press")


class ExpenseController:
    """
    Translates user events into tracker calls and tracker results into view state.

    View state:
      - toast: the current Toast or None
      - export_files: CSV and XLSX downloads prepared by export(), dropped
        whenever the collection changes
      - storage_warning: non-empty while changes are not being persisted
    """

    def __init__(self, tracker: ExpenseTracker, clock: Optional[Callable[[], int]] = None):
        self.tracker = tracker
        self._clock = clock or now_ms
        self.toast: Optional[Toast] = None
        self.export_files: List[ExportFile] = []
        self.storage_warning = ""

    def _show_toast(self, message: str, with_undo: bool = False) -> None:
        # replaces any visible toast
        self.toast = Toast(message, with_undo, self._clock() + TOAST_DURATION_MS)

    def now(self) -> int:
        return self._clock()

    def hide_toast(self) -> None:
        self.toast = None

    def _refresh_storage_warning(self) -> None:
        durable, message = self.tracker.storage_status()
        self.storage_warning = "" if durable else message

    def _collection_changed(self) -> None:
        self.export_files = []
        self._refresh_storage_warning()

    def submit(self, amount_text, note: str = "", category: str = "general") -> Optional[Expense]:
        """Form submission. An invalid amount is refused quietly and None is returned."""
        try:
            expense = self.tracker.add_expense(amount_text, note, category)
        except InvalidInput as exc:
            logger.debug("Refused expense: %s", exc)
            return None
        self._collection_changed()
        return expense

    def request_delete(self, request: DeleteRequest) -> Optional[RemovedEntry]:
        try:
            removed = self.tracker.remove_expense(request.expense_id)
        except NotFound:
            return None
        logger.debug("Delete via %s for id=%s", request.source, request.expense_id)
        self._show_toast("Expense deleted", with_undo=True)
        self._collection_changed()
        return removed

    def undo(self) -> bool:
        restored = self.tracker.undo_last_removal()
        self.hide_toast()
        if restored:
            self._collection_changed()
        return restored

    def tick(self, now: Optional[int] = None) -> None:
        """
        Expire the toast once its time is up. An expired undo toast also
        clears the tracker's undo slot.
        """
        if self.toast is None:
            return
        if now is None:
            now = self._clock()
        if self.toast.visible(now):
            return
        if self.toast.with_undo:
            self.tracker.dismiss_undo()
        self.toast = None

    def export(self, now: Optional[datetime.datetime] = None) -> Optional[ExportFile]:
        """
        Prepare CSV and XLSX downloads of the current collection and return the CSV.
        """
        expenses = self.tracker.list_expenses()
        if not expenses:
            self.export_files = []
            self._show_toast("No expenses to export")
            return None
        if now is None:
            now = to_local(self._clock())
        exported = export_csv(expenses, now)
        self.export_files = [exported, export_xlsx(expenses, now)]
        self._show_toast("Exported as CSV ✓")
        return exported
