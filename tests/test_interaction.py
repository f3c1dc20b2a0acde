import datetime

from explog.interaction import (
    LONG_PRESS_MS,
    TOAST_DURATION_MS,
    DeleteRequest,
    ExpenseController,
    LongPress,
    SwipeGesture,
)
from explog.errors import StorageUnavailable
from explog.storage import ExpenseStore, MemoryStorage
from explog.tracker import ExpenseTracker


def _controller(tracker, clock):
    return ExpenseController(tracker, clock=clock)


def test_submit_valid(tracker, clock):
    controller = _controller(tracker, clock)
    expense = controller.submit("12.346", "", "food")
    assert expense is not None
    assert expense.amount == 12.35
    assert expense.note == "Food"
    assert tracker.expenses == [expense]


def test_submit_invalid_is_refused_quietly(tracker, clock):
    controller = _controller(tracker, clock)
    assert controller.submit("abc", "x", "food") is None
    assert controller.submit("-3", "x", "food") is None
    assert tracker.expenses == []
    assert controller.toast is None


def test_delete_shows_undo_toast(tracker, clock):
    controller = _controller(tracker, clock)
    expense = controller.submit("5", "Taxi", "transport")
    removed = controller.request_delete(DeleteRequest(expense.id))
    assert removed.expense is expense
    assert controller.toast.message == "Expense deleted"
    assert controller.toast.with_undo is True
    assert controller.toast.expires_at == clock.now + TOAST_DURATION_MS

    assert controller.undo() is True
    assert tracker.expenses == [expense]
    assert controller.toast is None


def test_delete_unknown_is_noop(tracker, clock):
    controller = _controller(tracker, clock)
    controller.submit("5")
    assert controller.request_delete(DeleteRequest("missing")) is None
    assert controller.toast is None
    assert len(tracker.expenses) == 1


def test_toast_expiry_dismisses_undo(tracker, clock):
    controller = _controller(tracker, clock)
    expense = controller.submit("5")
    controller.request_delete(DeleteRequest(expense.id))

    clock.advance(TOAST_DURATION_MS - 1)
    controller.tick()
    assert controller.toast is not None
    assert tracker.pending_undo is not None

    clock.advance(1)
    controller.tick()
    assert controller.toast is None
    assert tracker.pending_undo is None
    assert controller.undo() is False
    assert tracker.expenses == []


def test_every_gesture_deletes_the_same_way(tracker, clock):
    controller = _controller(tracker, clock)
    a = controller.submit("1", "a")
    b = controller.submit("2", "b")
    c = controller.submit("3", "c")

    swipe = SwipeGesture(a.id)
    swipe.start(200)
    swipe.move(120)
    swipe.end()
    press = LongPress(b.id)
    press.press(at=0)

    for request in (swipe.confirm(), press.poll(LONG_PRESS_MS), DeleteRequest(c.id, "button")):
        assert controller.request_delete(request) is not None
        assert controller.toast.with_undo

    # only the last deletion can be undone
    assert controller.undo() is True
    assert tracker.expenses == [c]


def test_swipe_threshold():
    swipe = SwipeGesture("x")
    swipe.start(100)
    assert swipe.move(50) is False  # exactly 50px
    assert swipe.confirm() is None
    assert swipe.move(49) is True
    assert swipe.move(120) is False  # dragged back to the right
    swipe.move(0)
    swipe.end()
    assert swipe.revealed is True
    assert swipe.confirm().source == "swipe"
    swipe.reset()
    assert swipe.revealed is False


def test_swipe_move_without_start():
    swipe = SwipeGesture("x")
    assert swipe.move(0) is False


def test_long_press_release_cancels():
    press = LongPress("x")
    press.press(at=1000)
    assert press.poll(1000 + LONG_PRESS_MS - 1) is None
    press.release()
    assert press.poll(1000 + LONG_PRESS_MS) is None

    press.press(at=5000)
    press.leave()
    assert press.poll(10_000) is None


def test_long_press_fires_once():
    press = LongPress("x")
    press.press(at=0)
    request = press.poll(LONG_PRESS_MS)
    assert request.expense_id == "x"
    assert request.source == "long_press"
    assert press.poll(LONG_PRESS_MS * 2) is None


def test_export_empty(tracker, clock):
    controller = _controller(tracker, clock)
    assert controller.export() is None
    assert controller.toast.message == "No expenses to export"
    assert controller.toast.with_undo is False


def test_export_replaces_toast(tracker, clock):
    controller = _controller(tracker, clock)
    controller.submit("2.5", 'Say "cheese"', "shopping")
    exported = controller.export(datetime.datetime(2026, 10, 18, 9, 0))
    assert exported.filename == "explog_2026-10-18.csv"
    assert b'"Say ""cheese"""' in exported.data
    assert controller.toast.message == "Exported as CSV ✓"


def test_storage_warning_surfaces(clock):
    class BrokenStorage(MemoryStorage):
        def set_item(self, key, value):
            raise StorageUnavailable("storage disabled")

    tracker = ExpenseTracker(store=ExpenseStore(BrokenStorage()), clock=clock)
    controller = _controller(tracker, clock)
    expense = controller.submit("4")
    assert expense is not None
    assert "storage disabled" in controller.storage_warning
    assert tracker.expenses == [expense]


def test_export_prepares_csv_and_xlsx(tracker, clock):
    controller = _controller(tracker, clock)
    controller.submit("3", "a")
    controller.export(datetime.datetime(2026, 10, 18, 9, 0))
    assert [f.filename for f in controller.export_files] == [
        "explog_2026-10-18.csv",
        "explog_2026-10-18.xlsx",
    ]


def test_prepared_export_is_dropped_when_collection_changes(tracker, clock):
    controller = _controller(tracker, clock)
    first = controller.submit("3", "first")

    controller.export()
    controller.submit("4", "second")
    assert controller.export_files == []

    controller.export()
    assert b'"second"' in controller.export_files[0].data
    controller.request_delete(DeleteRequest(first.id))
    assert controller.export_files == []

    controller.export()
    assert controller.undo() is True
    assert controller.export_files == []

    # refused input and unknown deletes leave a prepared export alone
    controller.export()
    controller.submit("-1")
    controller.request_delete(DeleteRequest("missing"))
    assert len(controller.export_files) == 2
    assert b'"first"' in controller.export_files[0].data


def test_export_of_empty_collection_clears_prepared_files(tracker, clock):
    controller = _controller(tracker, clock)
    only = controller.submit("3", "only")
    controller.export()
    controller.request_delete(DeleteRequest(only.id))
    controller.tick(clock.now + TOAST_DURATION_MS)
    assert controller.export() is None
    assert controller.export_files == []
