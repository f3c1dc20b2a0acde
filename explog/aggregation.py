"""
aggregation.py - pure grouping, totals and label helpers

Everything here works on a snapshot of the collection and has no side
effects. Calendar logic uses the machine's local timezone, the same way the
list and the CSV export present dates.
"""

from typing import Dict, Iterable, List, Optional
import datetime

from explog.models import Expense, category_label

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# an expense younger than this is highlighted as just added
NEW_ITEM_WINDOW_MS = 1000


def to_local(timestamp: int) -> datetime.datetime:
    """Convert epoch milliseconds to a naive local datetime."""
    return datetime.datetime.fromtimestamp(timestamp / 1000)


def now_ms() -> int:
    return int(datetime.datetime.now().timestamp() * 1000)


def _reference_datetime(reference) -> datetime.datetime:
    if reference is None:
        return datetime.datetime.now()
    if isinstance(reference, datetime.datetime):
        return reference
    if isinstance(reference, datetime.date):
        return datetime.datetime(reference.year, reference.month, reference.day)
    return to_local(int(reference))


def day_key(timestamp: int) -> str:
    """Local calendar date of a timestamp as YYYY-MM-DD."""
    return to_local(timestamp).strftime("%Y-%m-%d")


def group_by_day(records: Iterable[Expense]) -> Dict[str, List[Expense]]:
    """
    Bucket records by local calendar day.

    Keys appear in first-encounter order and records keep their relative
    order inside each bucket. Nothing is sorted: a newest-first input gives
    newest-first days as a consequence.
    """
    groups: Dict[str, List[Expense]] = {}
    for e in records:
        groups.setdefault(day_key(e.timestamp), []).append(e)
    return groups


def day_total(records: Iterable[Expense]) -> float:
    return round(sum(e.amount for e in records), 2)


def month_to_date_total(records: Iterable[Expense], reference=None) -> float:
    """
    Sum amounts of records in the same local year and month as `reference`.

    `reference` may be a datetime, a date, epoch milliseconds or None (now).
    """
    ref = _reference_datetime(reference)
    total = 0.0
    for e in records:
        d = to_local(e.timestamp)
        if d.year == ref.year and d.month == ref.month:
            total += e.amount
    return round(total, 2)


def category_totals(records: Iterable[Expense]) -> Dict[str, float]:
    """Totals per category display label, in order of first appearance."""
    totals: Dict[str, float] = {}
    for e in records:
        label = category_label(e.category)
        totals[label] = round(totals.get(label, 0.0) + e.amount, 2)
    return totals


def records_in_month(records: Iterable[Expense], reference=None) -> List[Expense]:
    ref = _reference_datetime(reference)
    out: List[Expense] = []
    for e in records:
        d = to_local(e.timestamp)
        if d.year == ref.year and d.month == ref.month:
            out.append(e)
    return out


def format_day_label(key: str, reference=None) -> str:
    """
    Header label for a day-key: "Today", "Yesterday", or e.g. "Mon, Jan 5".
    """
    date = datetime.date.fromisoformat(key)
    today = _reference_datetime(reference).date()
    if date == today:
        return "Today"
    if date == today - datetime.timedelta(days=1):
        return "Yesterday"
    return f"{date.strftime('%a')}, {date.strftime('%b')} {date.day}"


def month_label(reference=None) -> str:
    ref = _reference_datetime(reference)
    return f"{MONTH_NAMES[ref.month - 1]} {ref.year}"


def format_time(timestamp: int) -> str:
    return to_local(timestamp).strftime("%H:%M")


def format_amount(value: float) -> str:
    """Display formatting: two decimals with thousands separators."""
    return f"{value:,.2f}"


def is_newly_added(expense: Expense, now: Optional[int] = None) -> bool:
    if now is None:
        now = now_ms()
    return now - expense.timestamp < NEW_ITEM_WINDOW_MS
