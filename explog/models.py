"""
models.py - Data model definitions

This file defines the Expense dataclass used across the tracker and UI, plus
the fixed category set. Expenses are serialized to/from simple dicts so the
whole collection can be persisted as one JSON array.
"""

from dataclasses import dataclass
from typing import Dict
import datetime
import math
import uuid

# fixed category set, in the order the form offers them
CATEGORIES = [
    "general",
    "food",
    "transport",
    "shopping",
    "bills",
    "entertainment",
    "health",
    "other",
]

CATEGORY_LABELS: Dict[str, str] = {
    "general": "Expense",
    "food": "Food",
    "transport": "Transport",
    "shopping": "Shopping",
    "bills": "Bills",
    "entertainment": "Entertainment",
    "health": "Health",
    "other": "Other",
}

CATEGORY_EMOJIS: Dict[str, str] = {
    "general": "💰",
    "food": "🍔",
    "transport": "🚌",
    "shopping": "🛍️",
    "bills": "📄",
    "entertainment": "🎬",
    "health": "💊",
    "other": "📦",
}


def category_label(category: str) -> str:
    """Human display label for a category; unknown values read as a generic expense."""
    return CATEGORY_LABELS.get(category, "Expense")


def category_emoji(category: str) -> str:
    return CATEGORY_EMOJIS.get(category, "💰")


def new_expense_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Expense:
    """
    Represents a single logged transaction.

    Fields:
      - id: opaque unique string assigned at creation, never reused
      - amount: positive amount, rounded to two decimals
      - note: free-text label (defaults to the category label)
      - category: one of CATEGORIES
      - timestamp: creation instant in epoch milliseconds
    """
    id: str
    amount: float
    note: str
    category: str
    timestamp: int

    def to_dict(self) -> Dict:
        """
        Convert to a plain dict suitable for JSON serialization.
        The store writes a list of these dicts as one blob.
        """
        return {
            "id": self.id,
            "amount": self.amount,
            "note": self.note,
            "category": self.category,
            "timestamp": self.timestamp,
        }

    @staticmethod
    def from_dict(d: Dict) -> "Expense":
        """
        Construct an Expense from a dict (inverse of to_dict).
        Raises KeyError/TypeError/ValueError when required fields are missing or
        malformed, the amount is not a positive finite number, the category is
        unknown, or the timestamp is outside the range datetime can represent.
        OverflowError and OSError can also escape from the timestamp conversion.
        """
        category = str(d.get("category") or "general")
        if category not in CATEGORIES:
            raise ValueError(f"unknown category {category!r}")
        amount = float(d["amount"])
        if not math.isfinite(amount) or amount <= 0:
            raise ValueError(f"amount must be positive, got {amount!r}")
        timestamp = int(d["timestamp"])
        # must map to a local datetime, the list and export both need one
        datetime.datetime.fromtimestamp(timestamp / 1000)
        return Expense(
            id=str(d["id"]),
            amount=round(amount, 2),
            note=str(d.get("note") or category_label(category)),
            category=category,
            timestamp=timestamp,
        )
