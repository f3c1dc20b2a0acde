"""
export.py - CSV (and spreadsheet) export of the expense collection

CSV layout:
    Date,Time,Category,Note,Amount
one row per expense in collection order (newest first). Date is the local
YYYY-MM-DD, Time the local 24-hour HH:MM, Category the display label, Note is
always double-quoted with inner quotes doubled, Amount has two decimals and
no thousands separators. The file is UTF-8 with a byte-order mark so
spreadsheet apps pick the right encoding.
"""

from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional
import datetime

import pandas as pd

from explog.aggregation import to_local
from explog.models import Expense, category_label

CSV_HEADERS = ["Date", "Time", "Category", "Note", "Amount"]
CSV_MIME = "text/csv"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass
class ExportFile:
    filename: str
    data: bytes
    mime: str = CSV_MIME


def quote_field(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def csv_row(e: Expense) -> str:
    d = to_local(e.timestamp)
    return ",".join([
        d.strftime("%Y-%m-%d"),
        d.strftime("%H:%M"),
        category_label(e.category),
        quote_field(e.note),
        f"{e.amount:.2f}",
    ])


def build_csv(expenses: List[Expense]) -> str:
    lines = [",".join(CSV_HEADERS)]
    lines.extend(csv_row(e) for e in expenses)
    return "\n".join(lines)


def export_filename(now: Optional[datetime.datetime] = None, extension: str = "csv") -> str:
    """explog_YYYY-MM-DD.<ext> using the export instant's local date."""
    now = now or datetime.datetime.now()
    return f"explog_{now.strftime('%Y-%m-%d')}.{extension}"


def export_csv(expenses: List[Expense], now: Optional[datetime.datetime] = None) -> ExportFile:
    # utf-8-sig prepends the byte-order mark
    return ExportFile(
        filename=export_filename(now),
        data=build_csv(expenses).encode("utf-8-sig"),
    )


def expenses_dataframe(expenses: List[Expense]) -> pd.DataFrame:
    """Tabular view with the same columns as the CSV (note left unquoted)."""
    rows = []
    for e in expenses:
        d = to_local(e.timestamp)
        rows.append({
            "Date": d.strftime("%Y-%m-%d"),
            "Time": d.strftime("%H:%M"),
            "Category": category_label(e.category),
            "Note": e.note,
            "Amount": float(e.amount),
        })
    return pd.DataFrame(rows, columns=CSV_HEADERS)


def export_xlsx(expenses: List[Expense], now: Optional[datetime.datetime] = None) -> ExportFile:
    df = expenses_dataframe(expenses)
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="expenses")
    return ExportFile(
        filename=export_filename(now, extension="xlsx"),
        data=buffer.getvalue(),
        mime=XLSX_MIME,
    )
