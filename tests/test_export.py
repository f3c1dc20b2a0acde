import datetime

from conftest import local_ms
from explog.export import (
    build_csv,
    export_csv,
    export_filename,
    export_xlsx,
    expenses_dataframe,
    quote_field,
)
from explog.models import Expense


def _records():
    return [
        Expense(id="2", amount=1234.5, note='He said "hi"', category="entertainment",
                timestamp=local_ms(2026, 10, 18, 21, 5)),
        Expense(id="1", amount=3.0, note="Bus, downtown", category="transport",
                timestamp=local_ms(2026, 10, 17, 8, 0)),
    ]


def test_note_quotes_are_doubled():
    assert quote_field('He said "hi"') == '"He said ""hi"""'


def test_build_csv_layout():
    lines = build_csv(_records()).split("\n")
    assert lines == [
        "Date,Time,Category,Note,Amount",
        '2026-10-18,21:05,Entertainment,"He said ""hi""",1234.50',
        '2026-10-17,08:00,Transport,"Bus, downtown",3.00',
    ]


def test_build_csv_empty_has_header_only():
    assert build_csv([]) == "Date,Time,Category,Note,Amount"


def test_export_csv_has_bom_and_filename():
    exported = export_csv(_records(), datetime.datetime(2026, 1, 7, 23, 59))
    assert exported.filename == "explog_2026-01-07.csv"
    assert exported.data.startswith(b"\xef\xbb\xbf")
    assert exported.data.decode("utf-8-sig").startswith("Date,Time,Category,Note,Amount\n")
    assert exported.mime == "text/csv"


def test_export_filename_pads_month_and_day():
    assert export_filename(datetime.datetime(2026, 3, 4)) == "explog_2026-03-04.csv"


def test_expenses_dataframe_keeps_order():
    df = expenses_dataframe(_records())
    assert list(df.columns) == ["Date", "Time", "Category", "Note", "Amount"]
    assert list(df["Note"]) == ['He said "hi"', "Bus, downtown"]
    assert list(df["Amount"]) == [1234.5, 3.0]


def test_export_xlsx_is_a_zip_workbook():
    exported = export_xlsx(_records(), datetime.datetime(2026, 1, 7))
    assert exported.filename == "explog_2026-01-07.xlsx"
    assert exported.data[:2] == b"PK"
