"""
components.py - reusable Streamlit components / forms / displays

This module contains pure-UI helpers used by the dashboard:
 - display_month_summary(total, reference, symbol)
 - display_expense_form(on_submit)
 - display_toast(toast, now, on_undo)
 - display_expense_list(expenses, on_delete, reference, now, symbol)
 - display_category_chart(totals, symbol)
 - display_export(on_export, export_files)

Components never touch the tracker; they receive data and callbacks.
"""

from typing import Callable, Dict, List, Optional
import datetime

import altair as alt
import pandas as pd
import streamlit as st

from explog.aggregation import (
    day_total,
    format_amount,
    format_day_label,
    format_time,
    group_by_day,
    is_newly_added,
    month_label,
)
from explog.export import ExportFile
from explog.interaction import Toast
from explog.models import CATEGORIES, Expense, category_emoji, category_label

PALETTE = [
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f",
]


def display_month_summary(total: float, reference: datetime.datetime, symbol: str = "$"):
    st.metric(label=month_label(reference), value=f"{symbol}{format_amount(total)}")


def display_expense_form(on_submit: Callable[[str, str, str], Optional[Expense]]):
    """
    Display the 'Add expense' form.

    The amount is taken as free text so unparsable input reaches the
    controller, which refuses it without raising. on_submit receives
    (amount_text, note, category).
    """
    with st.form(key="expense_form", clear_on_submit=True):
        amount_text = st.text_input("Amount", placeholder="0.00")
        note = st.text_input("Note (optional)")
        category = st.selectbox("Category", options=CATEGORIES, format_func=category_label)
        submitted = st.form_submit_button("Add")

    if submitted:
        added = on_submit(amount_text, note, category)
        if added is None:
            st.warning("Enter an amount greater than 0.")
        else:
            # refresh so the month summary above includes the new expense
            st.rerun()


def display_toast(toast: Optional[Toast], now: int, on_undo: Callable[[], bool]):
    if toast is None or not toast.visible(now):
        return
    if not toast.with_undo:
        st.info(toast.message)
        return
    col1, col2 = st.columns([4, 1])
    with col1:
        st.info(toast.message)
    with col2:
        st.button("UNDO", key="undo_button", on_click=on_undo)


def _expense_row(e: Expense, on_delete: Callable[[str], None], symbol: str, now: int):
    col_icon, col_details, col_amount, col_delete = st.columns([1, 6, 3, 1])
    with col_icon:
        st.write(category_emoji(e.category))
    with col_details:
        note = f"**{e.note}**" if is_newly_added(e, now) else e.note
        st.markdown(note)
        st.caption(format_time(e.timestamp))
    with col_amount:
        st.write(f"{symbol}{format_amount(e.amount)}")
    with col_delete:
        st.button(
            "🗑️",
            key=f"delete_{e.id}",
            help="Delete expense",
            on_click=on_delete,
            args=(e.id,),
        )


def display_expense_list(expenses: List[Expense],
                         on_delete: Callable[[str], None],
                         reference: datetime.datetime,
                         now: int,
                         symbol: str = "$"):
    """
    Render expenses grouped by day, newest day first, each group headed by
    its label (Today / Yesterday / weekday) and day total.
    """
    if not expenses:
        st.write("No expenses yet. Add your first one above.")
        return

    for key, items in group_by_day(expenses).items():
        col_label, col_total = st.columns([3, 1])
        with col_label:
            st.subheader(format_day_label(key, reference))
        with col_total:
            st.write(f"{symbol}{format_amount(day_total(items))}")
        for e in items:
            _expense_row(e, on_delete, symbol, now)


def display_category_chart(totals: Dict[str, float], symbol: str = "$"):
    """Pie chart of this month's spending per category."""
    if not totals:
        return
    df = pd.DataFrame(
        [{"category": cat, "amount": float(amt)} for cat, amt in totals.items()]
    )
    if df["amount"].sum() <= 0:
        return

    # stable category ordering and color mapping
    ordered = [category_label(c) for c in CATEGORIES]
    color_scale = alt.Scale(domain=ordered, range=PALETTE[: len(ordered)])

    pie = alt.Chart(df).mark_arc(innerRadius=50).encode(
        theta=alt.Theta(field="amount", type="quantitative"),
        color=alt.Color(
            field="category",
            type="nominal",
            scale=color_scale,
            legend=alt.Legend(title="Category"),
        ),
        tooltip=[
            alt.Tooltip("category:N", title="Category"),
            alt.Tooltip("amount:Q", title=f"Amount ({symbol})", format=".2f"),
        ],
    ).properties(title="This month by category")
    st.altair_chart(pie, use_container_width=True)


def display_export(on_export: Callable[[], object], export_files: List[ExportFile]):
    """Export button plus one download button per prepared file (CSV, XLSX)."""
    st.button("Export", key="export_button", on_click=on_export)
    for exported in export_files:
        st.download_button(
            label=f"Download {exported.filename}",
            data=exported.data,
            file_name=exported.filename,
            mime=exported.mime,
            key=f"download_{exported.filename}",
        )
