"""
dashboard.py - Streamlit UI entrypoint and orchestration

This module wires the UI components (explog.ui.components) to an
ExpenseController kept in st.session_state, so the tracker and its undo slot
survive Streamlit reruns for the whole browser session.

Design notes:
 - Keep the dashboard responsible only for UI orchestration and presentation.
 - All persistence and business rules live in explog.tracker.
 - Gestures and toasts go through explog.interaction.
"""

import streamlit as st

from explog.aggregation import category_totals, records_in_month, to_local
from explog.config import Settings, configure_logging
from explog.interaction import DeleteRequest, ExpenseController
from explog.storage import ExpenseStore
from explog.tracker import ExpenseTracker
from explog.ui import components


def _get_controller(settings: Settings) -> ExpenseController:
    if "controller" not in st.session_state:
        tracker = ExpenseTracker(store=ExpenseStore.from_settings(settings))
        st.session_state["controller"] = ExpenseController(tracker)
    return st.session_state["controller"]


def main():
    """
    Streamlit page:
      - month-to-date summary and category chart
      - add expense form
      - toast with undo after a delete
      - day-grouped list with delete buttons
      - CSV and XLSX export
    """
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    st.set_page_config(page_title="ExpLog", page_icon="💰")
    st.title("ExpLog")

    controller = _get_controller(settings)
    tracker = controller.tracker
    symbol = settings.currency_symbol

    controller.tick()
    now = controller.now()
    reference = to_local(now)

    def on_delete(expense_id: str):
        controller.request_delete(DeleteRequest(expense_id, source="button"))

    components.display_month_summary(tracker.month_total(reference), reference, symbol)
    components.display_expense_form(controller.submit)

    if controller.storage_warning:
        st.sidebar.warning(controller.storage_warning)
    else:
        st.sidebar.caption(tracker.storage_status()[1])

    components.display_toast(controller.toast, now, controller.undo)

    expenses = tracker.list_expenses()
    components.display_expense_list(expenses, on_delete, reference, now, symbol)

    with st.sidebar:
        components.display_category_chart(
            category_totals(records_in_month(expenses, reference)), symbol
        )
        components.display_export(controller.export, controller.export_files)


if __name__ == "__main__":
    main()
