"""
Expense tracker page.
"""

from datetime import date

import streamlit as st

from components.charts import ChartBuilder
from components.panels import PanelBuilder
from models.records import Expense
from state.cache import ItemId
from state.context import AppContext
from state.errors import CompanionError
from utils.validation import validate_expense
from .common import date_filtered, page_header, show_error


def render_expenses(ctx: AppContext) -> None:
    page_header(ctx, "💰 Expenses", "expenses")

    with st.form("expense_form", clear_on_submit=True):
        col1, col2, col3 = st.columns([3, 1, 1])
        with col1:
            title = st.text_input("What for?")
        with col2:
            amount = st.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")
        with col3:
            spent_on = st.date_input("Date", value=date.today())
        submitted = st.form_submit_button("Add expense")

    if submitted:
        try:
            fields = validate_expense(title, amount, spent_on.isoformat() if spent_on else "")
            ctx.sync.submit(ctx.expenses, Expense(**fields))
        except CompanionError as e:
            show_error(e)

    expenses = date_filtered(ctx.expenses.items, lambda e: e.date, key="expenses")
    if not expenses:
        PanelBuilder.render_empty("No expenses in this period")
        return

    st.metric("Total", f"{sum(e.amount for e in expenses):,.2f}")
    st.plotly_chart(ChartBuilder.create_expense_chart(expenses), use_container_width=True)

    for expense in expenses:
        item_id = ItemId.of(expense)
        col1, col2, col3, col4 = st.columns([4, 2, 2, 1])
        col1.write(expense.title)
        col2.write(f"{expense.amount:,.2f}")
        col3.write(expense.date)
        if col4.button("🗑", key=f"exp_del_{item_id.key}"):
            try:
                ctx.sync.remove(ctx.expenses, item_id)
            except CompanionError as e:
                show_error(e)
            else:
                st.rerun()
