"""Streamlit app for the budget tracker.

The app is a thin layer over :class:`budget_tracker.store.BudgetStore`:
forms feed user input through validation into store mutations, and the
remaining sections render the store's derived figures. The store and
the currency preference are created once per browser session and kept
in ``st.session_state``.

To run the dashboard from the command line::

    streamlit run budget_tracker/dashboard.py
"""

from __future__ import annotations

import os
import sys
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd
import streamlit as st

# Conditional imports to support ``streamlit run budget_tracker/dashboard.py``
# as well as importing the module from the package.
if __package__:
    from .analytics import period_bounds
    from .currency import CURRENCIES, CurrencyPreference
    from .errors import ValidationError
    from .store import BudgetStore
    from .validation import validate_budget, validate_transaction
    from .vocabulary import categories_for, expense_categories
    from . import visualization as viz
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from budget_tracker.analytics import period_bounds  # type: ignore
    from budget_tracker.currency import CURRENCIES, CurrencyPreference  # type: ignore
    from budget_tracker.errors import ValidationError  # type: ignore
    from budget_tracker.store import BudgetStore  # type: ignore
    from budget_tracker.validation import validate_budget, validate_transaction  # type: ignore
    from budget_tracker.vocabulary import categories_for, expense_categories  # type: ignore
    from budget_tracker import visualization as viz  # type: ignore

STORE_KEY = 'budget_store'
CURRENCY_KEY = 'currency_preference'
PERIOD_LABELS = {'month': 'This Month', 'year': 'This Year'}


def _rerun() -> None:
    rerun_fn = getattr(st, 'rerun', None) or getattr(st, 'experimental_rerun', None)
    if rerun_fn:
        rerun_fn()


def _ensure_session_state() -> None:
    if STORE_KEY not in st.session_state:
        st.session_state[STORE_KEY] = BudgetStore.open()
    if CURRENCY_KEY not in st.session_state:
        st.session_state[CURRENCY_KEY] = CurrencyPreference()


def _store() -> BudgetStore:
    return st.session_state[STORE_KEY]


def _currency() -> CurrencyPreference:
    return st.session_state[CURRENCY_KEY]


def run_action(store: BudgetStore, action: Callable[..., Any], *args: Any) -> Tuple[Any, List[str]]:
    """Run a store mutation and return its result with the save failure it recorded, if any."""
    result = action(*args)
    messages = [store.last_save_error] if store.last_save_error else []
    return result, messages


def has_trend_data(trend: List[Dict[str, Any]]) -> bool:
    return any(row['income'] or row['expenses'] for row in trend)


def submit_transaction(store: BudgetStore, values: Dict[str, Any]) -> Tuple[Optional[Any], List[str], List[str]]:
    """Validate form values and add the transaction.

    Returns:
        Tuple of (created transaction or None, validation errors, save warnings)
    """
    try:
        fields = validate_transaction(values)
    except ValidationError as exc:
        return None, exc.errors, []
    transaction, save_warnings = run_action(store, store.add_transaction, fields)
    return transaction, [], save_warnings


def submit_budget(store: BudgetStore, values: Dict[str, Any]) -> Tuple[Optional[Any], List[str], List[str]]:
    """Validate form values and set the budget.

    Returns:
        Tuple of (budget or None, validation errors, save warnings)
    """
    try:
        fields = validate_budget(values)
    except ValidationError as exc:
        return None, exc.errors, []
    budget, save_warnings = run_action(store, store.set_budget, fields['category'], fields['limit'])
    return budget, [], save_warnings


def _escape_markdown(text: str) -> str:
    """Escape dollar signs so markdown does not treat them as LaTeX delimiters."""
    return text.replace("$", "\\$")


def _show_save_warnings(messages: List[str]) -> None:
    for message in messages:
        st.warning(f"⚠️ {message}")


def render_header(store: BudgetStore, currency: CurrencyPreference) -> None:
    header_col, currency_col = st.columns([4, 1])
    header_col.title("Budget Tracker")
    codes = [c.code for c in CURRENCIES]
    selected = currency_col.selectbox(
        "Currency",
        options=codes,
        index=codes.index(currency.currency.code),
        format_func=lambda code: f"{code} ({next(c.symbol for c in CURRENCIES if c.code == code)})",
    )
    if selected != currency.currency.code:
        try:
            currency.set_currency(selected)
        except OSError as exc:
            st.warning(f"⚠️ Could not save currency preference: {exc}")

    totals = store.get_balance()
    balance_col, income_col, expense_col = st.columns(3)
    balance_col.metric("Balance", currency.format_amount(totals['balance']))
    income_col.metric("Income", currency.format_amount(totals['income']))
    expense_col.metric("Expenses", currency.format_amount(totals['expenses']))


def render_transaction_form(store: BudgetStore) -> None:
    st.subheader("Add Transaction")
    t_type = st.radio("Type", options=['expense', 'income'], horizontal=True, format_func=str.title)
    with st.form('transaction_form', clear_on_submit=True):
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")
        category = st.selectbox("Category", options=categories_for(t_type))
        description = st.text_input("Description")
        t_date = st.date_input("Date", value=date.today())
        submitted = st.form_submit_button("Add")

    if not submitted:
        return

    transaction, errors, save_warnings = submit_transaction(store, {
        'type': t_type,
        'amount': amount,
        'category': category,
        'description': description,
        'date': t_date.isoformat(),
    })
    if errors:
        st.error(", ".join(errors))
        return
    _show_save_warnings(save_warnings)
    st.success(f"{'Income' if transaction.is_income else 'Expense'} added successfully!")


def render_transaction_list(store: BudgetStore, currency: CurrencyPreference) -> None:
    st.subheader("Transactions")
    filter_col, sort_col = st.columns(2)
    kind = filter_col.selectbox(
        "Show", options=['all', 'income', 'expense'],
        format_func=lambda k: {'all': 'All', 'income': 'Income', 'expense': 'Expenses'}[k],
    )
    sort_by = sort_col.selectbox(
        "Sort", options=['date', 'amount'],
        format_func=lambda s: {'date': 'By Date', 'amount': 'By Amount'}[s],
    )

    transactions = store.list_transactions(kind=kind, sort_by=sort_by)
    if not transactions:
        st.info("No transactions yet. Add your first one above.")
        return

    for transaction in transactions:
        info_col, amount_col, action_col = st.columns([5, 2, 1])
        info_col.markdown(_escape_markdown(
            f"**{transaction.description}**  \n{transaction.category} • {transaction.date}"
        ))
        sign = '+' if transaction.is_income else '-'
        amount_col.markdown(_escape_markdown(f"{sign}{currency.format_amount(transaction.amount)}"))
        if action_col.button("🗑", key=f"delete_{transaction.id}"):
            _, save_warnings = run_action(store, store.delete_transaction, transaction.id)
            _show_save_warnings(save_warnings)
            st.toast("Transaction deleted")
            _rerun()


def render_budget_overview(store: BudgetStore, currency: CurrencyPreference) -> None:
    st.subheader("Budget Overview")
    with st.expander("Set budget"):
        with st.form('budget_form', clear_on_submit=True):
            category = st.selectbox("Category", options=expense_categories())
            limit = st.number_input("Monthly limit", min_value=0.0, step=1.0, format="%.2f")
            submitted = st.form_submit_button("Save budget")
        if submitted:
            _, errors, save_warnings = submit_budget(store, {'category': category, 'limit': limit})
            if errors:
                st.error(", ".join(errors))
            else:
                _show_save_warnings(save_warnings)
                st.success("Budget updated successfully!")

    progress = store.get_budgets_with_progress()
    if not progress:
        st.info("No budgets set. Set a monthly limit for a category to track it.")
        return

    for row in progress:
        st.markdown(_escape_markdown(
            f"**{row['category']}**: {currency.format_amount(row['spent'])} / "
            f"{currency.format_amount(row['limit'])}"
        ))
        st.progress(min(row['percentage'], 100.0) / 100.0)
        if row['over_budget']:
            st.caption(_escape_markdown(
                f"Over budget by {currency.format_amount(row['spent'] - row['limit'])}"
            ))
    st.plotly_chart(viz.create_budget_progress_chart(progress), use_container_width=True)


def render_analytics(store: BudgetStore, currency: CurrencyPreference) -> None:
    st.subheader("Analytics")
    period = st.radio(
        "Period", options=list(PERIOD_LABELS), horizontal=True,
        format_func=lambda p: PERIOD_LABELS[p],
    )
    start, end = period_bounds(period)

    summary = store.get_period_summary(start, end)
    income_col, expense_col = st.columns(2)
    income_col.metric("Total Income", currency.format_amount(summary['income']))
    expense_col.metric("Total Expenses", currency.format_amount(summary['expenses']))

    breakdown = store.get_category_breakdown(start, end)
    trend = store.get_trend(start, end, bucketing=period)

    pie_col, trend_col = st.columns(2)
    with pie_col:
        if breakdown:
            st.plotly_chart(
                viz.create_category_pie_chart(breakdown, currency.format_amount),
                use_container_width=True,
            )
            st.dataframe(
                pd.DataFrame(breakdown).assign(total=lambda df: df['total'].map(currency.format_amount)),
                use_container_width=True,
                hide_index=True,
            )
        else:
            st.info("No expense data for this period")
    with trend_col:
        if has_trend_data(trend):
            st.plotly_chart(viz.create_trend_chart(trend), use_container_width=True)
        else:
            st.info("No transaction data for this period")


def main() -> None:
    """Entry point for the Streamlit app."""
    st.set_page_config(page_title="Budget Tracker", page_icon="💰", layout="wide")
    _ensure_session_state()
    store = _store()
    currency = _currency()

    render_header(store, currency)
    form_col, budget_col = st.columns(2)
    with form_col:
        render_transaction_form(store)
    with budget_col:
        render_budget_overview(store, currency)
    render_analytics(store, currency)
    render_transaction_list(store, currency)


if __name__ == "__main__":
    main()
