"""Plotly visualisation helpers for the budget dashboard.

Each function accepts the plain list-of-dict results returned by
:class:`budget_tracker.store.BudgetStore` reads and produces a Plotly
figure that Streamlit can render via ``st.plotly_chart``. Empty input
yields a placeholder figure titled "No data to display".
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

COLORS = ['#0ea5e9', '#10b981', '#f59e0b', '#ef4444', '#8b5cf6', '#ec4899', '#14b8a6']
STATUS_COLORS = {
    'ok': '#10b981',
    'warning': '#f59e0b',
    'critical': '#ef4444',
    'over': '#b91c1c',
}


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_category_pie_chart(
    breakdown: Sequence[Dict[str, Any]],
    format_amount: Optional[Callable[[float], str]] = None,
    title: str | None = None,
) -> go.Figure:
    """Pie chart of a category breakdown.

    Parameters
    ----------
    breakdown : sequence of dict
        Rows with ``category`` and ``total`` as returned by
        ``get_category_breakdown``.
    format_amount : callable, optional
        Formats the hover amount with the selected currency symbol.
    title : str, optional
        Chart title.
    """
    if not breakdown:
        return _empty_figure()
    df = pd.DataFrame(breakdown)
    if format_amount is not None:
        df['Formatted'] = df['total'].map(format_amount)
    fig = px.pie(
        df,
        names='category',
        values='total',
        color_discrete_sequence=COLORS,
        hover_data=['Formatted'] if format_amount is not None else None,
    )
    fig.update_traces(textinfo='label+percent')
    fig.update_layout(title=title or "Spending by category")
    return fig


def create_trend_chart(trend: Sequence[Dict[str, Any]], title: str | None = None) -> go.Figure:
    """Grouped bar chart of income against expenses per bucket."""
    if not trend:
        return _empty_figure()
    df = pd.DataFrame(trend)
    fig = go.Figure()
    fig.add_trace(go.Bar(x=df['label'], y=df['income'], name='Income', marker_color=COLORS[1]))
    fig.add_trace(go.Bar(x=df['label'], y=df['expenses'], name='Expenses', marker_color=COLORS[3]))
    fig.update_layout(
        title=title or "Income vs expenses",
        barmode='group',
        xaxis_title="Period",
        yaxis_title="Amount",
    )
    return fig


def create_budget_progress_chart(progress: Sequence[Dict[str, Any]], title: str | None = None) -> go.Figure:
    """Horizontal bars of percent of limit used, coloured by status."""
    if not progress:
        return _empty_figure()
    df = pd.DataFrame(progress)
    fig = go.Figure(go.Bar(
        x=df['percentage'],
        y=df['category'],
        orientation='h',
        marker_color=[STATUS_COLORS.get(status, COLORS[0]) for status in df['status']],
    ))
    fig.add_vline(x=100, line_dash='dash', line_color='#64748b')
    fig.update_layout(
        title=title or "Budget usage",
        xaxis_title="Percent of limit",
        yaxis_title="Category",
    )
    return fig
