"""Aggregations over the transaction collection.

This module provides the derived figures shown by the dashboard: all-time
totals, per-category spend, budget progress, the category breakdown of a
period and the income-vs-expense trend. Every function takes the
DataFrame built by :func:`transactions_frame` and recomputes from
scratch; nothing is cached between calls.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .models import Budget, Transaction

DateLike = Union[str, date, pd.Timestamp]

TRANSACTION_COLUMNS = ['id', 'type', 'amount', 'category', 'description', 'date']
BUCKETINGS = ('month', 'year')
PERIODS = ('month', 'year')


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build a DataFrame of transactions in collection order.

    Adds a ``Transaction Date`` column holding the parsed date. Dates that
    match the ``YYYY-MM-DD`` shape but are not real calendar dates become
    ``NaT`` and drop out of every date-filtered aggregate.
    """
    frame = pd.DataFrame(
        [t.to_dict() for t in transactions],
        columns=TRANSACTION_COLUMNS,
    )
    frame['amount'] = pd.to_numeric(frame['amount'], errors='coerce').fillna(0.0).astype(float)
    frame['Transaction Date'] = pd.to_datetime(frame['date'], format='%Y-%m-%d', errors='coerce')
    return frame


def _expense_rows(frame: pd.DataFrame) -> pd.DataFrame:
    return frame[frame['type'] == 'expense']


def _income_rows(frame: pd.DataFrame) -> pd.DataFrame:
    return frame[frame['type'] == 'income']


def _to_timestamp(value: DateLike) -> pd.Timestamp:
    return pd.Timestamp(value).normalize()


def _within(frame: pd.DataFrame, start: DateLike, end: DateLike) -> pd.DataFrame:
    """Rows dated inside ``[start, end]``, inclusive at both ends."""
    dates = frame['Transaction Date']
    mask = (dates >= _to_timestamp(start)) & (dates <= _to_timestamp(end))
    return frame[mask]


def balance_totals(frame: pd.DataFrame) -> Dict[str, float]:
    """Return all-time ``income``, ``expenses`` and ``balance``."""
    income = float(_income_rows(frame)['amount'].sum())
    expenses = float(_expense_rows(frame)['amount'].sum())
    return {
        'income': income,
        'expenses': expenses,
        'balance': income - expenses,
    }


def category_spend(frame: pd.DataFrame, category: str) -> float:
    """Sum expense amounts whose category equals ``category`` exactly."""
    expenses = _expense_rows(frame)
    return float(expenses.loc[expenses['category'] == category, 'amount'].sum())


def progress_status(percentage: float) -> str:
    """Classify a budget percentage into a display status.

    Example:
        >>> progress_status(80.0)
        'warning'
    """
    if percentage > 100:
        return 'over'
    if percentage > 90:
        return 'critical'
    if percentage > 75:
        return 'warning'
    return 'ok'


def budget_percentage(spent: float, limit: float) -> float:
    """Percentage of ``limit`` used by ``spent``.

    A non-positive limit cannot be divided by: it reads as 100% once any
    money is spent against it and 0% otherwise.
    """
    if limit <= 0:
        return 100.0 if spent > 0 else 0.0
    return spent / limit * 100.0


def budget_progress(frame: pd.DataFrame, budgets: Sequence[Budget]) -> List[Dict[str, Any]]:
    """Compute live spend and progress for each budget, in budget order.

    Returns:
        List of dicts with keys: category, limit, spent, percentage,
        remaining, over_budget, status
    """
    expenses = _expense_rows(frame)
    spent_by_category = expenses.groupby('category')['amount'].sum()

    rows = []
    for budget in budgets:
        spent = float(spent_by_category.get(budget.category, 0.0))
        percentage = budget_percentage(spent, budget.limit)
        rows.append({
            'category': budget.category,
            'limit': budget.limit,
            'spent': spent,
            'percentage': percentage,
            'remaining': budget.limit - spent,
            'over_budget': spent > budget.limit,
            'status': progress_status(percentage),
        })
    return rows


def category_breakdown(frame: pd.DataFrame, start: DateLike, end: DateLike) -> List[Dict[str, Any]]:
    """Expense totals per category within ``[start, end]``, largest first.

    Categories without expenses in the period are left out. Ties keep
    alphabetical order.
    """
    expenses = _within(_expense_rows(frame), start, end)
    if expenses.empty:
        return []

    totals = expenses.groupby('category')['amount'].sum()
    totals = totals.sort_values(ascending=False, kind='stable')
    return [
        {'category': str(category), 'total': float(total)}
        for category, total in totals.items()
    ]


def period_summary(frame: pd.DataFrame, start: DateLike, end: DateLike) -> Dict[str, Any]:
    """Income, expenses and net flow of the transactions within ``[start, end]``."""
    scoped = _within(frame, start, end)
    signed = np.where(scoped['type'] == 'income', scoped['amount'], -scoped['amount'])
    income = float(_income_rows(scoped)['amount'].sum())
    expenses = float(_expense_rows(scoped)['amount'].sum())
    return {
        'income': income,
        'expenses': expenses,
        'net': float(signed.sum()),
        'transaction_count': int(len(scoped)),
    }


def trend_buckets(start: DateLike, end: DateLike, bucketing: str) -> List[Tuple[str, pd.Timestamp, pd.Timestamp]]:
    """Split ``[start, end]`` into labelled buckets in chronological order.

    ``month`` keeps the whole period as a single bucket labelled like
    ``Oct 2026``. ``year`` gives one bucket per calendar month, clipped to
    the period and labelled like ``Oct``, or ``Oct 2026`` when the period
    crosses a calendar year so labels stay unique.

    Raises:
        ValueError: If ``bucketing`` is not supported
    """
    if bucketing not in BUCKETINGS:
        raise ValueError(f"Unsupported bucketing '{bucketing}'. Expected one of {BUCKETINGS}")

    start_ts = _to_timestamp(start)
    end_ts = _to_timestamp(end)
    if end_ts < start_ts:
        return []

    if bucketing == 'month':
        return [(start_ts.strftime('%b %Y'), start_ts, end_ts)]

    label_format = '%b' if start_ts.year == end_ts.year else '%b %Y'
    buckets = []
    for month in pd.period_range(start_ts, end_ts, freq='M'):
        bucket_start = max(month.start_time.normalize(), start_ts)
        bucket_end = min(month.end_time.normalize(), end_ts)
        buckets.append((month.strftime(label_format), bucket_start, bucket_end))
    return buckets


def trend(frame: pd.DataFrame, start: DateLike, end: DateLike, bucketing: str) -> List[Dict[str, Any]]:
    """Income and expense totals per bucket of ``[start, end]``.

    Returns:
        List of dicts with keys: label, start, end (ISO dates), income,
        expenses; ordered by bucket start regardless of insertion order
    """
    rows = []
    for label, bucket_start, bucket_end in trend_buckets(start, end, bucketing):
        scoped = _within(frame, bucket_start, bucket_end)
        rows.append({
            'label': label,
            'start': bucket_start.date().isoformat(),
            'end': bucket_end.date().isoformat(),
            'income': float(_income_rows(scoped)['amount'].sum()),
            'expenses': float(_expense_rows(scoped)['amount'].sum()),
        })
    return rows


def period_bounds(period: str, today: Optional[date] = None) -> Tuple[date, date]:
    """Return the first and last day of the current calendar month or year.

    Example:
        >>> period_bounds('month', date(2024, 2, 10))
        (datetime.date(2024, 2, 1), datetime.date(2024, 2, 29))
    """
    if period not in PERIODS:
        raise ValueError(f"Unsupported period '{period}'. Expected one of {PERIODS}")

    current = pd.Timestamp(today or date.today()).to_period('M' if period == 'month' else 'Y')
    return current.start_time.date(), current.end_time.date()
