"""Tabular views of calculation results."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from incomecalc.schema.components import ComponentResult

RESULT_COLUMNS = ["component_id", "name", "date", "amount"]


def results_to_frame(results: Sequence[ComponentResult]) -> pd.DataFrame:
    """
    Flatten results into one row per component and date.

    Returns:
        DataFrame with columns component_id, name, date (datetime64) and amount,
        sorted by date then component order
    """
    rows = [
        (order, result.id, result.name, entry.date, entry.amount)
        for order, result in enumerate(results)
        for entry in result.results
    ]
    df = pd.DataFrame(rows, columns=["order"] + RESULT_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    df["amount"] = df["amount"].astype(float)
    df = df.sort_values(["date", "order"], kind="stable").drop(columns="order")
    return df.reset_index(drop=True)


def monthly_totals(results: Sequence[ComponentResult]) -> pd.DataFrame:
    """
    Sum amounts per calendar month and component.

    Returns:
        DataFrame indexed by month (Period[M]) with one column per component id
        (input order) plus a "total" column. A nan amount makes its
        month nan, like ComponentResult.total
    """
    component_ids = [result.id for result in results]
    df = results_to_frame(results)
    if df.empty:
        return pd.DataFrame(columns=component_ids + ["total"], dtype=float)

    df["month"] = df["date"].dt.to_period("M")
    grouped = df.groupby(["month", "component_id"])["amount"]
    table = (
        grouped.agg(lambda amounts: amounts.sum(skipna=False))
        .unstack("component_id")
        .reindex(columns=component_ids)
    )
    fired = grouped.size().unstack("component_id").reindex(columns=component_ids).notna()
    table = table.where(fired, 0.0).astype(float)
    table.columns.name = None
    table["total"] = table.sum(axis=1, skipna=False)
    return table


def component_totals(results: Sequence[ComponentResult]) -> pd.Series:
    """Total amount per component id over the whole window, in input order."""
    return pd.Series(
        {result.id: result.total for result in results}, dtype=float, name="total"
    )
