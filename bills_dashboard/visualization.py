"""Plotly visualisation helpers for the bills dashboard.

Each ``*_frame`` function turns scheduler output into a pandas DataFrame
for tables, and each ``create_*`` function returns a
``plotly.graph_objects.Figure`` that Streamlit renders via
``st.plotly_chart``.  Empty inputs produce an empty figure titled
"No data to display" rather than raising.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .models import CashFlowProjection, CategoryTotal, PaymentSchedule
from .subscriptions import RoiAnalysis

NEGATIVE_BALANCE_COLOR = '#d62728'
BALANCE_COLOR = '#8884d8'
INCOME_COLOR = '#82ca9d'
EXPENSE_COLOR = '#ff8042'


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def schedule_frame(schedule: Sequence[PaymentSchedule]) -> pd.DataFrame:
    rows = [
        {
            'Date': pd.Timestamp(entry.date),
            'Total': entry.total_amount,
            'Payments': len(entry.items),
            'Items': ', '.join(item.name for item in entry.items),
        }
        for entry in schedule
    ]
    return pd.DataFrame(rows, columns=['Date', 'Total', 'Payments', 'Items'])


def projection_frame(projection: Sequence[CashFlowProjection]) -> pd.DataFrame:
    rows = [
        {
            'Date': pd.Timestamp(entry.date),
            'Income': entry.income_for_day,
            'Expenses': entry.expense_for_day,
            'Balance': entry.running_balance,
        }
        for entry in projection
    ]
    return pd.DataFrame(rows, columns=['Date', 'Income', 'Expenses', 'Balance'])


def category_frame(categories: Sequence[CategoryTotal]) -> pd.DataFrame:
    df = pd.DataFrame(
        [{'Category': c.category, 'Amount': c.amount, 'Color': c.color} for c in categories],
        columns=['Category', 'Amount', 'Color'],
    )
    total = df['Amount'].sum()
    df['Share'] = df['Amount'] / total * 100 if total else 0.0
    return df


def create_schedule_bar_chart(schedule: Sequence[PaymentSchedule], title: str | None = None) -> go.Figure:
    """Bar chart of the amount due on each scheduled payment date.

    Parameters
    ----------
    schedule : sequence of PaymentSchedule
        Output of :func:`bills_dashboard.schedule.build_schedule`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart with one bar per payment date.
    """
    df = schedule_frame(schedule)
    if df.empty:
        return _empty_figure()
    fig = px.bar(df, x='Date', y='Total', hover_data=['Items', 'Payments'])
    fig.update_layout(
        title=title or "Payments by due date",
        xaxis_title="Date",
        yaxis_title="Amount due",
    )
    return fig


def create_cash_flow_chart(projection: Sequence[CashFlowProjection], title: str | None = None) -> go.Figure:
    """Line chart of daily income, expenses and the running balance.

    Days where the running balance is below zero are marked in red so
    shortfalls stand out.
    """
    df = projection_frame(projection)
    if df.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=df['Date'], y=df['Balance'], name="Running balance", mode='lines+markers',
        line=dict(color=BALANCE_COLOR, width=2),
        marker=dict(color=np.where(df['Balance'] < 0, NEGATIVE_BALANCE_COLOR, BALANCE_COLOR)),
    ))
    fig.add_trace(go.Scatter(
        x=df['Date'], y=df['Income'], name="Income", mode='lines',
        line=dict(color=INCOME_COLOR, width=2),
    ))
    fig.add_trace(go.Scatter(
        x=df['Date'], y=df['Expenses'], name="Expenses", mode='lines',
        line=dict(color=EXPENSE_COLOR, width=2),
    ))
    fig.update_layout(
        title=title or "Projected cash flow",
        xaxis_title="Date",
        yaxis_title="Amount",
        hovermode='x unified',
    )
    return fig


def create_category_pie_chart(categories: Sequence[CategoryTotal], title: str | None = None) -> go.Figure:
    """Pie chart of scheduled spend per category, using each category's color."""
    df = category_frame(categories)
    if df.empty:
        return _empty_figure()
    fig = px.pie(
        df,
        names='Category',
        values='Amount',
        color='Category',
        color_discrete_map=dict(zip(df['Category'], df['Color'])),
    )
    fig.update_layout(title=title or "Scheduled spend by category")
    return fig


def create_roi_bar_chart(analyses: Sequence[RoiAnalysis], title: str | None = None) -> go.Figure:
    """Grouped bars comparing value score and monthly cost per subscription."""
    if not analyses:
        return _empty_figure()
    df = pd.DataFrame([
        {
            'Subscription': a.subscription.name,
            'Value score': a.value_score,
            'Monthly cost': round(a.monthly_cost, 2),
            'ROI %': a.roi_percentage,
        }
        for a in analyses
    ])
    long_df = df.melt(
        id_vars=['Subscription', 'ROI %'],
        value_vars=['Value score', 'Monthly cost'],
        var_name='Metric',
        value_name='Value',
    )
    fig = px.bar(long_df, x='Subscription', y='Value', color='Metric', barmode='group', hover_data=['ROI %'])
    fig.update_layout(title=title or "Subscription value vs cost")
    return fig
