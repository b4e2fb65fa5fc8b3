"""Plotly figures over generated schedules."""

from typing import Sequence

import plotly.graph_objects as go

from amortizer.models.results import PaymentSchedule
from amortizer.presentation.formatters import format_currency

PRINCIPAL_COLOR = "#3b82f6"
INTEREST_COLOR = "#ef4444"
BALANCE_COLOR = "#1a1a2e"
MODIFIED_COLOR = "#10b981"


def amortization_figure(schedule: Sequence[PaymentSchedule], currency: str = "USD") -> go.Figure:
    """Principal and interest per period, remaining balance on a second axis."""
    periods = [row.payment_number for row in schedule]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=periods, y=[float(row.principal_amount) for row in schedule],
        name="Principal",
        stackgroup="payment",
        line=dict(color=PRINCIPAL_COLOR),
    ))
    fig.add_trace(go.Scatter(
        x=periods, y=[float(row.interest_amount) for row in schedule],
        name="Interest",
        stackgroup="payment",
        line=dict(color=INTEREST_COLOR),
    ))
    fig.add_trace(go.Scatter(
        x=periods, y=[float(row.remaining_balance) for row in schedule],
        name="Remaining Balance",
        mode="lines",
        yaxis="y2",
        line=dict(color=BALANCE_COLOR, width=2),
        hovertext=[format_currency(row.remaining_balance, currency) for row in schedule],
    ))
    fig.update_layout(
        title="Amortization Schedule",
        xaxis_title="Payment",
        yaxis=dict(title=f"Payment ({currency})"),
        yaxis2=dict(title=f"Balance ({currency})", overlaying="y", side="right"),
        hovermode="x unified",
    )
    return fig


def payment_breakdown_figure(schedule: Sequence[PaymentSchedule], currency: str = "USD") -> go.Figure:
    """Share of principal vs interest over the whole schedule."""
    total_principal = sum(float(row.principal_amount) for row in schedule)
    total_interest = sum(float(row.interest_amount) for row in schedule)

    fig = go.Figure(go.Pie(
        labels=["Principal", "Interest"],
        values=[total_principal, total_interest],
        marker=dict(colors=[PRINCIPAL_COLOR, INTEREST_COLOR]),
        hovertext=[format_currency(total_principal, currency), format_currency(total_interest, currency)],
        hole=0.4,
    ))
    fig.update_layout(title="Payment Breakdown")
    return fig


def playground_figure(
    original: Sequence[PaymentSchedule],
    modified: Sequence[PaymentSchedule],
    currency: str = "USD",
) -> go.Figure:
    """Remaining balance with and without interventions."""
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[row.payment_number for row in original],
        y=[float(row.remaining_balance) for row in original],
        mode="lines",
        name="Original",
        line=dict(color=BALANCE_COLOR, width=2, dash="dash"),
    ))
    fig.add_trace(go.Scatter(
        x=[row.payment_number for row in modified],
        y=[float(row.remaining_balance) for row in modified],
        mode="lines",
        name="With Interventions",
        line=dict(color=MODIFIED_COLOR, width=3),
    ))
    fig.update_layout(
        title="What-If Payoff",
        xaxis_title="Payment",
        yaxis_title=f"Remaining Balance ({currency})",
        hovermode="x unified",
    )
    return fig
