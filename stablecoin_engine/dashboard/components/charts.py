"""Reusable Plotly chart components."""

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from stablecoin_engine.simulation.results import LiquidationRunResult, MonteCarloResult


def health_factor_gauge(hf: float) -> go.Figure:
    """Create a health factor gauge chart."""
    # Clamp display value
    display_hf = min(hf, 5.0) if hf != float("inf") else 5.0

    if hf >= 2.0:
        color = "#22c55e"  # green
    elif hf >= 1.2:
        color = "#f59e0b"  # amber
    else:
        color = "#ef4444"  # red

    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=display_hf,
            number={"font": {"size": 40}, "valueformat": ".2f"},
            title={"text": "Health Factor", "font": {"size": 16}},
            domain={"x": [0, 1], "y": [0.15, 1]},
            gauge={
                "axis": {"range": [0, 5], "tickwidth": 1},
                "bar": {"color": color},
                "steps": [
                    {"range": [0, 1], "color": "rgba(239,68,68,0.2)"},
                    {"range": [1, 2], "color": "rgba(245,158,11,0.2)"},
                    {"range": [2, 5], "color": "rgba(34,197,94,0.2)"},
                ],
                "threshold": {
                    "line": {"color": "white", "width": 2},
                    "thickness": 0.75,
                    "value": 1.0,
                },
            },
        )
    )

    fig.update_layout(
        template="plotly_dark",
        height=350,
        margin=dict(t=40, b=0, l=30, r=30),
    )

    return fig


def price_sensitivity_chart(df: pd.DataFrame, symbol: str) -> go.Figure:
    """Health factor against collateral price.

    Args:
        df: DataFrame with columns: price, health_factor.
        symbol: Collateral symbol for axis labels.
    """
    fig = go.Figure()

    fig.add_trace(
        go.Scatter(
            x=df["price"],
            y=df["health_factor"],
            mode="lines",
            name="Health Factor",
            line=dict(color="#3b82f6", width=2),
            hovertemplate="Price: $%{x:,.2f}<br>HF: %{y:.3f}<extra></extra>",
        )
    )

    fig.add_hline(
        y=1.0,
        line_dash="dash",
        line_color="#ef4444",
        annotation_text="Liquidation (HF=1.0)",
    )

    fig.update_layout(
        title=f"Health Factor vs {symbol} Price",
        xaxis_title=f"{symbol} Price (USD)",
        yaxis_title="Health Factor",
        template="plotly_dark",
        height=450,
    )

    return fig


def price_fan_chart(mc_result: MonteCarloResult, symbol: str) -> go.Figure:
    """Percentile fan chart of simulated collateral prices."""
    days = mc_result.timesteps
    prices = mc_result.price_paths

    p5 = np.percentile(prices, 5, axis=0)
    p25 = np.percentile(prices, 25, axis=0)
    p50 = np.percentile(prices, 50, axis=0)
    p75 = np.percentile(prices, 75, axis=0)
    p95 = np.percentile(prices, 95, axis=0)

    fig = go.Figure()

    fig.add_trace(
        go.Scatter(
            x=np.concatenate([days, days[::-1]]),
            y=np.concatenate([p95, p5[::-1]]),
            fill="toself",
            fillcolor="rgba(59,130,246,0.1)",
            line=dict(color="rgba(0,0,0,0)"),
            name="5th-95th percentile",
            hoverinfo="skip",
        )
    )

    fig.add_trace(
        go.Scatter(
            x=np.concatenate([days, days[::-1]]),
            y=np.concatenate([p75, p25[::-1]]),
            fill="toself",
            fillcolor="rgba(59,130,246,0.25)",
            line=dict(color="rgba(0,0,0,0)"),
            name="25th-75th percentile",
            hoverinfo="skip",
        )
    )

    fig.add_trace(
        go.Scatter(
            x=days,
            y=p50,
            mode="lines",
            name="Median",
            line=dict(color="#3b82f6", width=2),
            hovertemplate="Day %{x:.0f}<br>Price: $%{y:,.2f}<extra></extra>",
        )
    )

    fig.update_layout(
        title=f"{symbol} Price Fan Chart",
        xaxis_title="Day",
        yaxis_title="Price (USD)",
        template="plotly_dark",
        height=450,
    )

    return fig


def liquidation_probability_chart(mc_result: MonteCarloResult) -> go.Figure:
    """Cumulative liquidation fraction over time."""
    days = mc_result.timesteps
    liq_fraction = mc_result.liquidation_curve()

    fig = go.Figure()

    fig.add_trace(
        go.Scatter(
            x=days,
            y=liq_fraction * 100,
            mode="lines",
            fill="tozeroy",
            fillcolor="rgba(239,68,68,0.15)",
            line=dict(color="#ef4444", width=2),
            name="Liquidation Probability",
            hovertemplate="Day %{x:.0f}<br>Prob: %{y:.2f}%<extra></extra>",
        )
    )

    fig.update_layout(
        title="Cumulative Liquidation Probability",
        xaxis_title="Day",
        yaxis_title="Liquidation Probability (%)",
        template="plotly_dark",
        height=400,
        yaxis=dict(range=[0, 100]),
    )

    return fig


def liquidation_run_chart(run: LiquidationRunResult, symbol: str) -> go.Figure:
    """Dual-axis chart: debt covered per step against the collateral price."""
    df = run.to_frame()
    if df.empty:
        fig = go.Figure()
        fig.update_layout(title="No price steps", template="plotly_dark", height=400)
        return fig

    fig = go.Figure()

    fig.add_trace(
        go.Bar(
            x=df["step"],
            y=df["debt_covered"],
            name="Debt Covered (DSC)",
            marker_color="#ef4444",
            opacity=0.8,
            yaxis="y",
            hovertemplate="Step %{x}<br>Covered: %{y:,.0f}<extra></extra>",
        )
    )

    fig.add_trace(
        go.Scatter(
            x=df["step"],
            y=df["collateral_price"],
            name=f"{symbol} Price (USD)",
            line=dict(color="#f59e0b", width=2),
            yaxis="y2",
            hovertemplate="Step %{x}<br>Price: $%{y:,.2f}<extra></extra>",
        )
    )

    fig.update_layout(
        title="Liquidation Bot Run",
        xaxis_title="Step",
        yaxis=dict(title="Debt Covered (DSC)", side="left"),
        yaxis2=dict(title=f"{symbol} Price (USD)", side="right", overlaying="y"),
        template="plotly_dark",
        height=450,
        legend=dict(x=0.01, y=0.99),
    )

    return fig


def scenario_comparison_chart(
    scenario_names: list[str],
    hf_before: list[float],
    hf_after: list[float],
) -> go.Figure:
    """Grouped bar chart: HF before/after for each scenario."""
    fig = go.Figure()

    fig.add_trace(
        go.Bar(
            x=scenario_names,
            y=hf_before,
            name="HF Before",
            marker_color="#22c55e",
            opacity=0.8,
        )
    )

    fig.add_trace(
        go.Bar(
            x=scenario_names,
            y=hf_after,
            name="HF After",
            marker_color="#ef4444",
            opacity=0.8,
        )
    )

    fig.add_hline(y=1.0, line_dash="dash", line_color="white",
                  annotation_text="Liquidation (HF=1.0)")

    fig.update_layout(
        title="Stress Scenario: Health Factor Impact",
        yaxis_title="Health Factor",
        barmode="group",
        template="plotly_dark",
        height=450,
    )

    return fig
