"""Metric card components for the dashboard."""

import streamlit as st

from stablecoin_engine.data.constants import MAX_UINT256, PRECISION


def format_health_factor(hf: int) -> str:
    """Render a 1e18 health factor, with the no-debt sentinel as infinity."""
    if hf == MAX_UINT256:
        return "∞"
    return f"{hf / PRECISION:,.4f}"


def format_usd(value: int) -> str:
    return f"${value / PRECISION:,.2f}"


def kpi_row(metrics: list[tuple[str, str, str | None]]) -> None:
    """Display a row of KPI cards.

    Args:
        metrics: List of (label, value, delta) tuples.
    """
    cols = st.columns(len(metrics))
    for col, (label, value, delta) in zip(cols, metrics):
        with col:
            st.metric(label=label, value=value, delta=delta)
