"""Stress Tests page: historical scenarios, custom scenario, correlated shocks."""

import pandas as pd
import streamlit as st

from stablecoin_engine.dashboard.components.charts import scenario_comparison_chart
from stablecoin_engine.dashboard.components.metrics_cards import format_health_factor
from stablecoin_engine.data.constants import MAX_UINT256, PRECISION
from stablecoin_engine.engine.factory import Deployment
from stablecoin_engine.stress.scenarios import HISTORICAL_SCENARIOS, create_custom_scenario
from stablecoin_engine.stress.shock_engine import (
    apply_scenario,
    generate_correlated_shocks,
    scenario_table,
    scenarios_from_shocks,
)


def _hf(value: int) -> float:
    # Bars cannot show infinity; cap the no-debt sentinel
    return 10.0 if value == MAX_UINT256 else value / PRECISION


def render_stress_tests(deployment: Deployment, user: str) -> None:
    """Render the stress tests page with 3 sections."""
    st.header("Stress Tests")

    engine = deployment.engine
    symbols = list(deployment.tokens)

    # --- Section 1: Historical Scenarios ---
    st.subheader("Historical Stress Scenarios")

    results = [apply_scenario(engine, user, scenario) for scenario in HISTORICAL_SCENARIOS]

    rows = []
    for scenario, shock in zip(HISTORICAL_SCENARIOS, results):
        rows.append({
            "Scenario": scenario.name,
            "Shocks": ", ".join(f"{s} {scenario.change_for(s) * 100:+.0f}%" for s in symbols),
            "Duration": f"{scenario.duration_days}d",
            "HF Before": format_health_factor(shock.hf_before),
            "HF After": format_health_factor(shock.hf_after),
            "Collateral After": f"${shock.collateral_after / PRECISION:,.2f}",
            "Liquidatable": "Yes" if shock.is_liquidatable else "No",
        })
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    fig = scenario_comparison_chart(
        [s.name for s in HISTORICAL_SCENARIOS],
        [_hf(r.hf_before) for r in results],
        [_hf(r.hf_after) for r in results],
    )
    st.plotly_chart(fig, use_container_width=True)

    with st.expander("Scenario Descriptions"):
        for scenario in HISTORICAL_SCENARIOS:
            st.markdown(f"**{scenario.name}**: {scenario.description}")

    st.divider()

    # --- Section 2: Custom Scenario ---
    st.subheader("Custom Scenario")

    cols = st.columns(len(symbols))
    changes = {}
    for col, symbol in zip(cols, symbols):
        with col:
            changes[symbol] = st.slider(
                f"{symbol} Price Change (%)",
                min_value=-95,
                max_value=50,
                value=-30,
                key=f"custom_{symbol}",
            ) / 100.0

    custom = create_custom_scenario("Custom", changes)
    shock = apply_scenario(engine, user, custom)

    c1, c2, c3 = st.columns(3)
    c1.metric("HF Before", format_health_factor(shock.hf_before))
    c2.metric("HF After", format_health_factor(shock.hf_after))
    c3.metric("Liquidatable", "Yes" if shock.is_liquidatable else "No")

    st.divider()

    # --- Section 3: Correlated Shocks ---
    st.subheader("Correlated Random Shocks")

    col1, col2 = st.columns(2)
    with col1:
        n_scenarios = st.number_input("Scenarios", min_value=100, max_value=5000, value=1000, step=100)
    with col2:
        seed = st.number_input("Random Seed", min_value=0, max_value=99999, value=42, step=1)

    shocks = generate_correlated_shocks(int(n_scenarios), seed=int(seed))
    sampled = scenarios_from_shocks(shocks, symbols)
    table = scenario_table(engine, [user], sampled)

    liquidated_share = table["liquidatable"].mean() if not table.empty else 0.0
    finite = table.loc[table["hf_after"] != float("inf"), "hf_after"]

    k1, k2 = st.columns(2)
    k1.metric("Share Liquidatable", f"{liquidated_share * 100:.1f}%")
    if not finite.empty:
        k2.metric("5th Percentile HF", f"{finite.quantile(0.05):.3f}")
