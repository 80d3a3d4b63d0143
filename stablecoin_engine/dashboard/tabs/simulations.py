"""Simulations page: Monte Carlo price paths and a liquidation bot replay."""

import numpy as np
import streamlit as st

from stablecoin_engine.dashboard.components.charts import (
    liquidation_probability_chart,
    liquidation_run_chart,
    price_fan_chart,
)
from stablecoin_engine.dashboard.deployment import (
    LIQUIDATOR,
    VAULT,
    deploy_with_prices,
    open_position,
)
from stablecoin_engine.data.constants import PRECISION
from stablecoin_engine.engine.factory import Deployment
from stablecoin_engine.protocol.errors import EngineError
from stablecoin_engine.simulation.liquidation_bot import LiquidationBotConfig, run_liquidation_bot
from stablecoin_engine.simulation.monte_carlo import run_monte_carlo
from stablecoin_engine.simulation.params import PriceDynamicsParams


def render_simulations(
    deployment: Deployment,
    user: str,
    symbol: str,
    prices: dict[str, float],
    vol: float,
    horizon_days: int,
    n_paths: int,
) -> None:
    """Render the simulations page with 2 sections."""
    st.header("Simulations")

    engine = deployment.engine
    asset = deployment.asset(symbol)
    collateral_amount = engine.get_collateral_balance_of_user(user, asset) / PRECISION
    debt = engine.get_dsc_minted(user) / PRECISION
    price = prices[symbol]

    # --- Section 1: Monte Carlo ---
    st.subheader("Monte Carlo Simulation")

    with st.expander("Price Dynamics", expanded=False):
        c1, c2, c3 = st.columns(3)
        with c1:
            drift = st.number_input("Annual Drift", min_value=-1.0, max_value=1.0, value=0.0, step=0.05)
        with c2:
            jump_intensity = st.number_input("Crashes per Year", min_value=0.0, max_value=10.0, value=0.5, step=0.1)
        with c3:
            jump_size = st.number_input("Crash Size", min_value=-0.9, max_value=0.0, value=-0.15, step=0.05)
        seed = st.number_input("Random Seed", min_value=0, max_value=99999, value=42, step=1, key="mc_seed")

    price_params = PriceDynamicsParams(
        drift=drift, vol=vol, jump_intensity=jump_intensity, jump_size=jump_size
    )
    mc_result = run_monte_carlo(
        collateral_amount=collateral_amount,
        collateral_price=price,
        debt_value=debt,
        price_params=price_params,
        n_paths=n_paths,
        horizon_days=horizon_days,
        seed=int(seed),
    )

    st.metric("Liquidation Probability", f"{mc_result.liquidation_probability * 100:.2f}%")

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(price_fan_chart(mc_result, symbol), use_container_width=True)
    with col2:
        st.plotly_chart(liquidation_probability_chart(mc_result), use_container_width=True)

    st.divider()

    # --- Section 2: Liquidation Bot ---
    st.subheader("Liquidation Bot Replay")
    st.caption(
        "Replays the 5th-percentile price path against a fresh engine holding "
        "this position and a liquidator funded with the other collateral."
    )

    others = [s for s in deployment.tokens if s != symbol]
    if debt <= 0 or not others:
        st.info("Mint DSC against the position to replay liquidations.")
        return

    final_prices = mc_result.price_paths[:, -1]
    path_idx = int(np.argsort(final_prices)[len(final_prices) // 20])
    path = mc_result.price_paths[path_idx]

    close_factor = st.slider("Close Factor", min_value=0.1, max_value=1.0, value=0.5, step=0.05)

    replay = deploy_with_prices(prices)
    liquidator_collateral = others[0]
    # Liquidator backs its DSC with four times the debt in the other collateral
    liquidator_deposit = 4 * 2 * debt / prices[liquidator_collateral]
    try:
        open_position(replay, VAULT, symbol, collateral_amount, debt)
        open_position(replay, LIQUIDATOR, liquidator_collateral, liquidator_deposit, debt)
    except EngineError as exc:
        st.error(f"Could not set up the replay: {exc}")
        return

    run = run_liquidation_bot(
        replay,
        path,
        LiquidationBotConfig(liquidator=LIQUIDATOR, collateral=symbol, close_factor=close_factor),
    )

    k1, k2, k3 = st.columns(3)
    k1.metric("Debt Covered", f"{run.total_debt_covered / PRECISION:,.2f} DSC")
    k2.metric(f"{symbol} Seized", f"{run.total_collateral_seized / PRECISION:,.4f}")
    k3.metric("Insolvent Accounts", str(len(run.insolvent_accounts)))

    st.plotly_chart(liquidation_run_chart(run, symbol), use_container_width=True)
