"""Stablecoin Engine Risk Dashboard — Main Streamlit entry point."""

import os
from pathlib import Path

import streamlit as st

# Load .env file if present (for ETH_RPC_URL, etc.)
_env_path = Path(__file__).resolve().parents[2] / ".env"
if _env_path.exists():
    for line in _env_path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, _, value = line.partition("=")
            os.environ.setdefault(key.strip(), value.strip())

from stablecoin_engine.dashboard.components.sidebar import render_sidebar
from stablecoin_engine.dashboard.deployment import (
    VAULT,
    deploy_with_prices,
    open_position,
    snapshot_prices,
)
from stablecoin_engine.dashboard.tabs.position import render_position
from stablecoin_engine.dashboard.tabs.simulations import render_simulations
from stablecoin_engine.dashboard.tabs.stress_tests import render_stress_tests
from stablecoin_engine.data.chainlink_feed import ChainlinkPriceFeed
from stablecoin_engine.data.feed_factory import create_price_feeds
from stablecoin_engine.protocol.errors import EngineError


def main() -> None:
    st.set_page_config(
        page_title="Stablecoin Engine Risk Dashboard",
        page_icon="📊",
        layout="wide",
    )

    st.title("Stablecoin Engine Risk Dashboard")
    st.caption("Overcollateralized DSC: positions, stress tests and liquidations")

    use_onchain = st.sidebar.checkbox("Use Chainlink Prices", value=False, key="use_onchain")
    feeds = create_price_feeds(use_onchain=use_onchain)

    if use_onchain:
        if all(isinstance(feed, ChainlinkPriceFeed) for feed in feeds.values()):
            st.sidebar.success("On-chain: connected")
        else:
            st.sidebar.error("Fell back to static prices")
            if not os.environ.get("ETH_RPC_URL"):
                st.sidebar.caption("ETH_RPC_URL not found in environment")

    try:
        oracle_prices = snapshot_prices(feeds)
    except EngineError as exc:
        st.error(f"Price feed rejected: {exc}")
        st.stop()

    params = render_sidebar(list(feeds), oracle_prices)

    # What-if: publish a scaled price for the selected collateral
    prices = dict(oracle_prices)
    prices[params.collateral_symbol] *= params.price_factor

    # Open the position at oracle prices, then move the price, so a
    # what-if crash can push an existing position underwater.
    deployment = deploy_with_prices(oracle_prices)
    try:
        open_position(
            deployment,
            VAULT,
            params.collateral_symbol,
            params.collateral_amount,
            params.mint_amount,
        )
    except EngineError as exc:
        st.error(f"Position rejected by the engine: {exc}")
        st.stop()

    if params.price_factor != 1.0:
        feed = deployment.feeds[params.collateral_symbol]
        feed.update_answer(round(prices[params.collateral_symbol] * 10**feed.decimals))

    tab1, tab2, tab3 = st.tabs(["Position", "Stress Tests", "Simulations"])

    with tab1:
        render_position(deployment, VAULT, params.collateral_symbol, prices[params.collateral_symbol])

    with tab2:
        render_stress_tests(deployment, VAULT)

    with tab3:
        render_simulations(
            deployment,
            VAULT,
            params.collateral_symbol,
            prices,
            params.vol,
            params.horizon_days,
            params.n_paths,
        )


if __name__ == "__main__":
    main()
