"""Sidebar parameter controls."""

from dataclasses import dataclass

import streamlit as st


@dataclass
class SidebarParams:
    """User-controlled parameters from the sidebar."""

    collateral_symbol: str
    collateral_amount: float
    mint_amount: float
    price_factor: float
    vol: float
    horizon_days: int
    n_paths: int


def render_sidebar(symbols: list[str], prices: dict[str, float]) -> SidebarParams:
    """Render sidebar controls and return selected parameters.

    Parameters
    ----------
    symbols : list[str]
        Collateral symbols the engine accepts.
    prices : dict[str, float]
        Current USD price per symbol, used for defaults and captions.
    """
    st.sidebar.header("Position Parameters")

    symbol = st.sidebar.selectbox("Collateral", symbols, index=0)
    price = prices.get(symbol, 0.0)
    st.sidebar.caption(f"Oracle price: ${price:,.2f}")

    collateral = st.sidebar.number_input(
        f"{symbol} Deposited",
        min_value=0.0,
        value=10.0,
        step=1.0,
        format="%.4f",
    )

    max_mint = collateral * price * 0.5
    mint = st.sidebar.number_input(
        "DSC Minted",
        min_value=0.0,
        value=round(max_mint * 0.5, 2),
        step=100.0,
        format="%.2f",
    )
    st.sidebar.caption(f"Mint capacity at HF 1.0: {max_mint:,.2f} DSC")

    st.sidebar.header("What-If Analysis")

    price_factor = st.sidebar.slider(
        f"{symbol} Price Factor",
        min_value=0.10,
        max_value=1.50,
        value=1.00,
        step=0.01,
        format="%.2f",
    )

    st.sidebar.header("Simulation")

    vol = st.sidebar.slider(
        "Annualized Volatility (%)",
        min_value=10,
        max_value=200,
        value=75,
    ) / 100.0

    horizon = st.sidebar.slider("Horizon (days)", min_value=7, max_value=365, value=30)
    n_paths = st.sidebar.select_slider("Paths", options=[250, 500, 1000, 2000, 5000], value=1000)

    return SidebarParams(
        collateral_symbol=symbol,
        collateral_amount=collateral,
        mint_amount=mint,
        price_factor=price_factor,
        vol=vol,
        horizon_days=horizon,
        n_paths=n_paths,
    )
