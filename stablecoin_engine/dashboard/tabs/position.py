"""Position page: KPI cards, health factor gauge and price sensitivity."""

import pandas as pd
import streamlit as st

from stablecoin_engine.dashboard.components.charts import (
    health_factor_gauge,
    price_sensitivity_chart,
)
from stablecoin_engine.dashboard.components.metrics_cards import (
    format_health_factor,
    format_usd,
    kpi_row,
)
from stablecoin_engine.data.constants import MAX_UINT256, PRECISION
from stablecoin_engine.engine.factory import Deployment
from stablecoin_engine.protocol.health_factor import HealthFactorModel


def render_position(deployment: Deployment, user: str, symbol: str, price: float) -> None:
    """Render the position page for *user*."""
    st.header("Position")

    engine = deployment.engine
    asset = deployment.asset(symbol)

    debt, collateral_value = engine.get_account_information(user)
    hf = engine.get_health_factor(user)
    deposited = engine.get_collateral_balance_of_user(user, asset) / PRECISION

    model = HealthFactorModel()
    debt_usd = debt / PRECISION
    collateral_usd = collateral_value / PRECISION
    headroom = model.max_mintable(collateral_usd) - debt_usd

    kpi_row(
        [
            ("Health Factor", format_health_factor(hf), None),
            ("Collateral Value", format_usd(collateral_value), None),
            ("DSC Minted", f"{debt_usd:,.2f}", None),
            ("Mint Headroom", f"{max(headroom, 0.0):,.2f} DSC", None),
        ]
    )

    st.divider()

    col1, col2 = st.columns([1, 2])

    with col1:
        hf_float = float("inf") if hf == MAX_UINT256 else hf / PRECISION
        st.plotly_chart(health_factor_gauge(hf_float), use_container_width=True)

        liq_price = model.liquidation_price(deposited, debt_usd)
        drop = model.price_drop_to_liquidation(collateral_usd, debt_usd)
        if debt_usd > 0:
            st.metric(f"{symbol} Liquidation Price", f"${liq_price:,.2f}")
            st.metric("Price Drop to Liquidation", f"{drop * 100:.1f}%")
            if not model.liquidation_improves(collateral_usd, debt_usd):
                st.warning(
                    "Collateral no longer covers debt plus the liquidation bonus: "
                    "no liquidation can improve this position."
                )
        else:
            st.info("No DSC minted: the position cannot be liquidated.")

    with col2:
        if debt_usd > 0:
            df = model.price_sensitivity(deposited, price, debt_usd)
            st.plotly_chart(price_sensitivity_chart(df, symbol), use_container_width=True)

    st.subheader("Engine Events")
    events = [
        {"event": type(event).__name__, **vars(event)}
        for event in engine.events
    ]
    if events:
        st.dataframe(pd.DataFrame(events), use_container_width=True, hide_index=True)
    else:
        st.caption("No events emitted yet.")
