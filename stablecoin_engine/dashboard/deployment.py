"""Build the in-memory deployment the dashboard pages inspect."""

from __future__ import annotations

import logging

from stablecoin_engine.data.interfaces import PriceFeed
from stablecoin_engine.data.static_feeds import StaticPriceFeed
from stablecoin_engine.engine.factory import Deployment, create_engine
from stablecoin_engine.protocol.fixed_point import to_wei
from stablecoin_engine.protocol.oracle import OracleGuard

logger = logging.getLogger(__name__)

VAULT = "vault"
LIQUIDATOR = "liquidator"


def snapshot_prices(feeds: dict[str, PriceFeed]) -> dict[str, float]:
    """Current USD price per symbol, read through the staleness guard."""
    guard = OracleGuard()
    return {
        symbol: guard.latest_price(feed) / 10**feed.decimals
        for symbol, feed in feeds.items()
    }


def deploy_with_prices(prices: dict[str, float]) -> Deployment:
    """Fresh engine whose static feeds publish *prices*."""
    feeds = {
        symbol: StaticPriceFeed.from_usd(price, description=f"{symbol} / USD")
        for symbol, price in prices.items()
    }
    return create_engine(feeds)


def open_position(
    deployment: Deployment,
    account: str,
    symbol: str,
    collateral_amount: float,
    mint_amount: float,
) -> None:
    """Fund *account*, deposit its collateral and mint against it.

    Raises whatever the engine raises, e.g. BrokenHealthFactorError when
    *mint_amount* exceeds the position's capacity.
    """
    collateral = to_wei(collateral_amount)
    if collateral <= 0:
        return
    deployment.fund(account, symbol, collateral)
    minted = to_wei(mint_amount)
    asset = deployment.asset(symbol)
    if minted > 0:
        deployment.engine.deposit_collateral_and_mint_dsc(account, asset, collateral, minted)
    else:
        deployment.engine.deposit_collateral(account, asset, collateral)
    logger.debug("Opened %s position for %s: %s collateral, %s DSC", symbol, account, collateral, minted)
