"""Factory for creating the collateral price feeds."""

from __future__ import annotations

import logging
import os

from stablecoin_engine.data.contracts import PRICE_FEED_ADDRESSES
from stablecoin_engine.data.interfaces import PriceFeed
from stablecoin_engine.data.static_feeds import default_price_feeds

logger = logging.getLogger(__name__)


def create_price_feeds(
    use_onchain: bool = False,
    rpc_url: str | None = None,
) -> dict[str, PriceFeed]:
    """Create one price feed per supported collateral asset.

    Parameters
    ----------
    use_onchain : bool
        If True, attempt to connect ``ChainlinkPriceFeed`` instances.
    rpc_url : str | None
        Ethereum JSON-RPC URL.  Falls back to the ``ETH_RPC_URL``
        environment variable when not supplied.

    Returns
    -------
    dict[str, PriceFeed]
        Chainlink feeds when requested and reachable, otherwise
        ``StaticPriceFeed`` instances at default prices.
    """
    if not use_onchain:
        return dict(default_price_feeds())

    resolved_url = rpc_url or os.environ.get("ETH_RPC_URL")
    if not resolved_url:
        logger.warning("On-chain feeds requested but no RPC URL provided; using static feeds")
        return dict(default_price_feeds())

    from stablecoin_engine.data.chainlink_feed import ChainlinkPriceFeed

    try:
        return {
            asset: ChainlinkPriceFeed.from_rpc(resolved_url, asset)
            for asset in PRICE_FEED_ADDRESSES
        }
    except Exception:
        logger.warning("Failed to connect Chainlink feeds; using static feeds", exc_info=True)
        return dict(default_price_feeds())
