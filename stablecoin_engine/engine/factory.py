"""Wire up an engine with in-memory tokens around a set of price feeds."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from stablecoin_engine.data.interfaces import PriceFeed
from stablecoin_engine.data.static_feeds import default_price_feeds
from stablecoin_engine.engine.dsc_engine import DSCEngine
from stablecoin_engine.token.erc20 import CollateralToken
from stablecoin_engine.token.stablecoin import DecentralizedStableCoin

logger = logging.getLogger(__name__)

DEPLOYER = "deployer"


@dataclass
class Deployment:
    """An engine together with the tokens and feeds it was built from."""

    engine: DSCEngine
    dsc: DecentralizedStableCoin
    tokens: dict[str, CollateralToken] = field(default_factory=dict)
    feeds: dict[str, PriceFeed] = field(default_factory=dict)

    def asset(self, symbol: str) -> str:
        """Engine asset identifier for a collateral *symbol*."""
        return self.tokens[symbol].address

    def fund(self, account: str, symbol: str, amount: int) -> None:
        """Give *account* collateral and approve the engine to pull it."""
        token = self.tokens[symbol]
        token.mint(account, amount)
        token.approve(account, self.engine.address, token.allowance(account, self.engine.address) + amount)

    def approve_dsc(self, account: str, amount: int) -> None:
        """Approve the engine to pull *amount* of *account*'s DSC when burning."""
        self.dsc.approve(account, self.engine.address, amount)


def create_engine(
    price_feeds: dict[str, PriceFeed] | None = None,
    clock: Callable[[], float] = time.time,
    engine_address: str = "dsc-engine",
) -> Deployment:
    """Deploy a stablecoin, one collateral token per feed, and the engine.

    Ownership of the stablecoin is handed to the engine, the way a
    deployment script would.
    """
    feeds = dict(price_feeds) if price_feeds is not None else dict(default_price_feeds())

    tokens = {
        symbol: CollateralToken(symbol, symbol, address=f"token:{symbol}")
        for symbol in feeds
    }
    dsc = DecentralizedStableCoin(owner=DEPLOYER, address="token:DSC")
    engine = DSCEngine(
        collateral_tokens=list(tokens.values()),
        price_feeds=list(feeds.values()),
        dsc=dsc,
        address=engine_address,
        clock=clock,
    )
    dsc.transfer_ownership(DEPLOYER, engine.address)

    logger.info("Deployed engine with collateral %s", ", ".join(tokens))
    return Deployment(engine=engine, dsc=dsc, tokens=tokens, feeds=feeds)
