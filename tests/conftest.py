"""Shared test fixtures: fixed clock, static feeds and a deployed engine."""

from __future__ import annotations

import pytest

from stablecoin_engine.data.constants import WBTC, WETH
from stablecoin_engine.data.static_feeds import StaticPriceFeed
from stablecoin_engine.engine.factory import Deployment, create_engine

NOW = 1_700_000_000

USER = "user"
LIQUIDATOR = "liquidator"

AMOUNT_COLLATERAL = 10 * 10**18
ETH_USD_PRICE = 2_000 * 10**8
BTC_USD_PRICE = 1_000 * 10**8


class FakeClock:
    """Callable clock the tests can move forward."""

    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Feed and engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def feeds() -> dict[str, StaticPriceFeed]:
    return {
        WETH: StaticPriceFeed(ETH_USD_PRICE, updated_at=NOW, description="ETH / USD"),
        WBTC: StaticPriceFeed(BTC_USD_PRICE, updated_at=NOW, description="BTC / USD"),
    }


@pytest.fixture()
def deployment(feeds, clock) -> Deployment:
    return create_engine(feeds, clock=clock)


@pytest.fixture()
def weth(deployment) -> str:
    return deployment.asset(WETH)


@pytest.fixture()
def wbtc(deployment) -> str:
    return deployment.asset(WBTC)


# ---------------------------------------------------------------------------
# Position fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def funded_user(deployment) -> str:
    deployment.fund(USER, WETH, AMOUNT_COLLATERAL)
    return USER


@pytest.fixture()
def deposited_collateral(deployment, funded_user, weth) -> str:
    deployment.engine.deposit_collateral(funded_user, weth, AMOUNT_COLLATERAL)
    return funded_user


@pytest.fixture()
def deposited_and_minted(deployment, funded_user, weth) -> str:
    deployment.engine.deposit_collateral_and_mint_dsc(
        funded_user, weth, AMOUNT_COLLATERAL, 100 * 10**18
    )
    return funded_user


def set_price(feed: StaticPriceFeed, answer: int) -> None:
    """Publish *answer* stamped with the fixed test time."""
    feed.update_answer(answer, updated_at=NOW)
