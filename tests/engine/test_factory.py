"""Tests for the in-memory deployment helper."""

from stablecoin_engine.data.constants import WBTC, WETH
from stablecoin_engine.data.static_feeds import StaticPriceFeed
from stablecoin_engine.engine.factory import DEPLOYER, create_engine


class TestCreateEngine:
    def test_default_feeds(self) -> None:
        deployment = create_engine()
        assert set(deployment.tokens) == {WETH, WBTC}
        assert all(isinstance(f, StaticPriceFeed) for f in deployment.feeds.values())

    def test_asset_identifiers(self, deployment) -> None:
        assert deployment.asset(WETH) == "token:WETH"
        assert deployment.engine.get_collateral_token(deployment.asset(WBTC)).symbol == WBTC

    def test_ownership_handed_to_engine(self, deployment) -> None:
        assert deployment.dsc.owner != DEPLOYER
        assert deployment.dsc.owner == deployment.engine.address

    def test_fund_accumulates_allowance(self, deployment) -> None:
        deployment.fund("alice", WETH, 5)
        deployment.fund("alice", WETH, 7)
        token = deployment.tokens[WETH]
        assert token.balance_of("alice") == 12
        assert token.allowance("alice", deployment.engine.address) == 12
