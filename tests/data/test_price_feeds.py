"""Tests for static feeds, the Chainlink feed wrapper and the feed factory."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest

from stablecoin_engine.data import create_price_feeds
from stablecoin_engine.data.chainlink_feed import ChainlinkPriceFeed
from stablecoin_engine.data.constants import WBTC, WETH
from stablecoin_engine.data.interfaces import PriceFeed, RoundData
from stablecoin_engine.data.static_feeds import StaticPriceFeed, default_price_feeds
from stablecoin_engine.engine.dsc_engine import DSCEngine
from stablecoin_engine.protocol.errors import EngineError, PriceFeedError
from stablecoin_engine.token.erc20 import CollateralToken
from stablecoin_engine.token.stablecoin import DecentralizedStableCoin


def _mock_aggregator(decimals: int = 8, round_data: tuple = (7, 2_000 * 10**8, 100, 100, 7)) -> MagicMock:
    contract = MagicMock()
    contract.functions.decimals.return_value.call.return_value = decimals
    contract.functions.latestRoundData.return_value.call.return_value = round_data
    return contract


# ======================================================================
# 1. Static feeds
# ======================================================================


class TestStaticPriceFeed:
    def test_initial_round(self) -> None:
        feed = StaticPriceFeed(2_000 * 10**8, updated_at=123)
        data = feed.latest_round_data()
        assert data == RoundData(
            round_id=1, answer=2_000 * 10**8, started_at=123, updated_at=123, answered_in_round=1
        )

    def test_update_answer_starts_new_round(self) -> None:
        feed = StaticPriceFeed(2_000 * 10**8, updated_at=123)
        feed.update_answer(1_800 * 10**8, updated_at=456)
        data = feed.latest_round_data()
        assert data.round_id == 2
        assert data.answer == 1_800 * 10**8
        assert data.updated_at == 456

    def test_update_round_data_sets_every_field(self) -> None:
        feed = StaticPriceFeed(1, updated_at=1)
        feed.update_round_data(round_id=9, answer=5, started_at=10, updated_at=11)
        data = feed.latest_round_data()
        assert (data.round_id, data.answer, data.started_at, data.updated_at) == (9, 5, 10, 11)
        assert data.answered_in_round == 9

    def test_from_usd(self) -> None:
        feed = StaticPriceFeed.from_usd(1_234.5)
        assert feed.decimals == 8
        assert feed.latest_round_data().answer == 123_450_000_000

    def test_default_feeds(self) -> None:
        feeds = default_price_feeds()
        assert set(feeds) == {WETH, WBTC}
        assert feeds[WETH].latest_round_data().answer == 2_000 * 10**8
        assert feeds[WBTC].latest_round_data().answer == 1_000 * 10**8


# ======================================================================
# 2. Chainlink feed with a mock contract
# ======================================================================


class TestChainlinkPriceFeed:
    def test_decimals_cached(self) -> None:
        contract = _mock_aggregator()
        feed = ChainlinkPriceFeed(contract)
        assert feed.decimals == 8
        assert feed.decimals == 8
        assert contract.functions.decimals.return_value.call.call_count == 1

    def test_latest_round_data(self) -> None:
        feed = ChainlinkPriceFeed(_mock_aggregator())
        assert feed.latest_round_data() == RoundData(7, 2_000 * 10**8, 100, 100, 7)

    def test_round_data_never_cached(self) -> None:
        contract = _mock_aggregator()
        feed = ChainlinkPriceFeed(contract)
        feed.latest_round_data()
        feed.latest_round_data()
        assert contract.functions.latestRoundData.return_value.call.call_count == 2

    def test_is_price_feed(self) -> None:
        assert isinstance(ChainlinkPriceFeed(_mock_aggregator()), PriceFeed)

    def test_failed_round_call_raises_price_feed_error(self) -> None:
        contract = _mock_aggregator()
        contract.functions.latestRoundData.return_value.call.side_effect = ConnectionError("refused")
        with pytest.raises(PriceFeedError) as exc_info:
            ChainlinkPriceFeed(contract).latest_round_data()
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_failed_decimals_call_raises_price_feed_error(self) -> None:
        contract = _mock_aggregator()
        contract.functions.decimals.return_value.call.side_effect = TimeoutError("slow")
        with pytest.raises(PriceFeedError):
            ChainlinkPriceFeed(contract).decimals

    def test_engine_surfaces_unreachable_feed_as_engine_error(self) -> None:
        contract = _mock_aggregator()
        contract.functions.latestRoundData.return_value.call.side_effect = ConnectionError("refused")
        token = CollateralToken("WETH", "WETH")
        engine = DSCEngine(
            [token], [ChainlinkPriceFeed(contract)], DecentralizedStableCoin(owner="deployer")
        )
        with pytest.raises(EngineError):
            engine.get_usd_value(token.address, 10**18)

    def test_from_rpc_rejects_unreachable_endpoint(self) -> None:
        with patch("web3.Web3") as web3_cls:
            web3_cls.return_value.is_connected.return_value = False
            with pytest.raises(ConnectionError):
                ChainlinkPriceFeed.from_rpc("http://127.0.0.1:9", WETH)

    def test_from_rpc_connected(self) -> None:
        with patch("web3.Web3") as web3_cls:
            web3_cls.return_value.is_connected.return_value = True
            feed = ChainlinkPriceFeed.from_rpc("http://localhost:8545", WETH)
        assert isinstance(feed, ChainlinkPriceFeed)


# ======================================================================
# 3. Factory
# ======================================================================


class TestCreatePriceFeeds:
    def test_static_by_default(self) -> None:
        feeds = create_price_feeds()
        assert all(isinstance(f, StaticPriceFeed) for f in feeds.values())

    def test_onchain_without_url_falls_back(self, monkeypatch, caplog) -> None:
        monkeypatch.delenv("ETH_RPC_URL", raising=False)
        with caplog.at_level(logging.WARNING):
            feeds = create_price_feeds(use_onchain=True)
        assert all(isinstance(f, StaticPriceFeed) for f in feeds.values())
        assert "no RPC URL" in caplog.text

    def test_onchain_reads_env_url(self, monkeypatch) -> None:
        monkeypatch.setenv("ETH_RPC_URL", "http://localhost:8545")
        sentinel = ChainlinkPriceFeed(_mock_aggregator())
        with patch.object(ChainlinkPriceFeed, "from_rpc", return_value=sentinel) as from_rpc:
            feeds = create_price_feeds(use_onchain=True)
        assert feeds == {WETH: sentinel, WBTC: sentinel}
        from_rpc.assert_any_call("http://localhost:8545", WETH)

    def test_connection_failure_falls_back(self) -> None:
        with patch.object(ChainlinkPriceFeed, "from_rpc", side_effect=ConnectionError("down")):
            feeds = create_price_feeds(use_onchain=True, rpc_url="http://localhost:8545")
        assert all(isinstance(f, StaticPriceFeed) for f in feeds.values())

    def test_unreachable_endpoint_falls_back(self, caplog) -> None:
        with patch("web3.Web3") as web3_cls:
            web3_cls.return_value.is_connected.return_value = False
            with caplog.at_level(logging.WARNING):
                feeds = create_price_feeds(use_onchain=True, rpc_url="http://127.0.0.1:9")
        assert all(isinstance(f, StaticPriceFeed) for f in feeds.values())
        assert "using static feeds" in caplog.text
