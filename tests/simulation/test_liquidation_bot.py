"""Tests for the liquidation bot driving a live engine."""

from unittest.mock import MagicMock

import pytest

from conftest import LIQUIDATOR, USER
from stablecoin_engine.data.chainlink_feed import ChainlinkPriceFeed
from stablecoin_engine.data.constants import MIN_HEALTH_FACTOR, WBTC, WETH
from stablecoin_engine.simulation.liquidation_bot import (
    LiquidationBotConfig,
    run_liquidation_bot,
    size_liquidation,
)
from stablecoin_engine.simulation.results import LiquidationRunResult

E18 = 10**18


@pytest.fixture()
def market(deployment, weth, wbtc):
    """Borrower at HF 2.0 on ETH; liquidator holding 5,000 DSC backed by BTC."""
    deployment.fund(USER, WETH, 10 * E18)
    deployment.engine.deposit_collateral_and_mint_dsc(USER, weth, 10 * E18, 5_000 * E18)

    deployment.fund(LIQUIDATOR, WBTC, 20 * E18)
    deployment.engine.deposit_collateral_and_mint_dsc(LIQUIDATOR, wbtc, 20 * E18, 5_000 * E18)
    return deployment


@pytest.fixture()
def config() -> LiquidationBotConfig:
    return LiquidationBotConfig(liquidator=LIQUIDATOR, collateral=WETH)


class TestSizeLiquidation:
    def test_close_factor_bounds_cover(self, market, weth) -> None:
        market.feeds[WETH].update_answer(900 * 10**8)
        cover = size_liquidation(market.engine, USER, weth, 0.5, 10_000 * E18)
        assert cover == 2_500 * E18

    def test_available_dsc_bounds_cover(self, market, weth) -> None:
        market.feeds[WETH].update_answer(900 * 10**8)
        assert size_liquidation(market.engine, USER, weth, 0.5, 100 * E18) == 100 * E18

    def test_deposit_bounds_cover(self, market, weth) -> None:
        # $5,000 of collateral pays at most 5000 / 1.1 of debt
        market.feeds[WETH].update_answer(500 * 10**8)
        cover = size_liquidation(market.engine, USER, weth, 1.0, 10_000 * E18)
        assert cover == 5_000 * E18 * 100 // 110


class TestRunLiquidationBot:
    def test_healthy_path_does_nothing(self, market, config) -> None:
        result = run_liquidation_bot(market, [2_000.0, 1_900.0, 1_800.0], config)
        assert isinstance(result, LiquidationRunResult)
        assert result.total_debt_covered == 0
        assert all(step.liquidations == 0 for step in result.steps)
        assert result.final_total_debt == 10_000 * E18

    def test_crash_triggers_liquidation(self, market, config) -> None:
        result = run_liquidation_bot(market, [2_000.0, 1_500.0, 900.0], config)

        assert [s.unhealthy_accounts for s in result.steps] == [0, 0, 1]
        assert result.steps[2].liquidations == 1
        assert result.total_debt_covered == 2_500 * E18
        assert result.final_total_debt == 7_500 * E18
        assert result.insolvent_accounts == []
        assert market.engine.get_health_factor(USER) >= MIN_HEALTH_FACTOR
        assert market.tokens[WETH].balance_of(LIQUIDATOR) == result.total_collateral_seized

    def test_deeply_underwater_liquidation_rejected(self, market, config) -> None:
        # $5,000 of collateral against $5,000 of debt cannot pay the bonus
        result = run_liquidation_bot(market, [500.0], config)
        assert result.steps[0].failed_liquidations == 1
        assert result.total_debt_covered == 0
        assert result.insolvent_accounts == [USER]
        assert market.engine.get_dsc_minted(USER) == 5_000 * E18

    def test_small_liquidations_skipped(self, market) -> None:
        config = LiquidationBotConfig(
            liquidator=LIQUIDATOR, collateral=WETH, close_factor=0.5, min_debt_to_cover=10_000 * E18
        )
        result = run_liquidation_bot(market, [900.0], config)
        assert result.steps[0].liquidations == 0
        assert result.steps[0].failed_liquidations == 0

    def test_to_frame(self, market, config) -> None:
        df = run_liquidation_bot(market, [2_000.0, 900.0], config).to_frame()
        assert len(df) == 2
        assert df["debt_covered"].iloc[1] == pytest.approx(2_500.0)

    def test_empty_path_frame_keeps_columns(self, market, config) -> None:
        df = run_liquidation_bot(market, [], config).to_frame()
        assert df.empty
        assert "collateral_price" in df.columns

    def test_live_feed_cannot_be_driven(self, market, config) -> None:
        market.feeds[WETH] = ChainlinkPriceFeed(MagicMock())
        with pytest.raises(TypeError):
            run_liquidation_bot(market, [1_000.0], config)
