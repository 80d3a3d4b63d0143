"""Tests for the float health factor model used by the analytics."""

import pytest

from stablecoin_engine.protocol.health_factor import HealthFactorModel, RiskParams


@pytest.fixture()
def model() -> HealthFactorModel:
    return HealthFactorModel()


class TestHealthFactorModel:
    def test_default_params(self, model) -> None:
        assert model.liquidation_threshold == pytest.approx(0.5)
        assert model.liquidation_bonus == pytest.approx(0.1)

    def test_health_factor(self, model) -> None:
        assert model.health_factor(20_000.0, 100.0) == pytest.approx(100.0)

    def test_no_debt_is_infinite(self, model) -> None:
        assert model.health_factor(20_000.0, 0.0) == float("inf")

    def test_is_liquidatable(self, model) -> None:
        assert model.is_liquidatable(180.0, 100.0) is True
        assert model.is_liquidatable(200.0, 100.0) is False

    def test_max_mintable(self, model) -> None:
        assert model.max_mintable(20_000.0) == pytest.approx(10_000.0)

    def test_liquidation_price(self, model) -> None:
        # 10 ETH backing 5,000 DSC liquidates at $1,000
        assert model.liquidation_price(10.0, 5_000.0) == pytest.approx(1_000.0)
        assert model.liquidation_price(10.0, 0.0) == 0.0

    def test_price_drop_to_liquidation(self, model) -> None:
        assert model.price_drop_to_liquidation(20_000.0, 5_000.0) == pytest.approx(0.5)
        assert model.price_drop_to_liquidation(100.0, 100.0) == 0.0
        assert model.price_drop_to_liquidation(100.0, 0.0) == float("inf")

    def test_collateral_seized(self, model) -> None:
        assert model.collateral_seized(100.0, 18.0) == pytest.approx(100.0 / 18.0 * 1.1)

    def test_liquidation_improves(self, model) -> None:
        assert model.liquidation_improves(180.0, 100.0) is True
        assert model.liquidation_improves(105.0, 100.0) is False

    def test_price_sensitivity_frame(self, model) -> None:
        df = model.price_sensitivity(10.0, 2_000.0, 5_000.0, n_points=11)
        assert list(df.columns) == ["price_factor", "price", "health_factor"]
        assert len(df) == 11
        assert df["health_factor"].is_monotonic_increasing

    def test_custom_min_health_factor(self) -> None:
        model = HealthFactorModel(RiskParams(min_health_factor=1.5))
        assert model.is_liquidatable(280.0, 100.0) is True
        assert model.max_mintable(300.0) == pytest.approx(100.0)
