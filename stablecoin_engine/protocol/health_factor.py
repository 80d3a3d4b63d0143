"""Health factor analytics — liquidation prices, mint capacity, sensitivity.

The engine itself uses the exact integer math in
:mod:`stablecoin_engine.protocol.fixed_point`; this module works in
floats for risk analysis and the dashboard.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd

from stablecoin_engine.data.constants import (
    LIQUIDATION_BONUS,
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
)


@dataclass(frozen=True)
class RiskParams:
    """Risk parameters as decimal fractions."""

    liquidation_threshold: float = LIQUIDATION_THRESHOLD / LIQUIDATION_PRECISION
    liquidation_bonus: float = LIQUIDATION_BONUS / LIQUIDATION_PRECISION
    min_health_factor: float = 1.0


class HealthFactorModel:
    """Health factor calculations on USD values."""

    def __init__(self, params: RiskParams | None = None) -> None:
        self.params = params or RiskParams()

    @property
    def liquidation_threshold(self) -> float:
        return self.params.liquidation_threshold

    @property
    def liquidation_bonus(self) -> float:
        return self.params.liquidation_bonus

    def health_factor(self, collateral_value: float, debt_value: float) -> float:
        """Compute health factor.

        HF = (collateral_value * liquidation_threshold) / debt_value
        """
        if debt_value <= 0:
            return float("inf")
        return (collateral_value * self.liquidation_threshold) / debt_value

    def is_liquidatable(self, collateral_value: float, debt_value: float) -> bool:
        return self.health_factor(collateral_value, debt_value) < self.params.min_health_factor

    def max_mintable(self, collateral_value: float) -> float:
        """Maximum debt that keeps HF at the minimum."""
        return collateral_value * self.liquidation_threshold / self.params.min_health_factor

    def liquidation_price(self, collateral_amount: float, debt_value: float) -> float:
        """Collateral price at which HF reaches the minimum.

        Returns 0.0 for a position without debt or collateral.
        """
        if debt_value <= 0 or collateral_amount <= 0:
            return 0.0
        return (
            debt_value
            * self.params.min_health_factor
            / (collateral_amount * self.liquidation_threshold)
        )

    def price_drop_to_liquidation(
        self, collateral_value: float, debt_value: float
    ) -> float:
        """Fractional collateral price drop that triggers liquidation.

        A return value of 0.25 means a 25% drop makes the position
        liquidatable.  Returns inf if the position has no debt and 0.0 if
        it is already liquidatable.
        """
        if debt_value <= 0:
            return float("inf")
        hf = self.health_factor(collateral_value, debt_value)
        if hf <= self.params.min_health_factor:
            return 0.0
        return 1.0 - self.params.min_health_factor / hf

    def collateral_seized(self, debt_to_cover: float, collateral_price: float) -> float:
        """Collateral units paid to a liquidator covering *debt_to_cover* USD."""
        return debt_to_cover / collateral_price * (1.0 + self.liquidation_bonus)

    def liquidation_improves(self, collateral_value: float, debt_value: float) -> bool:
        """Whether any liquidation raises this position's health factor.

        Seizing ``(1 + bonus)`` of collateral per unit of debt only helps
        while collateral value exceeds ``(1 + bonus) * debt``.
        """
        return collateral_value > (1.0 + self.liquidation_bonus) * debt_value

    def price_sensitivity(
        self,
        collateral_amount: float,
        collateral_price: float,
        debt_value: float,
        price_range: tuple[float, float] = (0.2, 1.2),
        n_points: int = 100,
    ) -> pd.DataFrame:
        """Health factor across collateral prices.

        ``price_range`` is expressed as multiples of *collateral_price*.

        Returns:
            DataFrame with columns: price_factor, price, health_factor
        """
        factors = np.linspace(price_range[0], price_range[1], n_points)
        prices = collateral_price * factors
        hfs = [
            self.health_factor(collateral_amount * price, debt_value) for price in prices
        ]
        return pd.DataFrame(
            {"price_factor": factors, "price": prices, "health_factor": hfs}
        )
