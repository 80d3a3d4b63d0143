"""Shock engine — apply stress scenarios to engine accounts and generate correlated shocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import pandas as pd

from stablecoin_engine.data.constants import MAX_UINT256, MIN_HEALTH_FACTOR, PRECISION
from stablecoin_engine.engine.dsc_engine import DSCEngine
from stablecoin_engine.protocol.fixed_point import calculate_health_factor
from stablecoin_engine.stress.scenarios import StressScenario

_FACTOR_SCALE = 10_000


@dataclass(frozen=True)
class ShockResult:
    """Result of applying a stress scenario to one account.

    Health factors and values are 1e18 fixed-point integers.
    """

    user: str
    hf_before: int
    hf_after: int
    collateral_before: int
    collateral_after: int
    debt: int
    is_liquidatable: bool


@dataclass(frozen=True)
class CorrelationMatrix:
    """Default correlation between collateral price returns.

    Matrix order follows the collateral symbols: [WETH, WBTC]
    """

    matrix: np.ndarray = field(
        default_factory=lambda: np.array(
            [
                [1.0, 0.8],
                [0.8, 1.0],
            ]
        )
    )


def _shocked_value(value: int, change: float) -> int:
    factor = max(0, round((1.0 + change) * _FACTOR_SCALE))
    return value * factor // _FACTOR_SCALE


def apply_scenario(engine: DSCEngine, user: str, scenario: StressScenario) -> ShockResult:
    """Apply *scenario* to *user*'s position without touching the engine.

    Prices are read through the engine's staleness guard; shocked values
    use the same integer health factor formula as the engine.
    """
    debt = engine.get_dsc_minted(user)
    collateral_before = 0
    collateral_after = 0
    for asset in engine.get_collateral_tokens():
        amount = engine.get_collateral_balance_of_user(user, asset)
        value = engine.get_usd_value(asset, amount)
        symbol = engine.get_collateral_token(asset).symbol
        collateral_before += value
        collateral_after += _shocked_value(value, scenario.change_for(symbol))

    hf_before = calculate_health_factor(debt, collateral_before)
    hf_after = calculate_health_factor(debt, collateral_after)

    return ShockResult(
        user=user,
        hf_before=hf_before,
        hf_after=hf_after,
        collateral_before=collateral_before,
        collateral_after=collateral_after,
        debt=debt,
        is_liquidatable=hf_after < MIN_HEALTH_FACTOR,
    )


def _hf_to_float(hf: int) -> float:
    return float("inf") if hf == MAX_UINT256 else hf / PRECISION


def scenario_table(
    engine: DSCEngine,
    users: Sequence[str],
    scenarios: Sequence[StressScenario],
) -> pd.DataFrame:
    """Health factor of every user under every scenario.

    Returns:
        DataFrame with columns: scenario, user, hf_before, hf_after,
        collateral_after, liquidatable
    """
    rows = []
    for scenario in scenarios:
        for user in users:
            result = apply_scenario(engine, user, scenario)
            rows.append(
                {
                    "scenario": scenario.name,
                    "user": user,
                    "hf_before": _hf_to_float(result.hf_before),
                    "hf_after": _hf_to_float(result.hf_after),
                    "collateral_after": result.collateral_after / PRECISION,
                    "liquidatable": result.is_liquidatable,
                }
            )
    return pd.DataFrame(
        rows,
        columns=["scenario", "user", "hf_before", "hf_after", "collateral_after", "liquidatable"],
    )


def generate_correlated_shocks(
    n_scenarios: int,
    vols: Sequence[float] = (0.30, 0.25),
    correlation: CorrelationMatrix | None = None,
    seed: int | None = None,
) -> np.ndarray:
    """Generate correlated price shocks using Cholesky decomposition.

    Args:
        n_scenarios: Number of correlated scenarios to generate.
        vols: Shock volatility per collateral, in matrix order.
        correlation: Correlation matrix (uses default if None).
        seed: Random seed for reproducibility.

    Returns:
        (n_scenarios, len(vols)) array of fractional price changes,
        clipped to [-0.99, inf).
    """
    if correlation is None:
        correlation = CorrelationMatrix()

    vol_arr = np.asarray(vols, dtype=float)
    if correlation.matrix.shape != (len(vol_arr), len(vol_arr)):
        raise ValueError(
            f"Correlation matrix shape {correlation.matrix.shape} does not match "
            f"{len(vol_arr)} volatilities"
        )

    rng = np.random.default_rng(seed)

    cov = correlation.matrix * np.outer(vol_arr, vol_arr)
    L = np.linalg.cholesky(cov)

    z = rng.standard_normal((n_scenarios, len(vol_arr)))
    shocks = z @ L.T

    return np.clip(shocks, -0.99, None)


def scenarios_from_shocks(
    shocks: np.ndarray,
    symbols: Sequence[str],
    prefix: str = "Sampled",
) -> list[StressScenario]:
    """Wrap each row of a shock array as a StressScenario."""
    return [
        StressScenario(
            name=f"{prefix} #{i + 1}",
            description="Correlated random shock",
            price_changes={symbol: float(row[j]) for j, symbol in enumerate(symbols)},
        )
        for i, row in enumerate(shocks)
    ]
