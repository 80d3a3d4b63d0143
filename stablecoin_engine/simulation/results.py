"""Result dataclasses for simulation outputs."""

from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class MonteCarloResult:
    """Results from a Monte Carlo collateral price simulation.

    Attributes:
        price_paths: (n_paths, n_steps) array of collateral USD prices.
        hf_paths: (n_paths, n_steps) array of health factor over time.
        liquidated: (n_paths,) boolean array — True if path hit liquidation.
        first_liquidation_step: (n_paths,) index of the first step with
            HF below the minimum, -1 for paths never liquidated.
        timesteps: (n_steps,) array of time in days.
    """

    price_paths: np.ndarray
    hf_paths: np.ndarray
    liquidated: np.ndarray
    first_liquidation_step: np.ndarray
    timesteps: np.ndarray

    @property
    def liquidation_probability(self) -> float:
        return float(np.mean(self.liquidated))

    def liquidation_curve(self) -> np.ndarray:
        """Cumulative fraction of paths liquidated by each timestep."""
        n_paths, n_steps = self.hf_paths.shape
        hits = self.first_liquidation_step[self.liquidated]
        counts = np.bincount(hits, minlength=n_steps)
        return np.cumsum(counts) / n_paths


_STEP_COLUMNS = [
    "step",
    "collateral_price",
    "unhealthy_accounts",
    "liquidations",
    "failed_liquidations",
    "debt_covered",
    "collateral_seized",
    "total_debt",
]


@dataclass(frozen=True)
class LiquidationStep:
    """A single price step of a liquidation bot run."""

    step: int
    collateral_price: float
    unhealthy_accounts: int
    liquidations: int
    failed_liquidations: int
    debt_covered: int
    collateral_seized: int
    total_debt: int


@dataclass(frozen=True)
class LiquidationRunResult:
    """Result of driving an engine along a price path with a liquidation bot."""

    steps: list[LiquidationStep]
    total_debt_covered: int
    total_collateral_seized: int
    final_total_debt: int
    insolvent_accounts: list[str]

    def to_frame(self) -> pd.DataFrame:
        """One row per step, amounts converted to floats (18 decimals)."""
        rows = [
            {
                "step": s.step,
                "collateral_price": s.collateral_price,
                "unhealthy_accounts": s.unhealthy_accounts,
                "liquidations": s.liquidations,
                "failed_liquidations": s.failed_liquidations,
                "debt_covered": s.debt_covered / 1e18,
                "collateral_seized": s.collateral_seized / 1e18,
                "total_debt": s.total_debt / 1e18,
            }
            for s in self.steps
        ]
        return pd.DataFrame(rows, columns=_STEP_COLUMNS)
