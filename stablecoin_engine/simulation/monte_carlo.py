"""Monte Carlo simulation of collateral prices and position health.

The collateral USD price follows a jump-diffusion: geometric Brownian
motion plus Poisson-driven crash jumps.  A position's health factor is
tracked along every path, and a path counts as liquidated from the first
step its health factor falls below the minimum.
"""

from __future__ import annotations

import numpy as np

from stablecoin_engine.protocol.health_factor import RiskParams
from stablecoin_engine.simulation.params import PriceDynamicsParams
from stablecoin_engine.simulation.results import MonteCarloResult


def simulate_price_paths(
    params: PriceDynamicsParams,
    p0: float,
    n_paths: int,
    n_steps: int,
    dt: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """Simulate collateral price paths.

    Args:
        params: Jump-diffusion parameters.
        p0: Initial price.
        n_paths: Number of Monte Carlo paths.
        n_steps: Number of time steps, including the initial state.
        dt: Time step size in years (e.g. 1/365).
        rng: Numpy random generator for reproducibility.

    Returns:
        (n_paths, n_steps) array of prices, floored at 1e-8.
    """
    paths = np.empty((n_paths, n_steps))
    paths[:, 0] = p0

    sigma = params.vol
    sqrt_dt = np.sqrt(dt)
    noise = rng.standard_normal((n_paths, n_steps - 1))
    jumps = rng.binomial(1, min(1.0, params.jump_intensity * dt), (n_paths, n_steps - 1))

    for t in range(1, n_steps):
        # S(t) = S(t-1) * exp((μ - σ²/2)dt + σ√dt·dW) * (1 + J·dN)
        log_return = (params.drift - 0.5 * sigma * sigma) * dt + sigma * sqrt_dt * noise[:, t - 1]
        jump_factor = 1.0 + params.jump_size * jumps[:, t - 1]
        paths[:, t] = paths[:, t - 1] * np.exp(log_return) * jump_factor

    np.clip(paths, 1e-8, None, out=paths)
    return paths


def run_monte_carlo(
    collateral_amount: float,
    collateral_price: float,
    debt_value: float,
    price_params: PriceDynamicsParams | None = None,
    risk_params: RiskParams | None = None,
    n_paths: int = 1000,
    horizon_days: int = 30,
    seed: int | None = None,
) -> MonteCarloResult:
    """Estimate how likely a static position is to become liquidatable.

    The position is held unchanged: no top-ups, no repayments.

    Args:
        collateral_amount: Collateral units deposited.
        collateral_price: Current USD price of one unit.
        debt_value: Outstanding stablecoin debt (USD).
        price_params: Price dynamics (defaults used if None).
        risk_params: Threshold and minimum health factor (defaults if None).
        n_paths: Number of simulation paths.
        horizon_days: Simulation horizon in days.
        seed: Random seed for reproducibility.

    Returns:
        MonteCarloResult with price and health factor paths.
    """
    if price_params is None:
        price_params = PriceDynamicsParams()
    if risk_params is None:
        risk_params = RiskParams()

    rng = np.random.default_rng(seed)
    dt = 1.0 / 365.0
    n_steps = horizon_days + 1  # +1: index 0 = initial state

    price_paths = simulate_price_paths(
        price_params, collateral_price, n_paths, n_steps, dt, rng
    )

    if debt_value <= 0:
        hf_paths = np.full((n_paths, n_steps), np.inf)
    else:
        hf_paths = (
            collateral_amount * price_paths * risk_params.liquidation_threshold
        ) / debt_value

    below = hf_paths < risk_params.min_health_factor
    liquidated = np.any(below, axis=1)
    first_liquidation_step = np.where(liquidated, np.argmax(below, axis=1), -1)

    return MonteCarloResult(
        price_paths=price_paths,
        hf_paths=hf_paths,
        liquidated=liquidated,
        first_liquidation_step=first_liquidation_step,
        timesteps=np.arange(n_steps, dtype=float),
    )
