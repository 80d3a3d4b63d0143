"""Parameters for collateral price dynamics in Monte Carlo simulations."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class PriceDynamicsParams:
    """Parameters for a collateral USD price jump-diffusion process.

    The price follows:
      dS/S = (drift - 0.5σ²)dt + σ·dW + J·dN

    where dW is a Brownian motion, J is the jump size and dN is a Poisson
    process with intensity λ.

    Attributes:
        drift: Annualized expected return.
        vol: Annualized volatility (σ).
        jump_intensity: Average number of crash events per year (λ).
        jump_size: Mean fractional jump size (negative = crash).
    """

    drift: float = 0.0
    vol: float = 0.75
    jump_intensity: float = 0.5
    jump_size: float = -0.15


def calibrate_price_params(
    daily_prices: list[float],
    min_observations: int = 30,
) -> PriceDynamicsParams:
    """Calibrate price dynamics from historical daily closes.

    Args:
        daily_prices: Chronological list of daily USD prices.
        min_observations: Minimum number of observations required.

    Returns:
        Calibrated PriceDynamicsParams, or defaults with too little data.
    """
    if len(daily_prices) < min_observations:
        return PriceDynamicsParams()

    prices = np.array(daily_prices, dtype=float)
    log_returns = np.diff(np.log(prices))

    daily_vol = np.std(log_returns)
    threshold = 3.0 * daily_vol

    # Jumps: returns beyond 3 standard deviations on the downside
    jumps = log_returns[log_returns < -threshold]
    n_days = len(log_returns)
    jump_intensity = (len(jumps) / n_days) * 365 if n_days > 0 else 0.5
    jump_size = float(np.mean(np.expm1(jumps))) if len(jumps) > 0 else -0.15

    diffusion_returns = log_returns[log_returns >= -threshold]
    if len(diffusion_returns) > 1:
        vol = float(np.std(diffusion_returns) * np.sqrt(365))
        drift = float(np.mean(diffusion_returns) * 365 + 0.5 * vol * vol)
    else:
        vol = float(daily_vol * np.sqrt(365))
        drift = 0.0

    return PriceDynamicsParams(
        drift=drift,
        vol=max(0.05, vol),
        jump_intensity=max(0.01, jump_intensity),
        jump_size=min(-0.01, jump_size),
    )
