"""Fixed-point conversions between token amounts, feed prices and USD.

All quantities are integers.  Token amounts and USD values carry 18
decimals (``PRECISION``); feed answers carry 8 and are lifted by
``ADDITIONAL_FEED_PRECISION`` before use.  Multiplications happen before
the single division so that no intermediate value is truncated.
"""

from stablecoin_engine.data.constants import (
    FEED_DECIMALS,
    LIQUIDATION_BONUS,
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    MAX_UINT256,
    PRECISION,
)


def feed_scale(decimals: int) -> int:
    """Factor lifting a feed answer with *decimals* decimals to 1e18."""
    if decimals > 18:
        raise ValueError(f"Feed decimals above 18 are not supported: {decimals}")
    return 10 ** (18 - decimals)


def usd_value(amount: int, price: int, decimals: int = FEED_DECIMALS) -> int:
    """USD value (1e18) of *amount* tokens at feed answer *price*.

    (price * 1e10) * amount / 1e18
    """
    scale = feed_scale(decimals)
    return (price * scale * amount) // PRECISION


def token_amount_from_usd(usd_amount: int, price: int, decimals: int = FEED_DECIMALS) -> int:
    """Token amount worth *usd_amount* (1e18) at feed answer *price*.

    usd * 1e18 / (price * 1e10)
    """
    scale = feed_scale(decimals)
    return (usd_amount * PRECISION) // (price * scale)


def collateral_adjusted_for_threshold(collateral_value_usd: int) -> int:
    """Portion of collateral value that counts toward backing debt."""
    return (collateral_value_usd * LIQUIDATION_THRESHOLD) // LIQUIDATION_PRECISION


def calculate_health_factor(total_minted: int, collateral_value_usd: int) -> int:
    """Health factor scaled by 1e18.

    HF = (collateral * threshold / 100) * 1e18 / debt

    An account without debt gets ``MAX_UINT256``.
    """
    if total_minted == 0:
        return MAX_UINT256
    return collateral_adjusted_for_threshold(collateral_value_usd) * PRECISION // total_minted


def liquidation_bonus(token_amount: int) -> int:
    """Extra collateral paid to a liquidator on top of *token_amount*."""
    return (token_amount * LIQUIDATION_BONUS) // LIQUIDATION_PRECISION


def to_wei(value: float | int, decimals: int = 18) -> int:
    """Convert a human-readable amount to integer base units."""
    if isinstance(value, int):
        return value * 10**decimals
    return int(round(value * 10**decimals))


def from_wei(value: int, decimals: int = 18) -> float:
    """Convert integer base units to a float for display and analytics."""
    return value / 10**decimals
