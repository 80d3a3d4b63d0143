"""Drive a live engine along a price path with a liquidation bot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from stablecoin_engine.data.constants import (
    LIQUIDATION_BONUS,
    LIQUIDATION_PRECISION,
    MIN_HEALTH_FACTOR,
)
from stablecoin_engine.data.static_feeds import StaticPriceFeed
from stablecoin_engine.engine.dsc_engine import DSCEngine
from stablecoin_engine.engine.factory import Deployment
from stablecoin_engine.protocol.errors import EngineError
from stablecoin_engine.simulation.results import LiquidationRunResult, LiquidationStep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiquidationBotConfig:
    """Configuration for a liquidation bot run.

    Attributes:
        liquidator: Account that repays debt and receives collateral.  It
            must already hold DSC, e.g. minted against another collateral.
        collateral: Symbol of the collateral whose price follows the path
            and which the bot seizes.
        close_factor: Fraction of an unhealthy account's debt the bot tries
            to cover per step.
        min_debt_to_cover: Liquidations smaller than this are skipped.
    """

    liquidator: str
    collateral: str
    close_factor: float = 0.5
    min_debt_to_cover: int = 10**18


def size_liquidation(
    engine: DSCEngine,
    user: str,
    asset: str,
    close_factor: float,
    available_dsc: int,
) -> int:
    """Debt to cover for *user*, bounded by what the bot and the position allow.

    The seized amount including the bonus must fit in the user's deposit
    of *asset*, so coverage is capped at ``value / (1 + bonus)``.
    """
    debt = engine.get_dsc_minted(user)
    target = debt * round(close_factor * 10_000) // 10_000

    deposited = engine.get_collateral_balance_of_user(user, asset)
    max_cover = (
        engine.get_usd_value(asset, deposited)
        * LIQUIDATION_PRECISION
        // (LIQUIDATION_PRECISION + LIQUIDATION_BONUS)
    )
    return max(0, min(target, max_cover, available_dsc))


def run_liquidation_bot(
    deployment: Deployment,
    price_path: Sequence[float],
    config: LiquidationBotConfig,
) -> LiquidationRunResult:
    """Publish each price of *price_path* and liquidate whatever becomes unhealthy.

    Rejected liquidations (for instance a position too far underwater for
    a liquidation to improve its health factor) are logged and counted,
    never raised.

    Args:
        deployment: Engine, tokens and static feeds to drive.
        price_path: USD prices of the configured collateral, one per step.
        config: Bot configuration.

    Returns:
        LiquidationRunResult with per-step details and totals.
    """
    engine = deployment.engine
    feed = deployment.feeds[config.collateral]
    if not isinstance(feed, StaticPriceFeed):
        raise TypeError(f"Feed for {config.collateral} cannot be driven: {type(feed).__name__}")

    asset = deployment.asset(config.collateral)
    token = deployment.tokens[config.collateral]

    steps: list[LiquidationStep] = []
    total_debt_covered = 0
    total_collateral_seized = 0

    for step_num, price in enumerate(price_path):
        feed.update_answer(round(price * 10**feed.decimals))

        unhealthy = [
            user
            for user in engine.get_accounts()
            if user != config.liquidator and engine.get_health_factor(user) < MIN_HEALTH_FACTOR
        ]

        liquidations = 0
        failed = 0
        step_debt_covered = 0
        step_collateral_seized = 0

        for user in unhealthy:
            debt_to_cover = size_liquidation(
                engine,
                user,
                asset,
                config.close_factor,
                deployment.dsc.balance_of(config.liquidator),
            )
            if debt_to_cover < config.min_debt_to_cover:
                continue

            deployment.approve_dsc(config.liquidator, debt_to_cover)
            balance_before = token.balance_of(config.liquidator)
            try:
                engine.liquidate(config.liquidator, asset, user, debt_to_cover)
            except EngineError as exc:
                failed += 1
                logger.warning(
                    "Liquidation of %s at step %s rejected: %s", user, step_num, exc
                )
                continue

            liquidations += 1
            step_debt_covered += debt_to_cover
            step_collateral_seized += token.balance_of(config.liquidator) - balance_before

        total_debt_covered += step_debt_covered
        total_collateral_seized += step_collateral_seized

        steps.append(
            LiquidationStep(
                step=step_num,
                collateral_price=float(price),
                unhealthy_accounts=len(unhealthy),
                liquidations=liquidations,
                failed_liquidations=failed,
                debt_covered=step_debt_covered,
                collateral_seized=step_collateral_seized,
                total_debt=engine.get_total_dsc_minted(),
            )
        )

    insolvent = [
        user
        for user in engine.get_accounts()
        if user != config.liquidator and engine.get_health_factor(user) < MIN_HEALTH_FACTOR
    ]

    return LiquidationRunResult(
        steps=steps,
        total_debt_covered=total_debt_covered,
        total_collateral_seized=total_collateral_seized,
        final_total_debt=engine.get_total_dsc_minted(),
        insolvent_accounts=insolvent,
    )
