"""Stress scenario definitions — historical and custom."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class StressScenario:
    """A stress scenario with simultaneous collateral price shocks.

    Attributes:
        name: Short identifier.
        description: Human-readable explanation.
        price_changes: Fractional USD price change per collateral symbol
            (e.g. {"WETH": -0.40} = -40%).  Symbols not listed are unchanged.
        duration_days: Duration of the stress period.
    """

    name: str
    description: str
    price_changes: dict[str, float] = field(default_factory=dict)
    duration_days: int = 1

    def change_for(self, symbol: str) -> float:
        return self.price_changes.get(symbol, 0.0)


# --- Historical scenarios ---

MARCH_2020_BLACK_THURSDAY = StressScenario(
    name="March 2020 Black Thursday",
    description="COVID crash: ETH fell ~50% and BTC ~40% within 24 hours. "
    "Keeper auctions failed under congestion.",
    price_changes={"WETH": -0.50, "WBTC": -0.40},
    duration_days=1,
)

MAY_2021_CRASH = StressScenario(
    name="May 2021 Crash",
    description="China mining ban and leverage flush: ETH dropped ~45%, "
    "BTC ~35% over a week.",
    price_changes={"WETH": -0.45, "WBTC": -0.35},
    duration_days=7,
)

JUNE_2022_DELEVERAGING = StressScenario(
    name="June 2022 Deleveraging",
    description="Celsius/3AC collapse: ETH dropped ~40%, BTC ~30% "
    "as lenders liquidated collateral.",
    price_changes={"WETH": -0.40, "WBTC": -0.30},
    duration_days=14,
)

NOVEMBER_2022_FTX = StressScenario(
    name="November 2022 FTX",
    description="FTX insolvency: ETH fell ~25% and BTC ~22% in three days.",
    price_changes={"WETH": -0.25, "WBTC": -0.22},
    duration_days=3,
)

HISTORICAL_SCENARIOS = [
    MARCH_2020_BLACK_THURSDAY,
    MAY_2021_CRASH,
    JUNE_2022_DELEVERAGING,
    NOVEMBER_2022_FTX,
]


def create_custom_scenario(
    name: str,
    price_changes: dict[str, float],
    duration_days: int = 1,
    description: str = "Custom scenario",
) -> StressScenario:
    """Factory for user-defined stress scenarios."""
    for symbol, change in price_changes.items():
        if change < -1.0:
            raise ValueError(f"Price change for {symbol} below -100%: {change}")
    return StressScenario(
        name=name,
        description=description,
        price_changes=dict(price_changes),
        duration_days=duration_days,
    )
