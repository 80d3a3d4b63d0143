"""Static price feeds with settable answers."""

import time

from stablecoin_engine.data.constants import FEED_DECIMALS, WBTC, WETH
from stablecoin_engine.data.interfaces import PriceFeed, RoundData

# --- Default USD prices (8 decimals) ---

_DEFAULT_PRICES: dict[str, int] = {
    WETH: 2_000 * 10**FEED_DECIMALS,
    WBTC: 1_000 * 10**FEED_DECIMALS,
}


class StaticPriceFeed(PriceFeed):
    """In-process aggregator holding a single answer.

    ``update_answer`` starts a new round stamped with the current time,
    the way a mock V3 aggregator does.
    """

    def __init__(
        self,
        answer: int,
        decimals: int = FEED_DECIMALS,
        updated_at: int | None = None,
        description: str = "",
    ) -> None:
        self._decimals = decimals
        self.description = description
        self._round_id = 0
        self._answer = 0
        self._started_at = 0
        self._updated_at = 0
        self.update_answer(answer, updated_at)

    @property
    def decimals(self) -> int:
        return self._decimals

    def update_answer(self, answer: int, updated_at: int | None = None) -> None:
        """Publish *answer* as a new round."""
        ts = int(time.time()) if updated_at is None else updated_at
        self._round_id += 1
        self._answer = answer
        self._started_at = ts
        self._updated_at = ts

    def update_round_data(
        self, round_id: int, answer: int, started_at: int, updated_at: int
    ) -> None:
        """Set every field of the current round explicitly."""
        self._round_id = round_id
        self._answer = answer
        self._started_at = started_at
        self._updated_at = updated_at

    def latest_round_data(self) -> RoundData:
        return RoundData(
            round_id=self._round_id,
            answer=self._answer,
            started_at=self._started_at,
            updated_at=self._updated_at,
            answered_in_round=self._round_id,
        )

    @classmethod
    def from_usd(cls, price: float, **kwargs) -> "StaticPriceFeed":
        """Build a feed from a plain USD price."""
        decimals = kwargs.pop("decimals", FEED_DECIMALS)
        return cls(round(price * 10**decimals), decimals=decimals, **kwargs)


def default_price_feeds() -> dict[str, StaticPriceFeed]:
    """Fresh static feeds for every supported collateral asset."""
    return {
        symbol: StaticPriceFeed(answer, description=f"{symbol} / USD")
        for symbol, answer in _DEFAULT_PRICES.items()
    }
