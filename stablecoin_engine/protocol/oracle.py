"""Staleness guard for aggregator readings."""

from __future__ import annotations

import logging
import time
from typing import Callable

from stablecoin_engine.data.constants import ORACLE_TIMEOUT
from stablecoin_engine.data.interfaces import PriceFeed, RoundData
from stablecoin_engine.protocol.errors import InvalidPriceError, StalePriceFeedError

logger = logging.getLogger(__name__)


def stale_check_latest_round_data(
    feed: PriceFeed,
    now: float | None = None,
    timeout: int = ORACLE_TIMEOUT,
) -> RoundData:
    """Read *feed* and reject it unless the round is fresh and complete.

    Raises:
        StalePriceFeedError: the reading is older than *timeout* seconds,
            was never updated, or comes from a round that has not been
            answered yet.
        InvalidPriceError: the answer is not positive.
    """
    data = feed.latest_round_data()
    current = time.time() if now is None else now

    if data.updated_at == 0 or data.answered_in_round < data.round_id:
        raise StalePriceFeedError(f"Incomplete round {data.round_id}")

    seconds_since = current - data.updated_at
    if seconds_since > timeout:
        logger.warning(
            "Price feed stale: updated %ss ago (timeout %ss)", int(seconds_since), timeout
        )
        raise StalePriceFeedError(
            f"Price updated {int(seconds_since)}s ago, timeout is {timeout}s"
        )

    if data.answer <= 0:
        raise InvalidPriceError(f"Non-positive price answer: {data.answer}")

    return data


class OracleGuard:
    """Reads prices through the staleness check using an injected clock."""

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        timeout: int = ORACLE_TIMEOUT,
    ) -> None:
        self.clock = clock
        self.timeout = timeout

    def latest_price(self, feed: PriceFeed) -> int:
        """Fresh feed answer, in the feed's own decimals."""
        return stale_check_latest_round_data(feed, self.clock(), self.timeout).answer
