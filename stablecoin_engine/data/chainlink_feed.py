"""On-chain Chainlink aggregator feed via web3.py."""

from __future__ import annotations

import logging
from typing import Any

from stablecoin_engine.data.contracts import AGGREGATOR_V3_ABI, PRICE_FEED_ADDRESSES
from stablecoin_engine.data.interfaces import PriceFeed, RoundData
from stablecoin_engine.protocol.errors import PriceFeedError

logger = logging.getLogger(__name__)


class ChainlinkPriceFeed(PriceFeed):
    """Live USD price feed backed by a Chainlink ``AggregatorV3`` contract.

    Readings are never cached: every call to :meth:`latest_round_data`
    performs a fresh RPC call so that the engine's staleness guard sees the
    real ``updatedAt``.

    Parameters
    ----------
    contract : Any
        A web3 contract object bound to an aggregator address with
        ``AGGREGATOR_V3_ABI``.
    """

    def __init__(self, contract: Any) -> None:
        self._contract = contract
        self._decimals: int | None = None

    @classmethod
    def from_rpc(cls, rpc_url: str, asset: str) -> ChainlinkPriceFeed:
        """Connect to the mainnet feed for *asset* through *rpc_url*."""
        from web3 import Web3

        raw = PRICE_FEED_ADDRESSES.get(asset)
        if raw is None:
            raise ValueError(f"No price feed known for asset: {asset}")

        w3 = Web3(Web3.HTTPProvider(rpc_url))
        if not w3.is_connected():
            raise ConnectionError(f"Cannot reach RPC endpoint: {rpc_url}")
        contract = w3.eth.contract(
            address=w3.to_checksum_address(raw),
            abi=AGGREGATOR_V3_ABI,
        )
        return cls(contract)

    @property
    def decimals(self) -> int:
        # Immutable on-chain, so one call is enough
        if self._decimals is None:
            try:
                self._decimals = int(self._contract.functions.decimals().call())
            except Exception as exc:
                raise PriceFeedError(f"decimals() call failed: {exc}") from exc
        return self._decimals

    def latest_round_data(self) -> RoundData:
        try:
            data = self._contract.functions.latestRoundData().call()
        except Exception as exc:
            logger.warning("latestRoundData call failed: %s", exc)
            raise PriceFeedError(f"latestRoundData() call failed: {exc}") from exc
        round_data = RoundData(
            round_id=int(data[0]),
            answer=int(data[1]),
            started_at=int(data[2]),
            updated_at=int(data[3]),
            answered_in_round=int(data[4]),
        )
        logger.debug(
            "latestRoundData round=%s answer=%s updated_at=%s",
            round_data.round_id,
            round_data.answer,
            round_data.updated_at,
        )
        return round_data
