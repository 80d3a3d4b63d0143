"""Price feeds and capability interfaces for the stablecoin engine."""

from stablecoin_engine.data.feed_factory import create_price_feeds

__all__ = ["create_price_feeds"]
