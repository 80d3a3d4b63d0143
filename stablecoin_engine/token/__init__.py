"""Reference token implementations."""

from stablecoin_engine.token.erc20 import ERC20, CollateralToken, TokenError
from stablecoin_engine.token.stablecoin import DecentralizedStableCoin

__all__ = ["ERC20", "CollateralToken", "DecentralizedStableCoin", "TokenError"]
