"""Decentralized stablecoin token — mint and burn restricted to the owner."""

from __future__ import annotations

import logging

from stablecoin_engine.data.constants import ZERO_ADDRESS
from stablecoin_engine.data.interfaces import MintableToken
from stablecoin_engine.token.erc20 import ERC20, TokenError

logger = logging.getLogger(__name__)


class NotOwnerError(TokenError):
    """Caller is not the token owner"""


class MustBeMoreThanZeroError(TokenError):
    """Mint or burn amount must be positive"""


class BurnAmountExceedsBalanceError(TokenError):
    """Owner holds less than the burn amount"""


class NotZeroAddressError(TokenError):
    """Cannot mint to the zero address"""


class DecentralizedStableCoin(ERC20, MintableToken):
    """USD-pegged token whose supply is governed by the engine that owns it."""

    def __init__(self, owner: str, address: str | None = None) -> None:
        super().__init__("DecentralizedStableCoin", "DSC", address=address)
        self.owner = owner

    def _only_owner(self, sender: str) -> None:
        if sender != self.owner:
            raise NotOwnerError(f"{sender} is not the owner")

    def transfer_ownership(self, sender: str, new_owner: str) -> None:
        self._only_owner(sender)
        if new_owner == ZERO_ADDRESS:
            raise NotZeroAddressError("New owner is the zero address")
        logger.info("DSC ownership transferred %s -> %s", self.owner, new_owner)
        self.owner = new_owner

    def mint(self, sender: str, to: str, amount: int) -> bool:
        self._only_owner(sender)
        if to == ZERO_ADDRESS:
            raise NotZeroAddressError("Cannot mint to the zero address")
        if amount <= 0:
            raise MustBeMoreThanZeroError(f"Mint amount must be positive, got {amount}")
        self._mint(to, amount)
        return True

    def burn(self, sender: str, amount: int) -> None:
        self._only_owner(sender)
        if amount <= 0:
            raise MustBeMoreThanZeroError(f"Burn amount must be positive, got {amount}")
        balance = self.balance_of(sender)
        if balance < amount:
            raise BurnAmountExceedsBalanceError(f"Balance {balance} below burn amount {amount}")
        self._burn(sender, amount)
