"""In-memory ERC20 token."""

from __future__ import annotations

import logging

from stablecoin_engine.data.constants import ZERO_ADDRESS
from stablecoin_engine.data.interfaces import Token

logger = logging.getLogger(__name__)


class TokenError(Exception):
    """Base error class for token errors"""


class ERC20(Token):
    """Balances and allowances held in process.

    Transfers that are not covered by balance or allowance return
    ``False`` rather than raising.  The token supports ``snapshot`` /
    ``restore`` so an enclosing engine operation can roll it back.
    """

    def __init__(self, name: str, symbol: str, address: str | None = None, decimals: int = 18) -> None:
        self.name = name
        self.symbol = symbol
        self.address = address or f"token:{symbol}"
        self.decimals = decimals
        self.total_supply = 0
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.symbol!r}, supply={self.total_supply})"

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def approve(self, sender: str, spender: str, amount: int) -> bool:
        if amount < 0:
            return False
        self._allowances[(sender, spender)] = amount
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        return self._move(sender, to, amount)

    def transfer_from(self, sender: str, source: str, to: str, amount: int) -> bool:
        allowed = self.allowance(source, sender)
        if allowed < amount:
            logger.debug(
                "%s: allowance %s of %s for %s below %s", self.symbol, allowed, source, sender, amount
            )
            return False
        if not self._move(source, to, amount):
            return False
        self._allowances[(source, sender)] = allowed - amount
        return True

    def _move(self, source: str, to: str, amount: int) -> bool:
        if amount < 0 or to == ZERO_ADDRESS:
            return False
        balance = self.balance_of(source)
        if balance < amount:
            return False
        self._balances[source] = balance - amount
        self._balances[to] = self.balance_of(to) + amount
        return True

    def _mint(self, to: str, amount: int) -> None:
        self._balances[to] = self.balance_of(to) + amount
        self.total_supply += amount

    def _burn(self, account: str, amount: int) -> None:
        self._balances[account] = self.balance_of(account) - amount
        self.total_supply -= amount

    # ------------------------------------------------------------------
    # Rollback support
    # ------------------------------------------------------------------

    def snapshot(self) -> tuple[dict[str, int], dict[tuple[str, str], int], int]:
        return dict(self._balances), dict(self._allowances), self.total_supply

    def restore(self, state: tuple[dict[str, int], dict[tuple[str, str], int], int]) -> None:
        balances, allowances, total_supply = state
        self._balances = dict(balances)
        self._allowances = dict(allowances)
        self.total_supply = total_supply


class CollateralToken(ERC20):
    """Collateral asset with an open faucet, for tests and simulations."""

    def mint(self, to: str, amount: int) -> None:
        self._mint(to, amount)
