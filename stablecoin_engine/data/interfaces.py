"""Abstract interfaces for the engine's external collaborators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class RoundData:
    """A single aggregator reading, as returned by ``latestRoundData``."""

    round_id: int
    answer: int  # USD price scaled by the feed's decimals
    started_at: int
    updated_at: int  # unix seconds
    answered_in_round: int


class PriceFeed(ABC):
    """USD price feed for one collateral asset."""

    @property
    @abstractmethod
    def decimals(self) -> int:
        """Number of decimals in ``RoundData.answer``."""

    @abstractmethod
    def latest_round_data(self) -> RoundData:
        """Get the most recent reading."""


class Token(ABC):
    """ERC20-style token capability.

    Every state-changing call takes the acting account as ``sender``.
    Calls return ``False`` (or raise) on failure.
    """

    address: str
    symbol: str

    @abstractmethod
    def balance_of(self, account: str) -> int:
        """Balance of *account* in the token's native units."""

    @abstractmethod
    def allowance(self, owner: str, spender: str) -> int:
        """Amount *spender* may still pull from *owner*."""

    @abstractmethod
    def approve(self, sender: str, spender: str, amount: int) -> bool:
        """Let *spender* pull up to *amount* from *sender*."""

    @abstractmethod
    def transfer(self, sender: str, to: str, amount: int) -> bool:
        """Move *amount* from *sender* to *to*."""

    @abstractmethod
    def transfer_from(self, sender: str, source: str, to: str, amount: int) -> bool:
        """Move *amount* from *source* to *to* against *sender*'s allowance."""


class MintableToken(Token):
    """Token whose supply is controlled by its owner (the engine)."""

    @abstractmethod
    def mint(self, sender: str, to: str, amount: int) -> bool:
        """Create *amount* new units for *to*."""

    @abstractmethod
    def burn(self, sender: str, amount: int) -> None:
        """Destroy *amount* units held by *sender*."""


@runtime_checkable
class Snapshottable(Protocol):
    """Collaborator whose state can be captured and rolled back."""

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...
