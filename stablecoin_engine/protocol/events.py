"""Observations emitted by engine operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CollateralDeposited:
    user: str
    token: str
    amount: int


@dataclass(frozen=True)
class CollateralRedeemed:
    redeemed_from: str
    redeemed_to: str
    token: str
    amount: int


@dataclass(frozen=True)
class DscMinted:
    user: str
    amount: int


@dataclass(frozen=True)
class DscBurned:
    on_behalf_of: str
    payer: str
    amount: int


@dataclass(frozen=True)
class Liquidated:
    """A successful liquidation.

    ``collateral_seized`` includes the liquidation bonus.
    """

    user: str
    liquidator: str
    token: str
    debt_covered: int
    collateral_seized: int


Event = CollateralDeposited | CollateralRedeemed | DscMinted | DscBurned | Liquidated
