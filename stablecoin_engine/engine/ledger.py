"""Collateral and debt ledgers owned by the engine."""

from __future__ import annotations

from dataclasses import dataclass

from stablecoin_engine.protocol.errors import BurnExceedsDebtError, RedeemExceedsDepositError


class CollateralLedger:
    """Per-account, per-asset deposited amounts.

    Entries are created on first credit; a zero balance is equivalent to
    no entry.
    """

    def __init__(self) -> None:
        self._deposits: dict[str, dict[str, int]] = {}

    def balance(self, account: str, asset: str) -> int:
        return self._deposits.get(account, {}).get(asset, 0)

    def positions(self, account: str) -> dict[str, int]:
        return dict(self._deposits.get(account, {}))

    def accounts(self) -> set[str]:
        return set(self._deposits)

    def credit(self, account: str, asset: str, amount: int) -> None:
        by_asset = self._deposits.setdefault(account, {})
        by_asset[asset] = by_asset.get(asset, 0) + amount

    def debit(self, account: str, asset: str, amount: int) -> None:
        deposited = self.balance(account, asset)
        if deposited < amount:
            raise RedeemExceedsDepositError(account, asset, deposited, amount)
        self._deposits[account][asset] = deposited - amount


class DebtLedger:
    """Per-account outstanding stablecoin debt."""

    def __init__(self) -> None:
        self._minted: dict[str, int] = {}

    def debt(self, account: str) -> int:
        return self._minted.get(account, 0)

    def accounts(self) -> set[str]:
        return set(self._minted)

    def total(self) -> int:
        return sum(self._minted.values())

    def increase(self, account: str, amount: int) -> None:
        self._minted[account] = self.debt(account) + amount

    def decrease(self, account: str, amount: int) -> None:
        owed = self.debt(account)
        if owed < amount:
            raise BurnExceedsDebtError(account, owed, amount)
        self._minted[account] = owed - amount


@dataclass(frozen=True)
class LedgerSnapshot:
    """Copy of both ledgers taken at the start of an operation."""

    deposits: dict[str, dict[str, int]]
    minted: dict[str, int]


class LedgerStore:
    """The engine's complete mutable state."""

    def __init__(self) -> None:
        self.collateral = CollateralLedger()
        self.debt = DebtLedger()

    def accounts(self) -> set[str]:
        return self.collateral.accounts() | self.debt.accounts()

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            deposits={
                account: dict(by_asset)
                for account, by_asset in self.collateral._deposits.items()
            },
            minted=dict(self.debt._minted),
        )

    def restore(self, snapshot: LedgerSnapshot) -> None:
        self.collateral._deposits = {
            account: dict(by_asset) for account, by_asset in snapshot.deposits.items()
        }
        self.debt._minted = dict(snapshot.minted)
