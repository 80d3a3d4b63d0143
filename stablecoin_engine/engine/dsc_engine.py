"""Overcollateralized stablecoin engine — deposits, minting, redemption, liquidation.

Users lock collateral tokens and mint DSC against them.  Every account
must keep a health factor of at least ``MIN_HEALTH_FACTOR``: only
``LIQUIDATION_THRESHOLD`` percent of collateral value counts toward
backing debt, so positions must stay 200% overcollateralized.  An
account below the minimum can be liquidated by anyone who repays part of
its debt, in exchange for the equivalent collateral plus a
``LIQUIDATION_BONUS`` percent bonus.

Every public operation is atomic: if any step fails, the ledgers, the
event log and every snapshottable token are restored to their state
before the call and the error propagates to the caller.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Sequence

from stablecoin_engine.data.constants import (
    ADDITIONAL_FEED_PRECISION,
    LIQUIDATION_BONUS,
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    MIN_HEALTH_FACTOR,
    PRECISION,
)
from stablecoin_engine.data.interfaces import MintableToken, PriceFeed, Snapshottable, Token
from stablecoin_engine.engine.ledger import LedgerStore
from stablecoin_engine.protocol import fixed_point
from stablecoin_engine.protocol.errors import (
    BrokenHealthFactorError,
    EngineError,
    ExternalCallError,
    HealthFactorIsOkError,
    HealthFactorNotImprovedError,
    InsufficientBalanceError,
    LengthMismatchError,
    MintFailedError,
    NeedsMoreThanZeroError,
    ReentrancyError,
    TransferFailedError,
    UnacceptedAssetError,
    ValidationError,
)
from stablecoin_engine.protocol.events import (
    CollateralDeposited,
    CollateralRedeemed,
    DscBurned,
    DscMinted,
    Event,
    Liquidated,
)
from stablecoin_engine.protocol.oracle import OracleGuard

logger = logging.getLogger(__name__)


class DSCEngine:
    """State-transition layer over the collateral and debt ledgers.

    Parameters
    ----------
    collateral_tokens : Sequence[Token]
        Accepted collateral tokens.  Each token's ``address`` identifies the
        asset in every operation.
    price_feeds : Sequence[PriceFeed]
        USD feed for each token, in the same order.
    dsc : MintableToken
        The stablecoin.  The engine must own it to mint and burn.
    address : str
        Account under which the engine holds collateral custody.
    clock : Callable[[], float]
        Source of the current unix time for the oracle staleness check.
    """

    def __init__(
        self,
        collateral_tokens: Sequence[Token],
        price_feeds: Sequence[PriceFeed],
        dsc: MintableToken,
        address: str = "dsc-engine",
        clock: Callable[[], float] = time.time,
    ) -> None:
        if len(collateral_tokens) != len(price_feeds):
            raise LengthMismatchError(len(collateral_tokens), len(price_feeds))

        tokens: dict[str, Token] = {}
        feeds: dict[str, PriceFeed] = {}
        for token, feed in zip(collateral_tokens, price_feeds):
            if token.address in tokens:
                raise ValidationError(f"Duplicate collateral token: {token.address}")
            tokens[token.address] = token
            feeds[token.address] = feed

        self.address = address
        self._dsc = dsc
        self._tokens = tokens
        self._price_feeds = feeds
        self._collateral_tokens = tuple(tokens)
        self._oracle = OracleGuard(clock=clock)
        self._ledger = LedgerStore()
        self._events: list[Event] = []
        self._entered = False

    # ------------------------------------------------------------------
    # Atomicity
    # ------------------------------------------------------------------

    def _participants(self) -> list[Snapshottable]:
        candidates: list[Any] = [self._dsc, *self._tokens.values()]
        return [c for c in candidates if isinstance(c, Snapshottable)]

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Run one public operation: non-reentrant, all-or-nothing."""
        if self._entered:
            raise ReentrancyError(f"{operation} called while another operation is in progress")
        self._entered = True

        ledger_state = self._ledger.snapshot()
        n_events = len(self._events)
        token_states = [(p, p.snapshot()) for p in self._participants()]
        try:
            yield
        except Exception:
            self._ledger.restore(ledger_state)
            del self._events[n_events:]
            for participant, state in token_states:
                participant.restore(state)
            logger.debug("%s aborted and rolled back", operation, exc_info=True)
            raise
        finally:
            self._entered = False

    def _call_token(
        self, error_cls: type[ExternalCallError], call: Callable[..., Any], *args: Any
    ) -> None:
        """Invoke a token capability, turning ``False`` or a raise into *error_cls*.

        A call with no return value counts as success.
        """
        try:
            result = call(*args)
        except EngineError:
            raise
        except Exception as exc:
            raise error_cls(f"{getattr(call, '__name__', call)} failed: {exc}") from exc
        if result is False:
            raise error_cls(f"{getattr(call, '__name__', call)} returned failure")

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _more_than_zero(amount: int) -> None:
        if amount <= 0:
            raise NeedsMoreThanZeroError(amount)

    def _is_allowed_token(self, token: str) -> None:
        if token not in self._price_feeds:
            raise UnacceptedAssetError(token)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def deposit_collateral(self, sender: str, token: str, amount_collateral: int) -> None:
        """Lock *amount_collateral* of *token* from *sender* as collateral."""
        with self._transaction("deposit_collateral"):
            self._deposit_collateral(sender, token, amount_collateral)
        logger.info("%s deposited %s of %s", sender, amount_collateral, token)

    def mint_dsc(self, sender: str, amount_dsc_to_mint: int) -> None:
        """Mint DSC to *sender* against their deposited collateral."""
        with self._transaction("mint_dsc"):
            self._mint_dsc(sender, amount_dsc_to_mint)
        logger.info("%s minted %s DSC", sender, amount_dsc_to_mint)

    def deposit_collateral_and_mint_dsc(
        self,
        sender: str,
        token: str,
        amount_collateral: int,
        amount_dsc_to_mint: int,
    ) -> None:
        """Deposit collateral and mint DSC in one operation."""
        with self._transaction("deposit_collateral_and_mint_dsc"):
            self._deposit_collateral(sender, token, amount_collateral)
            self._mint_dsc(sender, amount_dsc_to_mint)
        logger.info(
            "%s deposited %s of %s and minted %s DSC",
            sender,
            amount_collateral,
            token,
            amount_dsc_to_mint,
        )

    def redeem_collateral(self, sender: str, token: str, amount_collateral: int) -> None:
        """Withdraw collateral; the remaining position must stay healthy."""
        with self._transaction("redeem_collateral"):
            self._more_than_zero(amount_collateral)
            self._is_allowed_token(token)
            self._redeem_collateral(token, amount_collateral, sender, sender)
            self._revert_if_health_factor_is_broken(sender)
        logger.info("%s redeemed %s of %s", sender, amount_collateral, token)

    def burn_dsc(self, sender: str, amount: int) -> None:
        """Repay *amount* of *sender*'s own debt."""
        with self._transaction("burn_dsc"):
            self._more_than_zero(amount)
            self._burn_dsc(amount, sender, sender)
            # Burning cannot lower a health factor; kept as a safety net
            self._revert_if_health_factor_is_broken(sender)
        logger.info("%s burned %s DSC", sender, amount)

    def redeem_collateral_for_dsc(
        self,
        sender: str,
        token: str,
        amount_collateral: int,
        amount_dsc_to_burn: int,
    ) -> None:
        """Burn DSC, then redeem collateral, checking health once at the end."""
        with self._transaction("redeem_collateral_for_dsc"):
            self._more_than_zero(amount_collateral)
            self._more_than_zero(amount_dsc_to_burn)
            self._is_allowed_token(token)
            # Burn first so the health check sees the reduced debt
            self._burn_dsc(amount_dsc_to_burn, sender, sender)
            self._redeem_collateral(token, amount_collateral, sender, sender)
            self._revert_if_health_factor_is_broken(sender)
        logger.info(
            "%s burned %s DSC and redeemed %s of %s",
            sender,
            amount_dsc_to_burn,
            amount_collateral,
            token,
        )

    def liquidate(self, sender: str, collateral: str, user: str, debt_to_cover: int) -> None:
        """Repay *debt_to_cover* of *user*'s debt and seize their collateral.

        *sender* pays the DSC and receives the equivalent amount of
        *collateral* plus a bonus.  The liquidation must strictly raise the
        user's health factor and must leave *sender* healthy.
        """
        with self._transaction("liquidate"):
            self._more_than_zero(debt_to_cover)
            self._is_allowed_token(collateral)

            starting_user_health_factor = self._health_factor(user)
            if starting_user_health_factor >= MIN_HEALTH_FACTOR:
                raise HealthFactorIsOkError(user, starting_user_health_factor)

            token_amount_from_debt_covered = self.get_token_amount_from_usd(
                collateral, debt_to_cover
            )
            bonus_collateral = fixed_point.liquidation_bonus(token_amount_from_debt_covered)
            total_collateral_to_redeem = token_amount_from_debt_covered + bonus_collateral

            self._redeem_collateral(collateral, total_collateral_to_redeem, user, sender)
            self._burn_dsc(debt_to_cover, user, sender)

            ending_user_health_factor = self._health_factor(user)
            if ending_user_health_factor <= starting_user_health_factor:
                raise HealthFactorNotImprovedError(
                    user, starting_user_health_factor, ending_user_health_factor
                )
            self._revert_if_health_factor_is_broken(sender)

            self._events.append(
                Liquidated(
                    user=user,
                    liquidator=sender,
                    token=collateral,
                    debt_covered=debt_to_cover,
                    collateral_seized=total_collateral_to_redeem,
                )
            )
        logger.info(
            "%s liquidated %s: covered %s DSC, seized %s of %s",
            sender,
            user,
            debt_to_cover,
            total_collateral_to_redeem,
            collateral,
        )

    # ------------------------------------------------------------------
    # Internal primitives (run inside a transaction)
    # ------------------------------------------------------------------

    def _deposit_collateral(self, sender: str, token: str, amount_collateral: int) -> None:
        self._more_than_zero(amount_collateral)
        self._is_allowed_token(token)

        asset = self._tokens[token]
        balance = asset.balance_of(sender)
        if balance < amount_collateral:
            raise InsufficientBalanceError(sender, token, balance, amount_collateral)

        self._ledger.collateral.credit(sender, token, amount_collateral)
        self._events.append(CollateralDeposited(user=sender, token=token, amount=amount_collateral))
        self._call_token(
            TransferFailedError,
            asset.transfer_from,
            self.address,
            sender,
            self.address,
            amount_collateral,
        )

    def _mint_dsc(self, sender: str, amount_dsc_to_mint: int) -> None:
        self._more_than_zero(amount_dsc_to_mint)
        self._ledger.debt.increase(sender, amount_dsc_to_mint)
        self._events.append(DscMinted(user=sender, amount=amount_dsc_to_mint))
        self._revert_if_health_factor_is_broken(sender)
        self._call_token(MintFailedError, self._dsc.mint, self.address, sender, amount_dsc_to_mint)

    def _redeem_collateral(
        self, token: str, amount_collateral: int, from_account: str, to_account: str
    ) -> None:
        self._ledger.collateral.debit(from_account, token, amount_collateral)
        self._events.append(
            CollateralRedeemed(
                redeemed_from=from_account,
                redeemed_to=to_account,
                token=token,
                amount=amount_collateral,
            )
        )
        self._call_token(
            TransferFailedError,
            self._tokens[token].transfer,
            self.address,
            to_account,
            amount_collateral,
        )

    def _burn_dsc(self, amount_dsc_to_burn: int, on_behalf_of: str, dsc_from: str) -> None:
        self._ledger.debt.decrease(on_behalf_of, amount_dsc_to_burn)
        self._events.append(
            DscBurned(on_behalf_of=on_behalf_of, payer=dsc_from, amount=amount_dsc_to_burn)
        )
        self._call_token(
            TransferFailedError,
            self._dsc.transfer_from,
            self.address,
            dsc_from,
            self.address,
            amount_dsc_to_burn,
        )
        self._call_token(ExternalCallError, self._dsc.burn, self.address, amount_dsc_to_burn)

    # ------------------------------------------------------------------
    # Health factor
    # ------------------------------------------------------------------

    def _get_account_information(self, user: str) -> tuple[int, int]:
        total_dsc_minted = self._ledger.debt.debt(user)
        collateral_value_in_usd = self.get_account_collateral_value(user)
        return total_dsc_minted, collateral_value_in_usd

    def _health_factor(self, user: str) -> int:
        total_dsc_minted, collateral_value_in_usd = self._get_account_information(user)
        return fixed_point.calculate_health_factor(total_dsc_minted, collateral_value_in_usd)

    def _revert_if_health_factor_is_broken(self, user: str) -> None:
        user_health_factor = self._health_factor(user)
        if user_health_factor < MIN_HEALTH_FACTOR:
            raise BrokenHealthFactorError(user, user_health_factor)

    def _price(self, token: str) -> tuple[int, int]:
        feed = self._price_feeds[token]
        return self._oracle.latest_price(feed), feed.decimals

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    def calculate_health_factor(self, total_dsc_minted: int, collateral_value_in_usd: int) -> int:
        return fixed_point.calculate_health_factor(total_dsc_minted, collateral_value_in_usd)

    def get_account_information(self, user: str) -> tuple[int, int]:
        """(total DSC minted, collateral value in USD) for *user*."""
        return self._get_account_information(user)

    def get_account_collateral_value(self, user: str) -> int:
        """USD value (1e18) of everything *user* has deposited.

        Reads a fresh price for every registered token.
        """
        total_collateral_value_in_usd = 0
        for token in self._collateral_tokens:
            amount = self._ledger.collateral.balance(user, token)
            total_collateral_value_in_usd += self.get_usd_value(token, amount)
        return total_collateral_value_in_usd

    def get_usd_value(self, token: str, amount: int) -> int:
        self._is_allowed_token(token)
        price, decimals = self._price(token)
        return fixed_point.usd_value(amount, price, decimals)

    def get_token_amount_from_usd(self, token: str, usd_amount_in_wei: int) -> int:
        self._is_allowed_token(token)
        price, decimals = self._price(token)
        return fixed_point.token_amount_from_usd(usd_amount_in_wei, price, decimals)

    def get_health_factor(self, user: str) -> int:
        return self._health_factor(user)

    def get_collateral_balance_of_user(self, user: str, token: str) -> int:
        return self._ledger.collateral.balance(user, token)

    def get_dsc_minted(self, user: str) -> int:
        return self._ledger.debt.debt(user)

    def get_total_dsc_minted(self) -> int:
        return self._ledger.debt.total()

    def get_collateral_tokens(self) -> tuple[str, ...]:
        return self._collateral_tokens

    def get_collateral_token(self, token: str) -> Token:
        self._is_allowed_token(token)
        return self._tokens[token]

    def get_collateral_token_price_feed(self, token: str) -> PriceFeed:
        self._is_allowed_token(token)
        return self._price_feeds[token]

    def get_accounts(self) -> list[str]:
        """Every account that has ever held a position, sorted."""
        return sorted(self._ledger.accounts())

    def get_dsc(self) -> MintableToken:
        return self._dsc

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    @staticmethod
    def get_precision() -> int:
        return PRECISION

    @staticmethod
    def get_additional_feed_precision() -> int:
        return ADDITIONAL_FEED_PRECISION

    @staticmethod
    def get_liquidation_threshold() -> int:
        return LIQUIDATION_THRESHOLD

    @staticmethod
    def get_liquidation_bonus() -> int:
        return LIQUIDATION_BONUS

    @staticmethod
    def get_liquidation_precision() -> int:
        return LIQUIDATION_PRECISION

    @staticmethod
    def get_min_health_factor() -> int:
        return MIN_HEALTH_FACTOR

    def get_oracle_timeout(self) -> int:
        return self._oracle.timeout
