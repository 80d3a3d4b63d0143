"""Errors raised by the stablecoin engine.

Every failure aborts the whole operation; none of these are retried or
compensated inside the engine.
"""


class EngineError(Exception):
    """Base error class for engine errors"""


# --- Input validation ---


class ValidationError(EngineError):
    """Bad arguments supplied by the caller"""


class NeedsMoreThanZeroError(ValidationError):
    """Amount must be strictly positive"""

    def __init__(self, amount: int) -> None:
        super().__init__(f"Amount must be more than zero, got {amount}")
        self.amount = amount


class UnacceptedAssetError(ValidationError):
    """Asset is not a registered collateral token"""

    def __init__(self, asset: str) -> None:
        super().__init__(f"Asset not accepted as collateral: {asset}")
        self.asset = asset


class LengthMismatchError(ValidationError):
    """Token and price feed lists differ in length"""

    def __init__(self, n_tokens: int, n_feeds: int) -> None:
        super().__init__(
            f"Token addresses and price feeds must be the same length "
            f"({n_tokens} != {n_feeds})"
        )
        self.n_tokens = n_tokens
        self.n_feeds = n_feeds


# --- Insufficient resources ---


class InsufficientResourceError(EngineError):
    """Balance or position too small for the requested amount"""


class InsufficientBalanceError(InsufficientResourceError):
    """External token balance does not cover a deposit"""

    def __init__(self, account: str, asset: str, balance: int, amount: int) -> None:
        super().__init__(
            f"{account} holds {balance} of {asset}, cannot deposit {amount}"
        )
        self.account = account
        self.asset = asset
        self.balance = balance
        self.amount = amount


class RedeemExceedsDepositError(InsufficientResourceError):
    """Redeeming more collateral than is deposited"""

    def __init__(self, account: str, asset: str, deposited: int, amount: int) -> None:
        super().__init__(
            f"{account} has {deposited} of {asset} deposited, cannot redeem {amount}"
        )
        self.account = account
        self.asset = asset
        self.deposited = deposited
        self.amount = amount


class BurnExceedsDebtError(InsufficientResourceError):
    """Burning more stablecoin than the account owes"""

    def __init__(self, account: str, debt: int, amount: int) -> None:
        super().__init__(f"{account} owes {debt}, cannot burn {amount}")
        self.account = account
        self.debt = debt
        self.amount = amount


# --- External call failures ---


class ExternalCallError(EngineError):
    """A token or oracle collaborator failed"""


class TransferFailedError(ExternalCallError):
    """Token transfer returned failure or raised"""


class MintFailedError(ExternalCallError):
    """Stablecoin mint returned failure or raised"""


class StalePriceFeedError(ExternalCallError):
    """Oracle reading is too old or from an incomplete round"""


class InvalidPriceError(ExternalCallError):
    """Oracle answer is not a positive price"""


class PriceFeedError(ExternalCallError):
    """Price feed could not be read"""


# --- Invariant violations ---


class InvariantViolation(EngineError):
    """Operation would leave the protocol in a forbidden state"""


class BrokenHealthFactorError(InvariantViolation):
    """Health factor below the minimum"""

    def __init__(self, account: str, health_factor: int) -> None:
        super().__init__(f"Health factor of {account} is broken: {health_factor}")
        self.account = account
        self.health_factor = health_factor


class HealthFactorIsOkError(InvariantViolation):
    """Liquidation target is solvent"""

    def __init__(self, account: str, health_factor: int) -> None:
        super().__init__(f"Health factor of {account} is ok: {health_factor}")
        self.account = account
        self.health_factor = health_factor


class HealthFactorNotImprovedError(InvariantViolation):
    """Liquidation did not raise the target's health factor"""

    def __init__(self, account: str, before: int, after: int) -> None:
        super().__init__(
            f"Liquidation of {account} did not improve health factor ({before} -> {after})"
        )
        self.account = account
        self.before = before
        self.after = after


class ReentrancyError(InvariantViolation):
    """Engine entered while an operation is in progress"""
