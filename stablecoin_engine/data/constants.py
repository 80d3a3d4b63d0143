"""Asset identifiers and protocol constants."""

# Asset symbols
WETH = "WETH"
WBTC = "WBTC"

# Chainlink USD feeds report 8 decimals
FEED_DECIMALS = 8

# Fixed-point units
PRECISION = 10**18
ADDITIONAL_FEED_PRECISION = 10**10  # lifts an 8-decimal feed answer to 1e18

# Risk parameters (percent of LIQUIDATION_PRECISION)
LIQUIDATION_THRESHOLD = 50  # 200% overcollateralized
LIQUIDATION_BONUS = 10
LIQUIDATION_PRECISION = 100
MIN_HEALTH_FACTOR = 10**18

# Health factor of an account with no debt
MAX_UINT256 = 2**256 - 1

# Oracle readings older than this are unusable
ORACLE_TIMEOUT = 3 * 60 * 60

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
