"""Price feed addresses and the minimal aggregator ABI."""

# ---------------------------------------------------------------------------
# Chainlink USD feeds (Ethereum mainnet)
# ---------------------------------------------------------------------------
PRICE_FEED_ADDRESSES: dict[str, str] = {
    "WETH": "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419",
    "WBTC": "0xF4030086522a5bEEa4988F8cA5B36dbC97BeE88c",
}

# ---------------------------------------------------------------------------
# Minimal ABI — only the view functions we call
# ---------------------------------------------------------------------------

AGGREGATOR_V3_ABI = [
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "description",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "latestRoundData",
        "outputs": [
            {"name": "roundId", "type": "uint80"},
            {"name": "answer", "type": "int256"},
            {"name": "startedAt", "type": "uint256"},
            {"name": "updatedAt", "type": "uint256"},
            {"name": "answeredInRound", "type": "uint80"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]
