# flasharb/__init__.py
"""
Flash Loan Arbitrage Bot
Polls a deployed flash loan arbitrage contract and executes profitable paths

Modules:
- config: Configuration and environment
- pairs: Token and pair registry
- price_cache: Expiring USD price cache (CoinGecko)
- contract: Arbitrage contract binding
- profitability: Profitability check + USD threshold
- gas: Gas limit buffer and EIP-1559 fee resolution
- executor: Transaction submission
- wallet: Signer providers (private key, Foundry keystore)
- poller: Polling loop
- main: Entry point
"""

__version__ = "1.0.0"

from flasharb.pairs import (
    Token,
    TokenPair,
    DEFAULT_TOKEN_PAIRS,
)
from flasharb.errors import (
    PriceUnavailable,
    ProfitCheckFailed,
    ExecutionFailed,
)

__all__ = [
    "Token",
    "TokenPair",
    "DEFAULT_TOKEN_PAIRS",
    "PriceUnavailable",
    "ProfitCheckFailed",
    "ExecutionFailed",
]
