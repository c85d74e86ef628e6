# flasharb/pairs.py
"""
Token & Pair Registry for Ethereum Mainnet
Static tokens the bot knows about and the pairs it polls
"""

from web3 import Web3
from decimal import Decimal
from dataclasses import dataclass
from typing import Dict, List, Union

from flasharb.errors import ConfigError

# =============================================================================
# TOKEN ADDRESSES (Ethereum Mainnet)
# =============================================================================

WETH_ADDRESS = Web3.to_checksum_address("0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2")
LINK_ADDRESS = Web3.to_checksum_address("0x514910771AF9Ca656af840dff83E8264EcF986CA")
USDC_ADDRESS = Web3.to_checksum_address("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48")
WBTC_ADDRESS = Web3.to_checksum_address("0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599")
DAI_ADDRESS = Web3.to_checksum_address("0x6B175474E89094C44Da98b954EedeAC495271d0F")
USDT_ADDRESS = Web3.to_checksum_address("0xdAC17F958D2ee523a2206206994597C13D831ec7")


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class Token:
    address: str
    symbol: str
    decimals: int

    def __post_init__(self):
        object.__setattr__(self, "address", Web3.to_checksum_address(self.address))


@dataclass(frozen=True)
class TokenPair:
    """Borrow `token_borrow` via flash loan and arbitrage it against `token_to_swap`"""
    token_borrow: Token
    token_to_swap: Token
    amount_to_borrow: int  # In borrow token base units

    @property
    def label(self) -> str:
        return f"{self.token_borrow.symbol}-{self.token_to_swap.symbol}"


# =============================================================================
# TOKEN METADATA
# =============================================================================

WETH = Token(WETH_ADDRESS, "WETH", 18)
LINK = Token(LINK_ADDRESS, "LINK", 18)
USDC = Token(USDC_ADDRESS, "USDC", 6)
WBTC = Token(WBTC_ADDRESS, "WBTC", 8)
DAI = Token(DAI_ADDRESS, "DAI", 18)
USDT = Token(USDT_ADDRESS, "USDT", 6)

TOKENS: Dict[str, Token] = {
    token.symbol: token for token in (WETH, LINK, USDC, WBTC, DAI, USDT)
}


# =============================================================================
# UNIT CONVERSION
# =============================================================================

def to_base_units(amount_human: Union[Decimal, int, float, str], decimals: int) -> int:
    """Human amount -> integer base units (rounds toward zero)"""
    return int(Decimal(str(amount_human)) * (Decimal(10) ** decimals))


def from_base_units(amount: int, decimals: int) -> Decimal:
    """Integer base units -> human amount"""
    return Decimal(amount) / (Decimal(10) ** decimals)


# =============================================================================
# TRADING PAIRS CONFIGURATION
# =============================================================================

DEFAULT_TOKEN_PAIRS: List[TokenPair] = [
    TokenPair(WETH, LINK, to_base_units(10, WETH.decimals)),
    TokenPair(USDC, WBTC, to_base_units(10_000, USDC.decimals)),
]


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_token(symbol: str) -> Token:
    """Look up a registered token by symbol (case-insensitive)"""
    token = TOKENS.get(symbol.strip().upper())
    if token is None:
        raise ConfigError(f"Unknown token symbol: {symbol!r}")
    return token


def parse_token_pairs(text: str) -> List[TokenPair]:
    """
    Parse a pair list like "WETH:LINK:10,USDC:WBTC:10000"

    Each entry is BORROW:SWAP:AMOUNT with AMOUNT in human units
    of the borrow token. Order is preserved.
    """
    pairs = []

    for entry in text.split(","):
        entry = entry.strip()
        if not entry:
            continue

        parts = entry.split(":")
        if len(parts) != 3:
            raise ConfigError(f"Malformed token pair {entry!r} (expected BORROW:SWAP:AMOUNT)")

        borrow_sym, swap_sym, amount_str = parts
        borrow = get_token(borrow_sym)
        swap = get_token(swap_sym)

        if borrow == swap:
            raise ConfigError(f"Token pair {entry!r} borrows and swaps the same token")

        try:
            amount = Decimal(amount_str.strip())
        except ArithmeticError:
            raise ConfigError(f"Invalid borrow amount in {entry!r}")

        if not amount.is_finite() or amount <= 0:
            raise ConfigError(f"Borrow amount must be positive in {entry!r}")

        pairs.append(TokenPair(borrow, swap, to_base_units(amount, borrow.decimals)))

    if not pairs:
        raise ConfigError("TOKEN_PAIRS is empty")

    return pairs
