# flasharb/config.py
"""
Flash Loan Arbitrage Bot Configuration
Reference defaults live here as constants; deployment values come from .env
"""

import os
from dotenv import load_dotenv
from pathlib import Path
from decimal import Decimal, InvalidOperation
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from web3 import Web3

from flasharb.errors import ConfigError
from flasharb.pairs import TokenPair, DEFAULT_TOKEN_PAIRS, parse_token_pairs

# -----------------------------
# Paths
# -----------------------------
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
LOG_DIR = BASE_DIR / "logs"
DEFAULT_KEYSTORE_DIR = Path.home() / ".foundry" / "keystores"

# -----------------------------
# Price Feed
# -----------------------------
PRICE_API_URL = "https://api.coingecko.com/api/v3/simple/token_price/ethereum"
PRICE_API_TIMEOUT_SECONDS = 10
PRICE_VS_CURRENCY = "usd"
CACHE_EXPIRY_SECONDS = 300  # 5 minutes

# -----------------------------
# Trading Parameters
# -----------------------------
MIN_PROFIT_USD = 50.0

# -----------------------------
# Gas Configuration
# -----------------------------
DEFAULT_MAX_FEE_PER_GAS_GWEI = 50
DEFAULT_MAX_PRIORITY_FEE_GWEI = 2
FEE_BUMP_GWEI = 10               # Added to maxFeePerGas until it covers the tip
GAS_LIMIT_BUFFER_PCT = 120       # gasLimit = estimate * 120 / 100
TX_RECEIPT_TIMEOUT_SECONDS = 120

# -----------------------------
# Scan Configuration
# -----------------------------
POLLING_INTERVAL_SECONDS = 15
EXECUTION_COOLDOWN_SECONDS = 5

# -----------------------------
# Logging
# -----------------------------
LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class BotConfig:
    """Validated runtime configuration"""
    rpc_url: str
    contract_address: str
    private_key: Optional[str]
    foundry_wallet: Optional[str]
    wallet_password: Optional[str]
    keystore_dir: Path
    abi_path: Optional[Path]
    token_pairs: Tuple[TokenPair, ...]
    min_profit_usd: float = MIN_PROFIT_USD
    polling_interval: float = POLLING_INTERVAL_SECONDS
    execution_cooldown: float = EXECUTION_COOLDOWN_SECONDS
    max_fee_per_gas: int = Web3.to_wei(DEFAULT_MAX_FEE_PER_GAS_GWEI, "gwei")
    max_priority_fee_per_gas: int = Web3.to_wei(DEFAULT_MAX_PRIORITY_FEE_GWEI, "gwei")
    cache_expiry: float = CACHE_EXPIRY_SECONDS
    price_api_url: str = PRICE_API_URL
    receipt_timeout: float = TX_RECEIPT_TIMEOUT_SECONDS
    log_level: str = LOG_LEVEL


# =============================================================================
# PARSING HELPERS
# =============================================================================

def _get(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _require(env: Mapping[str, str], name: str) -> str:
    value = _get(env, name)
    if value is None:
        raise ConfigError(f"{name} not set in environment")
    return value


def _get_decimal(env: Mapping[str, str], name: str, default) -> Decimal:
    raw = _get(env, name)
    if raw is None:
        return Decimal(str(default))
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if not value.is_finite() or value < 0:
        raise ConfigError(f"{name} must be a non-negative number, got {raw!r}")
    return value


def _get_positive(env: Mapping[str, str], name: str, default) -> float:
    value = _get_decimal(env, name, default)
    if value == 0:
        raise ConfigError(f"{name} must be greater than zero")
    return float(value)


def _get_gwei(env: Mapping[str, str], name: str, default) -> int:
    return int(Web3.to_wei(_get_decimal(env, name, default), "gwei"))


# =============================================================================
# LOADER
# =============================================================================

def load_config(env: Optional[Mapping[str, str]] = None) -> BotConfig:
    """
    Build a BotConfig from the environment

    When `env` is None the process environment is used, after loading
    .env (or the file named by FLASHARB_ENV_FILE) if it exists.
    Raises ConfigError on any missing or malformed value.
    """
    if env is None:
        env_path = Path(os.getenv("FLASHARB_ENV_FILE", str(ENV_PATH)))
        if env_path.exists():
            load_dotenv(env_path)
        env = os.environ

    rpc_url = _require(env, "MAINNET_RPC_URL")

    contract_address = _require(env, "ARBITRAGE_CONTRACT_ADDRESS")
    if not Web3.is_address(contract_address):
        raise ConfigError(f"ARBITRAGE_CONTRACT_ADDRESS is not a valid address: {contract_address}")

    private_key = _get(env, "PRIVATE_KEY")
    foundry_wallet = _get(env, "FOUNDRY_WALLET")
    if not private_key and not foundry_wallet:
        raise ConfigError("Either PRIVATE_KEY or FOUNDRY_WALLET must be set")

    abi_path = _get(env, "ARBITRAGE_ABI_PATH")
    keystore_dir = _get(env, "KEYSTORE_DIR")

    pairs_text = _get(env, "TOKEN_PAIRS")
    token_pairs = parse_token_pairs(pairs_text) if pairs_text else DEFAULT_TOKEN_PAIRS

    log_level = (_get(env, "LOG_LEVEL") or LOG_LEVEL).upper()

    return BotConfig(
        rpc_url=rpc_url,
        contract_address=Web3.to_checksum_address(contract_address),
        private_key=private_key,
        foundry_wallet=foundry_wallet,
        wallet_password=_get(env, "WALLET_PASSWORD"),
        keystore_dir=Path(keystore_dir).expanduser() if keystore_dir else DEFAULT_KEYSTORE_DIR,
        abi_path=Path(abi_path).expanduser() if abi_path else None,
        token_pairs=tuple(token_pairs),
        min_profit_usd=float(_get_decimal(env, "MIN_PROFIT_USD", MIN_PROFIT_USD)),
        polling_interval=_get_positive(env, "POLLING_INTERVAL_SECONDS", POLLING_INTERVAL_SECONDS),
        execution_cooldown=float(_get_decimal(env, "EXECUTION_COOLDOWN_SECONDS", EXECUTION_COOLDOWN_SECONDS)),
        max_fee_per_gas=_get_gwei(env, "MAX_FEE_PER_GAS_GWEI", DEFAULT_MAX_FEE_PER_GAS_GWEI),
        max_priority_fee_per_gas=_get_gwei(env, "MAX_PRIORITY_FEE_PER_GAS_GWEI", DEFAULT_MAX_PRIORITY_FEE_GWEI),
        cache_expiry=_get_positive(env, "PRICE_CACHE_EXPIRY_SECONDS", CACHE_EXPIRY_SECONDS),
        price_api_url=_get(env, "PRICE_API_URL") or PRICE_API_URL,
        receipt_timeout=_get_positive(env, "TX_RECEIPT_TIMEOUT_SECONDS", TX_RECEIPT_TIMEOUT_SECONDS),
        log_level=log_level,
    )
