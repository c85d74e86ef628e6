# flasharb/errors.py
"""
Error taxonomy

Startup errors (config, wallet, RPC) are fatal.
Per-pair errors (price, profit check) abort only that pair for the tick.
Execution errors never leave the executor.
"""


class FlashArbError(Exception):
    """Base class for all bot errors"""


# -----------------------------
# Startup
# -----------------------------

class ConfigError(FlashArbError):
    """Missing or malformed configuration value"""


class WalletError(FlashArbError):
    """Signer could not be loaded"""


class RPCConnectionError(FlashArbError):
    """RPC endpoint unreachable"""


# -----------------------------
# Runtime
# -----------------------------

class PriceUnavailable(FlashArbError):
    """Price feed returned no usable value"""


class ProfitCheckFailed(FlashArbError):
    """Contract profitability read (or its USD conversion) failed"""


class ExecutionFailed(FlashArbError):
    """Gas estimation, submission or on-chain execution failed"""
