# flasharb/gas.py
"""EIP-1559 fee estimation, fallback and gas-limit buffer"""

import logging
from dataclasses import dataclass
from typing import Optional

from web3 import Web3

from flasharb.config import FEE_BUMP_GWEI, GAS_LIMIT_BUFFER_PCT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeeParams:
    """EIP-1559 fee fields, in wei (either may be None for an estimate)"""
    max_fee_per_gas: Optional[int]
    max_priority_fee_per_gas: Optional[int]


def gwei_to_wei(value) -> int:
    return int(Web3.to_wei(value, "gwei"))


def wei_to_gwei(value: int) -> float:
    return value / 10**9


def apply_gas_buffer(estimate: int, pct: int = GAS_LIMIT_BUFFER_PCT) -> int:
    # Integer math, rounds down
    return estimate * pct // 100


def estimate_fee_params(w3: Web3) -> Optional[FeeParams]:
    """
    Current network fee estimate
    max_fee = 2 * base_fee + tip, same as ethers' getFeeData.
    Returns None when the node can't provide it.
    """
    try:
        base_fee = w3.eth.get_block("latest").get("baseFeePerGas")
        tip = w3.eth.max_priority_fee
    except Exception as e:
        logger.warning(f"Fee estimate unavailable: {e}")
        return None

    if base_fee is None:
        # Pre-London chain or node without base fee
        return FeeParams(None, tip)

    return FeeParams(2 * base_fee + tip, tip)


def ensure_fee_ordering(fees: FeeParams, bump_gwei: int = FEE_BUMP_GWEI) -> FeeParams:
    """Raise maxFeePerGas by the fixed bump until it covers maxPriorityFeePerGas"""
    max_fee = fees.max_fee_per_gas
    tip = fees.max_priority_fee_per_gas

    if max_fee >= tip:
        return fees

    bump = gwei_to_wei(bump_gwei)
    while max_fee < tip:
        max_fee += bump

    logger.warning(
        f"maxFeePerGas {wei_to_gwei(fees.max_fee_per_gas):.2f} gwei < "
        f"maxPriorityFeePerGas {wei_to_gwei(tip):.2f} gwei, "
        f"bumped to {wei_to_gwei(max_fee):.2f} gwei"
    )
    return FeeParams(max_fee, tip)


def resolve_fee_params(estimate: Optional[FeeParams], default: FeeParams) -> FeeParams:
    """Fill gaps in the estimate from configured defaults, then enforce ordering"""
    if estimate is None:
        estimate = FeeParams(None, None)

    fees = FeeParams(
        max_fee_per_gas=estimate.max_fee_per_gas or default.max_fee_per_gas,
        max_priority_fee_per_gas=estimate.max_priority_fee_per_gas or default.max_priority_fee_per_gas,
    )
    return ensure_fee_ordering(fees)
