# flasharb/contract.py
"""
FlashLoanArbitrage Contract Binding
Thin wrapper over the deployed arbitrage contract and ERC20 balance reads
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from web3 import Web3

from flasharb.pairs import Token, TokenPair

logger = logging.getLogger(__name__)


# =============================================================================
# ABI DEFINITIONS
# =============================================================================

ARBITRAGE_ABI = [
    {
        "name": "checkArbitrageProfitability",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "tokenBorrow", "type": "address"},
            {"name": "tokenToSwap", "type": "address"},
            {"name": "amountToBorrow", "type": "uint256"},
        ],
        "outputs": [
            {"name": "profit", "type": "uint256"},
            {"name": "bestPath", "type": "uint256"},
        ],
    },
    {
        "name": "executeArbitrage",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "tokenBorrow", "type": "address"},
            {"name": "tokenToSwap", "type": "address"},
            {"name": "amountToBorrow", "type": "uint256"},
            {"name": "bestPath", "type": "uint256"},
        ],
        "outputs": [],
    },
    {
        "name": "flashLoanFeeRate",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

ERC20_ABI = [
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]


def load_abi(path: Path) -> List[dict]:
    """
    Load an ABI from disk
    Accepts a bare ABI list or a compiler artifact with an "abi" key
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and "abi" in data:
        data = data["abi"]

    if not isinstance(data, list):
        raise ValueError(f"No ABI found in {path}")

    return data


# =============================================================================
# ARBITRAGE CONTRACT
# =============================================================================

class ArbitrageContract:
    """Calls into the deployed flash loan arbitrage contract"""

    def __init__(self, w3: Web3, address: str, abi: List[dict] = None):
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)
        self.contract = w3.eth.contract(address=self.address, abi=abi or ARBITRAGE_ABI)

    def _execute_fn(self, pair: TokenPair, path: int):
        return self.contract.functions.executeArbitrage(
            pair.token_borrow.address,
            pair.token_to_swap.address,
            pair.amount_to_borrow,
            path,
        )

    def check_profitability(self, pair: TokenPair) -> Tuple[int, int]:
        """Read-only profitability check. Returns (profit, best_path)"""
        profit, best_path = self.contract.functions.checkArbitrageProfitability(
            pair.token_borrow.address,
            pair.token_to_swap.address,
            pair.amount_to_borrow,
        ).call()
        return int(profit), best_path

    def estimate_execute_gas(self, pair: TokenPair, path: int, sender: str) -> int:
        return self._execute_fn(pair, path).estimate_gas({"from": sender})

    def build_execute_tx(self, pair: TokenPair, path: int, tx_params: dict) -> dict:
        return self._execute_fn(pair, path).build_transaction(tx_params)

    def flash_loan_fee_rate(self) -> Optional[int]:
        """Flash loan fee in basis points, None if the contract can't tell us"""
        try:
            rate = int(self.contract.functions.flashLoanFeeRate().call())
        except Exception as e:
            logger.error(f"Flash loan fee rate read failed: {e}")
            return None

        logger.info(f"Current flash loan fee rate: {rate} bps ({rate / 100}%)")
        return rate


# =============================================================================
# ERC20 HELPERS
# =============================================================================

def get_erc20_balance(w3: Web3, token: Token, owner: str) -> int:
    """Token balance of `owner` in base units"""
    contract = w3.eth.contract(address=token.address, abi=ERC20_ABI)
    return contract.functions.balanceOf(Web3.to_checksum_address(owner)).call()
