# flasharb/executor.py
"""
Arbitrage Execution Engine
Submits executeArbitrage with a buffered gas limit and EIP-1559 fees

Every failure is reported through ExecutionResult; nothing raises past
ArbitrageExecutor.execute.
"""

import time
import logging
from dataclasses import dataclass
from typing import Optional

from web3 import Web3

from flasharb.config import TX_RECEIPT_TIMEOUT_SECONDS
from flasharb.errors import ExecutionFailed
from flasharb.gas import (
    FeeParams, apply_gas_buffer, estimate_fee_params, resolve_fee_params, wei_to_gwei,
)
from flasharb.pairs import TokenPair

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Result of an arbitrage execution attempt"""
    success: bool
    tx_hash: Optional[str] = None
    error: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: int = 0
    execution_time_ms: float = 0


def _hex(tx_hash) -> str:
    h = tx_hash.hex() if hasattr(tx_hash, "hex") else str(tx_hash)
    return h if h.startswith("0x") else f"0x{h}"


class ArbitrageExecutor:

    def __init__(
        self,
        w3: Web3,
        contract,
        account,
        default_fees: FeeParams,
        receipt_timeout: float = TX_RECEIPT_TIMEOUT_SECONDS,
    ):
        self.w3 = w3
        self.contract = contract
        self.account = account
        self.address = Web3.to_checksum_address(account.address)
        self.default_fees = default_fees
        self.receipt_timeout = receipt_timeout

    def _get_nonce(self) -> int:
        """Get current nonce (pending)"""
        return self.w3.eth.get_transaction_count(self.address, "pending")

    def _build_tx(self, pair: TokenPair, path: int) -> dict:
        try:
            gas_estimate = self.contract.estimate_execute_gas(pair, path, self.address)
        except Exception as e:
            raise ExecutionFailed(f"Gas estimation failed: {e}") from e

        gas_limit = apply_gas_buffer(gas_estimate)
        fees = resolve_fee_params(estimate_fee_params(self.w3), self.default_fees)

        logger.debug(
            f"Gas: estimate={gas_estimate} limit={gas_limit} "
            f"maxFee={wei_to_gwei(fees.max_fee_per_gas):.2f} gwei "
            f"tip={wei_to_gwei(fees.max_priority_fee_per_gas):.2f} gwei"
        )

        try:
            return self.contract.build_execute_tx(pair, path, {
                "from": self.address,
                "nonce": self._get_nonce(),
                "chainId": self.w3.eth.chain_id,
                "gas": gas_limit,
                "maxFeePerGas": fees.max_fee_per_gas,
                "maxPriorityFeePerGas": fees.max_priority_fee_per_gas,
                "type": 2,
            })
        except Exception as e:
            raise ExecutionFailed(f"Transaction build failed: {e}") from e

    def _submit(self, tx: dict) -> str:
        try:
            signed = self.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as e:
            raise ExecutionFailed(f"Broadcast failed: {e}") from e
        return _hex(tx_hash)

    def execute(self, pair: TokenPair, path: int) -> ExecutionResult:
        """Execute the arbitrage for `pair` along `path` and wait for inclusion"""
        start_time = time.time()
        tx_hash = None

        logger.info(f"Executing arbitrage: {pair.token_borrow.symbol} -> {pair.token_to_swap.symbol}")

        try:
            tx = self._build_tx(pair, path)
            tx_hash = self._submit(tx)
            logger.info(f"Tx submitted: {tx_hash}")

            try:
                receipt = self.w3.eth.wait_for_transaction_receipt(
                    tx_hash, timeout=self.receipt_timeout
                )
            except Exception as e:
                raise ExecutionFailed(f"Receipt wait failed: {e}") from e

            if receipt["status"] != 1:
                raise ExecutionFailed(f"Transaction reverted in block {receipt['blockNumber']}")

            logger.info(f"Tx confirmed in block {receipt['blockNumber']}")

            return ExecutionResult(
                success=True,
                tx_hash=tx_hash,
                block_number=receipt["blockNumber"],
                gas_used=receipt.get("gasUsed", 0),
                execution_time_ms=(time.time() - start_time) * 1000,
            )

        except Exception as e:
            logger.error(f"Execution error: {e}")
            return ExecutionResult(
                success=False,
                tx_hash=tx_hash,
                error=str(e),
                execution_time_ms=(time.time() - start_time) * 1000,
            )
