from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from web3 import Web3

import flasharb.executor as executor_module
from flasharb.executor import ArbitrageExecutor
from flasharb.gas import FeeParams

GWEI = 10**9
SENDER = Web3.to_checksum_address("0x90f8bf6a479f320ead074411a4b0e7944ea8c9c1")
TX_HASH = bytes.fromhex("ab" * 32)


class StubContract:
    def __init__(self, gas=100_000, gas_error=None):
        self.gas = gas
        self.gas_error = gas_error
        self.built = []

    def estimate_execute_gas(self, pair, path, sender):
        if self.gas_error is not None:
            raise self.gas_error
        return self.gas

    def build_execute_tx(self, pair, path, tx_params):
        self.built.append((pair, path, tx_params))
        return dict(tx_params, data="0x")


@pytest.fixture
def w3():
    w3 = MagicMock()
    w3.eth.chain_id = 1
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.get_block.return_value = {"baseFeePerGas": 20 * GWEI}
    w3.eth.max_priority_fee = 2 * GWEI
    w3.eth.send_raw_transaction.return_value = TX_HASH
    w3.eth.wait_for_transaction_receipt.return_value = {
        "status": 1, "blockNumber": 19_000_000, "gasUsed": 95_000,
    }
    return w3


@pytest.fixture
def account():
    account = MagicMock()
    account.address = SENDER
    account.sign_transaction.return_value = SimpleNamespace(raw_transaction=b"\x02signed")
    return account


def make_executor(w3, account, contract=None, defaults=FeeParams(50 * GWEI, 2 * GWEI)):
    contract = contract or StubContract()
    return ArbitrageExecutor(w3, contract, account, defaults, receipt_timeout=30), contract


def test_successful_execution(w3, account, weth_link):
    executor, contract = make_executor(w3, account)

    result = executor.execute(weth_link, 4)

    assert result.success is True
    assert result.tx_hash == "0x" + "ab" * 32
    assert result.block_number == 19_000_000
    assert result.gas_used == 95_000
    assert result.error is None

    pair, path, params = contract.built[0]
    assert pair is weth_link
    assert path == 4
    assert params["gas"] == 120_000
    assert params["maxFeePerGas"] == 42 * GWEI
    assert params["maxPriorityFeePerGas"] == 2 * GWEI
    assert params["nonce"] == 7
    assert params["chainId"] == 1
    assert params["type"] == 2
    assert params["from"] == SENDER

    account.sign_transaction.assert_called_once()
    w3.eth.send_raw_transaction.assert_called_once_with(b"\x02signed")
    w3.eth.get_transaction_count.assert_called_once_with(SENDER, "pending")
    w3.eth.wait_for_transaction_receipt.assert_called_once_with("0x" + "ab" * 32, timeout=30)


def test_inverted_fee_estimate_is_bumped(w3, account, weth_link, monkeypatch):
    monkeypatch.setattr(
        executor_module, "estimate_fee_params",
        lambda _w3: FeeParams(1 * GWEI, 5 * GWEI),
    )
    executor, contract = make_executor(w3, account)

    result = executor.execute(weth_link, 1)

    assert result.success is True
    params = contract.built[0][2]
    assert params["maxPriorityFeePerGas"] == 5 * GWEI
    assert params["maxFeePerGas"] >= params["maxPriorityFeePerGas"]
    assert params["maxFeePerGas"] == 11 * GWEI


def test_falls_back_to_configured_fees(w3, account, weth_link):
    w3.eth.get_block.side_effect = ConnectionError("no fee data")
    executor, contract = make_executor(w3, account, defaults=FeeParams(30 * GWEI, 3 * GWEI))

    executor.execute(weth_link, 1)

    params = contract.built[0][2]
    assert params["maxFeePerGas"] == 30 * GWEI
    assert params["maxPriorityFeePerGas"] == 3 * GWEI


def test_reverted_transaction_is_a_failure_result(w3, account, weth_link):
    w3.eth.wait_for_transaction_receipt.return_value = {
        "status": 0, "blockNumber": 19_000_001, "gasUsed": 60_000,
    }
    executor, _ = make_executor(w3, account)

    result = executor.execute(weth_link, 1)

    assert result.success is False
    assert "reverted" in result.error
    assert result.tx_hash == "0x" + "ab" * 32


def test_gas_estimation_failure_never_broadcasts(w3, account, weth_link):
    contract = StubContract(gas_error=ValueError("execution reverted: no profit"))
    executor, _ = make_executor(w3, account, contract)

    result = executor.execute(weth_link, 1)

    assert result.success is False
    assert "Gas estimation failed" in result.error
    assert "no profit" in result.error
    w3.eth.send_raw_transaction.assert_not_called()


def test_broadcast_failure(w3, account, weth_link):
    w3.eth.send_raw_transaction.side_effect = ValueError("nonce too low")
    executor, _ = make_executor(w3, account)

    result = executor.execute(weth_link, 1)

    assert result.success is False
    assert "nonce too low" in result.error
    assert result.tx_hash is None


def test_receipt_timeout(w3, account, weth_link):
    w3.eth.wait_for_transaction_receipt.side_effect = TimeoutError("not mined")
    executor, _ = make_executor(w3, account)

    result = executor.execute(weth_link, 1)

    assert result.success is False
    assert "not mined" in result.error
