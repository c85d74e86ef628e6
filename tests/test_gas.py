from unittest.mock import MagicMock

import pytest

from flasharb.gas import (
    FeeParams, apply_gas_buffer, ensure_fee_ordering, estimate_fee_params,
    gwei_to_wei, resolve_fee_params, wei_to_gwei,
)

GWEI = 10**9


@pytest.mark.parametrize("estimate, expected", [
    (100_000, 120_000),
    (100_001, 120_001),
    (999, 1_198),
    (0, 0),
])
def test_gas_buffer_rounds_down(estimate, expected):
    assert apply_gas_buffer(estimate) == expected


def test_gwei_helpers():
    assert gwei_to_wei(50) == 50 * GWEI
    assert gwei_to_wei("1.5") == 1_500_000_000
    assert wei_to_gwei(2 * GWEI) == 2.0


def test_ordering_untouched_when_valid():
    fees = FeeParams(50 * GWEI, 2 * GWEI)
    assert ensure_fee_ordering(fees) is fees


def test_equal_fees_are_valid():
    fees = FeeParams(2 * GWEI, 2 * GWEI)
    assert ensure_fee_ordering(fees) is fees


def test_inverted_fees_bumped_once():
    fees = ensure_fee_ordering(FeeParams(1 * GWEI, 2 * GWEI))
    assert fees.max_fee_per_gas == 11 * GWEI
    assert fees.max_priority_fee_per_gas == 2 * GWEI


def test_inverted_fees_bumped_until_covered():
    fees = ensure_fee_ordering(FeeParams(1 * GWEI, 25 * GWEI))
    assert fees.max_fee_per_gas == 31 * GWEI
    assert fees.max_fee_per_gas >= fees.max_priority_fee_per_gas


def test_resolve_falls_back_to_defaults():
    default = FeeParams(50 * GWEI, 2 * GWEI)
    assert resolve_fee_params(None, default) == default


def test_resolve_fills_missing_fields_only():
    default = FeeParams(50 * GWEI, 2 * GWEI)
    fees = resolve_fee_params(FeeParams(None, 3 * GWEI), default)
    assert fees == FeeParams(50 * GWEI, 3 * GWEI)


def test_resolve_enforces_ordering_on_defaults():
    fees = resolve_fee_params(None, FeeParams(1 * GWEI, 2 * GWEI))
    assert fees.max_fee_per_gas >= fees.max_priority_fee_per_gas


def test_estimate_from_base_fee_and_tip():
    w3 = MagicMock()
    w3.eth.get_block.return_value = {"baseFeePerGas": 10 * GWEI}
    w3.eth.max_priority_fee = 1 * GWEI

    assert estimate_fee_params(w3) == FeeParams(21 * GWEI, 1 * GWEI)
    w3.eth.get_block.assert_called_once_with("latest")


def test_estimate_without_base_fee():
    w3 = MagicMock()
    w3.eth.get_block.return_value = {}
    w3.eth.max_priority_fee = 1 * GWEI
    assert estimate_fee_params(w3) == FeeParams(None, 1 * GWEI)


def test_estimate_unavailable_returns_none():
    w3 = MagicMock()
    w3.eth.get_block.side_effect = ConnectionError("node down")
    assert estimate_fee_params(w3) is None
