from decimal import Decimal

import pytest

from flasharb.errors import ConfigError
from flasharb.pairs import (
    DEFAULT_TOKEN_PAIRS, LINK, TOKENS, USDC, WBTC, WETH, Token,
    from_base_units, get_token, parse_token_pairs, to_base_units,
)


def test_reference_pairs():
    weth_link, usdc_wbtc = DEFAULT_TOKEN_PAIRS

    assert (weth_link.token_borrow, weth_link.token_to_swap) == (WETH, LINK)
    assert weth_link.amount_to_borrow == 10 * 10**18
    assert (usdc_wbtc.token_borrow, usdc_wbtc.token_to_swap) == (USDC, WBTC)
    assert usdc_wbtc.amount_to_borrow == 10_000 * 10**6
    assert [p.label for p in DEFAULT_TOKEN_PAIRS] == ["WETH-LINK", "USDC-WBTC"]


def test_token_address_is_checksummed():
    token = Token("0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2", "WETH", 18)
    assert token.address == "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
    assert token == WETH


def test_tokens_are_immutable():
    with pytest.raises(AttributeError):
        WETH.decimals = 6


def test_registry_decimals():
    assert {s: t.decimals for s, t in TOKENS.items()} == {
        "WETH": 18, "LINK": 18, "USDC": 6, "WBTC": 8, "DAI": 18, "USDT": 6,
    }


def test_unit_conversion():
    assert to_base_units("1.5", 6) == 1_500_000
    assert to_base_units(Decimal("0.123456789"), 6) == 123_456
    assert from_base_units(1_500_000, 6) == Decimal("1.5")
    assert from_base_units(1, 18) == Decimal("1E-18")


def test_get_token_is_case_insensitive():
    assert get_token(" weth ") is WETH
    with pytest.raises(ConfigError):
        get_token("DOGE")


def test_parse_token_pairs_preserves_order():
    pairs = parse_token_pairs("USDC:WBTC:2500.5, WETH:LINK:1,")
    assert [p.label for p in pairs] == ["USDC-WBTC", "WETH-LINK"]
    assert pairs[0].amount_to_borrow == 2_500_500_000
    assert pairs[1].amount_to_borrow == 10**18


@pytest.mark.parametrize("text", [
    "",
    "WETH:LINK",
    "WETH:LINK:1:2",
    "WETH:WETH:1",
    "WETH:LINK:abc",
    "WETH:LINK:0",
    "WETH:LINK:-3",
    "WETH:LINK:inf",
])
def test_parse_token_pairs_rejects(text):
    with pytest.raises(ConfigError):
        parse_token_pairs(text)
