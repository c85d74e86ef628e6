import pytest

from flasharb.pairs import DEFAULT_TOKEN_PAIRS
from tests.fakes import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def weth_link():
    return DEFAULT_TOKEN_PAIRS[0]


@pytest.fixture
def usdc_wbtc():
    return DEFAULT_TOKEN_PAIRS[1]
