# flasharb/price_cache.py
"""
USD Price Cache
Lazy, pull-based token prices with a fixed expiry window

A cached price answers a query only while `now - fetched_at < expiry`.
Failed lookups are never cached.
"""

import math
import time
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable

import requests

from flasharb.config import (
    PRICE_API_URL, PRICE_API_TIMEOUT_SECONDS, PRICE_VS_CURRENCY,
    CACHE_EXPIRY_SECONDS,
)
from flasharb.errors import PriceUnavailable
from flasharb.pairs import Token, from_base_units

logger = logging.getLogger(__name__)


# =============================================================================
# PRICE SOURCE
# =============================================================================

class CoinGeckoPriceSource:
    """
    CoinGecko token_price endpoint

    One GET per call; accepts several contract addresses at once and
    returns {lowercased address: price}. Tokens the API does not know are
    simply absent from the result.
    """

    def __init__(
        self,
        url: str = PRICE_API_URL,
        timeout: float = PRICE_API_TIMEOUT_SECONDS,
        vs_currency: str = PRICE_VS_CURRENCY,
        session: requests.Session = None,
    ):
        self.url = url
        self.timeout = timeout
        self.vs_currency = vs_currency
        self.session = session or requests.Session()

    def fetch_prices(self, token_ids: Iterable[str]) -> Dict[str, float]:
        ids = [t.lower() for t in token_ids]
        params = {
            "contract_addresses": ",".join(ids),
            "vs_currencies": self.vs_currency,
        }

        try:
            resp = self.session.get(self.url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else 0
            if status == 429:
                raise PriceUnavailable("Price API rate limited (HTTP 429)") from exc
            raise PriceUnavailable(f"Price API returned HTTP {status}") from exc
        except requests.exceptions.RequestException as exc:
            raise PriceUnavailable(f"Price API request failed: {exc}") from exc
        except ValueError as exc:
            raise PriceUnavailable("Price API returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise PriceUnavailable("Price API returned an unexpected payload")

        prices = {}
        for key, entry in data.items():
            if not isinstance(entry, dict):
                continue
            price = entry.get(self.vs_currency)
            if isinstance(price, (int, float)) and not isinstance(price, bool):
                if math.isfinite(price):
                    prices[key.lower()] = float(price)
        return prices


# =============================================================================
# CACHE
# =============================================================================

@dataclass
class CacheEntry:
    price: float
    fetched_at: float


class PriceCache:
    """
    Expiring in-memory price cache

    Owned by the poller and handed to the profitability checker.
    `clock` and `source` are injectable so tests can drive time and
    count external calls.
    """

    def __init__(
        self,
        source,
        expiry_seconds: float = CACHE_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.source = source
        self.expiry_seconds = expiry_seconds
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def _is_live(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.fetched_at < self.expiry_seconds

    def get_usd_value(self, token_id: str) -> float:
        """USD price of one token, fetched only when missing or stale"""
        key = token_id.lower()
        now = self.clock()

        entry = self._entries.get(key)
        if entry and self._is_live(entry, now):
            return entry.price

        prices = self.source.fetch_prices([key])
        price = prices.get(key)

        # Zero is as useless as missing
        if price is None or not math.isfinite(price) or price <= 0:
            raise PriceUnavailable(f"Price not available for token {token_id}")

        self._entries[key] = CacheEntry(price=price, fetched_at=now)
        logger.debug(f"Price cached: {token_id} = ${price}")
        return price

    def convert_to_usd(self, token: Token, amount: int) -> float:
        """Value `amount` base units of `token` in USD"""
        price = self.get_usd_value(token.address)
        return float(from_base_units(amount, token.decimals)) * price

    def __len__(self) -> int:
        return len(self._entries)
