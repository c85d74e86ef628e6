# flasharb/profitability.py
"""
Profitability Checker
Asks the contract for (profit, path) and values the profit in USD

Below-threshold results report profit_usd = 0.0; only profitable
results carry the computed USD value.
"""

import logging
from dataclasses import dataclass

from flasharb.config import MIN_PROFIT_USD
from flasharb.errors import ProfitCheckFailed
from flasharb.pairs import TokenPair

logger = logging.getLogger(__name__)


@dataclass
class Profitability:
    """Result of one profitability check"""
    is_profitable: bool
    profit: int        # Borrow token base units
    profit_usd: float
    best_path: int     # Opaque route id from the contract


class ProfitabilityChecker:

    def __init__(self, contract, price_cache, min_profit_usd: float = MIN_PROFIT_USD):
        self.contract = contract
        self.price_cache = price_cache
        self.min_profit_usd = min_profit_usd

    def check_profitability(self, pair: TokenPair) -> Profitability:
        """
        Evaluate one pair
        Raises ProfitCheckFailed if the contract read or the USD conversion fails
        """
        try:
            profit, best_path = self.contract.check_profitability(pair)
        except Exception as e:
            raise ProfitCheckFailed(f"Profit check error: {e}") from e

        if profit <= 0:
            return Profitability(False, profit, 0.0, best_path)

        try:
            profit_usd = self.price_cache.convert_to_usd(pair.token_borrow, profit)
        except Exception as e:
            raise ProfitCheckFailed(f"Profit check error: {e}") from e

        if profit_usd >= self.min_profit_usd:
            return Profitability(True, profit, profit_usd, best_path)

        logger.debug(
            f"{pair.label}: profit ${profit_usd:.2f} below minimum ${self.min_profit_usd:.2f}"
        )
        return Profitability(False, profit, 0.0, best_path)
