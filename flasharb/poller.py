# flasharb/poller.py
"""
Arbitrage Poller
Every tick, walks the configured pairs in order: check, execute if
profitable, cool down, move on. Pairs are never evaluated concurrently.
"""

import time
import logging
from datetime import datetime
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from flasharb.config import POLLING_INTERVAL_SECONDS, EXECUTION_COOLDOWN_SECONDS
from flasharb.errors import ProfitCheckFailed
from flasharb.pairs import Token, TokenPair, from_base_units

logger = logging.getLogger(__name__)


# =============================================================================
# STATISTICS TRACKER
# =============================================================================

@dataclass
class TickSummary:
    checked: int = 0
    profitable: int = 0
    executed: int = 0
    failed: int = 0
    errors: int = 0


class StatisticsTracker:
    """Track bot performance statistics"""

    def __init__(self):
        self.start_time = datetime.now()
        self.tick_count = 0
        self.pairs_checked = 0
        self.profitable_opportunities = 0
        self.check_errors = 0
        self.trades_executed = 0
        self.trades_successful = 0
        self.total_profit_usd = 0.0

    def record_tick(self, summary: TickSummary):
        self.tick_count += 1
        self.pairs_checked += summary.checked
        self.profitable_opportunities += summary.profitable
        self.check_errors += summary.errors

    def record_trade(self, success: bool, profit_usd: float = 0.0):
        self.trades_executed += 1
        if success:
            self.trades_successful += 1
            self.total_profit_usd += profit_usd

    def get_summary(self) -> str:
        runtime = datetime.now() - self.start_time
        success_rate = (self.trades_successful / self.trades_executed * 100) if self.trades_executed > 0 else 0

        return (
            f"\n{'='*60}\n"
            f"📊 BOT STATISTICS\n"
            f"{'='*60}\n"
            f"Runtime: {runtime}\n"
            f"Ticks: {self.tick_count}\n"
            f"Pairs Checked: {self.pairs_checked}\n"
            f"Check Errors: {self.check_errors}\n"
            f"Profitable: {self.profitable_opportunities}\n"
            f"Trades Executed: {self.trades_executed}\n"
            f"Trades Successful: {self.trades_successful} ({success_rate:.1f}%)\n"
            f"Expected Profit (successful trades): ${self.total_profit_usd:.2f}\n"
            f"{'='*60}\n"
        )


# =============================================================================
# POLLER
# =============================================================================

class ArbitragePoller:
    """
    Owns the pair list and the repeating timer

    `balance_reader(token) -> int` is optional and only used for the
    startup balance log. `sleep` and `clock` are injectable for tests.
    """

    def __init__(
        self,
        checker,
        executor,
        pairs: Sequence[TokenPair],
        interval: float = POLLING_INTERVAL_SECONDS,
        cooldown: float = EXECUTION_COOLDOWN_SECONDS,
        balance_reader: Optional[Callable[[Token], int]] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.checker = checker
        self.executor = executor
        self.pairs: List[TokenPair] = list(pairs)
        self.interval = interval
        self.cooldown = cooldown
        self.balance_reader = balance_reader
        self.sleep = sleep
        self.clock = clock
        self.running = False
        self.stats = StatisticsTracker()

    def stop(self, *_):
        """Stop after the current tick (usable as a signal handler)"""
        if self.running:
            logger.info("🛑 Shutdown requested...")
        self.running = False

    def log_starting_balances(self):
        if self.balance_reader is None:
            return

        seen = set()
        for pair in self.pairs:
            token = pair.token_borrow
            if token.address in seen:
                continue
            seen.add(token.address)

            try:
                balance = self.balance_reader(token)
            except Exception as e:
                logger.warning(f"Balance {token.symbol}: unavailable ({e})")
                continue

            human = from_base_units(balance, token.decimals).normalize()
            logger.info(f"Balance {token.symbol}: {human:f}")

    def _evaluate_pair(self, pair: TokenPair, summary: TickSummary):
        try:
            result = self.checker.check_profitability(pair)
        except ProfitCheckFailed as e:
            summary.errors += 1
            logger.error(f"{pair.label}: {e}")
            return
        finally:
            summary.checked += 1

        if not result.is_profitable:
            logger.info(f"Not profitable: {pair.label}")
            return

        summary.profitable += 1
        logger.info(f"Profitable: {pair.label}: ${result.profit_usd:.2f}")

        execution = self.executor.execute(pair, result.best_path)
        summary.executed += 1
        self.stats.record_trade(execution.success, result.profit_usd)

        if execution.success:
            logger.info(f"Executed! Tx: {execution.tx_hash}")
        else:
            summary.failed += 1
            logger.error(f"Execution failed: {execution.error}")

        logger.debug(f"Cooling down {self.cooldown}s")
        self.sleep(self.cooldown)

    def run_tick(self) -> TickSummary:
        """One pass over every pair, in declaration order"""
        logger.info("Checking for opportunities...")
        summary = TickSummary()

        for pair in self.pairs:
            self._evaluate_pair(pair, summary)

        self.stats.record_tick(summary)
        return summary

    def run_forever(self, max_ticks: Optional[int] = None):
        """
        Tick every `interval` seconds until stop() or `max_ticks`
        A tick that overruns the interval starts the next one immediately.
        """
        logger.info(f"Polling {len(self.pairs)} pairs every {self.interval}s")
        self.running = True
        ticks = 0
        next_tick = self.clock()

        try:
            while self.running:
                try:
                    self.run_tick()
                except Exception as e:
                    logger.exception(f"Tick error: {e}")

                ticks += 1
                if max_ticks is not None and ticks >= max_ticks:
                    break

                next_tick += self.interval
                delay = next_tick - self.clock()
                if delay > 0:
                    self.sleep(delay)
                else:
                    next_tick = self.clock()

        except KeyboardInterrupt:
            logger.info("Keyboard interrupt received")

        finally:
            self.running = False
            logger.info(self.stats.get_summary())
            logger.info("Bot stopped.")
