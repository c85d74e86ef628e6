# flasharb/main.py
"""
Flash Loan Arbitrage Bot Entry Point

THIS IS THE ENTRY POINT - Run with: python -m flasharb.main

Setup failures (config, wallet, RPC, contract binding) are fatal and exit
with status 1. After setup the bot polls until interrupted.
"""

import sys
import logging
import signal
from datetime import datetime
from pathlib import Path
from typing import Optional

from flasharb.config import BotConfig, LOG_DIR, load_config
from flasharb.contract import ARBITRAGE_ABI, ArbitrageContract, get_erc20_balance, load_abi
from flasharb.executor import ArbitrageExecutor
from flasharb.gas import FeeParams
from flasharb.poller import ArbitragePoller
from flasharb.price_cache import CoinGeckoPriceSource, PriceCache
from flasharb.profitability import ProfitabilityChecker
from flasharb.rpc import RPCHealth, connect
from flasharb.wallet import signer_from_config

logger = logging.getLogger("flasharb")


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(level: str = "INFO", log_dir: Optional[Path] = LOG_DIR):
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(log_dir / f"flasharb_{datetime.now().strftime('%Y%m%d')}.log")
        )

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s | %(levelname)-8s | %(message)s',
        handlers=handlers,
        force=True,
    )


# =============================================================================
# WIRING
# =============================================================================

def build_poller(config: BotConfig) -> ArbitragePoller:
    """One-time setup: signer, provider, contract, price cache, executor"""
    account = signer_from_config(config).load()
    logger.info(f"Wallet: {account.address}")

    logger.info(f"Connecting to RPC: {config.rpc_url}")
    w3 = connect(config.rpc_url)

    ok, status = RPCHealth(w3).check()
    if ok:
        logger.info(f"✅ RPC healthy: {status}")
    else:
        logger.warning(f"⚠️ RPC unhealthy: {status}")

    abi = load_abi(config.abi_path) if config.abi_path else ARBITRAGE_ABI
    contract = ArbitrageContract(w3, config.contract_address, abi)
    logger.info(f"Arbitrage contract: {contract.address}")
    contract.flash_loan_fee_rate()

    price_cache = PriceCache(
        CoinGeckoPriceSource(url=config.price_api_url),
        expiry_seconds=config.cache_expiry,
    )

    checker = ProfitabilityChecker(contract, price_cache, config.min_profit_usd)

    executor = ArbitrageExecutor(
        w3,
        contract,
        account,
        default_fees=FeeParams(config.max_fee_per_gas, config.max_priority_fee_per_gas),
        receipt_timeout=config.receipt_timeout,
    )

    return ArbitragePoller(
        checker,
        executor,
        config.token_pairs,
        interval=config.polling_interval,
        cooldown=config.execution_cooldown,
        balance_reader=lambda token: get_erc20_balance(w3, token, account.address),
    )


# =============================================================================
# ENTRY POINT
# =============================================================================

def main(argv=None) -> int:
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Flash Loan Arbitrage Bot")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single polling tick and exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)",
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_level or "INFO")

    try:
        config = load_config()
        if args.log_level is None:
            logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

        poller = build_poller(config)

        logger.info("Monitoring arbitrage opportunities...")
        poller.log_starting_balances()
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        return 1

    if args.once:
        try:
            poller.run_tick()
        except Exception as e:
            logger.exception(f"Tick error: {e}")
            return 1
        return 0

    signal.signal(signal.SIGINT, poller.stop)
    signal.signal(signal.SIGTERM, poller.stop)

    poller.run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
