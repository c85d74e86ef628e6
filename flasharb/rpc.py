# flasharb/rpc.py
"""
RPC Connection & Health
Connects to the configured endpoint and reports latency / block height
"""

import time
from web3 import Web3

from flasharb.errors import RPCConnectionError


def connect(rpc_url: str) -> Web3:
    """HTTP provider for `rpc_url`; raises RPCConnectionError if unreachable"""
    w3 = Web3(Web3.HTTPProvider(rpc_url))

    if not w3.is_connected():
        raise RPCConnectionError(f"RPC not connected: {rpc_url}")

    return w3


class RPCHealth:
    """
    Monitor RPC health
    """

    def __init__(self, w3: Web3, max_latency: float = 2.0):
        self.w3 = w3
        self.max_latency = max_latency

    def check(self) -> tuple:
        """
        Check RPC health
        Returns (is_healthy: bool, status_message: str)
        """
        try:
            start = time.time()
            latest = self.w3.eth.block_number
            latency = time.time() - start
        except Exception as e:
            return False, str(e)

        if latency > self.max_latency:
            return False, f"High latency {latency:.2f}s"

        return True, f"OK (latency={latency:.2f}s, block={latest})"
