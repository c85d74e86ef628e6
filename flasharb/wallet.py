# flasharb/wallet.py
"""
Signer Providers
Turn configuration into a signing account. Interactive prompts live here
and nowhere else.
"""

import getpass
import json
import logging
from pathlib import Path
from typing import Callable, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from flasharb.config import BotConfig, DEFAULT_KEYSTORE_DIR
from flasharb.errors import WalletError

logger = logging.getLogger(__name__)


class SignerProvider:
    """Something that can produce a LocalAccount"""

    def load(self) -> LocalAccount:
        raise NotImplementedError


class PrivateKeySigner(SignerProvider):

    def __init__(self, private_key: str):
        self.private_key = private_key

    def load(self) -> LocalAccount:
        try:
            return Account.from_key(self.private_key)
        except Exception as e:
            # Never echo the key
            raise WalletError(f"Invalid private key: {type(e).__name__}") from None


class FoundryKeystoreSigner(SignerProvider):
    """
    Decrypt a Foundry (cast wallet) keystore
    ~/.foundry/keystores/<name> by default. The password comes from
    config or, failing that, an interactive prompt.
    """

    def __init__(
        self,
        name: str,
        keystore_dir: Path = DEFAULT_KEYSTORE_DIR,
        password: Optional[str] = None,
        prompt: Callable[[str], str] = getpass.getpass,
    ):
        self.name = name
        self.keystore_dir = Path(keystore_dir)
        self.password = password
        self.prompt = prompt

    @property
    def keystore_path(self) -> Path:
        return self.keystore_dir / self.name

    def load(self) -> LocalAccount:
        path = self.keystore_path
        if not path.exists():
            raise WalletError(f"Foundry wallet does not exist: {path}")

        try:
            encrypted = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise WalletError(f"Keystore {path} is not valid JSON") from e

        password = self.password
        if password is None:
            password = self.prompt("Enter wallet password: ")

        try:
            private_key = Account.decrypt(encrypted, password.strip())
        except ValueError as e:
            raise WalletError(f"Could not decrypt keystore {self.name}: {e}") from e

        account = Account.from_key(private_key)
        logger.info(f"Loaded Foundry wallet {self.name} ({account.address})")
        return account


def signer_from_config(config: BotConfig) -> SignerProvider:
    """PRIVATE_KEY wins over FOUNDRY_WALLET when both are set"""
    if config.private_key:
        return PrivateKeySigner(config.private_key)
    if config.foundry_wallet:
        return FoundryKeystoreSigner(
            config.foundry_wallet,
            keystore_dir=config.keystore_dir,
            password=config.wallet_password,
        )
    raise WalletError("No signer configured")
