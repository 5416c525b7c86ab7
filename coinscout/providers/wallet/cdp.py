"""
Coinbase Developer Platform wallet provider.

Wraps an MPC wallet from ``cdp-sdk``. The SDK is synchronous, so calls are run
in a worker thread to keep the conversation loop responsive.
"""

import asyncio
import json
import logging
from decimal import Decimal
from typing import Any, Optional

from .base import SimulatedSwapper, WalletError, WalletProvider


class CdpWalletProvider(WalletProvider):

    def __init__(
        self,
        wallet: Any,
        network_id: str,
        swapper: Optional[SimulatedSwapper] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._wallet = wallet
        self.network_id = network_id
        self.logger = logger or logging.getLogger(__name__)
        self._swapper = swapper or SimulatedSwapper(self.logger)

    @classmethod
    def configure(
        cls,
        api_key_name: str,
        api_key_private_key: str,
        wallet_data: Optional[bytes] = None,
        network_id: str = "base-sepolia",
    ) -> "CdpWalletProvider":
        """Configure the SDK and load the persisted wallet, creating one when none exists."""
        try:
            from cdp import Cdp, Wallet, WalletData
        except ImportError as exc:
            raise WalletError(
                "cdp-sdk is not installed. Install it with: pip install 'coinscout[wallet]'"
            ) from exc

        Cdp.configure(api_key_name, api_key_private_key)

        try:
            if wallet_data:
                data = WalletData.from_dict(json.loads(wallet_data.decode("utf-8")))
                wallet = Wallet.import_data(data)
            else:
                wallet = Wallet.create(network_id=network_id)
        except Exception as exc:
            raise WalletError(f"Failed to configure CDP wallet: {exc}") from exc

        return cls(wallet, network_id=getattr(wallet, "network_id", None) or network_id)

    async def get_balance(self) -> Decimal:
        try:
            balance = await asyncio.to_thread(self._wallet.balance, "eth")
        except Exception as exc:
            raise WalletError(f"Failed to read wallet balance: {exc}") from exc
        return Decimal(str(balance))

    async def export_wallet(self) -> bytes:
        try:
            data = await asyncio.to_thread(self._wallet.export_data)
        except Exception as exc:
            raise WalletError(f"Failed to export wallet: {exc}") from exc
        return json.dumps(data.to_dict()).encode("utf-8")

    async def swap(
        self,
        token_address: str,
        amount: Decimal,
        slippage: Decimal,
        *,
        idempotency_key: str,
    ) -> str:
        # TODO: route through a DEX aggregator once mainnet trading is enabled
        return self._swapper.submit(token_address, amount, slippage, idempotency_key)
