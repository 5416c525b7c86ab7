import hashlib
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, Optional


class WalletError(Exception):
    """Raised when a wallet operation fails."""


class WalletProvider(ABC):
    """Custodial wallet the agent invests from.

    The exported wallet data is opaque: providers produce and consume it,
    nothing else interprets it.
    """

    network_id: str

    @abstractmethod
    async def get_balance(self) -> Decimal:
        """Native asset balance of the default address"""
        pass

    @abstractmethod
    async def export_wallet(self) -> bytes:
        """Serialized wallet data suitable for CredentialStore"""
        pass

    @abstractmethod
    async def swap(
        self,
        token_address: str,
        amount: Decimal,
        slippage: Decimal,
        *,
        idempotency_key: str,
    ) -> str:
        """Swap ``amount`` of the native asset into ``token_address`` and return the tx hash.

        Repeating a call with the same ``idempotency_key`` must return the same
        transaction instead of submitting a new one.
        """
        pass


class SimulatedSwapper:
    """Stands in for a DEX integration: logs the intent and returns a stable hash per key."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._submitted: Dict[str, str] = {}

    def submit(self, token_address: str, amount: Decimal, slippage: Decimal, idempotency_key: str) -> str:
        existing = self._submitted.get(idempotency_key)
        if existing is not None:
            self.logger.info("Swap %s already submitted as %s", idempotency_key, existing)
            return existing

        self.logger.info(
            "Swapping %s ETH for %s with %s%% slippage tolerance (simulated)",
            amount, token_address, slippage,
        )
        digest = hashlib.sha256(
            f"{idempotency_key}:{token_address.lower()}:{amount}:{slippage}".encode()
        ).hexdigest()
        tx_hash = f"0x{digest}"
        self._submitted[idempotency_key] = tx_hash
        return tx_hash
