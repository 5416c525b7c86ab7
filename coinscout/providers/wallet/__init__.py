from .base import SimulatedSwapper, WalletError, WalletProvider
from .cdp import CdpWalletProvider
from .credentials import CredentialStore

__all__ = [
    "CdpWalletProvider",
    "CredentialStore",
    "SimulatedSwapper",
    "WalletError",
    "WalletProvider",
]
