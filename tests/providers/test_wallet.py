"""
Tests for wallet persistence and the simulated swap.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from coinscout.providers.wallet import CdpWalletProvider, CredentialStore, SimulatedSwapper, WalletError


class TestCredentialStore:

    def test_missing_file_loads_none(self, tmp_path):
        store = CredentialStore(tmp_path / "wallet_data.txt")
        assert store.load_credentials() is None

    def test_round_trips_opaque_bytes(self, tmp_path):
        store = CredentialStore(tmp_path / "nested" / "wallet_data.txt")
        blob = b'{"wallet_id": "abc", "seed": "\x00\xff"}'

        store.save_credentials(blob)

        assert store.load_credentials() == blob

    def test_empty_file_loads_none(self, tmp_path):
        path = tmp_path / "wallet_data.txt"
        path.write_bytes(b"")
        assert CredentialStore(path).load_credentials() is None

    def test_unreadable_path_loads_none(self, tmp_path):
        # A directory exists at the path but cannot be read as a file
        path = tmp_path / "wallet_data.txt"
        path.mkdir()
        assert CredentialStore(path).load_credentials() is None


class TestSimulatedSwapper:

    def test_same_key_returns_same_hash(self):
        swapper = SimulatedSwapper()
        first = swapper.submit("0xabc", Decimal("1"), Decimal("2"), "key-1")
        again = swapper.submit("0xabc", Decimal("1"), Decimal("2"), "key-1")
        assert first == again
        assert first.startswith("0x")

    def test_new_key_is_a_new_transaction(self):
        swapper = SimulatedSwapper()
        first = swapper.submit("0xabc", Decimal("1"), Decimal("2"), "key-1")
        second = swapper.submit("0xabc", Decimal("1"), Decimal("2"), "key-2")
        assert first != second


class TestCdpWalletProvider:

    @pytest.mark.asyncio
    async def test_balance_and_export_use_wrapped_wallet(self):
        wallet = MagicMock()
        wallet.balance.return_value = Decimal("0.25")
        wallet.export_data.return_value.to_dict.return_value = {"wallet_id": "w-1", "seed": "s"}
        provider = CdpWalletProvider(wallet, network_id="base-sepolia")

        assert await provider.get_balance() == Decimal("0.25")
        wallet.balance.assert_called_once_with("eth")
        assert await provider.export_wallet() == b'{"wallet_id": "w-1", "seed": "s"}'

    @pytest.mark.asyncio
    async def test_balance_failure_is_wallet_error(self):
        wallet = MagicMock()
        wallet.balance.side_effect = RuntimeError("rpc down")
        provider = CdpWalletProvider(wallet, network_id="base-sepolia")

        with pytest.raises(WalletError, match="rpc down"):
            await provider.get_balance()

    @pytest.mark.asyncio
    async def test_swap_is_idempotent_per_key(self):
        provider = CdpWalletProvider(MagicMock(), network_id="base-sepolia")

        first = await provider.swap("0xabc", Decimal("1"), Decimal("2"), idempotency_key="k")
        again = await provider.swap("0xabc", Decimal("1"), Decimal("2"), idempotency_key="k")

        assert first == again
