"""
Startup wiring: build every component from one Settings object.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import Settings, redact
from ..providers.apify import ApifyKeywordsProvider
from ..providers.coingecko import CoingeckoProvider
from ..providers.llm import get_llm_provider
from ..providers.llm.base import LLMProvider
from ..providers.wallet import CdpWalletProvider, CredentialStore, WalletProvider
from .agent import ActionDispatcher, AgentRuntime

logger = logging.getLogger(__name__)

WalletFactory = Callable[..., WalletProvider]


@dataclass
class AgentContext:
    settings: Settings
    wallet: WalletProvider
    dispatcher: ActionDispatcher
    runtime: AgentRuntime


async def initialize_agent(
    settings: Settings,
    wallet_factory: WalletFactory = CdpWalletProvider.configure,
    llm_provider: Optional[LLMProvider] = None,
    credential_store: Optional[CredentialStore] = None,
) -> AgentContext:
    """Load the wallet, assemble dispatcher and runtime, then persist the wallet export."""
    logger.debug("Initializing agent with settings %s", redact(settings))

    store = credential_store or CredentialStore(settings.wallet_data_file)
    wallet_data = store.load_credentials()

    wallet = await asyncio.to_thread(
        wallet_factory,
        api_key_name=settings.cdp_api_key_name,
        api_key_private_key=settings.cdp_private_key,
        wallet_data=wallet_data,
        network_id=settings.effective_network_id,
    )

    dispatcher = ActionDispatcher(
        market_data=CoingeckoProvider(settings),
        wallet=wallet,
        trend_data=ApifyKeywordsProvider(settings),
        default_limit=settings.default_analysis_limit,
    )
    runtime = AgentRuntime(
        llm_provider or get_llm_provider(settings),
        dispatcher,
        max_tool_rounds=settings.max_tool_rounds,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )

    store.save_credentials(await wallet.export_wallet())
    logger.info(
        "Agent initialized on %s with actions: %s",
        wallet.network_id,
        ", ".join(dispatcher.names),
    )
    return AgentContext(settings=settings, wallet=wallet, dispatcher=dispatcher, runtime=runtime)
