"""
Action registry and dispatcher for LLM-driven tool calling.

Each action pairs a tool definition (what the LLM sees) with a pydantic
parameter model (what gets validated) and an async handler. The registry is
fixed at construction: one analysis action per coin category, plus the
investment, keyword and wallet actions.
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Coroutine, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ...providers.base import MarketDataProvider, TrendDataProvider
from ...providers.apify import TrendDataError
from ...providers.llm.base import ToolDefinition, ToolParameter, ToolParameterType
from ...providers.wallet.base import WalletError, WalletProvider
from ...types.actions import ActionRequest, ActionResponse
from ...types.market import CoinCategory, utc_now

DEFAULT_ANALYSIS_LIMIT = 10
DEFAULT_SLIPPAGE = Decimal("2")


# =============================================================================
# Parameter schemas
# =============================================================================

class ActionParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AnalyzeParams(ActionParams):
    limit: Optional[int] = Field(default=None, ge=1, le=250)


class InvestParams(ActionParams):
    token_address: str = Field(alias="tokenAddress", min_length=1)
    amount: Decimal = Field(gt=0)
    slippage: Decimal = Field(default=DEFAULT_SLIPPAGE, ge=0, le=100)
    category: CoinCategory

    @field_validator("category", mode="before")
    @classmethod
    def _category_by_name(cls, value: Any) -> Any:
        # Categories arrive by name ("MEME"), not by Coingecko id
        if isinstance(value, str) and value.upper() in CoinCategory.__members__:
            return CoinCategory[value.upper()]
        return value

    @field_validator("slippage", mode="before")
    @classmethod
    def _default_slippage(cls, value: Any) -> Any:
        return DEFAULT_SLIPPAGE if value is None else value


class KeywordParams(ActionParams):
    platform: str = Field(min_length=1)


class EmptyParams(ActionParams):
    pass


@dataclass
class RegisteredAction:
    """An action registered in the dispatcher with its definition, schema and handler."""
    definition: ToolDefinition
    params_model: Type[ActionParams]
    handler: Callable[[Any], Coroutine[Any, Any, ActionResponse]]


def format_validation_error(name: str, exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "parameters"
        problems.append(f"{location}: {err.get('msg')}")
    return f"Error: invalid parameters for {name}: " + "; ".join(problems)


class ActionDispatcher:
    """
    Fixed registry of named actions behind a single ``invoke(name, params)`` call.

    Validation failures, upstream failures and wallet failures all come back as
    error responses; nothing raises past ``invoke``.
    """

    def __init__(
        self,
        market_data: MarketDataProvider,
        wallet: WalletProvider,
        trend_data: TrendDataProvider,
        default_limit: int = DEFAULT_ANALYSIS_LIMIT,
        logger: Optional[logging.Logger] = None,
    ):
        self.market_data = market_data
        self.wallet = wallet
        self.trend_data = trend_data
        self.default_limit = default_limit
        self.logger = logger or logging.getLogger(__name__)
        self._actions: Dict[str, RegisteredAction] = {}
        self._register_default_actions()

    def register(
        self,
        definition: ToolDefinition,
        params_model: Type[ActionParams],
        handler: Callable[[Any], Coroutine[Any, Any, ActionResponse]],
    ) -> None:
        self._actions[definition.name] = RegisteredAction(
            definition=definition,
            params_model=params_model,
            handler=handler,
        )

    @property
    def names(self) -> List[str]:
        return list(self._actions)

    def has_action(self, name: str) -> bool:
        return name in self._actions

    def tool_definitions(self) -> List[ToolDefinition]:
        """Get all action definitions for passing to the LLM."""
        return [action.definition for action in self._actions.values()]

    async def invoke(self, name: str, params: Optional[Dict[str, Any]] = None) -> ActionResponse:
        """Validate ``params`` against the action's schema and run it."""
        if params is not None and not isinstance(params, dict):
            return self._error(name, f"Error: invalid parameters for {name}: expected an object")
        return await self.dispatch(ActionRequest(name=name, parameters=params or {}))

    async def dispatch(self, request: ActionRequest) -> ActionResponse:
        action = self._actions.get(request.name)
        if action is None:
            return self._error(request.name, f"Error: unknown action '{request.name}'")

        try:
            params = action.params_model.model_validate(request.parameters)
        except ValidationError as exc:
            self.logger.warning("Rejected %s parameters: %s", request.name, exc.error_count())
            return self._error(request.name, format_validation_error(request.name, exc))

        try:
            return await action.handler(params)
        except Exception as e:
            self.logger.error(f"Action execution error for {request.name}: {e}", exc_info=True)
            return self._error(request.name, f"Error: {request.name} failed: {e}")

    @staticmethod
    def _error(name: str, message: str) -> ActionResponse:
        return ActionResponse(name=name, payload=message, error=True)

    # =========================================================================
    # Registration
    # =========================================================================

    def _register_default_actions(self) -> None:
        for category in CoinCategory:
            self.register(
                ToolDefinition(
                    name=category.action_name,
                    description=(
                        f"Fetches and analyzes the top {category.name} coins by trading volume "
                        "for investment potential. Returns price, 24h change, volume, market cap, "
                        "liquidity score and a risk level for each coin."
                    ),
                    parameters=[
                        ToolParameter(
                            name="limit",
                            type=ToolParameterType.INTEGER,
                            description="Number of coins to analyze",
                            required=False,
                            default=self.default_limit,
                        ),
                    ],
                ),
                AnalyzeParams,
                self._make_analyze_handler(category),
            )

        self.register(
            ToolDefinition(
                name="invest_in_coin",
                description=(
                    "Executes a swap to invest ETH in the specified token after checking "
                    "that the wallet balance covers the amount."
                ),
                parameters=[
                    ToolParameter(
                        name="tokenAddress",
                        type=ToolParameterType.STRING,
                        description="Contract address of the token to invest in",
                    ),
                    ToolParameter(
                        name="amount",
                        type=ToolParameterType.NUMBER,
                        description="Amount of ETH to invest",
                    ),
                    ToolParameter(
                        name="slippage",
                        type=ToolParameterType.NUMBER,
                        description="Max slippage percentage",
                        required=False,
                        default=float(DEFAULT_SLIPPAGE),
                    ),
                    ToolParameter(
                        name="category",
                        type=ToolParameterType.STRING,
                        description="Category of the token",
                        enum=[c.name for c in CoinCategory],
                    ),
                ],
            ),
            InvestParams,
            self._handle_invest,
        )

        self.register(
            ToolDefinition(
                name="fetch_keyword",
                description=(
                    "Fetches the top trending keywords on Twitter. Use it to predict which "
                    "keywords could become trending memecoins."
                ),
                parameters=[
                    ToolParameter(
                        name="platform",
                        type=ToolParameterType.STRING,
                        description="Which platform to fetch keywords from",
                    ),
                ],
            ),
            KeywordParams,
            self._handle_fetch_keyword,
        )

        self.register(
            ToolDefinition(
                name="get_wallet_details",
                description="Returns the agent wallet's network and current ETH balance.",
            ),
            EmptyParams,
            self._handle_wallet_details,
        )

    # =========================================================================
    # Handlers
    # =========================================================================

    def _make_analyze_handler(self, category: CoinCategory):
        async def handler(params: AnalyzeParams) -> ActionResponse:
            return await self._handle_analyze(category, params)
        return handler

    async def _handle_analyze(self, category: CoinCategory, params: AnalyzeParams) -> ActionResponse:
        name = category.action_name
        limit = params.limit or self.default_limit
        result = await self.market_data.fetch(category.value, limit)
        if not result.ok:
            return self._error(name, result.error)

        return ActionResponse(
            name=name,
            payload={
                "data": [coin.model_dump(by_alias=True, mode="json") for coin in result.coins],
                "message": f"Top {len(result.coins)} {category.name} coins analyzed",
                "category": category.name,
                "timestamp": utc_now().isoformat(),
            },
        )

    async def _handle_invest(self, params: InvestParams) -> ActionResponse:
        name = "invest_in_coin"
        category = params.category.name
        try:
            balance = await self.wallet.get_balance()
            if balance < params.amount:
                return ActionResponse(
                    name=name,
                    payload=(
                        f"Insufficient balance ({balance} ETH). Please top up your wallet "
                        f"to invest {params.amount} ETH in {category} token."
                    ),
                )

            # One key per invocation: retries of this swap reuse it, new tool calls do not
            idempotency_key = uuid.uuid4().hex
            tx_hash = await self.wallet.swap(
                params.token_address,
                params.amount,
                params.slippage,
                idempotency_key=idempotency_key,
            )
        except WalletError as exc:
            return self._error(name, f"Investment failed: {exc}")

        self.logger.info("Invested %s ETH in %s (%s)", params.amount, params.token_address, tx_hash)
        return ActionResponse(
            name=name,
            payload=(
                f"Invested {params.amount} ETH in {category} token "
                f"({params.token_address}). TX Hash: {tx_hash}"
            ),
        )

    async def _handle_fetch_keyword(self, params: KeywordParams) -> ActionResponse:
        name = "fetch_keyword"
        try:
            keywords = await self.trend_data.fetch_keywords()
        except TrendDataError as exc:
            return self._error(name, f"Failed to fetch keywords: {exc}")

        if not keywords:
            return ActionResponse(name=name, payload=f"No trending keywords found on {params.platform}.")
        return ActionResponse(
            name=name,
            payload="\n\n".join(keyword.format_block() for keyword in keywords),
        )

    async def _handle_wallet_details(self, params: EmptyParams) -> ActionResponse:
        name = "get_wallet_details"
        try:
            balance = await self.wallet.get_balance()
        except WalletError as exc:
            return self._error(name, f"Failed to read wallet: {exc}")
        return ActionResponse(
            name=name,
            payload={"network_id": self.wallet.network_id, "balance_eth": str(balance)},
        )
