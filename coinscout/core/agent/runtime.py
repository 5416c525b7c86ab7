"""
Agent runtime: a tool-calling loop between the LLM provider and the action dispatcher.

``stream(message, session_id)`` yields tagged chunks as they are produced: the
model's text as ``agent`` chunks and each action result as a ``tools`` chunk.
Conversation history is kept in memory per session id.
"""

import logging
from typing import AsyncIterator, Dict, List, Optional

from ...providers.llm.base import LLMMessage, LLMProvider, ToolResult
from ...types.actions import AgentChunk
from .actions import ActionDispatcher
from .prompts import SYSTEM_PROMPT

DEFAULT_MAX_TOOL_ROUNDS = 5


class AgentRuntime:

    def __init__(
        self,
        llm_provider: LLMProvider,
        dispatcher: ActionDispatcher,
        system_prompt: str = SYSTEM_PROMPT,
        max_tool_rounds: int = DEFAULT_MAX_TOOL_ROUNDS,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.llm_provider = llm_provider
        self.dispatcher = dispatcher
        self.system_prompt = system_prompt
        self.max_tool_rounds = max_tool_rounds
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.logger = logger or logging.getLogger(__name__)
        self._sessions: Dict[str, List[LLMMessage]] = {}

    def history(self, session_id: str) -> List[LLMMessage]:
        return self._sessions.setdefault(session_id, [])

    def reset(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def stream(self, message: str, session_id: str) -> AsyncIterator[AgentChunk]:
        history = self.history(session_id)
        history.append(LLMMessage(role="user", content=message))
        tools = self.dispatcher.tool_definitions()

        for _ in range(self.max_tool_rounds):
            response = await self.llm_provider.generate_response(
                [LLMMessage(role="system", content=self.system_prompt), *history],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                tools=tools,
            )
            if response.content or response.tool_calls:
                history.append(LLMMessage(
                    role="assistant",
                    content=response.content,
                    tool_calls=response.tool_calls,
                ))

            if response.content:
                yield AgentChunk(source="agent", content=response.content)

            if not response.tool_calls:
                return

            for call in response.tool_calls:
                self.logger.info("Invoking action %s", call.name)
                result = await self.dispatcher.invoke(call.name, call.arguments)
                content = result.as_text()
                history.append(LLMMessage(
                    role="tool_result",
                    tool_result=ToolResult(
                        tool_call_id=call.id,
                        result=content,
                        error=content if result.error else None,
                    ),
                ))
                yield AgentChunk(source="tools", content=content)

        self.logger.warning("Stopped after %s tool rounds in session %s", self.max_tool_rounds, session_id)
