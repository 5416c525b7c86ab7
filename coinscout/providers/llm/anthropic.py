import time
from typing import Any, Dict, List, Optional

import anthropic
from anthropic import AsyncAnthropic

from .base import (
    LLMProvider, LLMMessage, LLMResponse,
    LLMProviderError, LLMProviderAPIError, LLMProviderAuthError, LLMProviderRateLimitError,
    ToolDefinition, ToolCall,
)


class AnthropicProvider(LLMProvider):
    """Anthropic Claude LLM Provider implementation with native tool calling support"""

    supports_tools: bool = True

    def __init__(self, api_key: str, model: Optional[str] = None, **kwargs):
        if not model:
            raise ValueError("AnthropicProvider requires a model to be specified")

        super().__init__(api_key, model, **kwargs)

    def _setup_client(self, **kwargs) -> None:
        """Initialize the Anthropic client"""
        client = kwargs.get("client")
        if client is not None:
            self.client = client
            return
        try:
            self.client = AsyncAnthropic(api_key=self.api_key)
        except Exception as e:
            self.logger.error(f"Failed to initialize Anthropic client: {e}")
            raise LLMProviderAuthError(f"Failed to initialize Anthropic client: {e}")

    def _convert_messages(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        """Convert LLMMessages to Anthropic format, grouping tool results of one turn"""
        converted: List[Dict[str, Any]] = []

        for msg in messages:
            if msg.role == "system":
                continue  # System messages handled separately

            if msg.role == "tool_result" and msg.tool_result:
                block = msg.tool_result.to_anthropic_format()
                previous = converted[-1] if converted else None
                if (
                    previous
                    and previous["role"] == "user"
                    and isinstance(previous["content"], list)
                    and all(b.get("type") == "tool_result" for b in previous["content"])
                ):
                    previous["content"].append(block)
                else:
                    converted.append({"role": "user", "content": [block]})
                continue

            if msg.role == "assistant" and msg.tool_calls:
                content = []
                if msg.content:
                    content.append({"type": "text", "text": msg.content})
                for tc in msg.tool_calls:
                    content.append({
                        "type": "tool_use",
                        "id": tc.id,
                        "name": tc.name,
                        "input": tc.arguments
                    })
                converted.append({"role": "assistant", "content": content})
                continue

            converted.append({"role": msg.role, "content": msg.content or ""})

        return converted

    async def generate_response(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        tools: Optional[List[ToolDefinition]] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate a response from Claude with optional tool calling"""
        start_time = time.time()

        try:
            system_message = next((m.content for m in messages if m.role == "system"), None)

            request_params = {
                "model": self.model,
                "messages": self._convert_messages(messages),
                "max_tokens": max_tokens or 4000,
            }

            if system_message:
                request_params["system"] = system_message

            if temperature is not None:
                request_params["temperature"] = temperature

            if tools:
                request_params["tools"] = [t.to_anthropic_format() for t in tools]

            kwargs.pop('tools', None)
            request_params.update(kwargs)

            response = await self.client.messages.create(**request_params)

            content = ""
            tool_calls = []

            if response.content:
                for block in response.content:
                    if getattr(block, "type", None) == "tool_use":
                        tool_calls.append(ToolCall(
                            id=block.id,
                            name=block.name,
                            arguments=getattr(block, "input", None) or {}
                        ))
                    elif hasattr(block, 'text'):
                        content += block.text

            usage = getattr(response, "usage", None)
            return LLMResponse(
                content=content if content else None,
                tool_calls=tool_calls if tool_calls else None,
                tokens_used=usage.output_tokens if usage is not None else None,
                model=self.model,
                finish_reason=getattr(response, "stop_reason", None),
                response_time_ms=self._measure_time(start_time)
            )

        except anthropic.AuthenticationError as e:
            await self._handle_error(LLMProviderAuthError(f"Authentication failed: {e}"), "generate_response")
        except anthropic.RateLimitError as e:
            await self._handle_error(LLMProviderRateLimitError(f"Rate limit exceeded: {e}"), "generate_response")
        except anthropic.APIError as e:
            await self._handle_error(LLMProviderAPIError(f"API error: {e}"), "generate_response")
        except LLMProviderError:
            raise
        except Exception as e:
            await self._handle_error(LLMProviderError(f"Unexpected error: {e}"), "generate_response")
