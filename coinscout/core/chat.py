"""
Conversation loop between a user (or a timer) and the agent runtime.

Two modes, chosen once at startup:
- chat: read a line, relay it to the agent, print the streamed chunks
- auto: every interval, send a fixed self-directed prompt and print the chunks
"""

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Optional, Protocol

from ..types.actions import AgentChunk
from .agent.prompts import AUTONOMOUS_PROMPT

SEPARATOR = "-------------------"
CHUNK_LABELS = {"agent": "🤖 Agent", "tools": "🔧 Tool"}

MODE_ALIASES = {
    "1": "chat",
    "chat": "chat",
    "2": "auto",
    "auto": "auto",
}


class Agent(Protocol):
    def stream(self, message: str, session_id: str) -> AsyncIterator[AgentChunk]:
        ...


def format_chunk(chunk: AgentChunk) -> str:
    return f"{CHUNK_LABELS.get(chunk.source, chunk.source)}: {chunk.content}"


def choose_mode(read: Callable[[str], str] = input, write: Callable[[str], None] = print) -> str:
    """Ask until the user picks a mode; returns ``"chat"`` or ``"auto"``."""
    while True:
        write("\nAvailable modes:")
        write("1. chat    - Interactive chat mode")
        write("2. auto    - Autonomous action mode")

        choice = read("\nChoose a mode (enter number or name): ").strip().lower()
        mode = MODE_ALIASES.get(choice)
        if mode:
            return mode
        write("Invalid choice. Please try again.")


class ConversationLoop:

    def __init__(
        self,
        agent: Agent,
        session_id: str,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        self.agent = agent
        self.session_id = session_id
        self.read = read
        self.write = write
        self.sleep = sleep
        self.logger = logger or logging.getLogger(__name__)

    async def relay(self, message: str) -> int:
        """Send one message and print every chunk in arrival order. Returns the chunk count."""
        count = 0
        async for chunk in self.agent.stream(message, self.session_id):
            self.write(format_chunk(chunk))
            self.write(SEPARATOR)
            count += 1
        return count

    async def run_chat_mode(self) -> None:
        self.write("Starting chat mode... Type 'exit' to end.")

        while True:
            try:
                user_input = await asyncio.to_thread(self.read, "\nPrompt: ")
            except EOFError:
                break

            user_input = user_input.strip()
            if user_input.lower() == "exit":
                break
            if not user_input:
                continue

            await self.relay(user_input)

    async def run_autonomous_mode(self, interval: float, max_cycles: Optional[int] = None) -> None:
        """Prompt the agent every ``interval`` seconds; errors end the loop by propagating."""
        self.write("Starting autonomous mode...")

        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            await self.relay(AUTONOMOUS_PROMPT)
            cycles += 1
            self.logger.debug("Autonomous cycle %s complete", cycles)
            await self.sleep(interval)
