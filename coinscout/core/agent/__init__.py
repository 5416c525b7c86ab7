"""
Agent package: action dispatcher and the LLM tool-calling runtime.
"""

from .actions import ActionDispatcher, RegisteredAction
from .runtime import AgentRuntime

__all__ = [
    "ActionDispatcher",
    "AgentRuntime",
    "RegisteredAction",
]
