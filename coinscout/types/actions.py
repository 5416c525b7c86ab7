import json
from datetime import datetime
from typing import Any, Dict, Literal

from pydantic import BaseModel, Field

from .market import utc_now


class ActionRequest(BaseModel):
    """A single tool invocation requested by the agent."""
    name: str
    parameters: Dict[str, Any] = Field(default_factory=dict)


class ActionResponse(BaseModel):
    """Outcome of an action: structured data, or an error string."""
    name: str
    payload: Any
    error: bool = False
    timestamp: datetime = Field(default_factory=utc_now)

    def as_text(self) -> str:
        if isinstance(self.payload, str):
            return self.payload
        return json.dumps(self.payload, default=str)


class AgentChunk(BaseModel):
    """One piece of streamed agent output, tagged by where it came from."""
    source: Literal["agent", "tools"]
    content: str
