"""
LLM call structures.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class LLMResponse:
    """Response from LLM provider."""

    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0


@dataclass
class LLMConfig:
    """Configuration for LLM call."""

    model: str
    max_tokens: int = 256
    temperature: float = 0.0
    system_prompt: str | None = None
    json_mode: bool = False  # ask the provider for a bare JSON object


@runtime_checkable
class CompletionClient(Protocol):
    """Anything that can turn messages into an LLMResponse."""

    async def complete(self, messages: list[dict], config: LLMConfig) -> LLMResponse:
        ...
