"""
LLM Provider Protocol

The opaque "language model call" capability consumed by the planner,
reflector, synthesizer and the AI writing tools.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ProviderConfig:
    """Per-call provider selection (e.g. provider="openai", model="gpt-4.1-mini")."""

    provider: str | None = None
    model: str | None = None
    temperature: float | None = None
    json_mode: bool = False


class LLMProviderProtocol(Protocol):
    """
    Protocol for single-shot model completions.

    Implementations must signal every provider-specific failure (timeout,
    invalid model, rate limit, empty reply) by raising ModelCallError.
    """

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        provider_config: ProviderConfig | None = None,
    ) -> str:
        """
        Run one completion and return the raw text of the reply.

        Raises:
            ModelCallError: If the upstream call fails for any reason
        """
        ...
