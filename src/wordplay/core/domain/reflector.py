"""
Reflector

Periodic, advisory self-assessment over recent execution history. The result
is logged and attached to the execution log; it never changes autonomy level
or stops an iteration by itself.
"""

import json

import structlog

from wordplay.core.domain.errors import ModelCallError
from wordplay.core.domain.models import ExecutionStep, Goal, ReflectionResult
from wordplay.core.domain.parsing import parse_json_object
from wordplay.core.interfaces.llm import LLMProviderProtocol, ProviderConfig
from wordplay.core.prompts.agent_prompts import REFLECTION_SYSTEM_PROMPT, REFLECTION_USER_PROMPT

REFLECTION_WINDOW = 10
NEUTRAL_ADVICE = "continue with current approach"


def success_rate(steps: list[ExecutionStep]) -> float:
    if not steps:
        return 0.0
    return sum(1 for s in steps if s.success) / len(steps)


def _as_str_list(value: object) -> list[str]:
    if isinstance(value, list):
        return [str(v) for v in value]
    if isinstance(value, str) and value:
        return [value]
    return []


class Reflector:
    def __init__(self, llm_provider: LLMProviderProtocol):
        self.llm_provider = llm_provider
        self.logger = structlog.get_logger().bind(component="reflector")

    async def reflect(
        self,
        goal: Goal | None,
        recent_history: list[ExecutionStep],
        provider_config: ProviderConfig | None = None,
    ) -> ReflectionResult:
        """
        Assess the last REFLECTION_WINDOW result steps.

        Args:
            goal: Goal being pursued (may be None)
            recent_history: History steps; attempt records are ignored
            provider_config: Model selection for the narrative call

        Returns:
            ReflectionResult; a neutral fallback when the model call fails
        """
        window = [s for s in recent_history if s.is_result][-REFLECTION_WINDOW:]
        rate = success_rate(window)
        history = [
            {
                "tool": s.tool_used,
                "success": s.success,
                "error": s.result.error if s.result else None,
                "reasoning": s.reasoning,
            }
            for s in window
        ]
        user_prompt = REFLECTION_USER_PROMPT.format(
            goal=goal.description if goal else "(no explicit goal)",
            window=len(window),
            success_rate=rate,
            history=json.dumps(history, indent=2),
        )

        try:
            raw = await self.llm_provider.complete(
                REFLECTION_SYSTEM_PROMPT, user_prompt, provider_config
            )
            data = parse_json_object(raw)
        except (ModelCallError, ValueError) as e:
            self.logger.warning("reflection_fallback", error=str(e), success_rate=rate)
            return self.fallback(rate)

        result = ReflectionResult(
            analysis=str(data.get("analysis") or NEUTRAL_ADVICE),
            improvements=_as_str_list(data.get("improvements")),
            tool_recommendations=_as_str_list(data.get("tool_recommendations")),
            strategy_adjustments=_as_str_list(data.get("strategy_adjustments")),
            success_rate=rate,
        )
        self.logger.info(
            "reflection_complete",
            success_rate=round(rate, 2),
            recommendations=result.tool_recommendations,
        )
        return result

    @staticmethod
    def fallback(rate: float) -> ReflectionResult:
        return ReflectionResult(
            analysis=NEUTRAL_ADVICE,
            improvements=[],
            tool_recommendations=[],
            strategy_adjustments=[NEUTRAL_ADVICE],
            success_rate=rate,
            used_fallback=True,
        )
