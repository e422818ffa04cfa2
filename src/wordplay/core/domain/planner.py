"""
Planner

Turns a natural-language request plus the context summary into an initial set
of tool calls. Language understanding is delegated to the model capability;
the planner owns the structured contract for what comes back and never lets a
model failure end the turn.
"""

import json

import structlog

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.errors import ModelCallError
from wordplay.core.domain.models import PlannedToolCall, PlanResult
from wordplay.core.domain.parsing import parse_json_object, parse_tool_calls
from wordplay.core.interfaces.llm import LLMProviderProtocol, ProviderConfig
from wordplay.core.prompts.agent_prompts import PLANNER_SYSTEM_PROMPT, PLANNER_USER_PROMPT
from wordplay.core.tools.registry import ToolRegistry

RESEARCH_KEYWORDS = ("research", "search", "look up", "find information", "find sources")
STYLE_KEYWORDS = ("writing style", "analyze my style", "analyse my style", "tone of")

FALLBACK_RESPONSE = (
    "I'm here to help with your writing project. Could you be more specific "
    "about what you'd like me to do?"
)


def provider_config_for(context: ExecutionContext, json_mode: bool = False) -> ProviderConfig:
    return ProviderConfig(
        provider=context.llm_provider, model=context.llm_model, json_mode=json_mode
    )


class Planner:
    def __init__(self, llm_provider: LLMProviderProtocol, registry: ToolRegistry):
        self.llm_provider = llm_provider
        self.registry = registry
        self.logger = structlog.get_logger().bind(component="planner")

    async def plan(self, request: str, context: ExecutionContext) -> PlanResult:
        """
        Ask the model for a plan; fall back to keyword planning on failure.

        Tool calls naming unregistered tools are dropped.
        """
        system_prompt = PLANNER_SYSTEM_PROMPT.format(
            tools=json.dumps(self.registry.describe(), indent=2),
            context=json.dumps(context.summary(), indent=2, default=str),
        )
        user_prompt = PLANNER_USER_PROMPT.format(request=request)

        try:
            raw = await self.llm_provider.complete(
                system_prompt, user_prompt, provider_config_for(context, json_mode=True)
            )
        except ModelCallError as e:
            self.logger.warning("planner_model_failed", error=str(e))
            return self.fallback_plan(request, context)

        try:
            data = parse_json_object(raw)
        except ValueError as e:
            self.logger.warning("planner_parse_failed", error=str(e), raw=raw[:200])
            # The model answered in prose; keep its words but plan no tools.
            fallback = self.fallback_plan(request, context)
            if not fallback.tool_calls and raw.strip():
                fallback.response = raw.strip()
            return fallback

        tool_calls: list[PlannedToolCall] = []
        if data.get("needs_tools", True):
            tool_calls, rejected = parse_tool_calls(
                data.get("tool_calls"), set(self.registry.names())
            )
            if rejected:
                self.logger.warning("planner_rejected_tools", tools=rejected)

        result = PlanResult(
            plan=data.get("plan") or f'Analyzing request: "{request}"',
            tool_calls=tool_calls,
            response=data.get("response")
            or "I can help you with that. Let me think about the best approach.",
        )
        self.logger.info("plan_created", tool_calls=[c.tool for c in tool_calls])
        return result

    def fallback_plan(self, request: str, context: ExecutionContext) -> PlanResult:
        """Deterministic plan used when the model is unavailable."""
        lowered = request.lower()
        calls: list[PlannedToolCall] = []

        if any(k in lowered for k in RESEARCH_KEYWORDS) and "web_search" in self.registry:
            calls.append(
                PlannedToolCall(
                    tool="web_search",
                    params={"query": request},
                    reasoning="Request asks for research",
                )
            )
        text = context.current_text()
        if text and any(k in lowered for k in STYLE_KEYWORDS) and "analyze_writing_style" in self.registry:
            calls.append(
                PlannedToolCall(
                    tool="analyze_writing_style",
                    params={"text": text},
                    reasoning="Request asks about the current text's style",
                )
            )

        self.logger.info("fallback_plan_created", tool_calls=[c.tool for c in calls])
        return PlanResult(
            plan=f'Processing request: "{request}"',
            tool_calls=calls,
            response=FALLBACK_RESPONSE
            if not calls
            else "I'll work on that with the tools available.",
            used_fallback=True,
        )
