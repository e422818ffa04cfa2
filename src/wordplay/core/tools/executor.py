"""
Tool Executor

Invokes one named tool against the ExecutionContext with uniform timing,
error wrapping and history recording. The executor never raises: unknown
tools, invalid parameters and exceptions inside tool bodies all come back as
failed ToolResults, so the autonomous loop needs no exception handling for
tool calls.
"""

import time
from typing import Any

import structlog

from wordplay.core.domain.context import ExecutionContext
from wordplay.core.domain.errors import (
    ToolExecutionError,
    ToolValidationError,
    UnknownToolError,
)
from wordplay.core.domain.models import ExecutionStep, ToolResult
from wordplay.core.tools.registry import ToolRegistry


class ToolExecutor:
    def __init__(self, registry: ToolRegistry):
        self.registry = registry
        self.logger = structlog.get_logger().bind(component="tool_executor")

    async def execute(
        self,
        tool_name: str,
        params: dict[str, Any] | None,
        context: ExecutionContext,
        reasoning: str = "",
    ) -> ToolResult:
        """
        Execute a tool and record exactly two history steps (attempt + result).

        Args:
            tool_name: Registered tool name
            params: Raw parameters (validated against the tool schema)
            context: Session context the tool reads and mutates
            reasoning: Why the call was made; stored on both history steps

        Returns:
            ToolResult stamped with the tool name and elapsed time
        """
        params = dict(params or {})
        context.record_step(
            ExecutionStep(
                action=f"Attempting {tool_name}",
                tool_used=tool_name,
                parameters=params,
                reasoning=reasoning,
            )
        )

        start = time.perf_counter()
        try:
            tool = self.registry.get(tool_name)
            clean_params = tool.validate_params(params)
            self.logger.info("tool_execute", tool=tool_name, params_keys=list(clean_params))
            try:
                raw = await tool.execute(clean_params, context)
            except Exception as e:
                raise ToolExecutionError(tool_name, e) from e
            result = self._to_result(tool_name, raw, start)
        except UnknownToolError as e:
            self.logger.warning("tool_unknown", tool=tool_name)
            result = self._failure(tool_name, str(e), start)
        except ToolValidationError as e:
            self.logger.warning("tool_invalid_params", tool=tool_name, problems=e.problems)
            result = self._failure(tool_name, str(e), start)
        except ToolExecutionError as e:
            self.logger.error(
                "tool_exception",
                tool=tool_name,
                error=str(e),
                error_type=type(e.cause).__name__,
            )
            result = self._failure(tool_name, str(e), start)

        if result.success:
            self.logger.info(
                "tool_complete", tool=tool_name, execution_time_ms=round(result.execution_time_ms, 1)
            )
        else:
            self.logger.warning("tool_failed", tool=tool_name, error=result.error)

        context.record_step(
            ExecutionStep(
                action=f"Result of {tool_name}",
                tool_used=tool_name,
                parameters=params,
                result=result,
                success=result.success,
                reasoning=reasoning,
            )
        )
        return result

    @staticmethod
    def _elapsed_ms(start: float) -> float:
        return max(0.0, (time.perf_counter() - start) * 1000)

    def _to_result(self, tool_name: str, raw: Any, start: float) -> ToolResult:
        if not isinstance(raw, dict):
            return self._failure(
                tool_name, f"Tool returned invalid type: {type(raw).__name__}", start
            )
        success = bool(raw.get("success", False))
        return ToolResult(
            success=success,
            tool=tool_name,
            execution_time_ms=self._elapsed_ms(start),
            data=raw.get("data"),
            error=None if success else raw.get("error") or "Tool reported failure",
            message=raw.get("message"),
        )

    def _failure(self, tool_name: str, error: str, start: float) -> ToolResult:
        return ToolResult(
            success=False,
            tool=tool_name,
            execution_time_ms=self._elapsed_ms(start),
            error=error,
        )
