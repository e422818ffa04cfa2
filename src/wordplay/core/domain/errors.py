"""
Domain Errors

Exception taxonomy for the agent orchestrator. None of these are fatal to
the hosting process: the tool executor converts tool-level errors into failed
ToolResults, and the planner, reflector and synthesizer recover from
ModelCallError with deterministic fallbacks.
"""


class WordPlayError(Exception):
    """Base class for all orchestrator errors."""


class DuplicateToolError(WordPlayError):
    """Raised when a tool name is registered twice."""

    def __init__(self, name: str):
        super().__init__(f"Tool '{name}' is already registered")
        self.name = name


class UnknownToolError(WordPlayError):
    """Raised when a tool name is not present in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Tool '{name}' not found")
        self.name = name


class ToolValidationError(WordPlayError):
    """Raised when tool parameters do not match the declared schema."""

    def __init__(self, tool: str, problems: list[str]):
        super().__init__(f"Invalid parameters for '{tool}': {'; '.join(problems)}")
        self.tool = tool
        self.problems = problems


class ToolExecutionError(WordPlayError):
    """Wraps an exception raised inside a tool body."""

    def __init__(self, tool: str, cause: BaseException):
        super().__init__(str(cause) or type(cause).__name__)
        self.tool = tool
        self.cause = cause


class ModelCallError(WordPlayError):
    """Upstream language-model call failed (timeout, invalid model, provider error)."""

    def __init__(self, message: str, error_type: str | None = None, model: str | None = None):
        super().__init__(message)
        self.error_type = error_type
        self.model = model


class BudgetExceededError(WordPlayError):
    """
    Iteration or wall-clock budget reached.

    Not a failure: the autonomous loop catches it and reports the reason as a
    normal termination cause.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
