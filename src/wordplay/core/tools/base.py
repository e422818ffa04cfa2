# ============================================
# BASE TOOL INTERFACE
# ============================================

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from wordplay.core.domain.errors import ToolValidationError

if TYPE_CHECKING:
    from wordplay.core.domain.context import ExecutionContext


INTEGER_PATTERN = re.compile(r"-?[0-9]+")


class ParamType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    ANY = "any"


@dataclass(frozen=True)
class ParamSpec:
    """Typed parameter descriptor: primitive type plus required/optional kind."""

    type: ParamType
    required: bool = True
    description: str = ""

    @classmethod
    def optional(cls, type: ParamType, description: str = "") -> "ParamSpec":
        return cls(type=type, required=False, description=description)


def _coerce(value: Any, param_spec: ParamSpec) -> tuple[bool, Any]:
    """Return (ok, coerced_value) for a single parameter."""
    if param_spec.type is ParamType.ANY:
        return True, value
    if param_spec.type is ParamType.STRING:
        return isinstance(value, str), value
    if param_spec.type is ParamType.BOOLEAN:
        return isinstance(value, bool), value
    if param_spec.type is ParamType.INTEGER:
        if isinstance(value, bool):
            return False, value
        if isinstance(value, int):
            return True, value
        if isinstance(value, float) and value.is_integer():
            return True, int(value)
        if isinstance(value, str) and INTEGER_PATTERN.fullmatch(value.strip()):
            return True, int(value.strip())
        return False, value
    if param_spec.type is ParamType.NUMBER:
        if isinstance(value, bool):
            return False, value
        return isinstance(value, (int, float)), value
    if param_spec.type is ParamType.OBJECT:
        return isinstance(value, dict), value
    if param_spec.type is ParamType.ARRAY:
        return isinstance(value, (list, tuple)), list(value) if isinstance(value, tuple) else value
    return False, value


class Tool(ABC):
    """Base class for all agent tools"""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @property
    def parameters(self) -> dict[str, ParamSpec]:
        """Override to declare the tool's parameters."""
        return {}

    @property
    def parameters_schema(self) -> dict[str, Any]:
        """JSON-schema rendering of `parameters` for prompts and API listings"""
        properties = {}
        required = []
        for param_name, param_spec in self.parameters.items():
            prop: dict[str, Any] = {"description": param_spec.description or f"Parameter {param_name}"}
            if param_spec.type is not ParamType.ANY:
                prop["type"] = param_spec.type.value
            properties[param_name] = prop
            if param_spec.required:
                required.append(param_name)
        return {"type": "object", "properties": properties, "required": required}

    def validate_params(self, params: dict[str, Any] | None) -> dict[str, Any]:
        """
        Check params against the declared schema before dispatch.

        Undeclared keys are dropped; digit strings are coerced for integer
        parameters; explicit None for an optional parameter counts as absent.

        Raises:
            ToolValidationError: On missing required params or type mismatches
        """
        params = params or {}
        clean: dict[str, Any] = {}
        problems: list[str] = []

        for param_name, param_spec in self.parameters.items():
            if param_name not in params or params[param_name] is None:
                if param_spec.required:
                    problems.append(f"missing required parameter '{param_name}'")
                continue
            ok, value = _coerce(params[param_name], param_spec)
            if not ok:
                problems.append(
                    f"'{param_name}' expected {param_spec.type.value}, "
                    f"got {type(params[param_name]).__name__}"
                )
                continue
            clean[param_name] = value

        if problems:
            raise ToolValidationError(self.name, problems)
        return clean

    @abstractmethod
    async def execute(
        self, params: dict[str, Any], context: "ExecutionContext"
    ) -> dict[str, Any]:
        """
        Run the tool body.

        Returns:
            Dict with "success" and optionally "data", "message", "error".
        """
        pass
