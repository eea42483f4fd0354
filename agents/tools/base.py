"""Tool abstraction consumed by the ReAct reasoner."""
from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Sequence

from agents.tools.exceptions import ToolError


def _default_tool_name(class_name: str) -> str:
    return re.sub(r"Tool$", "", class_name).lower() or "anonymous"


class Tool(ABC):
    """A named capability with a declared parameter schema.

    Subclasses set ``description``, ``parameters`` (property name -> ``{"type", "description"}``,
    optionally ``"default"``) and ``required``, and implement :meth:`call`.
    ``name`` defaults to the lower-cased class name without a ``Tool`` suffix,
    so ``CalculatorTool`` is registered as ``calculator``.
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = "No description provided"
    parameters: ClassVar[Dict[str, Dict[str, Any]]] = {}
    required: ClassVar[Sequence[str]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.__dict__.get("name"):
            cls.name = _default_tool_name(cls.__name__)

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.name})"

    def get_schema(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {
                "type": "object",
                "properties": {k: dict(v) for k, v in self.parameters.items()},
                "required": list(self.required),
            },
        }

    def execute(self, params: Dict[str, Any]) -> str:
        """Check required parameters, apply defaults and run the tool."""
        arguments = dict(params)
        missing: List[str] = []
        for key, schema in self.parameters.items():
            if key in arguments:
                continue
            if "default" in schema:
                arguments[key] = schema["default"]
            elif key in self.required:
                missing.append(key)
        missing.extend(k for k in self.required if k not in self.parameters and k not in arguments)
        if missing:
            raise ToolError(f"Missing required parameter: {', '.join(missing)}", tool_name=self.name)

        result = self.call(**arguments)
        if isinstance(result, str):
            return result
        if isinstance(result, (dict, list)):
            return json.dumps(result, ensure_ascii=False, default=str)
        return str(result)

    @abstractmethod
    def call(self, **kwargs: Any) -> Any:
        """Do the tool's work; any exception is reported back to the model."""
        ...
