"""Resolves an action to a registered tool and runs it."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from agents.tools.base import Tool
from agents.tools.exceptions import ToolExecutionError, ToolNotFoundError
from utils.logger import get_logger
from utils.observability import observe

logger = get_logger(__name__)


class ToolDispatcher:
    """Stateless bridge between parsed actions and tool implementations.

    Lookup is a case-insensitive exact match on the tool's declared name.
    Whatever the tool raises comes back as ``ToolExecutionError``.
    """

    def __init__(self, tools: Sequence[Tool]) -> None:
        self.tools = tuple(tools)

    def find(self, tool_name: str) -> Optional[Tool]:
        wanted = str(tool_name).strip().lower()
        return next((t for t in self.tools if t.name.lower() == wanted), None)

    @observe
    def execute(self, tool_name: str, params: Mapping[str, Any]) -> str:
        tool = self.find(tool_name)
        if tool is None:
            raise ToolNotFoundError(tool_name)

        arguments = self.coerce_parameters(tool, params)
        logger.info("tool_execute", tool=tool.name, param_count=len(arguments))
        try:
            return tool.execute(arguments)
        except Exception as exc:
            raise ToolExecutionError(str(exc), tool_name=tool.name) from exc

    @staticmethod
    def coerce_parameters(tool: Tool, params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Map incoming keys onto the tool's declared parameter names."""
        if not params:
            return {}
        declared = {key.lower(): key for key in tool.parameters}
        if not declared:
            return {str(k): v for k, v in params.items()}

        arguments: Dict[str, Any] = {}
        dropped = []
        for key, value in params.items():
            target = declared.get(str(key).strip().lower())
            if target is None:
                dropped.append(str(key))
                continue
            arguments[target] = value
        if dropped:
            logger.debug("tool_params_dropped", tool=tool.name, keys=dropped)
        return arguments
