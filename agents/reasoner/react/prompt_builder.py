"""Renders the ReAct system prompt from the tool set and reasoner settings."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from agents.prompts import load_prompts
from agents.tools.base import Tool

_REQUIRED_PROMPTS = [
    "default_preamble",
    "custom_instructions",
    "tool_catalog",
    "no_tools",
    "iteration_limit",
    "thinking_language",
    "output_format",
]


class PromptBuilder:
    """Pure function of its arguments: identical inputs give byte-identical prompts.

    Sections, in order: preamble (default framing or scoped custom
    instructions), tool catalog, iteration limit, thinking language and the
    output-format contract. Optional sections are omitted when unset.
    """

    def __init__(self, profile: str = "react") -> None:
        self.prompts = load_prompts(profile, required_prompts=_REQUIRED_PROMPTS)

    def build_system_prompt(
        self,
        tools: Sequence[Tool],
        max_iterations: Optional[int],
        thinking_language: Optional[str] = None,
        custom_instructions: Optional[str] = None,
    ) -> str:
        sections: List[str] = []

        if custom_instructions and custom_instructions.strip():
            sections.append(self._render("custom_instructions", instructions=custom_instructions.strip()))
        else:
            sections.append(self._render("default_preamble"))

        if tools:
            sections.append(self._render("tool_catalog", tools=self.format_tools(tools)))
        else:
            sections.append(self._render("no_tools"))

        if max_iterations:
            sections.append(self._render("iteration_limit", max_iterations=max_iterations))

        if thinking_language and thinking_language.strip():
            sections.append(self._render("thinking_language", language=thinking_language.strip()))

        sections.append(self._render("output_format"))
        return "\n\n".join(sections)

    def format_tools(self, tools: Sequence[Tool]) -> str:
        lines: List[str] = []
        for tool in tools:
            schema = tool.get_schema()
            params = self.format_parameters(schema["parameters"])
            lines.append(f"- {schema['name']}: {schema['description']}\n  Parameters: {params}")
        return "\n".join(lines)

    @staticmethod
    def format_parameters(params_schema: Dict[str, Any]) -> str:
        properties: Dict[str, Dict[str, Any]] = params_schema.get("properties") or {}
        if not properties:
            return "none"
        required = set(params_schema.get("required") or [])
        parts = []
        for name, config in properties.items():
            flag = "(required)" if name in required else "(optional)"
            parts.append(f"{name} {flag} [{config.get('type', 'string')}] - {config.get('description', '')}")
        return ", ".join(parts)

    def _render(self, key: str, **values: Any) -> str:
        return self.prompts[key].format(**values).strip()
