"""Extracts Thought / Action / FinalAnswer directives from a raw model reply."""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from agents.models import Action
from utils.json_parser import parse_json
from utils.logger import get_logger

logger = get_logger(__name__)

_THOUGHT_RE = re.compile(r"<Thought>(.*?)</Thought>", re.DOTALL)
_ACTION_RE = re.compile(r"<Action>(.*?)</Action>", re.DOTALL)
_FINAL_ANSWER_RE = re.compile(r"<FinalAnswer>(.*?)</FinalAnswer>", re.DOTALL)
# Older prompt revisions used these spellings; accepted on input, never requested.
_LEGACY_FINAL_ANSWER_RE = re.compile(r"<Final_Answer>(.*?)</Final_Answer>", re.DOTALL)
_LEGACY_ACTION_RE = re.compile(r"^\s*Tool:\s*(?P<tool>\S+)\s*(?:Parameters:\s*(?P<params>.*))?$", re.DOTALL)


@dataclass
class ParsedResponse:
    thoughts: List[str] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)
    final_answer: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.thoughts and not self.actions and self.final_answer is None


class TaggedResponseParser:
    """Never raises: unusable fragments are dropped so the loop can self-correct."""

    def parse(self, text: str) -> ParsedResponse:
        if not isinstance(text, str) or not text:
            return ParsedResponse()

        return ParsedResponse(
            thoughts=[m.strip() for m in _THOUGHT_RE.findall(text)],
            actions=self._extract_actions(text),
            final_answer=self._extract_final_answer(text),
        )

    def _extract_final_answer(self, text: str) -> Optional[str]:
        match = _FINAL_ANSWER_RE.search(text) or _LEGACY_FINAL_ANSWER_RE.search(text)
        return match.group(1).strip() if match else None

    def _extract_actions(self, text: str) -> List[Action]:
        actions: List[Action] = []
        for body in _ACTION_RE.findall(text):
            action = self._parse_action_block(body.strip())
            if action is None:
                logger.debug("action_block_dropped", block=body.strip()[:200])
                continue
            actions.append(action)
        return actions

    def _parse_action_block(self, body: str) -> Optional[Action]:
        try:
            payload: Any = parse_json(body)
        except json.JSONDecodeError:
            return self._parse_legacy_block(body)

        if not isinstance(payload, dict):
            return None
        return self._to_action(payload.get("tool"), payload.get("parameters"))

    def _parse_legacy_block(self, body: str) -> Optional[Action]:
        match = _LEGACY_ACTION_RE.match(body)
        if not match:
            return None
        params: Any = {}
        raw_params = (match.group("params") or "").strip()
        if raw_params:
            try:
                params = parse_json(raw_params)
            except json.JSONDecodeError:
                return None
        return self._to_action(match.group("tool"), params)

    @staticmethod
    def _to_action(tool: Any, parameters: Any) -> Optional[Action]:
        if not isinstance(tool, str) or not tool.strip():
            return None
        if parameters is None:
            parameters = {}
        if not isinstance(parameters, dict):
            return None
        return Action(tool=tool.strip(), parameters=parameters)
