"""Lightweight chat-model interface consumed by the reasoner."""
from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from agents.models import Message, Role
from utils.logger import get_logger

logger = get_logger(__name__)


class BaseLLM(ABC):
    """Minimal synchronous chat-LLM interface.

    • Accepts an ordered sequence of :class:`Message`.
    • Returns an :class:`LLMResponse` whose ``content`` is the assistant reply.
    • Transport errors are raised as-is; the reasoner treats them as fatal.
    • Implementations SHOULD be stateless; auth + model name given at init.
    """

    @dataclass(frozen=True)
    class LLMResponse:
        content: str
        prompt_tokens: Optional[int] = None
        completion_tokens: Optional[int] = None
        total_tokens: Optional[int] = None

    def __init__(self, model: str | None = None, temperature: float | None = None) -> None:
        self.model = model or os.getenv("LLM_MODEL")
        if not self.model:
            raise ValueError("No model configured. Pass `model=` or set the LLM_MODEL environment variable.")
        self.temperature = temperature

    @abstractmethod
    def chat(self, messages: Sequence[Message], **kwargs) -> "BaseLLM.LLMResponse": ...

    def prompt(self, content: str, **kwargs) -> str:
        """Convenience method for single user prompts."""
        return self.chat([Message(role=Role.USER, content=content)], **kwargs).content
