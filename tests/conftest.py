import pytest
from typing import Any, Dict, List, Sequence

from agents.llm.base_llm import BaseLLM
from agents.models import Event, Message
from agents.tools.base import Tool


class ScriptedLLM(BaseLLM):
    """Replays canned replies in order and records every request."""

    def __init__(self, replies: Sequence[str] | None = None, *, repeat_last: bool = False):
        # Intentionally do not call super().__init__ to avoid model env requirement
        self.model = "scripted"
        self.temperature = None
        self.replies = list(replies or [])
        self.repeat_last = repeat_last
        self.calls: List[List[Message]] = []

    def chat(self, messages: Sequence[Message], **kwargs) -> BaseLLM.LLMResponse:  # type: ignore[override]
        self.calls.append(list(messages))
        if not self.replies:
            return BaseLLM.LLMResponse(content="")
        reply = self.replies[0] if self.repeat_last and len(self.replies) == 1 else self.replies.pop(0)
        return BaseLLM.LLMResponse(content=reply, prompt_tokens=10, completion_tokens=5, total_tokens=15)


class FailingLLM(BaseLLM):
    def __init__(self, error: Exception):
        self.model = "failing"
        self.temperature = None
        self.error = error
        self.calls = 0

    def chat(self, messages: Sequence[Message], **kwargs) -> BaseLLM.LLMResponse:  # type: ignore[override]
        self.calls += 1
        raise self.error


class CalculatorTool(Tool):
    description = "Evaluates simple arithmetic"
    parameters = {"expression": {"type": "string", "description": "Expression to evaluate"}}
    required = ["expression"]

    def call(self, expression: str) -> str:
        left, _, right = expression.partition("+")
        return str(int(left) + int(right))


class EchoTool(Tool):
    name = "echo"
    description = "Returns its arguments"
    parameters = {
        "text": {"type": "string", "description": "Text to echo"},
        "times": {"type": "integer", "description": "Repeat count", "default": 1},
    }
    required = ["text"]

    def __init__(self) -> None:
        self.received: List[Dict[str, Any]] = []

    def call(self, text: str, times: int) -> str:
        self.received.append({"text": text, "times": times})
        return text * int(times)


class BrokenTool(Tool):
    name = "broken"
    description = "Always fails"

    def call(self, **kwargs: Any) -> str:
        raise RuntimeError("disk on fire")


class EventRecorder:
    def __init__(self) -> None:
        self.events: List[Event] = []

    def __call__(self, event: Event) -> None:
        self.events.append(event)

    @property
    def types(self) -> List[str]:
        return [e.type.value for e in self.events]


@pytest.fixture
def calculator() -> CalculatorTool:
    return CalculatorTool()


@pytest.fixture
def echo() -> EchoTool:
    return EchoTool()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()
