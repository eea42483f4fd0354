"""Data models shared by the agent, the reasoner and its collaborators."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

__all__ = ["Role", "Message", "Action", "ThoughtRecord", "EventType", "Event", "EventSink"]


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single chat turn sent to or received from the model."""

    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class Action:
    """A tool invocation requested by the model."""

    tool: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"tool": self.tool, "parameters": dict(self.parameters)}


@dataclass(frozen=True)
class ThoughtRecord:
    """One parsed thought; a copy carrying action and observation replaces it when a tool runs."""

    step: int
    thought: str
    action: Optional[Action] = None
    observation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"step": self.step, "thought": self.thought}
        if self.action is not None:
            data["action"] = self.action.to_dict()
        if self.observation is not None:
            data["observation"] = self.observation
        return data


class EventType(str, Enum):
    THOUGHT = "thought"
    ACTION = "action"
    OBSERVATION = "observation"
    FINAL_ANSWER = "final_answer"
    ERROR = "error"


@dataclass(frozen=True)
class Event:
    type: EventType
    content: Any


EventSink = Callable[[Event], None]
