from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional

from agents.models import Action, Event, EventSink, EventType, Message, Role, ThoughtRecord


@dataclass
class ReasoningContext:
    """Mutable state of a single ``reason()`` call; never shared between calls."""

    task: str
    max_iterations: int
    event_sink: Optional[EventSink] = None
    thinking_language: Optional[str] = None
    custom_instructions: Optional[str] = None
    messages: List[Message] = field(default_factory=list)
    thoughts: List[ThoughtRecord] = field(default_factory=list)
    iteration: int = 0
    started_at: float = field(default_factory=time.perf_counter)

    @property
    def current_step(self) -> int:
        """1-based step number used on thought records."""
        return self.iteration + 1

    def max_iterations_reached(self) -> bool:
        return self.iteration >= self.max_iterations

    def increment_iteration(self) -> int:
        self.iteration += 1
        return self.iteration

    def emit(self, event_type: EventType, content: Any) -> None:
        if self.event_sink is not None:
            self.event_sink(Event(type=event_type, content=content))

    def add_message(self, role: Role, content: str) -> None:
        self.messages.append(Message(role=role, content=content))

    def add_thought(self, thought: str) -> ThoughtRecord:
        record = ThoughtRecord(step=self.current_step, thought=thought)
        self.thoughts.append(record)
        return record

    def update_last_thought(self, action: Action, observation: str) -> None:
        if not self.thoughts:
            return
        self.thoughts[-1] = replace(self.thoughts[-1], action=action, observation=observation)

    def last_assistant_content(self) -> Optional[str]:
        return next((m.content for m in reversed(self.messages) if m.role == Role.ASSISTANT), None)
