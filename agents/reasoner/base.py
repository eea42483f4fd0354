from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from agents.models import EventSink
from agents.reasoner.models import Result


class BaseReasoner(ABC):
    """
    Turns a task into a terminal :class:`Result`.

        Args:
            task: The natural-language task, already validated by the caller.
            event_sink: Optional callback receiving every event synchronously, in order.

        Returns:
            Exactly one Result per call. Model transport errors propagate unchanged.
    """

    @abstractmethod
    def reason(self, task: str, event_sink: Optional[EventSink] = None) -> Result: ...
