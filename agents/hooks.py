"""Lifecycle callbacks registered explicitly on an agent."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from agents.reasoner.models import Result
from utils.logger import get_logger

logger = get_logger(__name__)


class ErrorAction(str, Enum):
    CONTINUE = "continue"  # return a failed result
    STOP = "stop"          # re-raise the error


BeforeRunHook = Callable[[str], None]
AfterRunHook = Callable[[str, Result], None]
ErrorHook = Callable[[str, Exception], Optional[ErrorAction]]


@dataclass
class AgentHooks:
    """Ordered callback lists; each list runs in registration order.

    ``on_error`` hooks may return :class:`ErrorAction`. Any hook answering
    ``STOP`` makes the agent re-raise; the remaining hooks still run.
    """

    before_run: List[BeforeRunHook] = field(default_factory=list)
    after_run: List[AfterRunHook] = field(default_factory=list)
    on_error: List[ErrorHook] = field(default_factory=list)

    def run_before(self, task: str) -> None:
        for hook in self.before_run:
            hook(task)

    def run_after(self, task: str, result: Result) -> None:
        for hook in self.after_run:
            hook(task, result)

    def run_on_error(self, task: str, error: Exception) -> ErrorAction:
        action = ErrorAction.CONTINUE
        for hook in self.on_error:
            if hook(task, error) == ErrorAction.STOP:
                action = ErrorAction.STOP
        logger.debug("error_hooks_ran", hook_count=len(self.on_error), action=action.value)
        return action
