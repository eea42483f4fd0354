"""Canonical result and configuration models for reasoners."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from agents.models import ThoughtRecord

__all__ = [
    "ToolFailurePolicy",
    "ReasonerConfig",
    "ResultStatus",
    "Result",
]


class ToolFailurePolicy(str, Enum):
    """What the loop does after a tool could not be found or failed."""

    CONTINUE = "continue"  # feed the error back as an observation
    ABORT = "abort"        # stop with a failed result


@dataclass(frozen=True)
class ReasonerConfig:
    """Immutable settings resolved once per reasoner construction."""

    max_iterations: int = 10
    tool_failure_policy: ToolFailurePolicy = ToolFailurePolicy.CONTINUE
    thinking_language: Optional[str] = None
    # A callable is evaluated once at the start of every reasoning call.
    custom_instructions: Union[str, Callable[[], str], None] = None

    def __post_init__(self) -> None:
        if not isinstance(self.max_iterations, int) or self.max_iterations < 1:
            raise ValueError(f"max_iterations must be a positive integer, got {self.max_iterations!r}")

    def resolve_instructions(self) -> Optional[str]:
        if callable(self.custom_instructions):
            return self.custom_instructions()
        return self.custom_instructions


class ResultStatus(str, Enum):
    SUCCESS = "success"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"
    FAILED = "failed"
    TIMEOUT = "timeout"
    PENDING = "pending"


class Result(BaseModel):
    """Terminal outcome of one reasoning call."""

    model_config = ConfigDict(frozen=True)

    input: str
    thoughts: Tuple[ThoughtRecord, ...] = ()
    final_answer: Optional[str] = None
    status: ResultStatus = ResultStatus.PENDING
    error: Optional[str] = None
    execution_time: Optional[float] = None
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)

    @property
    def successful(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == ResultStatus.FAILED

    @property
    def timed_out(self) -> bool:
        return self.status == ResultStatus.TIMEOUT

    @property
    def max_iterations_reached(self) -> bool:
        return self.status == ResultStatus.MAX_ITERATIONS_REACHED

    @property
    def iterations(self) -> int:
        return len(self.thoughts)

    def summary(self) -> str:
        if self.status == ResultStatus.SUCCESS:
            return f"Success: {_truncate(self.final_answer)}"
        if self.status == ResultStatus.FAILED:
            return f"Failed: {self.error}"
        if self.status == ResultStatus.TIMEOUT:
            return "Timeout: Execution exceeded time limit"
        if self.status == ResultStatus.MAX_ITERATIONS_REACHED:
            return f"Max iterations reached: {self.iterations} iterations"
        return f"Status: {self.status.value}"

    def execution_details(self) -> Dict[str, Any]:
        return {
            "iterations": self.iterations,
            "confidence": f"{self.confidence_score * 100:.1f}%",
            "time": f"{self.execution_time:.2f}s" if self.execution_time is not None else "N/A",
            "status": self.status.value,
        }

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "input": self.input,
            "thoughts": [t.to_dict() for t in self.thoughts],
            "final_answer": self.final_answer,
            "confidence_score": self.confidence_score,
            "status": self.status.value,
            "error": self.error,
            "execution_time": self.execution_time,
            "iterations": self.iterations,
        }
        return {k: v for k, v in data.items() if v is not None}


def _truncate(text: Optional[str], length: int = 100) -> Optional[str]:
    if text is None or len(text) <= length:
        return text
    return text[:length] + "..."
