from __future__ import annotations

import copy
import time
from typing import Callable, Optional, Sequence

from agents.models import ThoughtRecord
from agents.reasoner.models import Result, ResultStatus

BASE_CONFIDENCE = 0.85
CONFIDENCE_PENALTY_PER_THOUGHT = 0.05
MIN_CONFIDENCE = 0.5


class ResultBuilder:
    """Assembles the immutable :class:`Result` of a reasoning call."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self.clock = clock

    def build(
        self,
        input: str,
        thoughts: Sequence[ThoughtRecord],
        final_answer: Optional[str],
        status: ResultStatus,
        error: Optional[str] = None,
        started_at: Optional[float] = None,
    ) -> Result:
        execution_time = None
        if started_at is not None:
            execution_time = max(self.clock() - started_at, 0.0)

        return Result(
            input=input,
            thoughts=tuple(copy.deepcopy(list(thoughts))),
            final_answer=final_answer,
            status=status,
            error=error,
            execution_time=execution_time,
            confidence_score=self.confidence_score(thoughts, status),
        )

    @staticmethod
    def confidence_score(thoughts: Sequence[ThoughtRecord], status: ResultStatus) -> float:
        # Fewer steps to a successful answer reads as higher confidence.
        if status != ResultStatus.SUCCESS:
            return 0.0
        return max(BASE_CONFIDENCE - CONFIDENCE_PENALTY_PER_THOUGHT * len(thoughts), MIN_CONFIDENCE)
