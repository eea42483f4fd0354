"""History of finished reasoning runs, kept for inspection and reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from agents.models import ThoughtRecord
from agents.reasoner.models import Result, ResultStatus


@dataclass(frozen=True)
class ThoughtSession:
    input: str
    thoughts: Tuple[ThoughtRecord, ...]
    final_answer: Optional[str]
    status: ResultStatus
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def iterations(self) -> int:
        return len(self.thoughts)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "input": self.input,
            "thoughts": [t.to_dict() for t in self.thoughts],
            "final_answer": self.final_answer,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


class ThoughtsMemory:
    """Append-only list of sessions, one per completed run."""

    def __init__(self) -> None:
        self._sessions: List[ThoughtSession] = []

    def record(self, result: Result) -> ThoughtSession:
        session = ThoughtSession(
            input=result.input,
            thoughts=tuple(result.thoughts),
            final_answer=result.final_answer,
            status=result.status,
            error=result.error,
        )
        self._sessions.append(session)
        return session

    @property
    def sessions(self) -> List[ThoughtSession]:
        return list(self._sessions)

    @property
    def successful_sessions(self) -> List[ThoughtSession]:
        return [s for s in self._sessions if s.status == ResultStatus.SUCCESS]

    @property
    def failed_sessions(self) -> List[ThoughtSession]:
        return [s for s in self._sessions if s.status != ResultStatus.SUCCESS]

    @property
    def average_iterations(self) -> float:
        if not self._sessions:
            return 0.0
        return sum(s.iterations for s in self._sessions) / len(self._sessions)

    def clear(self) -> None:
        self._sessions.clear()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessions": [s.to_dict() for s in self._sessions],
            "total_sessions": len(self._sessions),
            "successful_sessions": len(self.successful_sessions),
            "failed_sessions": len(self.failed_sessions),
            "average_iterations": self.average_iterations,
        }

    def __len__(self) -> int:
        return len(self._sessions)
