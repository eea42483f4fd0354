from __future__ import annotations
import dataclasses
from typing import Optional

from agents.reasoner.models import ReasonerConfig
from agents.retry import BackoffStrategy


@dataclasses.dataclass(frozen=True)
class LLM:
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclasses.dataclass(frozen=True)
class Agent:
    timeout: Optional[float] = None
    max_retries: int = 0
    backoff: BackoffStrategy = BackoffStrategy.EXPONENTIAL
    base_delay: float = 1.0
    detect_thinking_language: bool = False
    cache: bool = False

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"agent.timeout must be positive, got {self.timeout!r}")
        if self.max_retries < 0:
            raise ValueError(f"agent.max_retries must be >= 0, got {self.max_retries!r}")


@dataclasses.dataclass(frozen=True)
class Config:
    llm: LLM = dataclasses.field(default_factory=LLM)
    reasoner: ReasonerConfig = dataclasses.field(default_factory=ReasonerConfig)
    agent: Agent = dataclasses.field(default_factory=Agent)
