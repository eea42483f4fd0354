"""
ReActAgent

Lightweight façade that wires together the core runtime services (LLM, tools,
memories) with the ReAct reasoner. The agent owns the services and the run
lifecycle (validation, hooks, retries, deadline, memory updates); the reasoner
only turns one task into one result.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from enum import Enum
from typing import Dict, Optional, Sequence

from agents.hooks import AgentHooks, ErrorAction
from agents.language import LanguageDetector
from agents.llm.base_llm import BaseLLM
from agents.memory.conversation import ConversationMemory
from agents.memory.thoughts import ThoughtsMemory
from agents.models import EventSink, Role
from agents.reasoner.models import ReasonerConfig, Result, ResultStatus
from agents.reasoner.react.engine import ReActReasoner
from agents.reasoner.react.result_builder import ResultBuilder
from agents.retry import NoRetry, RetryPolicy
from agents.tools.base import Tool
from utils.logger import get_logger

logger = get_logger(__name__)


class AgentState(str, Enum):
    READY               = "READY"
    BUSY                = "BUSY"
    NEEDS_ATTENTION     = "NEEDS_ATTENTION"


class ReActAgent:
    """Top-level class that runs tasks through the ReAct loop."""

    def __init__(
        self,
        llm: BaseLLM,
        tools: Sequence[Tool] = (),
        memory: Optional[ConversationMemory] = None,
        config: ReasonerConfig = ReasonerConfig(),

        # Optionals
        retry_policy: Optional[RetryPolicy] = None,
        timeout: Optional[float] = None,
        hooks: Optional[AgentHooks] = None,
        detect_thinking_language: bool = False,
        thoughts_memory: Optional[ThoughtsMemory] = None,
        cache: bool = False,
    ):
        """Initializes the agent.

        Args:
            llm: The language model instance.
            tools: Tools the model may call, in catalog order.
            memory: Conversation memory replayed before each task.
            config: Reasoner settings (iteration budget, failure policy, ...).

            retry_policy: How a run that raised is retried. Defaults to no retry.
            timeout: Seconds a whole run may take before a timeout result is returned.
            hooks: Lifecycle callbacks.
            detect_thinking_language: Ask the model for the task's language when
                ``config.thinking_language`` is not set.
            thoughts_memory: Where finished runs are recorded.
            cache: Return the stored result when the same task is run again.
        """
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be a positive number of seconds")

        self.llm = llm
        self.tools = tuple(tools)
        self.memory = memory if memory is not None else ConversationMemory()
        self.thoughts_memory = thoughts_memory if thoughts_memory is not None else ThoughtsMemory()
        self.config = config

        self.retry_policy = retry_policy or NoRetry()
        self.timeout = timeout
        self.hooks = hooks or AgentHooks()
        self.language_detector = LanguageDetector(llm) if detect_thinking_language else None
        self.cache = cache
        self._cache_store: Dict[str, Result] = {}

        self.reasoner = ReActReasoner(llm=llm, tools=self.tools, config=config, memory=self.memory)
        self.result_builder = ResultBuilder()

        self._state: AgentState = AgentState.READY

    @property
    def state(self) -> AgentState:
        return self._state

    def run(self, task: str, event_sink: Optional[EventSink] = None) -> Result:
        """Runs a task synchronously and returns exactly one result.

        Raises:
            ValueError: If ``task`` is empty or not a string.
        """
        if not isinstance(task, str) or not task.strip():
            raise ValueError("Input cannot be empty")

        started_at = self.result_builder.clock()
        self._state = AgentState.BUSY
        logger.info("agent_run_started", task=task[:200], timeout=self.timeout)

        try:
            cached = self._cached(task)
            if cached is not None:
                self._state = AgentState.READY
                return cached

            self.hooks.run_before(task)
            result = self._supervise(task, event_sink)
            if result.timed_out:
                self._state = AgentState.NEEDS_ATTENTION
                return result

            self._record(task, result)
            self.hooks.run_after(task, result)
            if self.cache:
                self._cache_store[task] = result
        except Exception as exc:
            self._state = AgentState.NEEDS_ATTENTION
            logger.error("agent_run_failed", error=str(exc), error_type=type(exc).__name__, exc_info=True)
            if self.hooks.run_on_error(task, exc) == ErrorAction.STOP:
                raise
            return self.result_builder.build(
                input=task, thoughts=(), final_answer=None, status=ResultStatus.FAILED,
                error=str(exc), started_at=started_at,
            )

        self._state = AgentState.READY
        logger.info("agent_run_finished", status=result.status.value, iterations=result.iterations)
        return result

    def _supervise(self, task: str, event_sink: Optional[EventSink]) -> Result:
        if self.timeout is None:
            return self._reason(task, event_sink)

        started_at = self.result_builder.clock()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="react-agent")
        try:
            future = executor.submit(self._reason, task, event_sink)
            return future.result(timeout=self.timeout)
        except FutureTimeoutError:
            # The worker keeps running; its result is discarded.
            logger.warning("agent_run_timeout", timeout=self.timeout)
            return self.result_builder.build(
                input=task, thoughts=(), final_answer=None, status=ResultStatus.TIMEOUT,
                error=f"Execution exceeded {self.timeout} seconds", started_at=started_at,
            )
        finally:
            executor.shutdown(wait=False)

    def _reason(self, task: str, event_sink: Optional[EventSink]) -> Result:
        language = self.config.thinking_language
        if language is None and self.language_detector is not None:
            language = self.language_detector.detect(task)
        return self.retry_policy.call(
            lambda: self.reasoner.reason(task, event_sink=event_sink, thinking_language=language)
        )

    def _record(self, task: str, result: Result) -> None:
        self.memory.add(Role.USER, task)
        if result.final_answer:
            self.memory.add(Role.ASSISTANT, result.final_answer)
        self.thoughts_memory.record(result)

    def _cached(self, task: str) -> Optional[Result]:
        if not self.cache:
            return None
        result = self._cache_store.get(task)
        if result is not None:
            logger.info("agent_cache_hit", task=task[:200])
        return result

    def clear_cache(self) -> None:
        self._cache_store.clear()
