from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from agents.llm.base_llm import BaseLLM
from agents.models import EventSink, EventType, Message, Role
from agents.prompts import load_prompts
from agents.reasoner.base import BaseReasoner
from agents.reasoner.models import ReasonerConfig, Result, ResultStatus, ToolFailurePolicy
from agents.reasoner.react.context import ReasoningContext
from agents.reasoner.react.dispatcher import ToolDispatcher
from agents.reasoner.react.parser import ParsedResponse, TaggedResponseParser
from agents.reasoner.react.prompt_builder import PromptBuilder
from agents.reasoner.react.result_builder import ResultBuilder
from agents.tools.base import Tool
from agents.tools.exceptions import ToolError
from utils.logger import get_logger
from utils.observability import observe

logger = get_logger(__name__)

MAX_ITERATIONS_ANSWER = "I couldn't complete the task within the maximum number of iterations."


class MessageSource(Protocol):
    def to_messages(self) -> List[Message]: ...


class ReActReasoner(BaseReasoner):
    """Thought → Action → Observation loop over a tagged-text protocol.

    Each model reply is parsed for ``<Thought>``, ``<Action>`` and
    ``<FinalAnswer>`` tags. A final answer ends the call immediately; otherwise
    the first action is dispatched and its result is fed back as an
    ``<Observation>``. Replies with nothing actionable get a format reminder.
    The loop makes at most ``config.max_iterations`` model calls.
    """

    def __init__(
        self,
        *,
        llm: BaseLLM,
        tools: Sequence[Tool] = (),
        config: ReasonerConfig = ReasonerConfig(),
        memory: Optional[MessageSource] = None,
        parser: TaggedResponseParser | None = None,
        prompt_builder: PromptBuilder | None = None,
        dispatcher: ToolDispatcher | None = None,
        result_builder: ResultBuilder | None = None,
    ) -> None:
        self.llm = llm
        self.tools = tuple(tools)
        self.config = config
        self.memory = memory
        self.parser = parser or TaggedResponseParser()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.dispatcher = dispatcher or ToolDispatcher(self.tools)
        self.result_builder = result_builder or ResultBuilder()
        self.format_reminder = load_prompts("react", required_prompts=["format_reminder"])["format_reminder"].strip()

    @observe(root=True)
    def reason(
        self,
        task: str,
        event_sink: Optional[EventSink] = None,
        thinking_language: Optional[str] = None,
    ) -> Result:
        ctx = ReasoningContext(
            task=task,
            max_iterations=self.config.max_iterations,
            event_sink=event_sink,
            thinking_language=thinking_language or self.config.thinking_language,
            custom_instructions=self.config.resolve_instructions(),
        )
        ctx.messages.extend(self.initial_messages(ctx))
        logger.info(
            "reasoning_started",
            task=task[:200],
            max_iterations=ctx.max_iterations,
            tool_count=len(self.tools),
            thinking_language=ctx.thinking_language,
        )

        while not ctx.max_iterations_reached():
            reply = self.llm.chat(list(ctx.messages)).content
            parsed = self.parser.parse(reply)

            for thought in parsed.thoughts:
                ctx.emit(EventType.THOUGHT, thought)
                record = ctx.add_thought(thought)
                logger.info("thought_generated", step=record.step, thought=thought[:200])

            if parsed.final_answer is not None:
                return self._finish(ctx, parsed.final_answer)

            if parsed.actions:
                failure = self._act(ctx, reply, parsed)
                if failure is not None and self.config.tool_failure_policy == ToolFailurePolicy.ABORT:
                    logger.warning("reasoning_aborted", iteration=ctx.current_step, error=failure)
                    return self.result_builder.build(
                        input=task,
                        thoughts=ctx.thoughts,
                        final_answer=None,
                        status=ResultStatus.FAILED,
                        error=failure,
                        started_at=ctx.started_at,
                    )
            else:
                logger.warning("no_actionable_content", iteration=ctx.current_step, reply=reply[:200])
                ctx.add_message(Role.ASSISTANT, reply)
                ctx.add_message(Role.USER, self.format_reminder)

            ctx.increment_iteration()

        message = f"Maximum iterations ({ctx.max_iterations}) reached"
        ctx.emit(EventType.ERROR, message)
        logger.warning("max_iterations_reached", max_iterations=ctx.max_iterations, thoughts=len(ctx.thoughts))
        return self.result_builder.build(
            input=task,
            thoughts=ctx.thoughts,
            final_answer=MAX_ITERATIONS_ANSWER,
            status=ResultStatus.MAX_ITERATIONS_REACHED,
            error=message,
            started_at=ctx.started_at,
        )

    def initial_messages(self, ctx: ReasoningContext) -> List[Message]:
        system_prompt = self.prompt_builder.build_system_prompt(
            self.tools,
            ctx.max_iterations,
            thinking_language=ctx.thinking_language,
            custom_instructions=ctx.custom_instructions,
        )
        history = list(self.memory.to_messages()) if self.memory is not None else []
        return [Message(Role.SYSTEM, system_prompt), *history, Message(Role.USER, ctx.task)]

    def _act(self, ctx: ReasoningContext, reply: str, parsed: ParsedResponse) -> Optional[str]:
        """Dispatch the first action; returns the error text when the tool failed."""
        if len(parsed.actions) > 1:
            logger.info("multiple_actions_ignored", iteration=ctx.current_step, count=len(parsed.actions))
        action = parsed.actions[0]
        ctx.emit(EventType.ACTION, action)

        error: Optional[str] = None
        try:
            observation = self.dispatcher.execute(action.tool, action.parameters)
            ctx.emit(EventType.OBSERVATION, observation)
            logger.info("tool_executed", tool=action.tool, observation_preview=observation[:200])
        except ToolError as exc:
            error = f"Tool error: {exc.message}"
            observation = error
            ctx.emit(EventType.ERROR, error)
            logger.error("tool_execution_failed", tool=action.tool, error=exc.message)

        ctx.add_message(Role.ASSISTANT, reply)
        ctx.add_message(Role.USER, f"<Observation>{observation}</Observation>")
        ctx.update_last_thought(action, observation)
        return error

    def _finish(self, ctx: ReasoningContext, final_answer: str) -> Result:
        ctx.emit(EventType.FINAL_ANSWER, final_answer)
        logger.info("reasoning_complete", iterations=ctx.current_step, thoughts=len(ctx.thoughts))
        return self.result_builder.build(
            input=ctx.task,
            thoughts=ctx.thoughts,
            final_answer=final_answer,
            status=ResultStatus.SUCCESS,
            started_at=ctx.started_at,
        )
