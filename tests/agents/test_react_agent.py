import threading

import pytest

from agents.hooks import AgentHooks, ErrorAction
from agents.memory.conversation import ConversationMemory
from agents.models import Role
from agents.react_agent import AgentState, ReActAgent
from agents.reasoner.models import ReasonerConfig, ResultStatus
from agents.retry import BackoffRetry
from tests.conftest import FailingLLM, ScriptedLLM

FINAL = "<Thought>easy</Thought><FinalAnswer>4</FinalAnswer>"


def test_run_returns_result_and_updates_memories(calculator):
    agent = ReActAgent(ScriptedLLM([FINAL]), [calculator])

    result = agent.run("What is 2+2?")

    assert result.status == ResultStatus.SUCCESS
    assert agent.state == AgentState.READY
    assert [(m.role, m.content) for m in agent.memory.to_messages()] == [
        (Role.USER, "What is 2+2?"),
        (Role.ASSISTANT, "4"),
    ]
    assert len(agent.thoughts_memory) == 1
    assert agent.thoughts_memory.sessions[0].final_answer == "4"


def test_conversation_memory_is_replayed_on_next_run():
    llm = ScriptedLLM([FINAL, FINAL])
    agent = ReActAgent(llm)

    agent.run("first")
    agent.run("second")

    contents = [m.content for m in llm.calls[1]]
    assert contents[1:] == ["first", "4", "second"]


def test_shared_memory_instance_is_used():
    memory = ConversationMemory()
    memory.add("user", "earlier")
    llm = ScriptedLLM([FINAL])

    ReActAgent(llm, memory=memory).run("now")

    assert llm.calls[0][1].content == "earlier"
    assert len(memory) == 3


@pytest.mark.parametrize("task", ["", "   ", None, 42])
def test_invalid_input_raises_value_error(task):
    agent = ReActAgent(ScriptedLLM([FINAL]))

    with pytest.raises(ValueError, match="Input cannot be empty"):
        agent.run(task)
    assert agent.state == AgentState.READY


def test_hooks_run_in_order():
    calls = []
    hooks = AgentHooks(
        before_run=[lambda task: calls.append(("before", task))],
        after_run=[lambda task, result: calls.append(("after", result.final_answer))],
    )

    ReActAgent(ScriptedLLM([FINAL]), hooks=hooks).run("go")

    assert calls == [("before", "go"), ("after", "4")]


def test_errors_become_failed_results_and_run_error_hooks():
    seen = []
    hooks = AgentHooks(on_error=[lambda task, exc: seen.append((task, str(exc)))])
    agent = ReActAgent(FailingLLM(RuntimeError("rate limited")), hooks=hooks)

    result = agent.run("go")

    assert result.status == ResultStatus.FAILED
    assert result.error == "rate limited"
    assert result.thoughts == ()
    assert seen == [("go", "rate limited")]
    assert agent.state == AgentState.NEEDS_ATTENTION
    assert len(agent.memory) == 0


def test_error_hook_can_stop_and_reraise():
    hooks = AgentHooks(on_error=[lambda task, exc: None, lambda task, exc: ErrorAction.STOP])
    agent = ReActAgent(FailingLLM(RuntimeError("fatal")), hooks=hooks)

    with pytest.raises(RuntimeError, match="fatal"):
        agent.run("go")
    assert agent.state == AgentState.NEEDS_ATTENTION


def test_retry_policy_reruns_the_reasoner():
    class FlakyLLM(ScriptedLLM):
        def chat(self, messages, **kwargs):
            if not self.calls:
                self.calls.append(list(messages))
                raise ConnectionError("blip")
            return super().chat(messages, **kwargs)

    llm = FlakyLLM([FINAL])
    agent = ReActAgent(llm, retry_policy=BackoffRetry(max_retries=2, sleep=lambda _: None))

    result = agent.run("go")

    assert result.successful
    assert len(llm.calls) == 2


def test_timeout_returns_timeout_result():
    release = threading.Event()

    class SlowLLM(ScriptedLLM):
        def chat(self, messages, **kwargs):
            release.wait(5)
            return super().chat(messages, **kwargs)

    agent = ReActAgent(SlowLLM([FINAL]), timeout=0.05)
    try:
        result = agent.run("go")
    finally:
        release.set()

    assert result.status == ResultStatus.TIMEOUT
    assert result.timed_out
    assert result.summary() == "Timeout: Execution exceeded time limit"
    assert agent.state == AgentState.NEEDS_ATTENTION


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        ReActAgent(ScriptedLLM([]), timeout=0)


def test_detected_language_is_used_when_none_configured():
    llm = ScriptedLLM(["zh-TW", FINAL])
    agent = ReActAgent(llm, detect_thinking_language=True)

    agent.run("二加二等於多少？")

    assert "Use zh-TW for your reasoning" in llm.calls[1][0].content


def test_configured_language_skips_detection():
    llm = ScriptedLLM([FINAL])
    agent = ReActAgent(llm, config=ReasonerConfig(thinking_language="en"), detect_thinking_language=True)

    agent.run("hello")

    assert len(llm.calls) == 1
    assert "Use en for your reasoning" in llm.calls[0][0].content


def test_max_iterations_result_is_recorded_without_raising():
    llm = ScriptedLLM(["<Thought>hmm</Thought>"], repeat_last=True)
    agent = ReActAgent(llm, config=ReasonerConfig(max_iterations=2))

    result = agent.run("think")

    assert result.max_iterations_reached
    assert agent.state == AgentState.READY
    assert agent.thoughts_memory.failed_sessions[0].status == ResultStatus.MAX_ITERATIONS_REACHED


def test_after_run_hook_failure_goes_through_error_hooks():
    seen = []

    def broken_after(task, result):
        raise RuntimeError("after hook broke")

    hooks = AgentHooks(after_run=[broken_after], on_error=[lambda task, exc: seen.append(str(exc))])
    agent = ReActAgent(ScriptedLLM([FINAL]), hooks=hooks)

    result = agent.run("go")

    assert result.status == ResultStatus.FAILED
    assert result.error == "after hook broke"
    assert seen == ["after hook broke"]
    assert agent.state == AgentState.NEEDS_ATTENTION


def test_after_run_hook_failure_reraises_on_stop():
    def broken_after(task, result):
        raise RuntimeError("after hook broke")

    hooks = AgentHooks(after_run=[broken_after], on_error=[lambda task, exc: ErrorAction.STOP])
    agent = ReActAgent(ScriptedLLM([FINAL]), hooks=hooks)

    with pytest.raises(RuntimeError, match="after hook broke"):
        agent.run("go")
    assert agent.state == AgentState.NEEDS_ATTENTION


def test_cache_returns_stored_result_for_repeated_task():
    llm = ScriptedLLM([FINAL, "<FinalAnswer>5</FinalAnswer>"])
    calls = []
    hooks = AgentHooks(before_run=[calls.append])
    agent = ReActAgent(llm, hooks=hooks, cache=True)

    first = agent.run("What is 2+2?")
    second = agent.run("What is 2+2?")

    assert second is first
    assert len(llm.calls) == 1
    assert calls == ["What is 2+2?"]
    assert len(agent.memory) == 2
    assert agent.state == AgentState.READY


def test_cache_miss_for_new_task_runs_the_reasoner():
    llm = ScriptedLLM([FINAL, "<FinalAnswer>5</FinalAnswer>"])
    agent = ReActAgent(llm, cache=True)

    agent.run("What is 2+2?")
    result = agent.run("What is 2+3?")

    assert result.final_answer == "5"
    assert len(llm.calls) == 2


def test_failed_runs_are_not_cached():
    llm = FailingLLM(RuntimeError("rate limited"))
    agent = ReActAgent(llm, cache=True)

    agent.run("go")
    agent.run("go")

    assert llm.calls == 2


def test_without_cache_repeated_task_runs_again():
    llm = ScriptedLLM([FINAL, "<FinalAnswer>5</FinalAnswer>"])
    agent = ReActAgent(llm)

    agent.run("What is 2+2?")
    result = agent.run("What is 2+2?")

    assert result.final_answer == "5"
    assert len(llm.calls) == 2


def test_clear_cache_forgets_stored_results():
    llm = ScriptedLLM([FINAL, "<FinalAnswer>5</FinalAnswer>"])
    agent = ReActAgent(llm, cache=True)

    agent.run("What is 2+2?")
    agent.clear_cache()
    result = agent.run("What is 2+2?")

    assert result.final_answer == "5"
