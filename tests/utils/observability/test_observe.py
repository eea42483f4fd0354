"""Span attributes recorded by @observe around the reasoner, the dispatcher and model calls."""

import json

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from agents.models import Action, Message, Role, ThoughtRecord
from agents.reasoner.models import ReasonerConfig, Result, ResultStatus
from agents.reasoner.react.dispatcher import ToolDispatcher
from agents.reasoner.react.engine import ReActReasoner
from agents.tools.exceptions import ToolNotFoundError
from tests.conftest import CalculatorTool, EchoTool, ScriptedLLM
from utils.observability import observe
from utils.observability.observe import _safe_preview

CALC_ACTION = '<Thought>add</Thought><Action>{"tool":"calculator","parameters":{"expression":"2+2"}}</Action>'
FINAL = "<FinalAnswer>4</FinalAnswer>"

REASON_SPAN = "agents.reasoner.react.engine.ReActReasoner.reason"
EXECUTE_SPAN = "agents.reasoner.react.dispatcher.ToolDispatcher.execute"


class TracedLLM(ScriptedLLM):
    @observe(llm=True)
    def chat(self, messages, **kwargs):
        return super().chat(messages, **kwargs)


@pytest.fixture
def exporter(monkeypatch):
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setattr("opentelemetry.trace.get_tracer", lambda name, *a, **kw: provider.get_tracer(name))
    yield exporter
    provider.shutdown()


def _by_name(exporter, name):
    return [s for s in exporter.get_finished_spans() if s.name == name]


def test_reasoning_run_produces_root_span_with_result_fields(exporter):
    llm = TracedLLM([CALC_ACTION, FINAL])

    ReActReasoner(llm=llm, tools=[CalculatorTool()]).reason("What is 2+2?")

    (root,) = _by_name(exporter, REASON_SPAN)
    assert root.attributes["result_status"] == "success"
    assert root.attributes["total_iterations"] == 1
    assert root.attributes["output"] == "4"
    assert json.loads(root.attributes["input"])["task"] == "What is 2+2?"
    assert root.attributes["duration_ms"] >= 0


def test_model_and_tool_spans_are_children_of_the_run(exporter):
    llm = TracedLLM([CALC_ACTION, FINAL])

    ReActReasoner(llm=llm, tools=[CalculatorTool()]).reason("What is 2+2?")

    (root,) = _by_name(exporter, REASON_SPAN)
    (tool_span,) = _by_name(exporter, EXECUTE_SPAN)
    chat_spans = [s for s in exporter.get_finished_spans() if s.name.endswith("TracedLLM.chat")]

    assert len(chat_spans) == 2
    for child in [tool_span, *chat_spans]:
        assert child.parent.span_id == root.context.span_id
    assert tool_span.attributes["output"] == "4"
    assert json.loads(tool_span.attributes["input"]) == {
        "tool_name": "calculator",
        "params": {"expression": "2+2"},
    }


def test_root_span_sums_tokens_per_run(exporter):
    llm = TracedLLM([CALC_ACTION, FINAL, FINAL])
    reasoner = ReActReasoner(llm=llm, tools=[CalculatorTool()])

    reasoner.reason("What is 2+2?")
    reasoner.reason("Again?")

    totals = [s.attributes["tokens.total"] for s in _by_name(exporter, REASON_SPAN)]
    assert totals == [30, 15]


def test_model_span_records_messages_and_token_counts(exporter):
    llm = TracedLLM([FINAL])

    llm.chat([Message(Role.SYSTEM, "be brief"), Message(Role.USER, "hello")])

    (span,) = exporter.get_finished_spans()
    messages = json.loads(span.attributes["input"])
    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[1]["content"] == "hello"
    assert span.attributes["output"] == FINAL
    assert span.attributes["tokens.prompt"] == 10
    assert span.attributes["tokens.completion"] == 5
    assert span.attributes["tokens.total"] == 15


def test_max_iterations_status_is_recorded(exporter):
    llm = TracedLLM(["<Thought>hmm</Thought>"], repeat_last=True)

    ReActReasoner(llm=llm, config=ReasonerConfig(max_iterations=2)).reason("think")

    (root,) = _by_name(exporter, REASON_SPAN)
    assert root.attributes["result_status"] == "max_iterations_reached"
    assert root.attributes["total_iterations"] == 2


def test_unknown_tool_marks_span_as_error(exporter):
    with pytest.raises(ToolNotFoundError):
        ToolDispatcher([CalculatorTool()]).execute("ghost", {})

    (span,) = _by_name(exporter, EXECUTE_SPAN)
    assert span.status.status_code == StatusCode.ERROR
    exception_events = [e for e in span.events if e.name == "exception"]
    assert exception_events
    assert "Tool 'ghost' not found" in exception_events[0].attributes["exception.message"]


def test_tool_credentials_never_reach_span_input(exporter):
    ToolDispatcher([EchoTool()]).execute("echo", {"text": "hi", "api_key": "sk-live-123"})

    (span,) = _by_name(exporter, EXECUTE_SPAN)
    assert "sk-live-123" not in span.attributes["input"]
    assert json.loads(span.attributes["input"])["params"]["api_key"] == "<redacted>"


def test_long_task_is_truncated_in_span_input(exporter):
    llm = TracedLLM([FINAL])

    ReActReasoner(llm=llm).reason("x" * 2000)

    (root,) = _by_name(exporter, REASON_SPAN)
    task_preview = json.loads(root.attributes["input"])["task"]
    assert task_preview == "x" * 512 + "..."


@pytest.mark.parametrize("key", ["api_key", "API-KEY", "accessToken", "client_secret", "Authorization"])
def test_secret_keys_are_redacted_in_any_spelling(key):
    assert _safe_preview({key: "value", "city": "Oslo"}) == {key: "<redacted>", "city": "Oslo"}


def test_domain_objects_preview_as_plain_data():
    record = ThoughtRecord(step=1, thought="add", action=Action("calculator", {"password": "p"}), observation="4")
    result = Result(input="2+2", thoughts=(record,), final_answer="4", status=ResultStatus.SUCCESS)

    assert _safe_preview(Message(Role.USER, "hi")) == {"role": "user", "content": "hi"}
    assert _safe_preview(record)["action"] == {"tool": "calculator", "parameters": {"password": "<redacted>"}}
    preview = _safe_preview(result)
    assert preview["status"] == "success"
    assert preview["thoughts"][0]["observation"] == "4"


def test_large_collections_are_capped():
    history = [Message(Role.USER, str(i)) for i in range(25)]
    params = {f"p{i}": i for i in range(23)}

    assert _safe_preview(history)[-1] == "..."
    assert len(_safe_preview(history)) == 21
    assert _safe_preview(params)["..."] == "3 more keys"
