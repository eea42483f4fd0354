"""Simple, minimal tracing decorator for the ReAct agent."""

from __future__ import annotations

from functools import wraps
from inspect import signature
from typing import Any, Callable, Optional
from contextvars import ContextVar
from dataclasses import is_dataclass, asdict
import json
import time

from opentelemetry import trace

TRACER_NAME = "react-agent"

SECRET_REDACT_KEYS = {
    "apikey", "accesstoken", "refreshtoken", "clientsecret", "secret", "password",
    "authorization", "bearer", "cookie", "setcookie", "privatekey", "sshkey",
}

_MAX_ITEMS = 20


def observe(_fn: Optional[Callable[..., Any]] = None, *, llm: bool = False, root: bool = False) -> Callable[..., Any]:
    """Minimal tracing decorator.

    Usage:
        @observe
        def execute(...): ...

        @observe(llm=True)
        def chat(...): ...

        @observe(root=True)
        def reason(...): ...

    - Auto-names spans from function module.qualname
    - Records timing, exceptions, basic I/O
    - Tracks token usage when llm=True
    - Aggregates total tokens when root=True
    - Spans are no-ops until a tracer provider is installed (see setup_telemetry)
    """

    def _decorate(fn: Callable[..., Any]) -> Callable[..., Any]:
        module = getattr(fn, "__module__", "") or ""
        qualname = getattr(fn, "__qualname__", fn.__name__)
        span_name = f"{module}.{qualname}" if module else qualname

        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = trace.get_tracer(TRACER_NAME)
            start_time = time.perf_counter()

            with tracer.start_as_current_span(span_name) as span:
                if root:
                    _start_token_accumulator(span)
                try:
                    _capture_input(span, fn, args, kwargs, llm)
                    result = fn(*args, **kwargs)

                    if llm:
                        _capture_llm_output(span, result)
                    else:
                        _capture_output(span, result)

                    return result

                except Exception as e:
                    span.record_exception(e)
                    span.set_status(trace.Status(trace.StatusCode.ERROR))
                    raise

                finally:
                    duration_ms = int((time.perf_counter() - start_time) * 1000)
                    span.set_attribute("duration_ms", duration_ms)
                    if root:
                        _finalize_token_accumulator(span)

        return wrapper

    # Support both @observe and @observe() forms
    if callable(_fn):
        return _decorate(_fn)
    return _decorate


def _is_secret(key: Any) -> bool:
    return str(key).lower().replace("_", "").replace("-", "") in SECRET_REDACT_KEYS


def _safe_preview(val: Any, max_len: int = 512) -> Any:
    """Create a JSON-friendly preview of any value with secrets redacted."""
    if val is None or isinstance(val, (bool, int, float)):
        return val
    if isinstance(val, str):
        return val if len(val) <= max_len else val[:max_len] + "..."
    if isinstance(val, dict):
        items = list(val.items())
        preview = {
            str(k): ("<redacted>" if _is_secret(k) else _safe_preview(v, max_len))
            for k, v in items[:_MAX_ITEMS]
        }
        if len(items) > _MAX_ITEMS:
            preview["..."] = f"{len(items) - _MAX_ITEMS} more keys"
        return preview
    if isinstance(val, (list, tuple)):
        items = [_safe_preview(v, max_len) for v in list(val)[:_MAX_ITEMS]]
        if len(val) > _MAX_ITEMS:
            items.append("...")
        return items
    if is_dataclass(val) and not isinstance(val, type):
        return _safe_preview(asdict(val), max_len)
    if hasattr(val, "model_dump"):
        return _safe_preview(val.model_dump(mode="json"), max_len)
    return _safe_preview(repr(val), max_len)


def _capture_input(span: Any, fn: Callable, args: tuple, kwargs: dict, llm: bool) -> None:
    """Capture function inputs with smart previews and redaction."""
    try:
        bound = signature(fn).bind_partial(*args, **kwargs)
    except TypeError:
        return

    # LLM path: capture messages only (longer cap for prompt visibility)
    if llm:
        messages = bound.arguments.get("messages")
        if messages:
            msg_str = json.dumps(_safe_preview(list(messages), 4096), ensure_ascii=False, separators=(",", ":"))
            span.set_attribute("input", msg_str[:12288])
        return

    inputs = {name: _safe_preview(value) for name, value in bound.arguments.items() if name not in {"self", "cls"}}
    input_str = json.dumps(inputs, ensure_ascii=False, separators=(",", ":"), default=str)
    span.set_attribute("input", input_str[:6144] + ("..." if len(input_str) > 6144 else ""))


def _capture_output(span: Any, result: Any) -> None:
    """Capture non-LLM outputs with structured attributes."""
    # Result-like: capture structured fields
    if hasattr(result, "status") and hasattr(result, "final_answer"):
        span.set_attribute("output", str(result.final_answer or "")[:8192])
        span.set_attribute("result_status", str(getattr(result.status, "value", result.status)))
        if hasattr(result, "iterations"):
            span.set_attribute("total_iterations", int(result.iterations))
    else:
        span.set_attribute("output", str(result)[:8192])


def _capture_llm_output(span: Any, result: Any) -> None:
    """Capture LLM outputs and track tokens."""
    content = getattr(result, "content", None)
    if not isinstance(content, str):
        span.set_attribute("output", str(result)[:8192])
        return

    span.set_attribute("output", content[:8192])
    for attr, key in (("prompt_tokens", "tokens.prompt"),
                      ("completion_tokens", "tokens.completion"),
                      ("total_tokens", "tokens.total")):
        value = getattr(result, attr, None)
        if isinstance(value, int):
            span.set_attribute(key, value)
    total = getattr(result, "total_tokens", None)
    if isinstance(total, int):
        _accumulate_tokens(total)


# ── Token Accumulation ──────────────────────────────────────────────────────
# Root spans start a token counter; child LLM calls increment it; root finalizes total.

_tokens: ContextVar[Optional[int]] = ContextVar("tokens", default=None)
_owner: ContextVar[Optional[int]] = ContextVar("owner", default=None)


def _start_token_accumulator(span: Any) -> None:
    """Initialize token counter for root span."""
    if _tokens.get() is None:
        _tokens.set(0)
        _owner.set(id(span))


def _accumulate_tokens(token_count: int) -> None:
    """Add tokens from an LLM call."""
    current = _tokens.get()
    if isinstance(current, int):
        _tokens.set(current + token_count)


def _finalize_token_accumulator(span: Any) -> None:
    """Write total tokens to root span and reset."""
    if _owner.get() == id(span):
        total = _tokens.get()
        if isinstance(total, int) and total > 0:
            span.set_attribute("tokens.total", total)
        _tokens.set(None)
        _owner.set(None)
