"""Unit tests for public API tracing concern behavior."""

from __future__ import annotations

from opentelemetry.trace import StatusCode

from packages.blobfs_shared.logging.public_api import (
    CompletionContext,
    InvocationContext,
    PublicApiTracingConcern,
)


class _FakeSpan:
    """In-memory fake span capturing attributes and lifecycle updates."""

    def __init__(self) -> None:
        self.attributes: dict[str, object] = {}
        self.exceptions: list[Exception] = []
        self.statuses: list[object] = []

    def set_attribute(self, key: str, value: object) -> None:
        self.attributes[key] = value

    def record_exception(self, exception: Exception) -> None:
        self.exceptions.append(exception)

    def set_status(self, status: object) -> None:
        self.statuses.append(status)


class _FakeSpanManager:
    """Fake span context manager used by the fake tracer."""

    def __init__(self, span: _FakeSpan) -> None:
        self.span = span
        self.exited = False

    def __enter__(self) -> _FakeSpan:
        return self.span

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        del exc_type, exc, tb
        self.exited = True


class _FakeTracer:
    """Fake tracer returning tracked span context managers."""

    def __init__(self) -> None:
        self.names: list[str] = []
        self.managers: list[_FakeSpanManager] = []

    def start_as_current_span(self, name: str) -> _FakeSpanManager:
        self.names.append(name)
        manager = _FakeSpanManager(_FakeSpan())
        self.managers.append(manager)
        return manager


def test_tracing_concern_starts_and_completes_span_with_attributes() -> None:
    """Completion should set standard attributes and close span context."""
    tracer = _FakeTracer()
    concern = PublicApiTracingConcern(tracer=tracer)
    invocation = InvocationContext(
        component_id="adapter_blob_storage",
        api_name="write",
        references={"path": "bar/foo.txt"},
    )

    concern.on_invocation(invocation)
    concern.on_completion(
        CompletionContext(
            invocation=invocation,
            success=True,
            duration_ms=12.3,
            errors=[],
            error_categories=[],
        )
    )

    assert tracer.names == ["public_api.adapter_blob_storage.write"]
    manager = tracer.managers[0]
    assert manager.exited is True
    assert manager.span.attributes["component_id"] == "adapter_blob_storage"
    assert manager.span.attributes["api_name"] == "write"
    assert manager.span.attributes["reference.path"] == "bar/foo.txt"
    assert manager.span.attributes["outcome"] == "success"
    assert manager.span.attributes["errors.count"] == 0
    assert manager.span.statuses == []


def test_tracing_concern_marks_failed_spans() -> None:
    """Failed completions should set error status and record one exception."""
    tracer = _FakeTracer()
    concern = PublicApiTracingConcern(tracer=tracer)
    invocation = InvocationContext(
        component_id="substrate_azure_blob",
        api_name="delete_blob",
        references={"key": "a.txt"},
    )

    concern.on_invocation(invocation)
    concern.on_completion(
        CompletionContext(
            invocation=invocation,
            success=False,
            duration_ms=9.0,
            errors=["HttpResponseError: server busy"],
            error_categories=["dependency"],
        )
    )

    manager = tracer.managers[0]
    assert manager.exited is True
    assert manager.span.attributes["outcome"] == "failure"
    assert manager.span.attributes["error_category"] == "dependency"
    assert len(manager.span.exceptions) == 1
    assert manager.span.statuses[0].status_code is StatusCode.ERROR


def test_tracing_concern_closes_nested_spans_innermost_first() -> None:
    """Nested invocations should close their own spans in reverse order."""
    tracer = _FakeTracer()
    concern = PublicApiTracingConcern(tracer=tracer)
    outer = InvocationContext(
        component_id="adapter_blob_storage", api_name="rename", references={}
    )
    inner = InvocationContext(
        component_id="substrate_azure_blob", api_name="copy_blob", references={}
    )

    concern.on_invocation(outer)
    concern.on_invocation(inner)
    concern.on_completion(
        CompletionContext(
            invocation=inner,
            success=True,
            duration_ms=1.0,
            errors=[],
            error_categories=[],
        )
    )

    assert [manager.exited for manager in tracer.managers] == [False, True]


def test_completion_without_open_span_is_ignored() -> None:
    """Completion with no active scope should be a no-op."""
    tracer = _FakeTracer()
    concern = PublicApiTracingConcern(tracer=tracer)

    concern.on_completion(
        CompletionContext(
            invocation=InvocationContext(
                component_id="adapter_blob_storage", api_name="has", references={}
            ),
            success=True,
            duration_ms=0.1,
            errors=[],
            error_categories=[],
        )
    )

    assert tracer.managers == []
