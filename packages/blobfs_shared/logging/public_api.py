"""Instrumentation for public adapter and substrate methods.

Every decorated call produces one invocation event and one completion event.
Events fan out to concerns (structured logging, OpenTelemetry spans); a
failing concern is reported and skipped so it can never change the outcome
of the wrapped call.
"""

from __future__ import annotations

import inspect
from contextvars import ContextVar
from dataclasses import dataclass, field
from functools import lru_cache, wraps
from time import perf_counter
from typing import Any, Callable, Literal, Mapping, Protocol, Sequence

from opentelemetry import trace as otel_trace
from opentelemetry.trace import Status, StatusCode

from packages.blobfs_shared.config import load_settings
from packages.blobfs_shared.errors import exception_to_error

from . import fields
from .context import log_context

_DEFAULT_TRACER_NAME = "blobfs.public_api"

_Stage = Literal["invocation", "completion"]


@dataclass(frozen=True)
class InvocationContext:
    """One public API call as seen before the wrapped method runs."""

    component_id: str
    api_name: str
    references: Mapping[str, str]


@dataclass(frozen=True)
class CompletionContext:
    """Outcome of one public API call."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    errors: list[str] = field(default_factory=list)
    error_categories: list[str] = field(default_factory=list)


class PublicApiInstrumentationConcern(Protocol):
    """Receiver for invocation and completion events."""

    def on_invocation(self, context: InvocationContext) -> None:
        """Handle the start of one call."""

    def on_completion(self, context: CompletionContext) -> None:
        """Handle the end of one call."""


class PublicApiLoggingConcern:
    """Emit one debug line per invocation and one info/warning line per completion."""

    def __init__(self, *, logger: Any) -> None:
        self._logger = logger

    def on_invocation(self, context: InvocationContext) -> None:
        with log_context(_base_fields(context, fields.PUBLIC_API_INVOCATION_EVENT)):
            self._logger.debug("Public API invocation")

    def on_completion(self, context: CompletionContext) -> None:
        payload = _base_fields(context.invocation, fields.PUBLIC_API_COMPLETION_EVENT)
        payload[fields.SUCCESS] = context.success
        payload[fields.DURATION_MS] = context.duration_ms
        payload[fields.ERRORS] = context.errors
        payload[fields.ERROR_CATEGORY] = ",".join(context.error_categories) or None
        with log_context(payload):
            log = self._logger.info if context.success else self._logger.warning
            log("Public API completion")


class PublicApiTracingConcern:
    """Wrap each call in one span named ``public_api.<component>.<api>``.

    Open spans are tracked on a context-local stack so nested decorated
    calls close innermost first.
    """

    def __init__(self, *, tracer: Any) -> None:
        self._tracer = tracer
        self._open: ContextVar[tuple[tuple[Any, Any], ...]] = ContextVar(
            "public_api_open_spans", default=()
        )

    def on_invocation(self, context: InvocationContext) -> None:
        manager = self._tracer.start_as_current_span(
            f"public_api.{context.component_id}.{context.api_name}"
        )
        span = manager.__enter__()
        span.set_attribute(fields.COMPONENT_ID, context.component_id)
        span.set_attribute(fields.API_NAME, context.api_name)
        for key, value in context.references.items():
            span.set_attribute(f"reference.{key}", value)
        self._open.set((*self._open.get(), (manager, span)))

    def on_completion(self, context: CompletionContext) -> None:
        stack = self._open.get()
        if not stack:
            return
        manager, span = stack[-1]
        self._open.set(stack[:-1])

        span.set_attribute(fields.SUCCESS, context.success)
        span.set_attribute(fields.DURATION_MS, context.duration_ms)
        span.set_attribute(fields.OUTCOME, "success" if context.success else "failure")
        span.set_attribute("errors.count", len(context.errors))
        if not context.success:
            span.set_status(Status(StatusCode.ERROR))
            if context.error_categories:
                span.set_attribute(fields.ERROR_CATEGORY, context.error_categories[0])
            if context.errors:
                span.record_exception(RuntimeError("; ".join(context.errors[:3])))
        manager.__exit__(None, None, None)


def public_api_instrumented(
    *,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
    concerns: Sequence[PublicApiInstrumentationConcern] | None = None,
    logger: Any | None = None,
    tracing: bool = True,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public method with logging and tracing concerns.

    ``id_fields`` names arguments (positional or keyword) whose non-empty
    values are attached to logs and spans. Exceptions raised by the wrapped
    method are classified for telemetry and then re-raised unchanged.
    """
    static_concerns: tuple[PublicApiInstrumentationConcern, ...] = tuple(concerns or ())
    if logger is not None:
        static_concerns = (PublicApiLoggingConcern(logger=logger), *static_concerns)
    if not static_concerns and not tracing:
        raise ValueError("public_api_instrumented requires at least one concern")

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = api_name or func.__name__
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            active = static_concerns
            if tracing:
                active = (*active, _default_public_api_tracing_concern())
            invocation = InvocationContext(
                component_id=component_id,
                api_name=name,
                references=_references(signature, id_fields, args, kwargs),
            )
            _dispatch(active, "invocation", invocation, logger=logger)

            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                completion = CompletionContext(
                    invocation=invocation,
                    success=False,
                    duration_ms=_elapsed_ms(started),
                    errors=[f"{type(exc).__name__}: {exc}"],
                    error_categories=[exception_to_error(exc).category.value],
                )
                _dispatch(active, "completion", completion, logger=logger)
                raise

            completion = CompletionContext(
                invocation=invocation,
                success=True,
                duration_ms=_elapsed_ms(started),
            )
            _dispatch(active, "completion", completion, logger=logger)
            return result

        return wrapper

    return decorator


def _references(
    signature: inspect.Signature,
    id_fields: tuple[str, ...],
    args: tuple[Any, ...],
    kwargs: Mapping[str, Any],
) -> dict[str, str]:
    if not id_fields:
        return {}
    try:
        arguments = signature.bind_partial(*args, **kwargs).arguments
    except TypeError:
        arguments = dict(kwargs)
    return {
        name: str(arguments[name])
        for name in id_fields
        if arguments.get(name) not in (None, "")
    }


def _base_fields(context: InvocationContext, event: str) -> dict[str, object]:
    return {
        fields.EVENT: event,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
        **context.references,
    }


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 3)


def _dispatch(
    concerns: Sequence[PublicApiInstrumentationConcern],
    stage: _Stage,
    context: InvocationContext | CompletionContext,
    *,
    logger: Any | None,
) -> None:
    """Deliver one event to every concern, isolating concern failures."""
    invocation = context if isinstance(context, InvocationContext) else context.invocation
    for concern in concerns:
        try:
            if isinstance(context, InvocationContext):
                concern.on_invocation(context)
            else:
                concern.on_completion(context)
        except Exception as exc:  # noqa: BLE001
            if logger is None:
                continue
            failure = _base_fields(
                invocation, fields.PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT
            )
            failure[fields.STAGE] = stage
            failure[fields.CONCERN] = type(concern).__name__
            failure[fields.ERRORS] = [f"{type(exc).__name__}: {exc}"]
            with log_context(failure):
                logger.warning("Public API instrumentation concern failed")


@lru_cache(maxsize=1)
def _default_public_api_tracing_concern() -> PublicApiTracingConcern:
    """Build the shared OTel-backed tracing concern on first use.

    Without a configured OTel SDK the global tracer provider hands out
    non-recording spans.
    """
    tracer_name = load_settings().observability.otel.tracer_name.strip()
    return PublicApiTracingConcern(
        tracer=otel_trace.get_tracer(tracer_name or _DEFAULT_TRACER_NAME)
    )
