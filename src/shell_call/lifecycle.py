"""Three-phase lifecycle coordinator for harness scripts.

A harness script supplies ``before``, ``process`` and ``after`` callables and
hands control to :func:`on_shell_call`. The coordinator runs ``before`` once,
``process`` once per input item in order, and ``after`` once, then writes a
single token-prefixed JSON result array to stdout.

Failure handling per phase:

- ``before`` fails: ``process`` is skipped and every entry carries the same
  error message.
- ``process`` fails for one item: only that entry becomes an error.
- ``after`` fails: every entry is replaced by the after error, including
  earlier successes.

Only an invalid invocation (argument count, JSON shape) escapes as an
exception.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import sys
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, NoReturn, TextIO

from shell_call.config import HarnessSettings
from shell_call.encoding import stable_json_dumps
from shell_call.errors import ensure_error
from shell_call.logs import configure_logging
from shell_call.models import (
    Err,
    Errorneous,
    InvocationRequest,
    Ok,
    PhaseCounters,
    parse_invocation,
)

logger = logging.getLogger(__name__)

JSON_OUTPUT_TOKEN = "shell_call_json_output:"

BeforePhase = Callable[[Any], Any | Awaitable[Any]]
ProcessPhase = Callable[[Any, Any], Any | Awaitable[Any]]
AfterPhase = Callable[[Any, Any], None | Awaitable[None]]


async def capture_phase(call: Callable[..., Any], *args: Any) -> Errorneous[Any]:
    """Run one phase call and return its outcome instead of raising."""

    try:
        outcome = call(*args)
        if inspect.isawaitable(outcome):
            outcome = await outcome
    except Exception as error:  # noqa: BLE001
        return Err(error=ensure_error(error).message)
    return Ok(value=outcome)


def ensure_encodable(outcome: Ok[Any]) -> Errorneous[Any]:
    """Turn a result value the encoder rejects into an error for that item only."""

    try:
        stable_json_dumps(outcome.value, pretty=False)
    except (TypeError, ValueError, RecursionError) as error:
        return Err(error=ensure_error(error).message)
    return outcome


async def run_lifecycle(
    *,
    before: BeforePhase,
    process: ProcessPhase,
    after: AfterPhase,
    request: InvocationRequest,
) -> list[Errorneous[Any]]:
    """Drive before/process/after for one invocation and return index-aligned results."""

    counters = PhaseCounters()

    before_output = await capture_phase(before, request.before_input)
    results: list[Errorneous[Any]]
    if isinstance(before_output, Err):
        logger.warning("Before phase failed: %s", before_output.error)
        counters.skipped = len(request.inputs)
        results = [before_output for _ in request.inputs]
    else:
        results = []
        for index, item in enumerate(request.inputs):
            outcome = await capture_phase(process, before_output.value, item)
            if isinstance(outcome, Ok):
                outcome = ensure_encodable(outcome)
            counters.processed += 1
            if isinstance(outcome, Err):
                counters.failed += 1
                logger.warning("Process phase failed for item %d: %s", index, outcome.error)
            else:
                counters.succeeded += 1
            results.append(outcome)

    shared_output = None if isinstance(before_output, Err) else before_output.value
    after_output = await capture_phase(after, shared_output, request.after_input)
    if isinstance(after_output, Err):
        logger.warning(
            "After phase failed, overriding %d results: %s",
            len(results),
            after_output.error,
        )
        results = [Err(error=after_output.error) for _ in request.inputs]

    logger.debug(
        "Lifecycle finished: inputs=%d processed=%d succeeded=%d failed=%d skipped=%d",
        len(request.inputs),
        counters.processed,
        counters.succeeded,
        counters.failed,
        counters.skipped,
    )
    return results


def render_output(results: Sequence[Errorneous[Any]], settings: HarnessSettings) -> str:
    """Render the single stdout message: token followed by the encoded results."""

    return JSON_OUTPUT_TOKEN + stable_json_dumps(list(results), pretty=settings.pretty_output)


def on_shell_call(
    *,
    before: BeforePhase,
    process: ProcessPhase,
    after: AfterPhase,
    argv: Sequence[str] | None = None,
    settings: HarnessSettings | None = None,
    stream: TextIO | None = None,
) -> NoReturn:
    """Entry point for harness scripts: run all phases, write the result and exit."""

    settings = settings or HarnessSettings.from_env()
    configure_logging(settings)
    request = parse_invocation(sys.argv[1:] if argv is None else argv)

    results = asyncio.run(
        run_lifecycle(before=before, process=process, after=after, request=request),
    )

    output = stream or sys.stdout
    output.write(render_output(results, settings))
    output.flush()
    sys.exit(0)
