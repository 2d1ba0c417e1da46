"""Host-side runner for harness scripts started as subprocesses."""

from __future__ import annotations

import asyncio
import json
import logging
import shlex
from collections.abc import Sequence
from typing import Any

from shell_call.encoding import stable_json_dumps
from shell_call.errors import HarnessCallError
from shell_call.lifecycle import JSON_OUTPUT_TOKEN
from shell_call.models import Err, InvocationRequest, Ok, result_from_json
from shell_call.pool import execute_async

logger = logging.getLogger(__name__)

_STDERR_PREVIEW_CHARS = 2_000


def build_harness_args(command: str, request: InvocationRequest) -> list[str]:
    """Split the harness command and append the JSON payload as its only argument."""

    argv = shlex.split(command.strip())
    if not argv:
        raise HarnessCallError("Harness command is empty.")
    return [*argv, stable_json_dumps(request, pretty=False)]


def extract_results(stdout_text: str) -> list[Ok[Any] | Err]:
    """Locate the output token in harness stdout and decode the result array after it."""

    position = stdout_text.find(JSON_OUTPUT_TOKEN)
    if position == -1:
        raise HarnessCallError(f"Harness output token {JSON_OUTPUT_TOKEN!r} not found in stdout")

    raw_payload = stdout_text[position + len(JSON_OUTPUT_TOKEN) :]
    try:
        payload = json.loads(raw_payload)
    except json.JSONDecodeError as error:
        raise HarnessCallError(f"Harness output is not valid JSON: {error}") from error
    if not isinstance(payload, list):
        raise HarnessCallError("Harness output must be a JSON array")

    try:
        return [result_from_json(entry) for entry in payload]
    except TypeError as error:
        raise HarnessCallError(f"Malformed harness result entry: {error}") from error


async def call_harness(command: str, request: InvocationRequest) -> list[Ok[Any] | Err]:
    """Run one harness invocation and return its index-aligned results."""

    run_args = build_harness_args(command, request)
    try:
        process = await asyncio.create_subprocess_exec(
            *run_args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as error:
        raise HarnessCallError(f"Harness command not found: {run_args[0]}") from error
    except OSError as error:
        raise HarnessCallError(f"Harness command failed to start: {error}") from error

    stdout_bytes, stderr_bytes = await process.communicate()
    stdout_text = stdout_bytes.decode("utf-8", errors="replace")
    stderr_text = stderr_bytes.decode("utf-8", errors="replace")
    exit_code = process.returncode

    try:
        results = extract_results(stdout_text)
    except HarnessCallError as error:
        raise HarnessCallError(
            f"{error} (exit code {exit_code})",
            exit_code=exit_code,
            stderr=stderr_text[-_STDERR_PREVIEW_CHARS:],
        ) from error

    if len(results) != len(request.inputs):
        raise HarnessCallError(
            f"Harness returned {len(results)} results for {len(request.inputs)} inputs",
            exit_code=exit_code,
            stderr=stderr_text[-_STDERR_PREVIEW_CHARS:],
        )
    logger.debug(
        "Harness call finished: command=%s inputs=%d errors=%d",
        run_args[0],
        len(results),
        sum(1 for result in results if result.is_error),
    )
    return results


async def call_harness_many(
    command: str,
    requests: Sequence[InvocationRequest],
    workers_count: int,
) -> list[list[Ok[Any] | Err]]:
    """Run several harness invocations with bounded concurrency; any failure aborts all."""

    async def run_one(request: InvocationRequest) -> list[Ok[Any] | Err]:
        return await call_harness(command, request)

    return await execute_async(requests, run_one, workers_count)
