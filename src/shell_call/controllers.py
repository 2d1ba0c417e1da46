"""Controllers for shell-call CLI commands."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path

from shell_call.config import HarnessSettings
from shell_call.encoding import stable_json_dumps
from shell_call.errors import HarnessCallError, InvocationError
from shell_call.host import call_harness_many
from shell_call.models import InvocationRequest


@dataclass(slots=True)
class CallCommand:
    """CLI input for running payloads through a harness command."""

    command: str
    payloads: tuple[str, ...]
    payload_files: tuple[Path, ...]
    workers_count: int | None


@dataclass(slots=True)
class EncodeCommand:
    """CLI input for deterministic re-encoding of a JSON document."""

    text: str
    compact: bool


@dataclass(slots=True)
class ControllerResult:
    """Printable controller output with success flag."""

    lines: list[str]
    success: bool


class ShellCallCliController:
    """Executes CLI commands and renders printable lines."""

    def __init__(self, settings: HarnessSettings | None = None) -> None:
        self._settings = settings

    @property
    def settings(self) -> HarnessSettings:
        if self._settings is None:
            self._settings = HarnessSettings.from_env()
        return self._settings

    def call(self, command: CallCommand) -> ControllerResult:
        try:
            requests = _load_requests(command)
        except InvocationError as error:
            return ControllerResult(lines=[f"Invalid payload: {error}"], success=False)
        if not requests:
            return ControllerResult(
                lines=["At least one --payload or --payload-file is required."],
                success=False,
            )

        workers_count = command.workers_count or self.settings.workers_count
        try:
            batches = asyncio.run(
                call_harness_many(command.command, requests, workers_count),
            )
        except HarnessCallError as error:
            lines = [f"Harness call failed: {error}"]
            if error.stderr.strip():
                lines.extend(["stderr:", error.stderr.rstrip()])
            return ControllerResult(lines=lines, success=False)

        pretty = self.settings.pretty_output
        return ControllerResult(
            lines=[stable_json_dumps(results, pretty=pretty) for results in batches],
            success=True,
        )

    def encode(self, command: EncodeCommand) -> ControllerResult:
        try:
            payload = json.loads(command.text)
        except json.JSONDecodeError as error:
            return ControllerResult(lines=[f"Invalid JSON: {error}"], success=False)
        return ControllerResult(
            lines=[stable_json_dumps(payload, pretty=not command.compact)],
            success=True,
        )


def _load_requests(command: CallCommand) -> list[InvocationRequest]:
    raw_payloads = list(command.payloads)
    raw_payloads.extend(path.read_text("utf-8") for path in command.payload_files)

    requests: list[InvocationRequest] = []
    for raw in raw_payloads:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as error:
            raise InvocationError(f"payload is not valid JSON: {error}") from error
        requests.append(InvocationRequest.from_payload(payload))
    return requests
