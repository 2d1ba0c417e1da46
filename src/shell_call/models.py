"""Phase results and the invocation request consumed by the harness."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeAlias, TypeVar

from shell_call.errors import InvocationError

R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class Ok(Generic[R]):
    """Successful phase outcome."""

    value: R

    @property
    def is_error(self) -> bool:
        return False

    def to_json(self) -> dict[str, Any]:
        return {"is_error": False, "value": self.value}


@dataclass(frozen=True, slots=True)
class Err:
    """Failed phase outcome carrying the normalized error message."""

    error: str

    @property
    def is_error(self) -> bool:
        return True

    def to_json(self) -> dict[str, Any]:
        return {"is_error": True, "error": self.error}


Errorneous: TypeAlias = Ok[R] | Err


@dataclass(slots=True)
class InvocationRequest:
    """Setup payload, ordered work items and teardown payload of one harness run."""

    inputs: list[Any]
    before_input: Any = None
    after_input: Any = None

    def to_json(self) -> dict[str, Any]:
        return {"before": self.before_input, "inputs": self.inputs, "after": self.after_input}

    @classmethod
    def from_payload(cls, payload: object) -> InvocationRequest:
        """Validate a decoded invocation payload."""

        if not isinstance(payload, dict):
            raise InvocationError("Invocation payload must be a JSON object")
        inputs = payload.get("inputs")
        if not isinstance(inputs, list):
            raise InvocationError("inputs should be an array")
        return cls(
            inputs=inputs,
            before_input=payload.get("before"),
            after_input=payload.get("after"),
        )


def parse_invocation(argv: Sequence[str]) -> InvocationRequest:
    """Decode the single command-line argument of a harness run."""

    if len(argv) != 1:
        raise InvocationError(f"only one argument expected, got {len(argv)}")
    try:
        payload = json.loads(argv[0])
    except json.JSONDecodeError as error:
        raise InvocationError(f"Invocation argument is not valid JSON: {error}") from error
    return InvocationRequest.from_payload(payload)


def result_from_json(raw: object) -> Ok[Any] | Err:
    """Rebuild a phase result from its serialized `{is_error, value|error}` form."""

    if not isinstance(raw, dict):
        raise TypeError("Phase result must be an object")
    is_error = raw.get("is_error")
    if is_error is True:
        error = raw.get("error")
        if not isinstance(error, str):
            raise TypeError("Failed phase result must carry a string error")
        return Err(error=error)
    if is_error is False:
        return Ok(value=raw.get("value"))
    raise TypeError("Phase result is_error must be a boolean")


@dataclass(slots=True)
class PhaseCounters:
    """Aggregate per-run counters for log reporting."""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
