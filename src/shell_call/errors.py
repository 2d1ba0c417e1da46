"""Error normalization for harness phases and host calls."""

from __future__ import annotations

import traceback
from dataclasses import dataclass

DEFAULT_ERROR_MESSAGE = "Unknown error"


class InvocationError(ValueError):
    """Harness was started with an invocation that breaks the argument contract."""


class HarnessCallError(RuntimeError):
    """Host could not obtain a result payload from a harness subprocess."""

    def __init__(self, message: str, *, exit_code: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    """Canonical error shape: message plus optional stack trace."""

    message: str
    stack: str | None = None

    def to_json(self) -> dict[str, object]:
        return {"message": self.message, "stack": self.stack}


def ensure_error(value: object, default_message: str = DEFAULT_ERROR_MESSAGE) -> ErrorRecord:
    """Normalize an arbitrary raised or rejected value into an `ErrorRecord`."""

    if isinstance(value, ErrorRecord):
        if value.message:
            return value
        return ErrorRecord(message=default_message, stack=value.stack)

    if isinstance(value, BaseException):
        message = str(value) or default_message
        stack = "".join(traceback.format_exception(value)).rstrip("\n")
        return ErrorRecord(message=message, stack=stack)

    if not value:
        return ErrorRecord(message=default_message)
    return ErrorRecord(message=str(value))
