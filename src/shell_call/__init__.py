"""Batch-execution harness with deterministic JSON output."""

from shell_call.encoding import stable_json_dumps
from shell_call.errors import ErrorRecord, HarnessCallError, InvocationError, ensure_error
from shell_call.lifecycle import JSON_OUTPUT_TOKEN, on_shell_call, run_lifecycle
from shell_call.models import Err, Errorneous, InvocationRequest, Ok
from shell_call.pool import execute_async

__version__ = "0.1.0"

__all__ = [
    "JSON_OUTPUT_TOKEN",
    "Err",
    "ErrorRecord",
    "Errorneous",
    "HarnessCallError",
    "InvocationError",
    "InvocationRequest",
    "Ok",
    "__version__",
    "ensure_error",
    "execute_async",
    "on_shell_call",
    "run_lifecycle",
    "stable_json_dumps",
]
