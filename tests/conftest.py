"""Shared test fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

_SRC_DIR = Path(__file__).resolve().parent.parent / "src"

DEMO_HARNESS_COMMAND = f'"{sys.executable}" -m shell_call.demo_harness'


@pytest.fixture()
def demo_harness(monkeypatch) -> str:
    """Return the demo harness command with the source tree importable by subprocesses."""

    existing = os.environ.get("PYTHONPATH", "")
    pythonpath = f"{_SRC_DIR}{os.pathsep}{existing}" if existing else str(_SRC_DIR)
    monkeypatch.setenv("PYTHONPATH", pythonpath)
    monkeypatch.delenv("SHELL_CALL_ENVIRONMENT", raising=False)
    monkeypatch.delenv("SHELL_CALL_PRETTY_OUTPUT", raising=False)
    return DEMO_HARNESS_COMMAND
