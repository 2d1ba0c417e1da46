"""Runtime configuration for harness runs and host-side calls."""

from __future__ import annotations

import os
from dataclasses import dataclass

ENVIRONMENTS: tuple[str, ...] = ("development", "production", "test")


@dataclass(slots=True)
class HarnessSettings:
    """Settings built once at startup and passed explicitly to harness code."""

    environment: str = "development"
    debug: bool = False
    pretty_output: bool = True
    workers_count: int = 4

    @classmethod
    def from_env(cls) -> HarnessSettings:
        """Load settings from environment with defaults for local development."""

        settings = cls(
            environment=os.getenv("SHELL_CALL_ENVIRONMENT", "development").strip().lower(),
            debug=_env_bool("SHELL_CALL_DEBUG", default=False),
            pretty_output=_env_bool("SHELL_CALL_PRETTY_OUTPUT", default=True),
            workers_count=_env_int("SHELL_CALL_WORKERS_COUNT", default=4),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise configuration error for unsupported values."""

        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"invalid environment {self.environment!r}, "
                f"expected one of: {', '.join(ENVIRONMENTS)}",
            )
        if self.workers_count < 1:
            raise ValueError("SHELL_CALL_WORKERS_COUNT must be >= 1.")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {value!r}") from error
