"""CLI entrypoint for shell-call."""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import rich_click as click

from shell_call import __version__
from shell_call.config import HarnessSettings
from shell_call.controllers import CallCommand, EncodeCommand, ShellCallCliController
from shell_call.logs import configure_logging

click.rich_click.USE_MARKDOWN = True


@click.group()
@click.version_option(version=__version__, prog_name="shell-call")
@click.pass_context
def shell_call(ctx: click.Context) -> None:
    """Run batch harness scripts and inspect their deterministic output."""

    settings = HarnessSettings.from_env()
    configure_logging(settings)
    ctx.obj = ShellCallCliController(settings=settings)


@shell_call.command("call")
@click.option(
    "--command",
    "harness_command",
    required=True,
    help="Harness command line, for example `python -m shell_call.demo_harness`.",
)
@click.option(
    "--payload",
    "payloads",
    multiple=True,
    help="Invocation payload JSON `{before, inputs, after}`. Can be repeated.",
)
@click.option(
    "--payload-file",
    "payload_files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File holding one invocation payload. Can be repeated.",
)
@click.option(
    "--workers",
    "workers_count",
    type=click.IntRange(min=1),
    default=None,
    help="Concurrent harness processes; defaults to SHELL_CALL_WORKERS_COUNT.",
)
@click.pass_obj
def call(
    controller: ShellCallCliController,
    harness_command: str,
    payloads: tuple[str, ...],
    payload_files: tuple[Path, ...],
    workers_count: int | None,
) -> None:
    """Run each payload through the harness command and print its results in order."""

    result = controller.call(
        CallCommand(
            command=harness_command,
            payloads=payloads,
            payload_files=payload_files,
            workers_count=workers_count,
        ),
    )
    if not result.success:
        raise click.ClickException("\n".join(result.lines))
    _emit_lines(result.lines)


@shell_call.command("encode")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--compact", is_flag=True, default=False, help="Single-line output.")
@click.pass_obj
def encode(controller: ShellCallCliController, source: TextIO, compact: bool) -> None:
    """Print a JSON document with all object keys sorted recursively."""

    result = controller.encode(EncodeCommand(text=source.read(), compact=compact))
    if not result.success:
        raise click.ClickException("\n".join(result.lines))
    _emit_lines(result.lines)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    shell_call()
