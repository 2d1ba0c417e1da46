"""Local demo harness for host integration tests and CLI examples.

Invocation payload::

    {"before": {"factor": 3}, "inputs": [1, 2, {"fail": "bad item"}], "after": null}

``before.fail``, an item ``{"fail": ...}`` or ``after.fail`` make the
corresponding phase raise with that message.
"""

from __future__ import annotations

import asyncio
from typing import Any

from shell_call.lifecycle import on_shell_call


async def before(before_input: Any) -> int:
    options = before_input if isinstance(before_input, dict) else {}
    if options.get("fail"):
        raise RuntimeError(options["fail"])
    return int(options.get("factor", 1))


async def process(factor: int, item: Any) -> Any:
    await asyncio.sleep(0)
    if isinstance(item, dict) and item.get("fail"):
        raise RuntimeError(item["fail"])
    if isinstance(item, bool) or not isinstance(item, (int, float)):
        raise TypeError(f"Unsupported item: {item!r}")
    return item * factor


async def after(factor: int | None, after_input: Any) -> None:
    if isinstance(after_input, dict) and after_input.get("fail"):
        raise RuntimeError(after_input["fail"])


def main() -> None:
    on_shell_call(before=before, process=process, after=after)


if __name__ == "__main__":  # pragma: no cover
    main()
