from __future__ import annotations

import json
from pathlib import Path

import allure
from click.testing import CliRunner

from shell_call import __version__
from shell_call.main import shell_call

pytestmark = [
    allure.epic("Harness Runtime"),
    allure.feature("CLI"),
]


def test_version():
    assert __version__


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(shell_call, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_encode_sorts_keys_from_stdin() -> None:
    runner = CliRunner()
    result = runner.invoke(
        shell_call,
        ["encode", "--compact"],
        input='{"b": 1, "a": {"d": 2, "c": 3}}',
    )

    assert result.exit_code == 0, result.output
    assert result.output == '{"a":{"c":3,"d":2},"b":1}\n'


def test_encode_reads_file(tmp_path: Path) -> None:
    source = tmp_path / "doc.json"
    source.write_text('{"z": [3, 1], "a": null}', "utf-8")

    result = CliRunner().invoke(shell_call, ["encode", str(source)])

    assert result.exit_code == 0, result.output
    assert result.output == '{\n  "a": null,\n  "z": [\n    3,\n    1\n  ]\n}\n'


def test_encode_rejects_invalid_json() -> None:
    result = CliRunner().invoke(shell_call, ["encode"], input="{nope")

    assert result.exit_code != 0
    assert "Invalid JSON" in result.output


def test_call_prints_results_per_payload(demo_harness: str, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("SHELL_CALL_PRETTY_OUTPUT", "0")
    payload_file = tmp_path / "payload.json"
    payload_file.write_text(json.dumps({"before": {"factor": 10}, "inputs": [1]}), "utf-8")

    result = CliRunner().invoke(
        shell_call,
        [
            "call",
            "--command",
            demo_harness,
            "--payload",
            '{"inputs": [1, {"fail": "bad item"}]}',
            "--payload-file",
            str(payload_file),
            "--workers",
            "2",
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        '[{"is_error":false,"value":1},{"error":"bad item","is_error":true}]',
        '[{"is_error":false,"value":10}]',
    ]


def test_call_requires_a_payload(demo_harness: str) -> None:
    result = CliRunner().invoke(shell_call, ["call", "--command", demo_harness])

    assert result.exit_code != 0
    assert "At least one --payload" in result.output


def test_call_rejects_invalid_payload(demo_harness: str) -> None:
    result = CliRunner().invoke(
        shell_call,
        ["call", "--command", demo_harness, "--payload", '{"inputs": "nope"}'],
    )

    assert result.exit_code != 0
    assert "inputs should be an array" in result.output


def test_call_reports_harness_failure(demo_harness: str) -> None:
    result = CliRunner().invoke(
        shell_call,
        ["call", "--command", f"{demo_harness} extra-arg", "--payload", '{"inputs": [1]}'],
    )

    assert result.exit_code != 0
    assert "Harness call failed" in result.output
    assert "InvocationError" in result.output
