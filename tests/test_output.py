"""Tests for pypas.output -- stdout/stderr discipline and formats."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pypas.objects import Safe
from pypas.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
    to_data,
)


class TestToData:
    def test_models_are_dumped(self) -> None:
        safe = Safe(safeName="Ops", numberOfVersionsRetention=5)
        assert to_data(safe) == {"safeName": "Ops", "numberOfVersionsRetention": 5}

    def test_nested_containers(self) -> None:
        data = {"safes": [Safe(safeName="A"), Safe(safeName="B")], "count": 2}
        assert to_data(data) == {
            "safes": [{"safeName": "A"}, {"safeName": "B"}],
            "count": 2,
        }

    def test_scalars_pass_through(self) -> None:
        assert to_data("x") == "x"
        assert to_data(None) is None


class TestFormatResponse:
    def test_json_goes_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(format=OutputFormat.JSON)
        out.format_response([Safe(safeName="Ops")])

        captured = capsys.readouterr()
        assert json.loads(captured.out) == [{"safeName": "Ops"}]
        assert captured.err == ""

    def test_plain_dict(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(format=OutputFormat.PLAIN)
        out.format_response({"safeName": "Ops", "location": "\\"})
        assert capsys.readouterr().out.splitlines() == ["safeName\tOps", "location\t\\"]

    def test_plain_list_of_dicts(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(format=OutputFormat.PLAIN)
        out.format_response([{"id": "1", "name": "a"}, {"id": "2", "name": "b"}])
        assert capsys.readouterr().out.splitlines() == ["1\ta", "2\tb"]

    def test_plain_nested_values(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(format=OutputFormat.PLAIN)
        out.format_response(
            {
                "secretManagement": {"automaticManagementEnabled": True},
                "remoteMachinesAccess": None,
                "enabled": False,
            }
        )
        assert capsys.readouterr().out.splitlines() == [
            'secretManagement\t{"automaticManagementEnabled":true}',
            "remoteMachinesAccess\t",
            "enabled\tfalse",
        ]

    def test_output_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        target = tmp_path / "out.json"
        out = OutputManager(format=OutputFormat.PLAIN, output_file=str(target))
        out.format_response({"id": "12_3"})

        assert json.loads(target.read_text(encoding="utf-8")) == {"id": "12_3"}
        assert capsys.readouterr().out == ""


class TestPrintTable:
    def test_json_records(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(format=OutputFormat.JSON)
        out.print_table(["Profile", "PVWA"], [["prod", "https://pvwa"]])
        assert json.loads(capsys.readouterr().out) == [
            {"Profile": "prod", "PVWA": "https://pvwa"}
        ]

    def test_plain_tab_separated(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(format=OutputFormat.PLAIN)
        out.print_table(["A", "B"], [["1", "2"]])
        assert capsys.readouterr().out.splitlines() == ["A\tB", "1\t2"]


class TestDiagnostics:
    def test_warning_and_error_on_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        out.warning("careful")
        out.error("broken")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Warning: careful" in captured.err
        assert "Error: broken" in captured.err

    def test_quiet_suppresses_info_but_not_warning(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        out = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        out.info("hello")
        out.success("done")
        out.suggest("next")
        out.warning("still shown")

        err = capsys.readouterr().err
        assert "hello" not in err
        assert "done" not in err
        assert "next" not in err
        assert "still shown" in err

    def test_debug_only_when_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("hidden")
        assert capsys.readouterr().err == ""

        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("GET /api/Safes")
        assert "[debug] GET /api/Safes" in capsys.readouterr().err


class TestColorAndGlobalState:
    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_auto_resolves_to_plain_when_piped(self) -> None:
        # stdout is captured by pytest, so it is never a TTY here
        assert OutputManager().format == OutputFormat.PLAIN

    def test_set_and_reset(self) -> None:
        manager = OutputManager(format=OutputFormat.JSON)
        set_output(manager)
        assert get_output() is manager
        reset_output()
        assert get_output() is not manager
