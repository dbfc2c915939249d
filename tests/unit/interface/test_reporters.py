"""Unit tests for DiagnosticReporter."""

from pathlib import Path

import astroid
import pytest

from checked_exceptions_linter.domain.entities import FixResult
from checked_exceptions_linter.domain.rules import ExceptionDiagnostic
from checked_exceptions_linter.infrastructure.services.guidance_service import GuidanceService
from checked_exceptions_linter.interface.reporters import DiagnosticReporter


def _diagnostic(code: str = "W9501", symbol: str = "unhandled-exception", args: tuple[str, ...] = ("KeyError",)):
    node = astroid.extract_node("def f():\n    raise KeyError('k')  #@\n")
    return ExceptionDiagnostic(code=code, symbol=symbol, message_args=args, node=node)


class TestDiagnosticReporter:

    def test_format_uses_registry_template(self) -> None:
        reporter = DiagnosticReporter(GuidanceService().get_registry())
        line = reporter.format_diagnostic("/elsewhere/app.py", _diagnostic())
        assert line == "/elsewhere/app.py:2:4: W9501 (unhandled-exception) Unhandled exception(s): KeyError"

    def test_format_substitution_args(self) -> None:
        reporter = DiagnosticReporter(GuidanceService().get_registry())
        diagnostic = _diagnostic(
            "W9505", "base-method-substitution-violation", ("run", "OSError", "Base", "run")
        )
        line = reporter.format_diagnostic("/elsewhere/app.py", diagnostic)
        assert line.endswith("Method run throws exception(s) OSError not declared in base method Base.run")

    def test_format_without_registry_entry(self) -> None:
        line = DiagnosticReporter({}).format_diagnostic("/elsewhere/app.py", _diagnostic(args=("A", "B")))
        assert line.endswith("W9501 (unhandled-exception) A, B")

    def test_paths_are_relative_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        reporter = DiagnosticReporter({})
        line = reporter.format_diagnostic(str(tmp_path.resolve() / "pkg" / "app.py"), _diagnostic())
        assert line.startswith(str(Path("pkg") / "app.py") + ":2:4:")

    def test_report_counts(self, capsys: pytest.CaptureFixture[str]) -> None:
        reporter = DiagnosticReporter(GuidanceService().get_registry())
        count = reporter.report({"/elsewhere/a.py": [_diagnostic(), _diagnostic()], "/elsewhere/b.py": []})
        captured = capsys.readouterr()
        assert count == 2
        assert captured.out.count("W9501") == 2
        assert "2 exception diagnostic(s) found." in captured.err

    def test_report_fixes(self, capsys: pytest.CaptureFixture[str]) -> None:
        DiagnosticReporter({}).report_fixes(
            FixResult(files_modified=2, plans_applied=3, failed_files=["/elsewhere/broken.py"])
        )
        captured = capsys.readouterr()
        assert "Modified 2 file(s) (3 fix plan(s))." in captured.out
        assert "Skipped unparsable file: /elsewhere/broken.py" in captured.err
