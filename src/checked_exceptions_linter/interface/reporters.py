"""Terminal output for CLI results."""

from pathlib import Path

import typer

from checked_exceptions_linter.domain.entities import FixResult
from checked_exceptions_linter.domain.rules import ExceptionDiagnostic
from checked_exceptions_linter.domain.rule_msgs import RuleMsgBuilder
from checked_exceptions_linter.domain.registry_types import RuleRegistryEntry


class DiagnosticReporter:
    """Prints ``path:line:col: CODE (symbol) message`` lines, pylint style."""

    def __init__(self, registry: dict[str, RuleRegistryEntry]) -> None:
        self._registry = registry

    def format_diagnostic(self, file_path: str, diagnostic: ExceptionDiagnostic) -> str:
        entry = RuleMsgBuilder.get_entry(self._registry, diagnostic.code)
        template = str(entry.get("message_template", "%s")) if entry else "%s"
        try:
            message = template % diagnostic.message_args
        except TypeError:
            message = ", ".join(diagnostic.message_args)
        line = getattr(diagnostic.node, "lineno", 0) or 0
        column = getattr(diagnostic.node, "col_offset", 0) or 0
        return f"{self._relative(file_path)}:{line}:{column}: {diagnostic.code} ({diagnostic.symbol}) {message}"

    def report(self, results: dict[str, list[ExceptionDiagnostic]]) -> int:
        """Echo every diagnostic; return how many were printed."""
        count = 0
        for file_path, diagnostics in results.items():
            for diagnostic in diagnostics:
                typer.echo(self.format_diagnostic(file_path, diagnostic))
                count += 1
        if count:
            typer.echo(f"\n{count} exception diagnostic(s) found.", err=True)
        return count

    def report_fixes(self, result: FixResult) -> None:
        typer.echo(f"Modified {result.files_modified} file(s) ({result.plans_applied} fix plan(s)).")
        for failed in result.failed_files:
            typer.echo(f"Skipped unparsable file: {self._relative(failed)}", err=True)

    @staticmethod
    def _relative(file_path: str) -> str:
        path = Path(file_path)
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return file_path
