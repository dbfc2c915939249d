"""CLI entry points for checked-exceptions - Thin Controller using Typer."""

from dataclasses import dataclass
from pathlib import Path

import typer

from checked_exceptions_linter.domain.config import ConfigurationLoader
from checked_exceptions_linter.domain.entities import FixMode
from checked_exceptions_linter.domain.protocols import (
    AstroidGatewayProtocol,
    FileSystemProtocol,
    FixerGatewayProtocol,
    GuidanceServiceProtocol,
)
from checked_exceptions_linter.domain.rules import Checkable
from checked_exceptions_linter.interface.reporters import DiagnosticReporter
from checked_exceptions_linter.use_cases.apply_fixes import ApplyFixesUseCase
from checked_exceptions_linter.use_cases.check_exceptions import CheckExceptionsUseCase


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    astroid_gateway: AstroidGatewayProtocol
    filesystem: FileSystemProtocol
    fixer_gateway: FixerGatewayProtocol
    guidance_service: GuidanceServiceProtocol
    rules: list[Checkable]


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def resolve_target_path(path: Path | None) -> str:
        """Resolve target path: explicit path, else src/ if exists, else '.' (public API)."""
        if path and str(path) != ".":
            return str(path)
        cwd = Path.cwd()
        src_dir = cwd / "src"
        if src_dir.exists() and src_dir.is_dir():
            return "src"
        return "."

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies. No Service Locator."""
        app = typer.Typer(
            name="checked-exceptions",
            help="Checked exceptions for Python. Run 'checked-exceptions check' to report; 'checked-exceptions fix' to declare, ignore or handle.",
            add_completion=False,
        )
        reporter = DiagnosticReporter(deps.guidance_service.get_registry())

        def _check_use_case() -> CheckExceptionsUseCase:
            return CheckExceptionsUseCase(
                astroid_gateway=deps.astroid_gateway,
                filesystem=deps.filesystem,
                rules=deps.rules,
                config_loader=deps.config_loader,
            )

        @app.command()
        def check(
            path: Path | None = typer.Argument(None, help="Path to analyze (default: src/ if present, else .)"),  # noqa: B008
        ) -> None:
            """Report exceptions that escape without being caught or declared."""
            target_path = CLIAppFactory.resolve_target_path(path)
            results = _check_use_case().execute(target_path)
            if reporter.report(results):
                raise typer.Exit(code=1)

        @app.command()
        def fix(
            path: Path | None = typer.Argument(None, help="Path to fix (default: src/ if present, else .)"),  # noqa: B008
            mode: FixMode = typer.Option(FixMode.DECLARE, "--mode", help="declare, ignore or handle"),  # noqa: B008
        ) -> None:
            """Apply one fix mode to every fixable diagnostic."""
            target_path = CLIAppFactory.resolve_target_path(path)
            use_case = ApplyFixesUseCase(
                check_use_case=_check_use_case(),
                fixer_gateway=deps.fixer_gateway,
                rules=deps.rules,
            )
            reporter.report_fixes(use_case.execute(target_path, mode))

        @app.command()
        def explain(code: str = typer.Argument(..., help="Message code or symbol, e.g. W9501")) -> None:
            """Show what a message means and how to fix it."""
            entry = deps.guidance_service.get_entry(code)
            if entry is None:
                typer.echo(f"Unknown message: {code}", err=True)
                raise typer.Exit(code=2)
            typer.echo(f"{code}: {deps.guidance_service.get_symbol(code)} - {entry.get('display_name', '')}")
            typer.echo(str(entry.get("short_description", "")).strip())
            typer.echo("Fix: " + deps.guidance_service.get_manual_instructions(code))
            modes = deps.guidance_service.get_fix_modes(code)
            typer.echo("Automatic fixes: " + (", ".join(modes) if modes else "none"))

        return app
