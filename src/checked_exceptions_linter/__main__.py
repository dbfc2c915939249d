"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from checked_exceptions_linter.infrastructure.di.container import CheckedExceptionsContainer
from checked_exceptions_linter.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = CheckedExceptionsContainer()

    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        astroid_gateway=container.get_astroid_gateway(),
        filesystem=container.get_filesystem_gateway(),
        fixer_gateway=container.get_fixer_gateway(),
        guidance_service=container.get_guidance_service(),
        rules=container.get_rules(),
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
