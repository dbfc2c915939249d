"""Use Case: run the exception rules over files outside pylint."""

from astroid import nodes

from checked_exceptions_linter.domain.config import ConfigurationLoader
from checked_exceptions_linter.domain.protocols import (
    AstroidGatewayProtocol,
    FileSystemProtocol,
)
from checked_exceptions_linter.domain.rules import Checkable, ExceptionDiagnostic


class CheckExceptionsUseCase:
    """Parse each file once and hand every function, lambda and augmented assignment to each rule."""

    def __init__(
        self,
        astroid_gateway: AstroidGatewayProtocol,
        filesystem: FileSystemProtocol,
        rules: list[Checkable],
        config_loader: ConfigurationLoader,
    ) -> None:
        self.astroid_gateway = astroid_gateway
        self.filesystem = filesystem
        self.rules = rules
        self.config_loader = config_loader

    def python_files(self, target_path: str) -> list[str]:
        """Python files under target_path minus any matching an exclude_paths fragment."""
        excluded = self.config_loader.exclude_paths
        return [
            path for path in self.filesystem.glob_python_files(target_path)
            if not any(fragment in path for fragment in excluded)
        ]

    def execute(self, target_path: str) -> dict[str, list[ExceptionDiagnostic]]:
        """Diagnostics per file, in file order. Unparsable files are left out."""
        results: dict[str, list[ExceptionDiagnostic]] = {}
        for file_path in self.python_files(target_path):
            diagnostics = self.check_file(file_path)
            if diagnostics is not None:
                results[file_path] = diagnostics
        return results

    def check_file(self, file_path: str) -> list[ExceptionDiagnostic] | None:
        """Diagnostics for one file, or None if it cannot be parsed."""
        module = self.astroid_gateway.parse_file(file_path)
        if module is None:
            return None
        return self.check_module(module)

    def check_module(self, module: nodes.Module) -> list[ExceptionDiagnostic]:
        diagnostics: list[ExceptionDiagnostic] = []
        # AsyncFunctionDef is a FunctionDef subclass.
        for node in module.nodes_of_class((nodes.FunctionDef, nodes.Lambda, nodes.AugAssign)):
            for rule in self.rules:
                diagnostics.extend(rule.check(node))
        return diagnostics
