from typing import TYPE_CHECKING, Optional, Protocol

from checked_exceptions_linter.domain.registry_types import RuleRegistryEntry

if TYPE_CHECKING:
    import astroid

    from checked_exceptions_linter.domain.entities import TransformationPlan


class AstroidGatewayProtocol(Protocol):
    """Protocol for turning source files into astroid modules."""

    def parse_file(self, file_path: str) -> Optional["astroid.nodes.Module"]:
        """Parse a file and return the astroid Module node, or None if it cannot be parsed."""
        ...


class FixerGatewayProtocol(Protocol):
    """Protocol for applying code fixes. Implementers accept only TransformationPlan at boundary."""

    def apply_fixes(self, file_path: str, fixes: list["TransformationPlan"]) -> bool:
        """Apply a list of transformation plans to a file. Returns True if modified."""
        ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python files in path (recursive if directory)."""
        ...


class GuidanceServiceProtocol(Protocol):
    """Protocol for the rule registry. Implemented by GuidanceService in infrastructure."""

    def get_registry(self) -> dict[str, RuleRegistryEntry]:
        """Return the loaded registry keyed by rule id."""
        ...

    def get_entry(self, rule_code: str) -> Optional[RuleRegistryEntry]:
        """Return the full registry entry for a rule by code or symbol."""
        ...

    def get_manual_instructions(self, rule_code: str) -> str:
        """Return manual fix instructions for the rule."""
        ...

    def get_fix_modes(self, rule_code: str) -> list[str]:
        """Return the fix modes a rule supports."""
        ...

    def get_symbol(self, rule_code: str) -> str:
        """Return the message symbol for a code, or the code itself when unknown."""
        ...
