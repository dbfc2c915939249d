"""Astroid Gateway - parses source files for the CLI."""

import logging
from pathlib import Path
from typing import Optional

import astroid

from checked_exceptions_linter.domain.protocols import AstroidGatewayProtocol


class AstroidGateway(AstroidGatewayProtocol):
    """Builds astroid modules from files so rules can run outside pylint."""

    def parse_file(self, file_path: str) -> Optional[astroid.nodes.Module]:
        """Parse a file and return the astroid Module node; None (with a warning) on failure."""
        file_path_obj = Path(file_path)
        if not file_path_obj.exists():
            return None
        try:
            source = file_path_obj.read_text(encoding="utf-8")
            return astroid.parse(source, module_name=self._module_name(file_path_obj), path=file_path)
        except (OSError, UnicodeDecodeError, astroid.AstroidSyntaxError) as exc:
            logging.warning("Skipping %s: %s", file_path, exc)
            return None

    @staticmethod
    def _module_name(file_path: Path) -> str:
        """Dotted module name from the enclosing packages (directories with __init__.py)."""
        parts = [file_path.stem] if file_path.stem != "__init__" else []
        parent = file_path.parent
        while (parent / "__init__.py").exists():
            parts.insert(0, parent.name)
            parent = parent.parent
        return ".".join(parts) or file_path.stem
