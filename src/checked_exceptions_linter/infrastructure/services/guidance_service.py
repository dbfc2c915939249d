"""GuidanceService: loads the rule registry and answers message, fixability and instruction queries."""

from pathlib import Path
from typing import cast

import yaml

from checked_exceptions_linter.domain.protocols import GuidanceServiceProtocol
from checked_exceptions_linter.domain.registry_types import RuleRegistryEntry
from checked_exceptions_linter.domain.rule_msgs import RuleMsgBuilder


class GuidanceService(GuidanceServiceProtocol):
    """Loads rule_registry.yaml once; every query reads the in-memory copy."""

    def __init__(self, registry_path: str | None = None) -> None:
        if registry_path is not None:
            self._path = Path(registry_path)
        else:
            # Default: packaged resource next to this package
            _base = Path(__file__).resolve().parent.parent
            self._path = _base / "resources" / "rule_registry.yaml"
        self._registry: dict[str, RuleRegistryEntry] = {}
        self._load()

    def _load(self) -> None:
        if self._path.exists():
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                self._registry = (
                    cast(dict[str, RuleRegistryEntry], data) if isinstance(data, dict) else {}
                )
        else:
            self._registry = {}

    def get_registry(self) -> dict[str, RuleRegistryEntry]:
        """Return a shallow copy of the loaded registry for use by domain/use_cases."""
        return dict(self._registry)

    def get_entry(self, rule_code: str) -> RuleRegistryEntry | None:
        """Return the full registry entry for a rule by code or symbol."""
        return RuleMsgBuilder.get_entry(self._registry, rule_code)

    def get_manual_instructions(self, rule_code: str) -> str:
        entry = self.get_entry(rule_code)
        if entry and "manual_instructions" in entry:
            return str(entry["manual_instructions"]).strip()
        return "Catch the exception or declare it in the docstring."

    def get_fix_modes(self, rule_code: str) -> list[str]:
        entry = self.get_entry(rule_code)
        if not entry:
            return []
        return [str(mode) for mode in entry.get("fix_modes", []) or []]

    def get_symbol(self, rule_code: str) -> str:
        entry = self.get_entry(rule_code)
        return str(entry.get("symbol") or rule_code) if entry else rule_code
