"""Pure message-building from a registry dict. No I/O or infrastructure imports."""

from collections.abc import Mapping
from typing import cast

from checked_exceptions_linter.domain.constants import CHECKED_EXCEPTIONS_PREFIX
from checked_exceptions_linter.domain.registry_types import RuleRegistryEntry


class RuleMsgBuilder:
    """Builds Pylint msgs dict from a registry mapping."""

    @staticmethod
    def get_entry(
        registry: Mapping[str, RuleRegistryEntry], rule_code: str
    ) -> RuleRegistryEntry | None:
        """Return registry entry for a rule by code or symbol."""
        entry = registry.get(f"{CHECKED_EXCEPTIONS_PREFIX}{rule_code}")
        if isinstance(entry, dict):
            return cast(RuleRegistryEntry, dict(entry))
        for rule_id, candidate in registry.items():
            if not rule_id.startswith(CHECKED_EXCEPTIONS_PREFIX):
                continue
            if isinstance(candidate, dict) and candidate.get("symbol") == rule_code:
                return cast(RuleRegistryEntry, dict(candidate))
        return None

    @staticmethod
    def build_msgs_for_codes(
        registry: Mapping[str, RuleRegistryEntry], codes: list[str]
    ) -> dict[str, tuple[str, str, str]]:
        """Build Pylint msgs dict from a registry mapping for given rule codes.

        Registry keys are e.g. 'checked-exceptions.W9501'.
        Returns { code: (message_template, symbol, description) } for checker.msgs.
        """
        result: dict[str, tuple[str, str, str]] = {}
        for code in codes:
            entry = RuleMsgBuilder.get_entry(registry, code)
            if entry and entry.get("message_template"):
                msg = entry["message_template"]
                symbol = entry.get("symbol") or code
                desc = entry.get("short_description") or entry.get("display_name") or code
                result[code] = (str(msg), str(symbol), str(desc))
        return result
