"""Substitution checks (W9505-W9508)."""

from collections.abc import Mapping
from typing import TYPE_CHECKING

import astroid

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from pylint.checkers import BaseChecker

from checked_exceptions_linter.domain.constants import SUBSTITUTION_CODES
from checked_exceptions_linter.domain.registry_types import RuleRegistryEntry
from checked_exceptions_linter.domain.rule_msgs import RuleMsgBuilder
from checked_exceptions_linter.domain.rules.substitution import SubstitutionRule


class SubstitutionChecker(BaseChecker):
    """W9505-W9508: override contracts. Thin: delegates to SubstitutionRule."""

    name: str = "checked-exceptions-substitution"
    CODES = SUBSTITUTION_CODES

    def __init__(
        self,
        linter: "PyLinter",
        rule: SubstitutionRule,
        registry: Mapping[str, RuleRegistryEntry],
    ) -> None:
        self.msgs = RuleMsgBuilder.build_msgs_for_codes(
            registry, self.CODES)  # type: ignore[assignment]
        super().__init__(linter)
        self._rule = rule

    def visit_functiondef(self, node: astroid.nodes.FunctionDef) -> None:
        """Delegate to domain rule; report each diagnostic via add_message."""
        for d in self._rule.check(node):
            self.add_message(
                d.code,
                node=d.node,
                args=d.message_args or (),
            )

    visit_asyncfunctiondef = visit_functiondef
