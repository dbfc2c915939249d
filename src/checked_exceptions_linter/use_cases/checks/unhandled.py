"""Unhandled exception checks (W9501-W9504)."""

from collections.abc import Mapping
from typing import TYPE_CHECKING

import astroid

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from pylint.checkers import BaseChecker

from checked_exceptions_linter.domain.constants import UNHANDLED_CODES
from checked_exceptions_linter.domain.registry_types import RuleRegistryEntry
from checked_exceptions_linter.domain.rule_msgs import RuleMsgBuilder
from checked_exceptions_linter.domain.rules.unhandled_exceptions import UnhandledExceptionRule


class UnhandledExceptionChecker(BaseChecker):
    """W9501-W9504: exceptions escaping functions, accessors and lambdas. Thin: delegates to UnhandledExceptionRule."""

    name: str = "checked-exceptions-unhandled"
    CODES = UNHANDLED_CODES

    def __init__(
        self,
        linter: "PyLinter",
        rule: UnhandledExceptionRule,
        registry: Mapping[str, RuleRegistryEntry],
    ) -> None:
        self.msgs = RuleMsgBuilder.build_msgs_for_codes(
            registry, self.CODES)  # type: ignore[assignment]
        super().__init__(linter)
        self._rule = rule

    def _report(self, node: astroid.nodes.NodeNG) -> None:
        for d in self._rule.check(node):
            self.add_message(
                d.code,
                node=d.node,
                args=d.message_args or (),
            )

    def visit_functiondef(self, node: astroid.nodes.FunctionDef) -> None:
        """Delegate to domain rule; report each diagnostic via add_message."""
        self._report(node)

    visit_asyncfunctiondef = visit_functiondef

    def visit_lambda(self, node: astroid.nodes.Lambda) -> None:
        self._report(node)
