"""Event handler checks (W9509)."""

from collections.abc import Mapping
from typing import TYPE_CHECKING

import astroid

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from pylint.checkers import BaseChecker

from checked_exceptions_linter.domain.constants import EVENT_HANDLER_CODES
from checked_exceptions_linter.domain.registry_types import RuleRegistryEntry
from checked_exceptions_linter.domain.rule_msgs import RuleMsgBuilder
from checked_exceptions_linter.domain.rules.event_handlers import EventHandlerRule


class EventHandlerChecker(BaseChecker):
    """W9509: handlers subscribed with += / -= that declare exceptions."""

    name: str = "checked-exceptions-event-handlers"
    CODES = EVENT_HANDLER_CODES

    def __init__(
        self,
        linter: "PyLinter",
        rule: EventHandlerRule,
        registry: Mapping[str, RuleRegistryEntry],
    ) -> None:
        self.msgs = RuleMsgBuilder.build_msgs_for_codes(
            registry, self.CODES)  # type: ignore[assignment]
        super().__init__(linter)
        self._rule = rule

    def visit_augassign(self, node: astroid.nodes.AugAssign) -> None:
        for d in self._rule.check(node):
            self.add_message(
                d.code,
                node=d.node,
                args=d.message_args or (),
            )
