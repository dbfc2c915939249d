"""Event handler rule (W9509): functions subscribed with += / -= should not throw."""

import logging

import astroid

from checked_exceptions_linter.domain.constants import (
    EVENT_HANDLER_CODES,
    EVENT_HANDLER_EXCEPTION,
)
from checked_exceptions_linter.domain.entities import (
    AccessorScope,
    FixMode,
    TransformationPlan,
)
from checked_exceptions_linter.domain.rules import (
    Checkable,
    EventHandlerViolation,
    ExceptionDiagnostic,
)
from checked_exceptions_linter.domain.rules.exception_contract import (
    ASTROID_ERRORS,
    ExceptionContractRule,
)

_SUBSCRIPTION_OPERATORS = frozenset({"+=", "-="})


def _handler_args(first: EventHandlerViolation, names: str) -> tuple[str, ...]:
    return (first.handler_name, names)


class EventHandlerRule(ExceptionContractRule, Checkable):
    """Rule for W9509: report the declared contract of a subscribed handler at the subscription."""

    codes: list[str] = EVENT_HANDLER_CODES
    description: str = "Event handlers should not declare exceptions."

    def check(self, node: astroid.nodes.NodeNG) -> list[ExceptionDiagnostic]:
        if not isinstance(node, astroid.nodes.AugAssign) or node.op not in _SUBSCRIPTION_OPERATORS:
            return []
        try:
            handler = self._resolver.handler_function(node.value)
            if handler is None:
                return []
            declared = sorted(
                self._extractor.declared_exceptions(handler, True, AccessorScope.NONE),
                key=lambda t: t.qname,
            )
        except ASTROID_ERRORS as exc:
            logging.debug("Skipping event subscription %s (%s)", node.as_string(), exc)
            return []
        violations = self._noise_filter.filter(
            [
                EventHandlerViolation.from_node(t, node.value, handler_name=handler.name)
                for t in declared
            ]
        )
        return self._group(
            EVENT_HANDLER_EXCEPTION,
            violations,
            handler,
            _handler_args,
            fixable=False,
        )

    def fix(self, diagnostic: ExceptionDiagnostic, mode: FixMode) -> list[TransformationPlan]:
        """Handlers are fixed by hand; there is no automatic plan."""
        return []
