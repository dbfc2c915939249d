"""Unhandled exception rule (W9501-W9504): thrown, not caught and not declared."""

import logging

import astroid

from checked_exceptions_linter.domain.config import ConfigurationLoader
from checked_exceptions_linter.domain.constants import (
    ACCESSOR_SCOPE_PROPERTY,
    UNHANDLED_CODES,
    UNHANDLED_EXCEPTION,
    UNHANDLED_EXCEPTION_IN_EXPRESSION_BODY,
    UNHANDLED_EXCEPTION_IN_GETTER,
    UNHANDLED_EXCEPTION_IN_SETTER,
)
from checked_exceptions_linter.domain.entities import (
    AccessorScope,
    FixMode,
    TransformationPlan,
)
from checked_exceptions_linter.domain.rules import (
    Checkable,
    ExceptionDiagnostic,
    Fixable,
)
from checked_exceptions_linter.domain.rules.declarations import DeclarationExtractor
from checked_exceptions_linter.domain.rules.exception_contract import (
    ASTROID_ERRORS,
    ExceptionContractRule,
)
from checked_exceptions_linter.domain.rules.exception_flow import ExceptionFlowAnalyzer
from checked_exceptions_linter.domain.rules.noise_filter import NoiseFilter
from checked_exceptions_linter.domain.services.member_resolver import MemberResolver

_CODE_FOR_SCOPE: dict[AccessorScope, str] = {
    AccessorScope.NONE: UNHANDLED_EXCEPTION,
    AccessorScope.GET: UNHANDLED_EXCEPTION_IN_GETTER,
    AccessorScope.SET: UNHANDLED_EXCEPTION_IN_SETTER,
}


class UnhandledExceptionRule(ExceptionContractRule, Checkable, Fixable):
    """
    Rule for W9501-W9504.

    unhandled = noise-filtered(thrown) minus declared, where a thrown type is
    covered by any declared supertype. Getters and setters are checked
    against their own accessor's entries only; lambdas have no contract.
    """

    codes: list[str] = UNHANDLED_CODES
    description: str = "Exceptions escaping a function, accessor or lambda must be caught or declared."

    def __init__(
        self,
        config_loader: ConfigurationLoader,
        extractor: DeclarationExtractor | None = None,
        resolver: MemberResolver | None = None,
        noise_filter: NoiseFilter | None = None,
        analyzer: ExceptionFlowAnalyzer | None = None,
    ) -> None:
        super().__init__(config_loader, extractor, resolver, noise_filter)
        self._analyzer = analyzer or ExceptionFlowAnalyzer(self._extractor, self._resolver)

    def check(self, node: astroid.nodes.NodeNG) -> list[ExceptionDiagnostic]:
        """Check a FunctionDef, AsyncFunctionDef or Lambda. Other nodes yield nothing."""
        if not isinstance(node, (astroid.nodes.FunctionDef, astroid.nodes.Lambda)):
            return []
        try:
            return self._check(node)
        except ASTROID_ERRORS as exc:
            logging.debug("Skipping %s: astroid could not analyze it (%s)", node.as_string()[:40], exc)
            return []

    def _check(self, node: astroid.nodes.FunctionDef | astroid.nodes.Lambda) -> list[ExceptionDiagnostic]:
        is_function = isinstance(node, astroid.nodes.FunctionDef)
        scope = self._resolver.accessor_scope(node) if is_function else AccessorScope.NONE
        thrown = self._noise_filter.filter(self._analyzer.thrown_unhandled(node))
        if not thrown:
            return []
        declared = self._extractor.declared_exceptions(node, False, scope) if is_function else set()
        unhandled = [
            v for v in thrown
            if not any(v.exception_type.is_subtype_of(d) for d in declared)
        ]
        code = _CODE_FOR_SCOPE[scope] if is_function else UNHANDLED_EXCEPTION_IN_EXPRESSION_BODY
        return self._group(
            code, unhandled, node, lambda first, names: (names,), scope, fixable=is_function
        )

    def fix(self, diagnostic: ExceptionDiagnostic, mode: FixMode) -> list[TransformationPlan]:
        """Declare, ignore or handle the diagnostic's exceptions. Lambdas have no fix."""
        if diagnostic.code not in self.codes or not diagnostic.fixable:
            return []
        if mode is FixMode.HANDLE:
            return self._handle_plans(diagnostic)
        scope = AccessorScope(diagnostic.properties.get(ACCESSOR_SCOPE_PROPERTY, AccessorScope.NONE.value))
        return self._declare_plans(diagnostic, mode, scope)
