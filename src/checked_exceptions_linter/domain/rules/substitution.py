"""Substitution rule (W9505-W9508): overrides must not declare more than what they replace."""

import logging

import astroid

from checked_exceptions_linter.domain.constants import (
    ACCESSOR_SCOPE_PROPERTY,
    BASE_METHOD_SUBSTITUTION,
    BASE_PROPERTY_GETTER_SUBSTITUTION,
    BASE_PROPERTY_SETTER_SUBSTITUTION,
    INTERFACE_SUBSTITUTION,
    SUBSTITUTION_CODES,
)
from checked_exceptions_linter.domain.entities import (
    AccessorScope,
    ExceptionType,
    FixMode,
    TransformationPlan,
)
from checked_exceptions_linter.domain.rules import (
    Checkable,
    ExceptionDiagnostic,
    Fixable,
    SubstitutionViolation,
)
from checked_exceptions_linter.domain.rules.exception_contract import (
    ASTROID_ERRORS,
    ExceptionContractRule,
)

_PROPERTY_CODES: dict[AccessorScope, str] = {
    AccessorScope.GET: BASE_PROPERTY_GETTER_SUBSTITUTION,
    AccessorScope.SET: BASE_PROPERTY_SETTER_SUBSTITUTION,
}


def _method_args(first: SubstitutionViolation, names: str) -> tuple[str, ...]:
    return (first.member_name, names, first.counterpart_owner, first.counterpart_member)


class SubstitutionRule(ExceptionContractRule, Checkable, Fixable):
    """
    Rule for W9505-W9508.

    A member's declared set (ignored entries excluded) minus its counterpart's
    declared set must be empty. Methods are compared with the base-class
    member and each implemented interface member; properties per accessor,
    skipping an accessor the counterpart lacks. Constructors are exempt.
    """

    codes: list[str] = SUBSTITUTION_CODES
    description: str = "Overriding members must not declare exceptions their counterpart does not."

    def check(self, node: astroid.nodes.NodeNG) -> list[ExceptionDiagnostic]:
        """Check a method definition. Setters are reconciled through their getter."""
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        if self._resolver.owner_class(node) is None or self._resolver.is_constructor(node):
            return []
        if self._resolver.is_property_setter(node):
            return []
        try:
            if self._resolver.is_property_getter(node):
                return self._check_property(node)
            return self._check_method(node)
        except ASTROID_ERRORS as exc:
            logging.debug("Skipping substitution check of %s (%s)", node.qname(), exc)
            return []

    def _check_method(self, node: astroid.nodes.FunctionDef) -> list[ExceptionDiagnostic]:
        own = self._extractor.declared_exceptions(node, True, AccessorScope.NONE)
        if not own:
            return []
        diagnostics: list[ExceptionDiagnostic] = []
        base = self._resolver.base_counterpart(node)
        if base is not None:
            diagnostics.extend(
                self._group(
                    BASE_METHOD_SUBSTITUTION,
                    self._excess(node, own, [base], AccessorScope.NONE),
                    node,
                    _method_args,
                )
            )
        interfaces = self._resolver.interface_counterparts(node)
        if interfaces:
            diagnostics.extend(
                self._group(
                    INTERFACE_SUBSTITUTION,
                    self._excess(node, own, interfaces, AccessorScope.NONE),
                    node,
                    _method_args,
                )
            )
        return diagnostics

    def _check_property(self, node: astroid.nodes.FunctionDef) -> list[ExceptionDiagnostic]:
        counterparts = [
            c for c in [self._resolver.base_counterpart(node)] + self._resolver.interface_counterparts(node)
            if c is not None
        ]
        if not counterparts:
            return []
        diagnostics: list[ExceptionDiagnostic] = []
        for scope in (AccessorScope.GET, AccessorScope.SET):
            own = self._extractor.declared_exceptions(node, True, scope)
            if not own:
                continue
            matching = [
                c for c in counterparts
                if self._resolver.has_accessor(self._resolver.contract_holder(c), scope)
            ]
            diagnostics.extend(
                self._group(
                    _PROPERTY_CODES[scope],
                    self._excess(node, own, matching, scope),
                    node,
                    _method_args,
                    scope,
                )
            )
        return diagnostics

    def _excess(
        self,
        node: astroid.nodes.FunctionDef,
        own: set[ExceptionType],
        counterparts: list[astroid.nodes.FunctionDef],
        scope: AccessorScope,
    ) -> list[SubstitutionViolation]:
        """Own types missing from each counterpart, first counterpart first, noise removed."""
        violations: list[SubstitutionViolation] = []
        ordered_own = sorted(own, key=lambda t: t.qname)
        for counterpart in counterparts:
            allowed = self._extractor.declared_exceptions(counterpart, True, scope)
            owner = self._resolver.owner_class(counterpart)
            for exception_type in ordered_own:
                if exception_type in allowed:
                    continue
                violations.append(
                    SubstitutionViolation.from_node(
                        exception_type,
                        node,
                        counterpart_owner=owner.name if owner is not None else "",
                        counterpart_member=counterpart.name,
                        member_name=node.name,
                    )
                )
        return self._noise_filter.filter(list(dict.fromkeys(violations)))

    def fix(self, diagnostic: ExceptionDiagnostic, mode: FixMode) -> list[TransformationPlan]:
        """Only "ignore" applies: mark the member's own excess entries as ignored."""
        if diagnostic.code not in self.codes or mode is not FixMode.IGNORE:
            return []
        scope = AccessorScope(diagnostic.properties.get(ACCESSOR_SCOPE_PROPERTY, AccessorScope.NONE.value))
        return self._declare_plans(diagnostic, mode, scope)
