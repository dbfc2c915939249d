"""Declared exception contracts read from docstrings."""

import logging

from astroid import nodes

from checked_exceptions_linter.domain.entities import AccessorScope, ExceptionType
from checked_exceptions_linter.domain.exceptions import AnnotationSyntaxError
from checked_exceptions_linter.domain.services.annotation_parser import (
    AnnotationEntry,
    AnnotationParser,
)
from checked_exceptions_linter.domain.services.member_resolver import MemberResolver


class DeclarationExtractor:
    """
    Compute the set of exception types a member declares.

    <inheritdoc/> pulls in the same query against the base-class counterpart
    and every interface counterpart, transitively.
    """

    def __init__(
        self,
        resolver: MemberResolver | None = None,
        parser: AnnotationParser | None = None,
    ) -> None:
        self._resolver = resolver or MemberResolver()
        self._parser = parser or AnnotationParser()

    def declared_exceptions(
        self,
        member: nodes.FunctionDef | None,
        ignore_marked: bool,
        scope: AccessorScope = AccessorScope.NONE,
    ) -> set[ExceptionType]:
        """
        Return the declared set for ``member``.

        Args:
            member: Any FunctionDef; setters read their property's getter docstring.
            ignore_marked: Drop entries carrying the "Ignore." marker.
            scope: GET/SET keep entries tagged with that accessor; BOTH keeps
                either tag; NONE keeps every entry.
        """
        declared: set[ExceptionType] = set()
        holder = self._resolver.contract_holder(member)
        if holder is None:
            return declared

        worklist: list[nodes.FunctionDef] = [holder]
        visited: set[int] = set()
        while worklist:
            current = worklist.pop()
            if id(current) in visited:
                continue
            visited.add(id(current))
            entries = self.entries(current)
            for entry in entries:
                if not entry.is_exception or entry.cref is None:
                    continue
                if ignore_marked and entry.ignore:
                    continue
                if not scope.covers(entry.accessor):
                    continue
                resolved = self._resolver.resolve_exception_type(entry.cref, current)
                if resolved is not None:
                    declared.add(resolved)
            if self._parser.has_inherit_marker(entries):
                worklist.extend(self.inherited_holders(current))
        return declared

    def entries(self, holder: nodes.FunctionDef) -> list[AnnotationEntry]:
        """Parsed docstring entries, or an empty list if the docstring is missing or malformed."""
        doc_node = holder.doc_node
        if doc_node is None or not isinstance(doc_node.value, str):
            return []
        try:
            return self._parser.parse(doc_node.value)
        except AnnotationSyntaxError as exc:
            logging.debug("Ignoring malformed exception markup on %s: %s", holder.qname(), exc)
            return []

    def inherited_holders(self, holder: nodes.FunctionDef) -> list[nodes.FunctionDef]:
        """Contract holders an <inheritdoc/> on ``holder`` refers to."""
        result: list[nodes.FunctionDef] = []
        base = self._resolver.contract_holder(self._resolver.base_counterpart(holder))
        if base is not None:
            result.append(base)
        for counterpart in self._resolver.interface_counterparts(holder):
            interface_holder = self._resolver.contract_holder(counterpart)
            if interface_holder is not None:
                result.append(interface_holder)
        return result
