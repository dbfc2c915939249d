"""Exception flow analysis: which exception types escape a function or lambda body."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from astroid import nodes
from astroid.const import Context

from checked_exceptions_linter.domain.entities import AccessorScope, ExceptionType
from checked_exceptions_linter.domain.rules import UnhandledExceptionViolation
from checked_exceptions_linter.domain.rules.declarations import DeclarationExtractor
from checked_exceptions_linter.domain.services.member_resolver import MemberResolver

_TERMINATORS = (nodes.Return, nodes.Raise, nodes.Break, nodes.Continue)
_TRY_NODES = (nodes.Try, nodes.TryStar)
_SEQUENTIAL_BLOCKS = ("body", "orelse", "finalbody")
_NESTED_SCOPES = (nodes.FunctionDef, nodes.Lambda, nodes.ClassDef)


def _by_name(types: Iterable[ExceptionType]) -> list[ExceptionType]:
    return sorted(types, key=lambda t: t.qname)


@dataclass
class _Walk:
    """Accumulator for one body: where violations go and what handlers resolved to."""

    owner: nodes.NodeNG
    found: list[UnhandledExceptionViolation] = field(default_factory=list)
    handler_types: dict[int, list[ExceptionType]] = field(default_factory=dict)


class ExceptionFlowAnalyzer:
    """
    Collect exceptions thrown in a body and not caught inside it.

    Sources are raise statements, calls (the callee's declared contract),
    property reads and writes (the getter's contract scoped by accessor) and
    subscripts (the __getitem__/__setitem__ contract). Nested functions,
    lambdas and classes are separate bodies and are skipped.
    """

    def __init__(
        self,
        extractor: DeclarationExtractor,
        resolver: MemberResolver | None = None,
    ) -> None:
        self._extractor = extractor
        self._resolver = resolver or MemberResolver()

    def thrown_unhandled(self, body_owner: nodes.NodeNG) -> list[UnhandledExceptionViolation]:
        """Deduplicated violations in source order."""
        walk = _Walk(owner=body_owner)
        if isinstance(body_owner, nodes.FunctionDef):
            for statement in body_owner.body:
                self._visit(statement, walk)
        elif isinstance(body_owner, nodes.Lambda):
            self._visit(body_owner.body, walk)
        return list(dict.fromkeys(walk.found))

    # -- traversal --------------------------------------------------------------

    def _visit(self, node: nodes.NodeNG, walk: _Walk) -> None:
        if isinstance(node, _NESTED_SCOPES):
            return
        if isinstance(node, nodes.Raise):
            self._visit_raise(node, walk)
        elif isinstance(node, nodes.Call):
            for callee in self._resolver.called_functions(node):
                self._contribute(
                    self._declared(callee, AccessorScope.NONE), node, walk
                )
        elif isinstance(node, (nodes.Attribute, nodes.AssignAttr)):
            getter = self._resolver.accessed_property(node)
            if getter is not None:
                self._contribute(
                    self._declared(getter, self._access_scope(node)),
                    node,
                    walk,
                )
        elif isinstance(node, nodes.Subscript):
            for method in self._resolver.subscript_methods(node, self._access_scope(node)):
                self._contribute(
                    self._declared(method, AccessorScope.NONE), node, walk
                )
        for child in node.get_children():
            self._visit(child, walk)

    def _declared(self, member: nodes.FunctionDef, scope: AccessorScope) -> list[ExceptionType]:
        return _by_name(self._extractor.declared_exceptions(member, True, scope))

    @staticmethod
    def _access_scope(node: nodes.NodeNG) -> AccessorScope:
        parent = node.parent
        if isinstance(parent, nodes.AugAssign) and parent.target is node:
            return AccessorScope.BOTH
        if isinstance(node, nodes.AssignAttr):
            return AccessorScope.SET
        if isinstance(node, nodes.Subscript) and node.ctx == Context.Store:
            return AccessorScope.SET
        return AccessorScope.GET

    def _visit_raise(self, node: nodes.Raise, walk: _Walk) -> None:
        if self._is_unreachable(node, walk.owner):
            return
        if node.exc is None:
            types: list[ExceptionType] = []
            for handler in self._enclosing_handlers(node, walk.owner):
                types.extend(self._handler_types(handler, walk))
            self._contribute(types, node, walk)
            return
        self._contribute(
            [ExceptionType.from_classdef(c) for c in self._resolver.exception_classes(node.exc)],
            node,
            walk,
        )

    def _contribute(
        self, types: Iterable[ExceptionType], origin: nodes.NodeNG, walk: _Walk
    ) -> None:
        location = self._location_node(origin, walk.owner)
        for exception_type in types:
            if self._is_caught(exception_type, origin, walk):
                continue
            walk.found.append(
                UnhandledExceptionViolation.from_node(exception_type, location, origin=origin)
            )

    @staticmethod
    def _location_node(origin: nodes.NodeNG, owner: nodes.NodeNG) -> nodes.NodeNG:
        if isinstance(owner, nodes.Lambda):
            return owner.body
        return origin.statement()

    # -- catching ----------------------------------------------------------------

    def _is_caught(self, exception_type: ExceptionType, origin: nodes.NodeNG, walk: _Walk) -> bool:
        child = origin
        parent = origin.parent
        while parent is not None and child is not walk.owner:
            if isinstance(parent, _TRY_NODES) and child in parent.body:
                for handler in parent.handlers:
                    if self._handler_catches(handler, exception_type, walk):
                        return True
            if parent is walk.owner:
                return False
            child, parent = parent, parent.parent
        return False

    def _handler_catches(
        self, handler: nodes.ExceptHandler, exception_type: ExceptionType, walk: _Walk
    ) -> bool:
        if handler.type is None:
            return not self._contains_bare_raise(handler)
        return any(
            exception_type.is_subtype_of(caught) for caught in self._handler_types(handler, walk)
        )

    def _handler_types(self, handler: nodes.ExceptHandler, walk: _Walk) -> list[ExceptionType]:
        """Statically resolvable classes named by ``except <expr>``; empty if unresolvable."""
        key = id(handler)
        if key not in walk.handler_types:
            if handler.type is None:
                walk.handler_types[key] = []
            else:
                walk.handler_types[key] = [
                    ExceptionType.from_classdef(c)
                    for c in self._resolver.exception_classes(handler.type)
                ]
        return walk.handler_types[key]

    @staticmethod
    def _contains_bare_raise(handler: nodes.ExceptHandler) -> bool:
        return any(
            raise_node.exc is None
            for raise_node in handler.nodes_of_class(
                nodes.Raise, skip_klass=_NESTED_SCOPES
            )
        )

    @staticmethod
    def _enclosing_handlers(node: nodes.NodeNG, owner: nodes.NodeNG) -> list[nodes.ExceptHandler]:
        handlers: list[nodes.ExceptHandler] = []
        parent = node.parent
        while parent is not None and parent is not owner:
            if isinstance(parent, nodes.ExceptHandler):
                handlers.append(parent)
            parent = parent.parent
        return handlers

    # -- reachability -----------------------------------------------------------

    def _is_unreachable(self, node: nodes.NodeNG, owner: nodes.NodeNG) -> bool:
        current = node.statement()
        while current is not None and current is not owner:
            parent = current.parent
            if any(self._terminates(previous) for previous in self._preceding(current)):
                return True
            if isinstance(parent, (nodes.If, nodes.While)) and self._in_dead_branch(parent, current):
                return True
            current = parent
        return False

    @staticmethod
    def _preceding(statement: nodes.NodeNG) -> list[nodes.NodeNG]:
        """Statements executed before ``statement`` in its block; handlers are not sequential."""
        parent = statement.parent
        for name in _SEQUENTIAL_BLOCKS:
            block = getattr(parent, name, None)
            if isinstance(block, list) and statement in block:
                return block[:block.index(statement)]
        return []

    @staticmethod
    def _in_dead_branch(parent: nodes.If | nodes.While, statement: nodes.NodeNG) -> bool:
        test = parent.test
        if not isinstance(test, nodes.Const):
            return False
        if not test.value:
            return statement in parent.body
        return isinstance(parent, nodes.If) and statement in parent.orelse

    def _terminates(self, statement: nodes.NodeNG) -> bool:
        if isinstance(statement, _TERMINATORS):
            return True
        if isinstance(statement, nodes.If):
            return (
                bool(statement.orelse)
                and self._block_terminates(statement.body)
                and self._block_terminates(statement.orelse)
            )
        if isinstance(statement, _TRY_NODES):
            if self._block_terminates(statement.finalbody):
                return True
            return self._block_terminates(statement.body) and all(
                self._block_terminates(handler.body) for handler in statement.handlers
            )
        return False

    def _block_terminates(self, block: list[nodes.NodeNG]) -> bool:
        return any(self._terminates(statement) for statement in block)
