"""Python member semantics on top of astroid: accessors, visibility, counterparts, callees."""

import logging
from collections.abc import Iterator

import astroid
from astroid import bases, nodes
from astroid.exceptions import (
    AstroidBuildingError,
    AttributeInferenceError,
    InferenceError,
    MroError,
)

from checked_exceptions_linter.domain.constants import (
    ABC_QNAMES,
    BASE_EXCEPTION_QNAME,
    CONSTRUCTOR_NAMES,
    IMPLICIT_FIRST_PARAMETERS,
    OBJECT_QNAME,
    PROPERTY_DECORATORS,
    PROTOCOL_QNAMES,
)
from checked_exceptions_linter.domain.entities import (
    AccessorScope,
    CommentTarget,
    ExceptionType,
    MemberKind,
    ParameterDeclaration,
    Visibility,
)


class MemberResolver:
    """
    Answers "what kind of member is this and what does it override?".

    Stateless; every method degrades to a neutral answer (None, empty list,
    NONE scope) when astroid cannot infer something.
    """

    # -- accessors ------------------------------------------------------------

    def is_property_getter(self, func: nodes.NodeNG | None) -> bool:
        if not isinstance(func, nodes.FunctionDef) or not func.decorators:
            return False
        for decorator in func.decorators.nodes:
            if isinstance(decorator, nodes.Name) and decorator.name in PROPERTY_DECORATORS:
                return True
            if isinstance(decorator, nodes.Attribute):
                if decorator.attrname == "getter":
                    return True
                if decorator.as_string() in PROPERTY_DECORATORS:
                    return True
        return False

    def is_property_setter(self, func: nodes.NodeNG | None) -> bool:
        if not isinstance(func, nodes.FunctionDef) or not func.decorators:
            return False
        return any(
            isinstance(decorator, nodes.Attribute) and decorator.attrname == "setter"
            for decorator in func.decorators.nodes
        )

    def accessor_scope(self, func: nodes.NodeNG) -> AccessorScope:
        """GET for a property getter, SET for a setter, NONE for anything else."""
        if self.is_property_getter(func):
            return AccessorScope.GET
        if self.is_property_setter(func):
            return AccessorScope.SET
        return AccessorScope.NONE

    def property_getter(self, func: nodes.FunctionDef) -> nodes.FunctionDef | None:
        """Return the getter that owns the docstring of the property ``func`` belongs to."""
        if self.is_property_getter(func):
            return func
        owner = self.owner_class(func)
        if owner is None:
            return None
        for candidate in owner.locals.get(func.name, []):
            if self.is_property_getter(candidate):
                return candidate
        return None

    def property_setter(self, getter: nodes.FunctionDef) -> nodes.FunctionDef | None:
        owner = self.owner_class(getter)
        if owner is None:
            return None
        for candidate in owner.locals.get(getter.name, []):
            if self.is_property_setter(candidate):
                return candidate
        return None

    def contract_holder(self, func: nodes.NodeNG | None) -> nodes.FunctionDef | None:
        """The function whose docstring holds ``func``'s exception contract."""
        if not isinstance(func, nodes.FunctionDef):
            return None
        if self.is_property_setter(func):
            return self.property_getter(func) or func
        return func

    def has_accessor(self, holder: nodes.FunctionDef, scope: AccessorScope) -> bool:
        """Whether the property documented by ``holder`` defines the given accessor."""
        if scope is AccessorScope.GET:
            return self.is_property_getter(holder)
        if scope is AccessorScope.SET:
            return self.property_setter(holder) is not None
        return True

    # -- declaration shape ----------------------------------------------------

    def owner_class(self, func: nodes.NodeNG) -> nodes.ClassDef | None:
        parent = func.parent
        return parent if isinstance(parent, nodes.ClassDef) else None

    def is_constructor(self, func: nodes.FunctionDef) -> bool:
        return func.name in CONSTRUCTOR_NAMES and self.owner_class(func) is not None

    def member_kind(self, func: nodes.FunctionDef) -> MemberKind:
        if self.is_property_getter(func) or self.is_property_setter(func):
            return MemberKind.PROPERTY
        if self.is_constructor(func):
            return MemberKind.CONSTRUCTOR
        return MemberKind.FUNCTION

    def visibility(self, func: nodes.FunctionDef) -> Visibility:
        name = func.name
        in_class = self.owner_class(func) is not None
        if name.startswith("__") and not name.endswith("__"):
            return Visibility.PRIVATE
        if name.startswith("_") and not name.endswith("__"):
            return Visibility.PROTECTED if in_class else Visibility.INTERNAL
        if not isinstance(func.parent, (nodes.Module, nodes.ClassDef)):
            return Visibility.INTERNAL
        return Visibility.PUBLIC

    def returns_value(self, func: nodes.FunctionDef) -> bool:
        if func.returns is not None:
            return not (isinstance(func.returns, nodes.Const) and func.returns.value is None)
        if func.is_generator():
            return True
        for ret in func.nodes_of_class(nodes.Return, skip_klass=(nodes.FunctionDef, nodes.Lambda, nodes.ClassDef)):
            if ret.value is not None and not (isinstance(ret.value, nodes.Const) and ret.value.value is None):
                return True
        return False

    def comment_target(self, func: nodes.FunctionDef, indentation: str = "") -> CommentTarget:
        """Describe ``func`` for the comment synthesizer."""
        parameters = tuple(
            ParameterDeclaration(name=name)
            for name in self._parameter_names(func)
        )
        return CommentTarget(
            title=func.name,
            indentation=indentation,
            parameters=parameters,
            returns_value=self.returns_value(func),
            kind=self.member_kind(func),
        )

    def _parameter_names(self, func: nodes.FunctionDef) -> list[str]:
        args = func.args
        names = [a.name for a in (args.posonlyargs or []) + (args.args or [])]
        if names and self.owner_class(func) is not None and func.type != "staticmethod":
            if names[0] in IMPLICIT_FIRST_PARAMETERS or func.type in ("method", "classmethod"):
                names = names[1:]
        if args.vararg:
            names.append(args.vararg)
        names.extend(a.name for a in args.kwonlyargs or [])
        if args.kwarg:
            names.append(args.kwarg)
        return names

    # -- type hierarchy --------------------------------------------------------

    def is_interface(self, cls: nodes.ClassDef) -> bool:
        """Protocol classes, and ABCs whose every method is abstract."""
        # Protocol must be a direct base; subclasses of a protocol are concrete.
        direct_bases = {a.qname() for a in cls.ancestors(recurs=False)}
        if cls.qname() in PROTOCOL_QNAMES or direct_bases & PROTOCOL_QNAMES:
            return True
        ancestor_names = {a.qname() for a in cls.ancestors()}
        metaclass = cls.declared_metaclass()
        is_abc = bool(ancestor_names & ABC_QNAMES) or (
            metaclass is not None and metaclass.qname() in ABC_QNAMES
        )
        if not is_abc:
            return False
        methods = [m for m in cls.mymethods()]
        return bool(methods) and all(m.is_abstract(pass_is_abstract=False) for m in methods)

    def _linearized_ancestors(self, cls: nodes.ClassDef) -> list[nodes.ClassDef]:
        try:
            return list(cls.mro())[1:]
        except (MroError, InferenceError):
            logging.debug("MRO unavailable for %s; falling back to ancestors()", cls.qname())
            return list(cls.ancestors())

    def base_counterpart(self, func: nodes.FunctionDef) -> nodes.FunctionDef | None:
        """Nearest non-interface ancestor member with the same name (its contract holder)."""
        owner = self.owner_class(func)
        if owner is None:
            return None
        for ancestor in self._linearized_ancestors(owner):
            if ancestor.qname() == OBJECT_QNAME or self.is_interface(ancestor):
                continue
            if func.name in ancestor.locals:
                return self._member_in(ancestor, func.name)
        return None

    def interface_counterparts(self, func: nodes.FunctionDef) -> list[nodes.FunctionDef]:
        """Members of every interface ancestor that ``func`` implements."""
        owner = self.owner_class(func)
        if owner is None:
            return []
        result: list[nodes.FunctionDef] = []
        for ancestor in self._linearized_ancestors(owner):
            if ancestor.qname() == OBJECT_QNAME or not self.is_interface(ancestor):
                continue
            member = self._member_in(ancestor, func.name)
            if member is not None:
                result.append(member)
        return result

    def _member_in(self, cls: nodes.ClassDef, name: str) -> nodes.FunctionDef | None:
        candidates = [c for c in cls.locals.get(name, []) if isinstance(c, nodes.FunctionDef)]
        for candidate in candidates:
            if self.is_property_getter(candidate):
                return candidate
        return candidates[-1] if candidates else None

    def exception_classes(self, node: nodes.NodeNG) -> list[nodes.ClassDef]:
        """Exception classes an expression statically denotes (classes, instances, tuples)."""
        result: list[nodes.ClassDef] = []
        for value in self._infer(node):
            if isinstance(value, nodes.Tuple):
                for element in value.elts:
                    result.extend(self.exception_classes(element))
            elif isinstance(value, nodes.ClassDef):
                if value.is_subtype_of(BASE_EXCEPTION_QNAME):
                    result.append(value)
            elif isinstance(value, bases.Instance) and not isinstance(value, bases.BoundMethod):
                proxied = value._proxied
                if isinstance(proxied, nodes.ClassDef) and proxied.is_subtype_of(BASE_EXCEPTION_QNAME):
                    result.append(proxied)
        return self._unique(result)

    # -- callees ----------------------------------------------------------------

    def called_functions(self, call: nodes.Call) -> list[nodes.FunctionDef]:
        """Functions a call may run: plain functions, methods, or a class's __init__."""
        result: list[nodes.FunctionDef] = []
        for value in self._infer(call.func):
            if isinstance(value, bases.UnboundMethod):
                proxied = value._proxied
                if isinstance(proxied, nodes.FunctionDef):
                    result.append(proxied)
            elif isinstance(value, nodes.ClassDef):
                init = self._lookup_method(value, "__init__")
                if init is not None:
                    result.append(init)
            elif isinstance(value, nodes.FunctionDef):
                result.append(value)
        return self._unique(result)

    def accessed_property(self, node: nodes.Attribute | nodes.AssignAttr) -> nodes.FunctionDef | None:
        """Getter of the property ``obj.attr`` refers to, if ``obj`` is an instance."""
        for value in self._infer(node.expr):
            if not isinstance(value, bases.Instance) or isinstance(value, bases.BoundMethod):
                continue
            try:
                candidates = value.getattr(node.attrname)
            except AttributeInferenceError:
                continue
            for candidate in candidates:
                if self.is_property_getter(candidate):
                    return candidate
                if self.is_property_setter(candidate):
                    getter = self.property_getter(candidate)
                    if getter is not None:
                        return getter
        return None

    def subscript_methods(self, node: nodes.Subscript, scope: AccessorScope) -> list[nodes.FunctionDef]:
        """__getitem__/__setitem__ implementations used by a subscript in the given scope."""
        names: list[str] = []
        if scope in (AccessorScope.GET, AccessorScope.BOTH):
            names.append("__getitem__")
        if scope in (AccessorScope.SET, AccessorScope.BOTH):
            names.append("__setitem__")
        result: list[nodes.FunctionDef] = []
        for value in self._infer(node.value):
            if not isinstance(value, bases.Instance) or isinstance(value, bases.BoundMethod):
                continue
            proxied = value._proxied
            if not isinstance(proxied, nodes.ClassDef):
                continue
            for name in names:
                method = self._lookup_method(proxied, name)
                if method is not None:
                    result.append(method)
        return self._unique(result)

    def handler_function(self, node: nodes.NodeNG) -> nodes.FunctionDef | None:
        """Function an event-subscription operand refers to."""
        for value in self._infer(node):
            if isinstance(value, bases.UnboundMethod) and isinstance(value._proxied, nodes.FunctionDef):
                return value._proxied
            if isinstance(value, nodes.FunctionDef):
                return value
        return None

    def _lookup_method(self, cls: nodes.ClassDef, name: str) -> nodes.FunctionDef | None:
        try:
            candidates = cls.getattr(name)
        except AttributeInferenceError:
            return None
        for candidate in candidates:
            if isinstance(candidate, nodes.FunctionDef):
                return candidate
        return None

    # -- inference helpers -----------------------------------------------------

    def _infer(self, node: nodes.NodeNG) -> Iterator[nodes.NodeNG]:
        try:
            for value in node.infer():
                if value is not astroid.Uninferable:
                    yield value
        except InferenceError:
            logging.debug("Inference failed for %s", node.as_string())

    def resolve_exception_type(self, cref: str, context: nodes.NodeNG) -> ExceptionType | None:
        """Resolve a cref (short or dotted name) as seen from ``context``'s scope."""
        parts = [p for p in cref.strip().split(".") if p]
        if not parts:
            return None
        scope = context.scope()
        try:
            for value in scope.ilookup(parts[0]):
                resolved = self._walk_attributes(value, parts[1:])
                if resolved is not None:
                    return ExceptionType.from_classdef(resolved)
        except InferenceError:
            logging.debug("Could not look up %s from %s", parts[0], scope.qname())
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                module = astroid.MANAGER.ast_from_module_name(module_name)
            except AstroidBuildingError:
                continue
            resolved = self._walk_attributes(module, parts[split:])
            if resolved is not None:
                return ExceptionType.from_classdef(resolved)
        return None

    def _walk_attributes(self, value: nodes.NodeNG, attributes: list[str]) -> nodes.ClassDef | None:
        current = value
        for attribute in attributes:
            if current is astroid.Uninferable:
                return None
            try:
                current = next(current.igetattr(attribute), astroid.Uninferable)
            except (InferenceError, AttributeInferenceError):
                return None
        if isinstance(current, nodes.ClassDef) and current.is_subtype_of(BASE_EXCEPTION_QNAME):
            return current
        return None

    def display_name(self, exception_type: ExceptionType, context: nodes.NodeNG) -> str:
        """Short name if it resolves to the same type from ``context``, else the qualified name."""
        resolved = self.resolve_exception_type(exception_type.name, context)
        if resolved is not None and resolved == exception_type:
            return exception_type.name
        return exception_type.qname

    @staticmethod
    def _unique(items: list) -> list:
        seen: set[int] = set()
        result = []
        for item in items:
            if id(item) not in seen:
                seen.add(id(item))
                result.append(item)
        return result
