from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from checked_exceptions_linter.domain.constants import GET_MARKER, SET_MARKER
from checked_exceptions_linter.domain.transformation_contexts import (
    DeclareExceptionsContext,
    HandleExceptionsContext,
    ImportContext,
    PlanParams,
)

if TYPE_CHECKING:
    import astroid


class AccessorScope(Enum):
    """Which half of a read/write member a declaration or violation applies to."""
    NONE = "none"
    GET = "get"
    SET = "set"
    BOTH = "both"

    @property
    def marker(self) -> str:
        """Accessor tag written in front of an entry body ("Get." / "Set.")."""
        if self is AccessorScope.GET:
            return GET_MARKER
        if self is AccessorScope.SET:
            return SET_MARKER
        return ""

    def covers(self, other: "AccessorScope") -> bool:
        """True if a query for this scope includes entries tagged with ``other``."""
        if self is AccessorScope.NONE:
            return True
        if self is AccessorScope.BOTH:
            return other in (AccessorScope.GET, AccessorScope.SET)
        return self is other


class MemberKind(Enum):
    """Shape of the declaration a docstring belongs to."""
    FUNCTION = "function"
    CONSTRUCTOR = "constructor"
    PROPERTY = "property"


class Visibility(Enum):
    """Python naming-convention visibility."""
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PUBLIC = "public"


class FixMode(Enum):
    """Fix actions offered for a diagnostic."""
    DECLARE = "declare"
    IGNORE = "ignore"
    HANDLE = "handle"


@dataclass(frozen=True)
class ExceptionType:
    """
    Nominal exception type identity.

    Equality and hashing use the qualified name only; ``ancestors`` carries the
    qualified names of every supertype so subsumption needs no inference.
    ``module`` is the defining module, which tells a nested class apart from
    a top-level one.
    """
    qname: str
    name: str
    ancestors: tuple[str, ...] = field(default=(), compare=False)
    module: str = field(default="", compare=False)

    def is_subtype_of(self, other: "ExceptionType") -> bool:
        """Transitive is-a, including equality."""
        return other.qname == self.qname or other.qname in self.ancestors

    def import_path(self) -> tuple[str, str]:
        """(module, importable top-level name); for a nested class the outermost enclosing class."""
        module, name = self.module, self.qname
        if module and self.qname.startswith(module + "."):
            name = self.qname[len(module) + 1:]
        else:
            module, _, name = self.qname.rpartition(".")
        return module, name.split(".")[0]

    @classmethod
    def from_classdef(cls, node: "astroid.nodes.ClassDef") -> "ExceptionType":
        """Build from an astroid class definition."""
        return cls(
            qname=node.qname(),
            name=node.name,
            ancestors=tuple(ancestor.qname() for ancestor in node.ancestors()),
            module=node.root().name,
        )


@dataclass(frozen=True)
class ExceptionDeclaration:
    """One <exception> entry, as parsed or as requested by a fix."""
    name: str
    short_name: str
    comment: str | None = None
    ignore: bool = False
    accessor_scope: AccessorScope = AccessorScope.NONE


@dataclass(frozen=True)
class ParameterDeclaration:
    name: str
    text: str = ""


@dataclass(frozen=True)
class CommentTarget:
    """What the comment synthesizer needs to know about the documented declaration."""
    title: str
    indentation: str = ""
    parameters: tuple[ParameterDeclaration, ...] = ()
    returns_value: bool = False
    kind: MemberKind = MemberKind.FUNCTION


class TransformationType(Enum):
    """Types of code transformations the fixer can apply."""
    ADD_IMPORT = "add_import"
    DECLARE_EXCEPTIONS = "declare_exceptions"
    HANDLE_EXCEPTIONS = "handle_exceptions"


@dataclass(frozen=True)
class TransformationPlan:
    """
    Pure data structure describing a code transformation.

    Rules return plans instead of LibCST transformers. The fixer gateway
    interprets each plan and applies the matching transformer.
    """
    transformation_type: TransformationType
    params: PlanParams

    @property
    def target_line(self) -> int:
        """Line the plan anchors to; 0 for module-level edits such as imports."""
        return int(self.params.get("target_line", 0))  # type: ignore[union-attr]

    @classmethod
    def add_import(cls, module: str, imports: list[str]) -> "TransformationPlan":
        """Create plan to add an import statement."""
        p: ImportContext = {"module": module, "imports": imports}
        return cls(
            transformation_type=TransformationType.ADD_IMPORT,
            params=p,
        )

    @classmethod
    def declare_exceptions(
        cls,
        *,
        function_name: str,
        target_line: int,
        declarations: list[ExceptionDeclaration],
        short_form: bool,
        target: CommentTarget,
    ) -> "TransformationPlan":
        """Create plan to merge exception entries into a function's docstring."""
        p: DeclareExceptionsContext = {
            "function_name": function_name,
            "target_line": target_line,
            "exception_names": [d.name for d in declarations],
            "short_names": [d.short_name for d in declarations],
            "ignore": any(d.ignore for d in declarations),
            "accessor_scopes": [d.accessor_scope.value for d in declarations],
            "short_form": short_form,
            "title": target.title,
            "parameters": [p.name for p in target.parameters],
            "returns_value": target.returns_value,
            "member_kind": target.kind.value,
        }
        return cls(
            transformation_type=TransformationType.DECLARE_EXCEPTIONS,
            params=p,
        )

    @classmethod
    def handle_exceptions(
        cls, target_line: int, exception_names: list[str], enclosing_try_line: int = 0
    ) -> "TransformationPlan":
        """Create plan to catch exceptions around a statement or on its enclosing try."""
        p: HandleExceptionsContext = {
            "target_line": target_line,
            "exception_names": exception_names,
            "enclosing_try_line": enclosing_try_line,
        }
        return cls(
            transformation_type=TransformationType.HANDLE_EXCEPTIONS,
            params=p,
        )


@dataclass(frozen=True)
class FixResult:
    """Outcome of a fix run over a path."""
    files_modified: int
    plans_applied: int
    failed_files: list[str] = field(default_factory=list)
