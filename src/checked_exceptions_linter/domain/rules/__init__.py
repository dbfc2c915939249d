"""Domain models for rules, violations and diagnostics."""

from dataclasses import dataclass, field

__all__ = [
    "Checkable",
    "EventHandlerViolation",
    "ExceptionDiagnostic",
    "Fixable",
    "SubstitutionViolation",
    "UnhandledExceptionViolation",
    "Violation",
]

from typing import TYPE_CHECKING, Protocol

import astroid

from checked_exceptions_linter.domain.entities import ExceptionType, FixMode

if TYPE_CHECKING:
    from checked_exceptions_linter.domain.entities import TransformationPlan


@dataclass(frozen=True)
class Violation:
    """
    An exception type escaping at a location.

    Equality is (exception_type, location); the node rides along for
    reporting and fixing but never distinguishes two violations.
    """

    exception_type: ExceptionType
    location: str
    node: astroid.nodes.NodeNG = field(compare=False, repr=False)

    @staticmethod
    def _location_from_node(node: astroid.nodes.NodeNG) -> str:
        """Compute path:lineno:col_offset from an astroid node. Used by from_node."""
        root = node.root()
        path = getattr(root, "file", "") or ""
        lineno = getattr(node, "lineno", 0)
        col_offset = getattr(node, "col_offset", 0)
        return f"{path}:{lineno}:{col_offset}"

    @classmethod
    def from_node(
        cls, exception_type: ExceptionType, node: astroid.nodes.NodeNG, **extra: object
    ) -> "Violation":
        """Build a violation with location derived from node. Prefer over manual location=."""
        return cls(
            exception_type=exception_type,
            location=cls._location_from_node(node),
            node=node,
            **extra,
        )


@dataclass(frozen=True)
class UnhandledExceptionViolation(Violation):
    """Thrown and not caught; ``origin`` is the raise, call or access that threw."""

    origin: astroid.nodes.NodeNG | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class SubstitutionViolation(Violation):
    """Declared by an override but not by the member it overrides or implements."""

    counterpart_owner: str = field(default="", compare=False)
    counterpart_member: str = field(default="", compare=False)
    member_name: str = field(default="", compare=False)


@dataclass(frozen=True)
class EventHandlerViolation(Violation):
    """Declared by a function subscribed as an event handler."""

    handler_name: str = field(default="", compare=False)


@dataclass(frozen=True)
class ExceptionDiagnostic:
    """
    One reportable message: all violations of one family at one location.

    ``properties`` mirrors what a fix needs without re-running the analysis:
    the comma-joined qualified names, whether the contract holder gets a
    short comment, and the accessor scope value.
    """

    code: str
    symbol: str
    message_args: tuple[str, ...]
    node: astroid.nodes.NodeNG = field(compare=False, repr=False)
    location: str = ""
    violations: tuple[Violation, ...] = ()
    member: astroid.nodes.NodeNG | None = field(default=None, compare=False, repr=False)
    properties: dict[str, object] = field(default_factory=dict, compare=False)
    fixable: bool = True

    @property
    def exception_types(self) -> list[ExceptionType]:
        """Distinct violation types in report order."""
        seen: list[ExceptionType] = []
        for violation in self.violations:
            if violation.exception_type not in seen:
                seen.append(violation.exception_type)
        return seen


class Checkable(Protocol):
    """One-and-done check: given a node, return diagnostics."""

    codes: list[str]
    description: str

    def check(self, node: astroid.nodes.NodeNG) -> list[ExceptionDiagnostic]:
        """Interrogate a node for escaping or mismatched exceptions."""
        ...


class Fixable(Protocol):
    """Optional capability: rule can turn one of its diagnostics into plans."""

    def fix(
        self, diagnostic: ExceptionDiagnostic, mode: FixMode
    ) -> "list[TransformationPlan]":
        """
        Return the plans that resolve ``diagnostic`` in ``mode``.

        An empty list means the mode does not apply to this diagnostic.
        """
        ...
