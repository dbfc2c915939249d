"""Shared plumbing for the exception-contract rules: grouping, naming, and fix plans."""

from collections.abc import Callable, Sequence

from astroid import nodes
from astroid.exceptions import (
    AstroidBuildingError,
    AttributeInferenceError,
    InferenceError,
    MroError,
)

from checked_exceptions_linter.domain.config import ConfigurationLoader
from checked_exceptions_linter.domain.constants import (
    ACCESSOR_SCOPE_PROPERTY,
    CODE_SYMBOLS,
    EXCEPTION_TYPES_PROPERTY,
    SHORT_COMMENT_PROPERTY,
)
from checked_exceptions_linter.domain.entities import (
    AccessorScope,
    ExceptionDeclaration,
    ExceptionType,
    FixMode,
    TransformationPlan,
)
from checked_exceptions_linter.domain.rules import ExceptionDiagnostic, Violation
from checked_exceptions_linter.domain.rules.declarations import DeclarationExtractor
from checked_exceptions_linter.domain.rules.noise_filter import NoiseFilter
from checked_exceptions_linter.domain.services.member_resolver import MemberResolver

# Failures astroid raises while inferring; a rule treats them as "no violation".
ASTROID_ERRORS: tuple[type[Exception], ...] = (
    InferenceError,
    AttributeInferenceError,
    MroError,
    AstroidBuildingError,
)


class ExceptionContractRule:
    """Base for rules that compare thrown or declared sets against a contract."""

    codes: list[str] = []
    description: str = ""

    def __init__(
        self,
        config_loader: ConfigurationLoader,
        extractor: DeclarationExtractor | None = None,
        resolver: MemberResolver | None = None,
        noise_filter: NoiseFilter | None = None,
    ) -> None:
        self._config_loader = config_loader
        self._resolver = resolver or MemberResolver()
        self._extractor = extractor or DeclarationExtractor(resolver=self._resolver)
        self._noise_filter = noise_filter or NoiseFilter(config_loader)

    # -- diagnostics -------------------------------------------------------------

    def _group(
        self,
        code: str,
        violations: Sequence[Violation],
        member: nodes.NodeNG,
        args_for: Callable[[Violation, str], tuple[str, ...]],
        scope: AccessorScope = AccessorScope.NONE,
        fixable: bool = True,
    ) -> list[ExceptionDiagnostic]:
        """One diagnostic per location; ``args_for(first_violation, names)`` builds message args."""
        by_location: dict[str, list[Violation]] = {}
        for violation in violations:
            by_location.setdefault(violation.location, []).append(violation)
        diagnostics: list[ExceptionDiagnostic] = []
        for location, grouped in by_location.items():
            types = list(dict.fromkeys(v.exception_type for v in grouped))
            names = ", ".join(self._display(t, member) for t in types)
            diagnostics.append(
                ExceptionDiagnostic(
                    code=code,
                    symbol=CODE_SYMBOLS[code],
                    message_args=args_for(grouped[0], names),
                    node=grouped[0].node,
                    location=location,
                    violations=tuple(grouped),
                    member=member,
                    properties={
                        EXCEPTION_TYPES_PROPERTY: ",".join(t.qname for t in types),
                        SHORT_COMMENT_PROPERTY: self._is_short_comment_target(member),
                        ACCESSOR_SCOPE_PROPERTY: scope.value,
                    },
                    fixable=fixable,
                )
            )
        return diagnostics

    def _display(self, exception_type: ExceptionType, context: nodes.NodeNG) -> str:
        return self._resolver.display_name(exception_type, context)

    def _is_short_comment_target(self, member: nodes.NodeNG) -> bool:
        holder = self._resolver.contract_holder(member)
        if holder is None:
            return False
        return self._config_loader.short_comment_for(self._resolver.visibility(holder))

    # -- fixes -------------------------------------------------------------------

    def _declare_plans(
        self,
        diagnostic: ExceptionDiagnostic,
        mode: FixMode,
        scope: AccessorScope,
    ) -> list[TransformationPlan]:
        """Merge the diagnostic's types into the contract holder's docstring."""
        holder = self._resolver.contract_holder(diagnostic.member)
        if holder is None:
            return []
        declarations = [
            ExceptionDeclaration(
                name=exception_type.qname,
                short_name=self._display(exception_type, holder),
                ignore=mode is FixMode.IGNORE,
                accessor_scope=scope,
            )
            for exception_type in diagnostic.exception_types
        ]
        return [
            TransformationPlan.declare_exceptions(
                function_name=holder.name,
                target_line=holder.lineno,
                declarations=declarations,
                short_form=bool(diagnostic.properties.get(SHORT_COMMENT_PROPERTY, False)),
                target=self._resolver.comment_target(holder),
            )
        ]

    def _handle_plans(self, diagnostic: ExceptionDiagnostic) -> list[TransformationPlan]:
        """Catch the diagnostic's types around its statement or on its enclosing try."""
        statement = diagnostic.node
        member = diagnostic.member
        if statement is None or member is None:
            return []
        names: list[str] = []
        imports: dict[str, list[str]] = {}
        for exception_type in diagnostic.exception_types:
            display = self._display(exception_type, statement)
            if display == exception_type.qname and "." in display:
                # Nested classes are reached through their outermost class.
                module, top = exception_type.import_path()
                imported = imports.setdefault(module, [])
                if top not in imported:
                    imported.append(top)
                display = display[len(module) + 1:]
            names.append(display)
        enclosing = self._enclosing_try(statement, member)
        plans = [
            TransformationPlan.handle_exceptions(
                target_line=statement.lineno,
                exception_names=names,
                enclosing_try_line=enclosing.lineno if enclosing is not None else 0,
            )
        ]
        for module, imported in imports.items():
            if module not in ("builtins", statement.root().name):
                plans.append(TransformationPlan.add_import(module, imported))
        return plans

    @staticmethod
    def _enclosing_try(statement: nodes.NodeNG, member: nodes.NodeNG) -> nodes.Try | None:
        """Nearest try whose protected body holds ``statement``, stopping at ``member``."""
        child = statement
        parent = statement.parent
        while parent is not None and parent is not member:
            if isinstance(parent, (nodes.Try, nodes.TryStar)) and child in parent.body:
                return parent
            child, parent = parent, parent.parent
        return None
