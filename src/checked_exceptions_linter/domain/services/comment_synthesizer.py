"""Merge requested exception entries into docstring text. Pure text in, text out."""

from collections.abc import Sequence

from checked_exceptions_linter.domain.constants import IGNORE_MARKER
from checked_exceptions_linter.domain.entities import (
    AccessorScope,
    CommentTarget,
    ExceptionDeclaration,
    MemberKind,
)
from checked_exceptions_linter.domain.services.annotation_parser import (
    AnnotationEntry,
    AnnotationParser,
)


class CommentSynthesizer:
    """
    Produce docstring text declaring (or ignoring) a set of exceptions.

    ``synthesize`` is idempotent: feeding its output back in with the same
    additions returns the output unchanged, because every addition then
    matches an existing entry and nothing is appended.
    """

    def __init__(self, parser: AnnotationParser | None = None) -> None:
        self._parser = parser or AnnotationParser()

    def synthesize(
        self,
        existing: str | None,
        additions: Sequence[ExceptionDeclaration],
        short_form: bool,
        target: CommentTarget,
    ) -> str:
        """
        Return the new docstring body.

        Args:
            existing: Raw text between the docstring quotes, or None if the
                declaration has no docstring yet.
            additions: Entries to declare; ``ignore=True`` asks for the
                "Ignore." marker.
            short_form: Emit only exception entries when creating a docstring.
            target: Title, indentation, parameters and kind of the declaration.
        """
        pending = self._normalize(additions, target.kind)
        if existing is None:
            return self._new_block(pending, short_form, target)

        text = existing
        entries = [e for e in self._parser.parse(existing, strict=False) if e.is_exception]
        # Walk backwards so insertions never shift offsets still to be visited.
        for entry in reversed(entries):
            scope = entry.accessor if target.kind is MemberKind.PROPERTY else AccessorScope.NONE
            match = self._find_match(pending, entry, scope)
            if match is None:
                continue
            if match.ignore and not entry.ignore:
                text = self._mark_ignored(text, entry)
            pending.remove(match)

        if not pending:
            return text
        return text.rstrip() + self._render_entries(pending, target.indentation) + "\n" + target.indentation

    def _normalize(
        self, additions: Sequence[ExceptionDeclaration], kind: MemberKind
    ) -> list[ExceptionDeclaration]:
        """Coerce scopes to the target kind, split BOTH, and collapse duplicates."""
        result: list[ExceptionDeclaration] = []
        seen: dict[tuple[str, AccessorScope], int] = {}
        for addition in additions:
            if kind is not MemberKind.PROPERTY:
                scopes = [AccessorScope.NONE]
            elif addition.accessor_scope is AccessorScope.BOTH:
                scopes = [AccessorScope.GET, AccessorScope.SET]
            else:
                scopes = [addition.accessor_scope]
            for scope in scopes:
                key = (addition.name, scope)
                declaration = ExceptionDeclaration(
                    name=addition.name,
                    short_name=addition.short_name,
                    comment=addition.comment,
                    ignore=addition.ignore,
                    accessor_scope=scope,
                )
                if key in seen:
                    index = seen[key]
                    if addition.ignore and not result[index].ignore:
                        result[index] = declaration
                    continue
                seen[key] = len(result)
                result.append(declaration)
        return result

    @staticmethod
    def _find_match(
        pending: list[ExceptionDeclaration], entry: AnnotationEntry, scope: AccessorScope
    ) -> ExceptionDeclaration | None:
        for addition in pending:
            if entry.cref in (addition.name, addition.short_name) and addition.accessor_scope is scope:
                return addition
        return None

    @staticmethod
    def _mark_ignored(text: str, entry: AnnotationEntry) -> str:
        if entry.self_closing:
            return text[:entry.body_start] + ">" + IGNORE_MARKER + "</exception>" + text[entry.end:]
        if entry.accessor_end is not None:
            point = entry.accessor_end
            trailing = " " if point < entry.body_end and not text[point].isspace() else ""
            return text[:point] + " " + IGNORE_MARKER + trailing + text[point:]
        point = entry.marker_start
        padding = " " if entry.text else ""
        return text[:point] + IGNORE_MARKER + padding + text[point:]

    @staticmethod
    def _render_entries(declarations: Sequence[ExceptionDeclaration], indentation: str) -> str:
        parts: list[str] = []
        for declaration in declarations:
            accessor = declaration.accessor_scope.marker
            ignore = IGNORE_MARKER if declaration.ignore else ""
            space = " " if accessor and ignore else ""
            parts.append(
                f'\n{indentation}<exception cref="{declaration.short_name}">'
                f"{accessor}{space}{ignore}</exception>"
            )
        return "".join(parts)

    def _new_block(
        self, declarations: list[ExceptionDeclaration], short_form: bool, target: CommentTarget
    ) -> str:
        indent = target.indentation
        exceptions = self._render_entries(declarations, indent)
        if short_form:
            return exceptions[len(indent) + 1:] + "\n" + indent

        lines = [f"\n{indent}<summary>\n{indent}{target.title}\n{indent}</summary>"]
        if target.kind is not MemberKind.PROPERTY:
            for parameter in target.parameters:
                lines.append(f'\n{indent}<param name="{parameter.name}">{parameter.text}</param>')
        if target.kind is MemberKind.FUNCTION and target.returns_value:
            lines.append(f"\n{indent}<returns></returns>")
        lines.append(exceptions)
        lines.append("\n" + indent)
        return "".join(lines)
