"""LibCST Transformers for code fixes."""

from collections.abc import Sequence
from typing import Optional

import libcst as cst
from libcst.metadata import PositionProvider

from checked_exceptions_linter.domain.entities import (
    AccessorScope,
    CommentTarget,
    ExceptionDeclaration,
    MemberKind,
    ParameterDeclaration,
)
from checked_exceptions_linter.domain.services.comment_synthesizer import CommentSynthesizer

_QUOTES = ('"""', "'''", '"', "'")


def _pass_block() -> cst.IndentedBlock:
    return cst.IndentedBlock(body=[cst.SimpleStatementLine(body=[cst.Pass()])])


def _handler(name: str) -> cst.ExceptHandler:
    return cst.ExceptHandler(
        type=cst.parse_expression(name),
        body=_pass_block(),
    )


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


class AddImportTransformer(cst.CSTTransformer):
    """Transformer to add a ``from module import names`` line after the last top-level import."""

    def __init__(self, context: dict) -> None:
        self.module = context.get("module")
        self.imports = context.get("imports", [])  # List[str]
        self.added = False

    def _already_imported(self, body: Sequence[cst.CSTNode]) -> list[str]:
        present: set[str] = set()
        for stmt in body:
            if not isinstance(stmt, cst.SimpleStatementLine):
                continue
            for small in stmt.body:
                if not isinstance(small, cst.ImportFrom) or isinstance(small.names, cst.ImportStar):
                    continue
                module = cst.Module(body=[]).code_for_node(small.module) if small.module else ""
                if module != self.module:
                    continue
                for alias in small.names:
                    if isinstance(alias.name, cst.Name):
                        present.add(alias.name.value)
        return [name for name in self.imports if name not in present]

    def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
        if self.added:
            return updated_node
        missing = self._already_imported(updated_node.body)
        self.added = True
        if not missing:
            return updated_node
        names = [cst.ImportAlias(name=cst.Name(n)) for n in missing]
        # Support dotted module paths like "a.b.c"
        module_expr: cst.BaseExpression
        if isinstance(self.module, str) and "." in self.module:
            parts = self.module.split(".")
            module_expr = cst.Name(parts[0])
            for part in parts[1:]:
                module_expr = cst.Attribute(value=module_expr, attr=cst.Name(part))
        else:
            module_expr = cst.Name(self.module)

        import_stmt = cst.ImportFrom(
            module=module_expr,
            names=names,
            whitespace_after_import=cst.SimpleWhitespace(" ")
        )

        new_body = list(updated_node.body)
        insert_idx: int = 0
        for i, stmt in enumerate(new_body):
            if isinstance(stmt, cst.SimpleStatementLine) and any(
                isinstance(small, (cst.Import, cst.ImportFrom)) for small in stmt.body
            ):
                insert_idx = i + 1
        new_body.insert(insert_idx, cst.SimpleStatementLine(body=[import_stmt]))
        return updated_node.with_changes(body=new_body)


class DocstringExceptionTransformer(cst.CSTTransformer):
    """
    Merge <exception> entries into the docstring of one function.

    The function is matched by name and by the line of its name; the
    docstring text is produced by CommentSynthesizer, so re-applying the same
    plan leaves the file unchanged.
    """

    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self, context: dict, synthesizer: CommentSynthesizer | None = None) -> None:
        self.function_name = context.get("function_name", "")
        self.target_line = context.get("target_line", 0)
        self.short_form = bool(context.get("short_form", False))
        scopes = context.get("accessor_scopes", [])
        ignore = bool(context.get("ignore", False))
        self.declarations = [
            ExceptionDeclaration(
                name=name,
                short_name=short,
                ignore=ignore,
                accessor_scope=AccessorScope(scope),
            )
            for name, short, scope in zip(
                context.get("exception_names", []), context.get("short_names", []), scopes
            )
        ]
        self.title = context.get("title", self.function_name)
        self.parameters = tuple(ParameterDeclaration(name=p) for p in context.get("parameters", []))
        self.returns_value = bool(context.get("returns_value", False))
        self.member_kind = MemberKind(context.get("member_kind", MemberKind.FUNCTION.value))
        self.source_lines: list[str] = context.get("source_lines", [])
        self.synthesizer = synthesizer or CommentSynthesizer()
        self.applied = False

    def _line_of(self, node: cst.CSTNode) -> int:
        return self.get_metadata(PositionProvider, node).start.line

    def _indent_of(self, line: int) -> str:
        if 0 < line <= len(self.source_lines):
            return _leading_whitespace(self.source_lines[line - 1])
        return ""

    def leave_FunctionDef(
        self, original_node: cst.FunctionDef, updated_node: cst.FunctionDef
    ) -> cst.FunctionDef:
        if self.applied or original_node.name.value != self.function_name:
            return updated_node
        if self._line_of(original_node.name) != self.target_line:
            return updated_node

        body = updated_node.body
        if isinstance(body, cst.SimpleStatementSuite):
            indentation = self._indent_of(self.target_line) + "    "
            body = cst.IndentedBlock(
                body=[cst.SimpleStatementLine(body=list(body.body))]
            )
        else:
            first = original_node.body.body[0]
            indentation = self._indent_of(self._line_of(first))

        target = CommentTarget(
            title=self.title,
            indentation=indentation,
            parameters=self.parameters,
            returns_value=self.returns_value,
            kind=self.member_kind,
        )
        statements = list(body.body)
        docstring = self._docstring_of(statements[0]) if statements else None
        self.applied = True

        if docstring is None:
            text = self.synthesizer.synthesize(None, self.declarations, self.short_form, target)
            new_doc = cst.SimpleStatementLine(
                body=[cst.Expr(value=cst.SimpleString(f'"""{text}"""'))]
            )
            if statements:
                # Comments above the first statement stay with it, below the new docstring.
                statements.insert(0, new_doc)
            else:
                statements = [new_doc]
            return updated_node.with_changes(body=body.with_changes(body=statements))

        if isinstance(docstring, cst.ConcatenatedString):
            return updated_node.with_changes(body=body)
        prefix, quote, existing = self._split_string(docstring.value)
        if "b" in prefix.lower():
            return updated_node.with_changes(body=body)
        text = self.synthesizer.synthesize(existing, self.declarations, self.short_form, target)
        if text == existing:
            return updated_node.with_changes(body=body)
        if len(quote) == 1:
            quote = quote * 3
        new_string = docstring.with_changes(value=f"{prefix}{quote}{text}{quote}")
        first_line = statements[0]
        statements[0] = first_line.with_changes(
            body=[first_line.body[0].with_changes(value=new_string)] + list(first_line.body[1:])
        )
        return updated_node.with_changes(body=body.with_changes(body=statements))

    @staticmethod
    def _docstring_of(statement: cst.BaseStatement) -> Optional[cst.BaseString]:
        if not isinstance(statement, cst.SimpleStatementLine) or not statement.body:
            return None
        expr = statement.body[0]
        if isinstance(expr, cst.Expr) and isinstance(expr.value, (cst.SimpleString, cst.ConcatenatedString)):
            return expr.value
        return None

    @staticmethod
    def _split_string(value: str) -> tuple[str, str, str]:
        """(prefix, quote, contents) of a string literal."""
        index = 0
        while index < len(value) and value[index] not in "\"'":
            index += 1
        prefix = value[:index]
        for quote in _QUOTES:
            if value.startswith(quote, index):
                return prefix, quote, value[index + len(quote): len(value) - len(quote)]
        return prefix, '"', value[index + 1: -1]


class HandleExceptionTransformer(cst.CSTTransformer):
    """
    Catch exceptions at a statement.

    With ``enclosing_try_line`` set, ``except T: pass`` handlers are added to
    that try (before a bare ``except:``, skipping types it already names).
    Otherwise the statement at ``target_line`` is wrapped in a new try.
    """

    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self, context: dict) -> None:
        self.target_line = context.get("target_line", 0)
        self.exception_names: list[str] = list(context.get("exception_names", []))
        self.enclosing_try_line = context.get("enclosing_try_line", 0)
        self.applied = False

    def _line_of(self, node: cst.CSTNode) -> int:
        return self.get_metadata(PositionProvider, node).start.line

    def _wrap(self, statement: cst.BaseStatement) -> cst.Try:
        return cst.Try(
            body=cst.IndentedBlock(body=[statement.with_changes(leading_lines=())]),
            handlers=[_handler(name) for name in self.exception_names],
            leading_lines=statement.leading_lines,
        )

    def leave_Try(self, original_node: cst.Try, updated_node: cst.Try) -> cst.Try:
        if self.applied or not self.enclosing_try_line:
            return updated_node
        if self._line_of(original_node) != self.enclosing_try_line:
            return updated_node
        self.applied = True
        present = self._handled_names(updated_node.handlers)
        new_handlers = [_handler(n) for n in self.exception_names if n not in present]
        if not new_handlers:
            return updated_node
        handlers = list(updated_node.handlers)
        insert_at = len(handlers)
        for index, handler in enumerate(handlers):
            if handler.type is None:
                insert_at = index
                break
        handlers[insert_at:insert_at] = new_handlers
        return updated_node.with_changes(handlers=handlers)

    @staticmethod
    def _handled_names(handlers: Sequence[cst.ExceptHandler]) -> set[str]:
        names: set[str] = set()
        code = cst.Module(body=[]).code_for_node
        for handler in handlers:
            if handler.type is None:
                continue
            if isinstance(handler.type, cst.Tuple):
                names.update(code(element.value) for element in handler.type.elements)
            else:
                names.add(code(handler.type))
        return names

    def leave_IndentedBlock(
        self, original_node: cst.IndentedBlock, updated_node: cst.IndentedBlock
    ) -> cst.IndentedBlock:
        if self.applied or self.enclosing_try_line:
            return updated_node
        for index, statement in enumerate(original_node.body):
            if self._line_of(statement) != self.target_line:
                continue
            self.applied = True
            body = list(updated_node.body)
            body[index] = self._wrap(body[index])
            return updated_node.with_changes(body=body)
        return updated_node

    def leave_FunctionDef(
        self, original_node: cst.FunctionDef, updated_node: cst.FunctionDef
    ) -> cst.FunctionDef:
        """One-line bodies (``def f(): raise X()``) have no IndentedBlock to visit."""
        if self.applied or self.enclosing_try_line:
            return updated_node
        if not isinstance(updated_node.body, cst.SimpleStatementSuite):
            return updated_node
        if self._line_of(original_node.body) != self.target_line:
            return updated_node
        self.applied = True
        line = cst.SimpleStatementLine(body=list(updated_node.body.body))
        return updated_node.with_changes(body=cst.IndentedBlock(body=[self._wrap(line)]))
