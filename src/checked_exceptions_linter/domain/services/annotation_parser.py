"""
Tokenizer/parser for the exception-contract markup embedded in docstrings.

Grammar (tag names and markers are case-insensitive)::

    <exception cref="TypeRef">[Get.|Set. ][Ignore. ]free text</exception>
    <exception cref="TypeRef"/>
    <inheritdoc/>

Anything else in the docstring is prose and is skipped.
"""

from dataclasses import dataclass

from checked_exceptions_linter.domain.constants import (
    CREF_ATTRIBUTE,
    EXCEPTION_TAG,
    INHERITDOC_TAG,
)
from checked_exceptions_linter.domain.entities import AccessorScope
from checked_exceptions_linter.domain.exceptions import AnnotationSyntaxError

_CLOSE_EXCEPTION = "/" + EXCEPTION_TAG
_IGNORE_WORD = "ignore"
_NAME_CHARS = frozenset("_-:.")


@dataclass(frozen=True)
class AnnotationEntry:
    """
    One parsed tag with the character offsets the comment synthesizer edits.

    Offsets index into the text passed to ``AnnotationParser.parse``:
    ``start``/``end`` bound the whole tag, ``body_start``/``body_end`` its
    content, ``accessor_end`` sits right after a "Get."/"Set." tag and
    ``marker_start`` is the first non-blank body character after it.
    """

    tag: str
    start: int
    end: int
    cref: str | None = None
    accessor: AccessorScope = AccessorScope.NONE
    ignore: bool = False
    text: str = ""
    body_start: int = 0
    body_end: int = 0
    accessor_end: int | None = None
    marker_start: int = 0
    self_closing: bool = False

    @property
    def is_exception(self) -> bool:
        return self.tag == EXCEPTION_TAG

    @property
    def is_inheritdoc(self) -> bool:
        return self.tag == INHERITDOC_TAG


class AnnotationParser:
    """
    Explicit scanner over docstring text.

    ``parse(text)`` raises AnnotationSyntaxError on a broken <exception> tag;
    ``parse(text, strict=False)`` skips the broken tag and keeps scanning.
    """

    def parse(self, text: str | None, strict: bool = True) -> list[AnnotationEntry]:
        """Return every <exception> and <inheritdoc> entry in document order."""
        if not text:
            return []
        entries: list[AnnotationEntry] = []
        pos = 0
        while True:
            lt = text.find("<", pos)
            if lt < 0:
                return entries
            name, name_end = self._read_name(text, lt + 1)
            lowered = name.lower()
            try:
                if lowered == EXCEPTION_TAG:
                    entry = self._parse_exception(text, lt, name_end)
                elif lowered == INHERITDOC_TAG:
                    entry = self._parse_inheritdoc(text, lt, name_end)
                elif lowered == _CLOSE_EXCEPTION:
                    raise AnnotationSyntaxError("unexpected </exception>", lt)
                else:
                    pos = lt + 1
                    continue
            except AnnotationSyntaxError:
                if strict:
                    raise
                pos = lt + 1
                continue
            entries.append(entry)
            pos = entry.end

    def has_inherit_marker(self, entries: list[AnnotationEntry]) -> bool:
        return any(entry.is_inheritdoc for entry in entries)

    # -- tags ---------------------------------------------------------------

    def _parse_exception(self, text: str, start: int, name_end: int) -> AnnotationEntry:
        attrs, open_end, self_closing = self._parse_attributes(text, name_end)
        cref = attrs.get(CREF_ATTRIBUTE)
        if cref is not None:
            cref = cref.strip() or None
        if self_closing:
            close_start = open_end - 2
            return AnnotationEntry(
                tag=EXCEPTION_TAG,
                start=start,
                end=open_end,
                cref=cref,
                body_start=close_start,
                body_end=close_start,
                marker_start=close_start,
                self_closing=True,
            )
        body_end, close_end = self._find_close(text, open_end)
        i = self._skip_ws(text, open_end, body_end)
        accessor = AccessorScope.NONE
        accessor_end: int | None = None
        for scope in (AccessorScope.GET, AccessorScope.SET):
            marker = scope.marker
            if text[i:i + len(marker)].lower() == marker.lower():
                accessor = scope
                accessor_end = i + len(marker)
                i = self._skip_ws(text, accessor_end, body_end)
                break
        marker_start = i
        ignore = False
        word_end = i + len(_IGNORE_WORD)
        if (
            word_end <= body_end
            and text[i:word_end].lower() == _IGNORE_WORD
            and (word_end == body_end or not text[word_end].isalnum())
        ):
            ignore = True
            i = word_end + 1 if word_end < body_end and text[word_end] == "." else word_end
        return AnnotationEntry(
            tag=EXCEPTION_TAG,
            start=start,
            end=close_end,
            cref=cref,
            accessor=accessor,
            ignore=ignore,
            text=text[i:body_end].strip(),
            body_start=open_end,
            body_end=body_end,
            accessor_end=accessor_end,
            marker_start=marker_start,
        )

    def _parse_inheritdoc(self, text: str, start: int, name_end: int) -> AnnotationEntry:
        _, open_end, _ = self._parse_attributes(text, name_end)
        return AnnotationEntry(tag=INHERITDOC_TAG, start=start, end=open_end)

    # -- lexing -------------------------------------------------------------

    def _parse_attributes(self, text: str, i: int) -> tuple[dict[str, str], int, bool]:
        """Read attributes up to '>' or '/>'. Returns (attrs, index after tag, self_closing)."""
        attrs: dict[str, str] = {}
        while True:
            i = self._skip_ws(text, i)
            if i >= len(text):
                raise AnnotationSyntaxError("unterminated tag", i)
            if text.startswith("/>", i):
                return attrs, i + 2, True
            if text[i] == ">":
                return attrs, i + 1, False
            name, j = self._read_name(text, i)
            if not name or name.startswith("/"):
                raise AnnotationSyntaxError("malformed attribute", i)
            j = self._skip_ws(text, j)
            if j >= len(text) or text[j] != "=":
                raise AnnotationSyntaxError("attribute without value", j)
            j = self._skip_ws(text, j + 1)
            if j >= len(text) or text[j] not in "\"'":
                raise AnnotationSyntaxError("unquoted attribute value", j)
            close = text.find(text[j], j + 1)
            if close < 0:
                raise AnnotationSyntaxError("unterminated attribute value", j)
            attrs[name.lower()] = text[j + 1:close]
            i = close + 1

    def _find_close(self, text: str, i: int) -> tuple[int, int]:
        """Locate </exception>. Returns (body end, index after the closing tag)."""
        while True:
            lt = text.find("<", i)
            if lt < 0:
                raise AnnotationSyntaxError("unterminated <exception>", i)
            name, name_end = self._read_name(text, lt + 1)
            lowered = name.lower()
            if lowered == EXCEPTION_TAG:
                raise AnnotationSyntaxError("nested <exception>", lt)
            if lowered == _CLOSE_EXCEPTION:
                j = self._skip_ws(text, name_end)
                if j < len(text) and text[j] == ">":
                    return lt, j + 1
                raise AnnotationSyntaxError("malformed </exception>", lt)
            i = lt + 1

    @staticmethod
    def _read_name(text: str, i: int) -> tuple[str, int]:
        j = i
        if j < len(text) and text[j] == "/":
            j += 1
        while j < len(text) and (text[j].isalnum() or text[j] in _NAME_CHARS):
            j += 1
        return text[i:j], j

    @staticmethod
    def _skip_ws(text: str, i: int, limit: int | None = None) -> int:
        end = len(text) if limit is None else limit
        while i < end and text[i].isspace():
            i += 1
        return i
