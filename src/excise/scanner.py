"""Locate top-level import declarations in TypeScript/JavaScript source text.

Only text positions are computed here; nothing is rewritten in place. Comments
are blanked out first (keeping offsets and newlines intact) so that the import
pattern never has to reason about them, then a brace-depth aware pass finds the
``import`` keywords that start a module-level declaration.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Sequence

IMPORT_RE = re.compile(
    r"""
    import(?![\w$])(?!\s*[.(])\s*
    (?:(?P<clause>[^'"`;()=]*?)\s*\bfrom\s*)?
    (?P<quote>['"])(?P<specifier>[^'"\r\n]*)(?P=quote)
    (?:\s*(?:with|assert)\s*\{[^{}]*\})?
    [ \t]*;?
    """,
    re.VERBOSE,
)
KEYWORD_RE = re.compile(r"(?<![\w$.])import(?![\w$])")
TYPE_PREFIX_RE = re.compile(r"^type\s+(?=\S)")
AS_RE = re.compile(r"\s+as\s+")
IDENT_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_$"
)
# a slash after one of these starts a regex literal, not a division
REGEX_PRECEDERS = frozenset("([{,;:=!&|?+-*%<>~^}")
REGEX_KEYWORDS = frozenset(
    {
        "return",
        "typeof",
        "case",
        "do",
        "else",
        "in",
        "instanceof",
        "new",
        "delete",
        "void",
        "throw",
        "yield",
        "await",
        "of",
    }
)


@dataclass(frozen=True)
class ImportDeclaration:
    specifier: str
    default_name: str | None
    namespace_name: str | None
    named_names: tuple[str, ...]
    start: int
    end: int
    line: int

    @property
    def imported_names(self) -> list[str]:
        names = [n for n in (self.default_name, self.namespace_name) if n]
        names.extend(self.named_names)
        return names


def list_imports(text: str) -> list[ImportDeclaration]:
    masked = mask_comments(text)
    declarations: list[ImportDeclaration] = []
    for offset in _top_level_keyword_offsets(masked, "import"):
        match = IMPORT_RE.match(masked, offset)
        if match is None:
            continue
        if match.group("clause") and KEYWORD_RE.search(match.group("clause")):
            continue
        default_name, namespace_name, named = _parse_clause(match.group("clause"))
        start, end = _removal_span(text, match.start(), match.end())
        declarations.append(
            ImportDeclaration(
                specifier=match.group("specifier"),
                default_name=default_name,
                namespace_name=namespace_name,
                named_names=tuple(named),
                start=start,
                end=end,
                line=text.count("\n", 0, match.start()) + 1,
            )
        )
    return declarations


def remove_declarations(text: str, declarations: Iterable[ImportDeclaration]) -> str:
    spans: list[list[int]] = []
    for decl in sorted(declarations, key=lambda d: d.start):
        if spans and decl.start <= spans[-1][1]:
            spans[-1][1] = max(spans[-1][1], decl.end)
        else:
            spans.append([decl.start, decl.end])

    pieces: list[str] = []
    cursor = 0
    for start, end in spans:
        # declarations sharing a line take its newline once they are all gone
        if text[end - 1 : end] != "\n":
            start, end = _removal_span(text, start, end)
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)


def mask_comments(text: str) -> str:
    """Replace comment bodies with spaces, keeping string literals and offsets."""
    chars = list(text)
    length = len(text)
    i = 0
    while i < length:
        ch = text[i]
        if ch == "/" and text.startswith("//", i):
            end = text.find("\n", i)
            end = length if end == -1 else end
            _blank(chars, i, end)
            i = end
        elif ch == "/" and text.startswith("/*", i):
            end = text.find("*/", i + 2)
            end = length if end == -1 else end + 2
            _blank(chars, i, end)
            i = end
        elif ch == "/" and _regex_allowed(chars, i):
            i = _skip_regex(text, i)
        elif ch in "'\"":
            i = _skip_string(text, i)
        elif ch == "`":
            i = _skip_template(text, i)
        else:
            i += 1
    return "".join(chars)


def _blank(chars: list[str], start: int, end: int) -> None:
    for index in range(start, end):
        if chars[index] not in "\r\n":
            chars[index] = " "


def _skip_string(text: str, i: int) -> int:
    quote = text[i]
    i += 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n":
            # unterminated literal, most likely a regex; stop at the line end
            return i
        i += 1
    return len(text)


def _skip_template(text: str, i: int) -> int:
    i += 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "`":
            return i + 1
        if ch == "$" and text.startswith("${", i):
            i = _skip_braces(text, i + 2)
            continue
        i += 1
    return len(text)


def _regex_allowed(chars: Sequence[str], i: int) -> bool:
    j = i - 1
    while j >= 0 and chars[j].isspace():
        j -= 1
    if j < 0 or chars[j] in REGEX_PRECEDERS:
        return True
    if chars[j] not in IDENT_CHARS:
        return False
    start = j
    while start > 0 and chars[start - 1] in IDENT_CHARS:
        start -= 1
    return "".join(chars[start : j + 1]) in REGEX_KEYWORDS


def _skip_regex(text: str, i: int) -> int:
    """Return the offset past the regex literal at ``i``, flags included."""
    j = i + 1
    in_class = False
    while j < len(text):
        ch = text[j]
        if ch == "\\":
            j += 2
            continue
        if ch == "\n":
            # not a regex after all; treat the slash as an operator
            return i + 1
        if in_class:
            in_class = ch != "]"
        elif ch == "[":
            in_class = True
        elif ch == "/":
            j += 1
            while j < len(text) and text[j] in IDENT_CHARS:
                j += 1
            return j
        j += 1
    return i + 1


def _skip_braces(text: str, i: int) -> int:
    depth = 1
    while i < len(text):
        ch = text[i]
        if ch in "'\"":
            i = _skip_string(text, i)
            continue
        if ch == "`":
            i = _skip_template(text, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return len(text)


def _top_level_keyword_offsets(masked: str, keyword: str) -> list[int]:
    offsets: list[int] = []
    depth = 0
    i = 0
    length = len(masked)
    while i < length:
        ch = masked[i]
        if ch in "'\"":
            i = _skip_string(masked, i)
        elif ch == "`":
            i = _skip_template(masked, i)
        elif ch == "/" and _regex_allowed(masked, i):
            i = _skip_regex(masked, i)
        elif ch == "{":
            depth += 1
            i += 1
        elif ch == "}":
            depth = max(depth - 1, 0)
            i += 1
        elif ch in IDENT_CHARS:
            start = i
            while i < length and masked[i] in IDENT_CHARS:
                i += 1
            if (
                depth == 0
                and masked[start:i] == keyword
                and not _preceded_by_dot(masked, start)
            ):
                offsets.append(start)
        else:
            i += 1
    return offsets


def _preceded_by_dot(masked: str, offset: int) -> bool:
    i = offset - 1
    while i >= 0 and masked[i].isspace():
        i -= 1
    return i >= 0 and masked[i] == "." and masked[max(i - 2, 0) : i + 1] != "..."


def _parse_clause(clause: str | None) -> tuple[str | None, str | None, list[str]]:
    if not clause:
        return None, None, []
    clause = TYPE_PREFIX_RE.sub("", clause.strip())
    named: list[str] = []
    brace_start = clause.find("{")
    if brace_start != -1:
        brace_end = clause.find("}", brace_start)
        brace_end = len(clause) if brace_end == -1 else brace_end
        for part in clause[brace_start + 1 : brace_end].split(","):
            part = TYPE_PREFIX_RE.sub("", part.strip())
            if not part:
                continue
            named.append(AS_RE.split(part)[0].strip().strip("'\""))
        clause = clause[:brace_start] + clause[brace_end + 1 :]

    default_name: str | None = None
    namespace_name: str | None = None
    for part in clause.split(","):
        part = part.strip()
        if not part:
            continue
        if part.startswith("*"):
            namespace_name = AS_RE.split(part)[-1].strip()
        else:
            default_name = part
    return default_name, namespace_name, named


def _removal_span(text: str, start: int, end: int) -> tuple[int, int]:
    line_start = text.rfind("\n", 0, start) + 1
    owns_line_start = text[line_start:start].strip() == ""
    if owns_line_start:
        start = line_start
    cursor = end
    while cursor < len(text) and text[cursor] in " \t":
        cursor += 1
    if not owns_line_start:
        return start, cursor
    if text.startswith("//", cursor):
        newline = text.find("\n", cursor)
        cursor = len(text) if newline == -1 else newline
        if text[cursor - 1 : cursor] == "\r":
            cursor -= 1
    if text.startswith("\r\n", cursor):
        return start, cursor + 2
    if cursor < len(text) and text[cursor] == "\n":
        return start, cursor + 1
    return start, cursor
