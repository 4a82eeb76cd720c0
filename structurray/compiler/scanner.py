"""Locate ``#[faux_array(...)]`` items in Rust source text.

Scanning runs over a masked copy of the source in which comments and string,
byte-string, raw-string and char literals are blanked out (newlines kept), so
offsets line up with the input while brackets and ``#[`` inside literals
are ignored. Bracket depth is tracked the same way the argument splitter does
it, one counter for every kind of bracket.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

ATTR_START_RE = re.compile(r"#\s*\[")
# The argument list may use any delimiter, or be missing entirely (`#[faux_array]`)
FAUX_ARRAY_RE = re.compile(
    r"\s*(?:structurray\s*::\s*)?faux_array\s*"
    r"(?:\(([\s\S]*)\)|\[([\s\S]*)\]|\{([\s\S]*)\}|=[\s\S]*)?\s*"
)
SERIALIZE_IMPL_RE = re.compile(
    r"\bimpl\b[^;{]*?\b(?:Serialize|Deserialize)\b(?:\s*<[^;{]*?>)?\s+for\s+([A-Za-z_][A-Za-z0-9_]*)"
)
_RAW_STRING_RE = re.compile(r'b?r(#*)"')
_CHAR_RE = re.compile(r"b?'(?:\\(?:x[0-9A-Fa-f]{2}|u\{[0-9A-Fa-f]{1,6}\}|.)|[^'\\\n])'")

_OPENERS = "([{"
_CLOSERS = ")]}"


@dataclass
class AnnotatedItem:
    """An item carrying a faux_array attribute.

    All offsets index the scanned source.
    """
    start: int          # first outer attribute of the item
    end: int            # just past the closing brace or semicolon
    attr_start: int     # the faux_array attribute itself
    attr_end: int
    args: str           # text inside the attribute's delimiters, "" when it has none
    skeleton: str       # item text with the faux_array attribute removed
    indent: str         # leading whitespace of the item's first line
    duplicates: List[Tuple[int, int]] = field(default_factory=list)  # further faux_array attributes

    def source_offset(self, skeleton_offset: int) -> int:
        """Map an offset in `skeleton` back to the scanned source."""
        head = self.attr_start - self.start
        if skeleton_offset < head:
            return self.start + skeleton_offset
        return self.start + skeleton_offset + (self.attr_end - self.attr_start)


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _string_end(src: str, i: int) -> int:
    """Index just past the string literal whose opening quote is at i."""
    j = i + 1
    n = len(src)
    while j < n:
        if src[j] == "\\":
            j += 2
        elif src[j] == '"':
            return j + 1
        else:
            j += 1
    return n


def _block_comment_end(src: str, i: int) -> int:
    """Block comments nest in Rust."""
    depth = 0
    j = i
    n = len(src)
    while j < n:
        if src.startswith("/*", j):
            depth += 1
            j += 2
        elif src.startswith("*/", j):
            depth -= 1
            j += 2
            if depth == 0:
                return j
        else:
            j += 1
    return n


def mask_source(src: str) -> str:
    """Blank out comments and literals, keeping every offset and newline."""
    out = list(src)
    n = len(src)

    def blank(a: int, b: int) -> None:
        for k in range(a, b):
            if out[k] != "\n":
                out[k] = " "

    i = 0
    while i < n:
        ch = src[i]
        if src.startswith("//", i):
            j = src.find("\n", i)
            j = n if j < 0 else j
            blank(i, j)
            i = j
        elif src.startswith("/*", i):
            j = _block_comment_end(src, i)
            blank(i, j)
            i = j
        elif ch == '"':
            j = _string_end(src, i)
            blank(i, j)
            i = j
        elif ch == "'" or (ch == "b" and src.startswith("b'", i)):
            m = _CHAR_RE.match(src, i)
            if m:
                blank(i, m.end())
                i = m.end()
            else:
                # Lifetime
                i += 1
        elif _is_ident_char(ch):
            raw = _RAW_STRING_RE.match(src, i) if ch in "br" else None
            if raw:
                closing = '"' + raw.group(1)
                j = src.find(closing, raw.end())
                j = n if j < 0 else j + len(closing)
                blank(i, j)
                i = j
            elif src.startswith('b"', i):
                j = _string_end(src, i + 1)
                blank(i, j)
                i = j
            else:
                # Whole identifier, so a trailing r or b is never read as a prefix
                j = i
                while j < n and _is_ident_char(src[j]):
                    j += 1
                i = j
        else:
            i += 1
    return "".join(out)


def matching_close(masked: str, open_pos: int) -> int:
    """Index of the bracket closing the one at open_pos, or -1."""
    depth = 0
    for j in range(open_pos, len(masked)):
        ch = masked[j]
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
            if depth == 0:
                return j
    return -1


def item_end(masked: str, start: int) -> int:
    """End of the item starting at `start`: its top-level `;` or braced body."""
    depth = 0
    n = len(masked)
    for i in range(start, n):
        ch = masked[i]
        if ch == "{" and depth == 0:
            close = matching_close(masked, i)
            return n if close < 0 else close + 1
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
            if depth < 0:
                # The enclosing block closed first
                return i
        elif ch == ";" and depth == 0:
            return i + 1
    return n


def _skip_ws(masked: str, i: int) -> int:
    n = len(masked)
    while i < n and masked[i].isspace():
        i += 1
    return i


def _attribute_at(masked: str, pos: int) -> Optional[Tuple[int, int, int]]:
    """(start, bracket, end) of the outer attribute starting exactly at pos."""
    m = ATTR_START_RE.match(masked, pos)
    if not m:
        return None
    bracket = m.end() - 1
    close = matching_close(masked, bracket)
    if close < 0:
        return None
    return m.start(), bracket, close + 1


def next_attribute_run(masked: str, pos: int) -> List[Tuple[int, int, int]]:
    """The first run of adjacent outer attributes at or after pos (empty if none)."""
    m = ATTR_START_RE.search(masked, pos)
    if not m:
        return []
    first = _attribute_at(masked, m.start())
    if first is None:
        return []
    run = [first]
    while True:
        nxt = _attribute_at(masked, _skip_ws(masked, run[-1][2]))
        if nxt is None:
            return run
        run.append(nxt)


def _argument_text(src: str, match: re.Match) -> str:
    """Delimited argument list of a faux_array match, read from the unmasked source.

    `#[faux_array]` and `#[faux_array = ...]` have no list and give "".
    """
    for group in (1, 2, 3):
        if match.group(group) is not None:
            return src[match.start(group):match.end(group)]
    return ""


def find_annotated_items(src: str) -> List[AnnotatedItem]:
    """Every item in `src` annotated with faux_array, in source order."""
    masked = mask_source(src)
    items: List[AnnotatedItem] = []

    pos = 0
    while True:
        run = next_attribute_run(masked, pos)
        if not run:
            return items
        pos = run[-1][2]

        markers = []
        for start, bracket, end in run:
            match = FAUX_ARRAY_RE.fullmatch(masked, bracket + 1, end - 1)
            if match:
                markers.append((start, end, _argument_text(src, match)))
        if not markers:
            continue

        run_start = run[0][0]
        attr_start, attr_end, args = markers[0]
        end = item_end(masked, _skip_ws(masked, pos))

        line_start = src.rfind("\n", 0, run_start) + 1
        indent = re.match(r"[ \t]*", src[line_start:run_start]).group()

        items.append(AnnotatedItem(
            start=run_start,
            end=end,
            attr_start=attr_start,
            attr_end=attr_end,
            args=args,
            skeleton=src[run_start:attr_start] + src[attr_end:end],
            indent=indent,
            duplicates=[(s, e) for s, e, _ in markers[1:]],
        ))
        # Nothing inside an expanded item is scanned again
        pos = end


def find_serialize_impls(src: str) -> Set[str]:
    """Names of types with a hand-written serde impl in `src`."""
    masked = mask_source(src)
    return {m.group(1) for m in SERIALIZE_IMPL_RE.finditer(masked)}
