"""Validation of the textual ``faux_array(Type, N)`` argument list."""
from __future__ import annotations

import re
import sys
from typing import List

from lark import UnexpectedInput

from structurray.internals.parser import parse_type_tree
from structurray.internals.report import span_of
from structurray.semantics.ast import Arguments, TypeRef
from structurray.semantics.base62 import U32_MAX
from structurray.semantics.exceptions import (
    MissingTypeArgument,
    MissingCountArgument,
    InvalidTypeArgument,
    InvalidCountArgument,
    CountConversionOverflow,
)

# Largest count a Python list can be pre-sized to on this platform.
SIZE_MAX = sys.maxsize

_COUNT_RE = re.compile(r"\+?([0-9]+)")

# Significant digits in U32_MAX; anything longer cannot fit
_MAX_COUNT_DIGITS = len(str(U32_MAX))

_OPENERS = "<([{"
_CLOSERS = ">)]}"


def split_top_level(text: str) -> List[str]:
    """Split on commas that are not nested inside <>, (), [] or {}.

    ``HashMap<String, u8>, 4`` splits into ``["HashMap<String, u8>", " 4"]``.
    The ``>`` of a ``->`` arrow does not close anything.
    """
    segments: List[str] = []
    depth = 0
    start = 0
    prev = ""
    for i, ch in enumerate(text):
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS and not (ch == ">" and prev == "-"):
            if depth > 0:
                depth -= 1
        elif ch == "," and depth == 0:
            segments.append(text[start:i])
            start = i + 1
        prev = ch
    segments.append(text[start:])
    return segments


def normalize(text: str) -> str:
    return " ".join(text.split())


def parse_type(text: str) -> TypeRef:
    """Parse the first argument into a TypeRef.

    Raises:
        InvalidTypeArgument: if the text is not a type expression.
    """
    source = text.strip()
    try:
        tree = parse_type_tree(source)
    except UnexpectedInput as e:
        raise InvalidTypeArgument(source) from e
    return TypeRef(text=normalize(source), tree=tree, loc=span_of(tree))


def parse_count(text: str) -> int:
    """Parse the second argument as a u32 and check it against SIZE_MAX."""
    source = text.strip()
    match = _COUNT_RE.fullmatch(source)
    if not match:
        raise InvalidCountArgument(source, max_count=U32_MAX)
    # Leading zeros are accepted, but int() must never see an unbounded string
    digits = match.group(1).lstrip("0") or "0"
    if len(digits) > _MAX_COUNT_DIGITS:
        raise InvalidCountArgument(source, max_count=U32_MAX)
    count = int(digits)
    if count > U32_MAX:
        raise InvalidCountArgument(source, max_count=U32_MAX)
    if count > SIZE_MAX:
        raise CountConversionOverflow(count, size_max=SIZE_MAX)
    return count


def parse_arguments(raw_args: str) -> Arguments:
    """Turn ``"T, 3"`` into Arguments(field_type=T, field_count=3).

    Segments after the second are not inspected.

    Raises:
        MissingTypeArgument: the argument list (or its first segment) is blank.
        MissingCountArgument: no top-level comma was found.
        InvalidTypeArgument: the first segment is not a type.
        InvalidCountArgument: the second segment is not a u32 literal.
        CountConversionOverflow: the count does not fit the platform size type.
    """
    if not raw_args.strip():
        raise MissingTypeArgument()

    segments = split_top_level(raw_args)
    if len(segments) < 2:
        raise MissingCountArgument(raw_args.strip())

    type_text, count_text = segments[0], segments[1]
    if not type_text.strip():
        raise MissingTypeArgument()

    field_type = parse_type(type_text)
    field_count = parse_count(count_text)
    return Arguments(loc=None, field_type=field_type, field_count=field_count)
