"""Expansion orchestration: one declaration, or every annotated item in a file."""
from __future__ import annotations

from typing import Iterable, List, Optional

from structurray.backend.emitter import render_struct
from structurray.compiler.scanner import AnnotatedItem, find_annotated_items, find_serialize_impls
from structurray.internals import errors as er
from structurray.internals.parse_errors import handle_parse_exception
from structurray.internals.report import Reporter, Span, span_at
from structurray.semantics.arguments import parse_arguments
from structurray.semantics.assembler import assemble, check_skeleton
from structurray.semantics.ast import StructSkeleton
from structurray.semantics.ast_builder import parse_skeleton
from structurray.semantics.exceptions import DuplicateFauxArray, ExpansionError
from structurray.semantics.synthesizer import synthesize


def expand_declaration(raw_args: str, declaration: str, *, serialize_impls: Iterable[str] = (),
                       dump_parse: bool = False) -> StructSkeleton:
    """Run the whole chain and return the assembled skeleton.

    Arguments are validated before the declaration is parsed, and the
    declaration is validated before any field is synthesized.

    Raises:
        ExpansionError: any argument or declaration error.
    """
    serialize_impls = frozenset(serialize_impls)
    arguments = parse_arguments(raw_args)
    skeleton = parse_skeleton(declaration, dump_parse=dump_parse)
    check_skeleton(skeleton, serialize_impls)
    fields = synthesize(arguments.field_type, arguments.field_count)
    return assemble(skeleton, fields, serialize_impls=serialize_impls, validate=False)


def expand(raw_args: str, declaration: str, *, serialize_impls: Iterable[str] = (),
           indent: str = "") -> str:
    """Expand ``#[faux_array(raw_args)]`` applied to `declaration` into Rust text."""
    assembled = expand_declaration(raw_args, declaration, serialize_impls=serialize_impls)
    return render_struct(assembled, indent=indent)


# ------------------------
# File mode
# ------------------------

def _offset_in(text: str, line: int, col: int) -> int:
    """Offset of a 1-based (line, col) position inside `text`."""
    pos = 0
    for _ in range(line - 1):
        nl = text.find("\n", pos)
        if nl < 0:
            return len(text)
        pos = nl + 1
    return min(pos + col - 1, len(text))


def _newline_of(src: str) -> str:
    """Line ending of the first line, "\\n" when there is none."""
    first = src.find("\n")
    if first > 0 and src[first - 1] == "\r":
        return "\r\n"
    return "\n"


def _file_span(src: str, item: AnnotatedItem, exc: ExpansionError) -> Span:
    """Where an error raised for `item` should point in the whole file.

    Argument errors point at the faux_array attribute. Declaration errors
    carry a span relative to the item's skeleton text, which is mapped back
    through the removed attribute.
    """
    if exc.code.startswith("CE1"):
        return span_at(src, item.attr_start, item.attr_end)
    if exc.span is None:
        return span_at(src, item.start)

    start = item.source_offset(_offset_in(item.skeleton, exc.span.line, exc.span.col))
    end = item.source_offset(_offset_in(item.skeleton, exc.span.end_line, exc.span.end_col))
    return span_at(src, start, max(start + 1, end))


def expand_source(src: str, reporter: Reporter, *, dump_parse: bool = False,
                  dump_ast: bool = False) -> Optional[str]:
    """Expand every faux_array item in a Rust source file.

    Every item is processed so all errors are reported together. Returns the
    rewritten source, or None if any item failed.
    """
    items = find_annotated_items(src)
    if not items:
        er.emit(reporter, er.ERR.CW1001, None)
        return src

    serialize_impls = find_serialize_impls(src)
    newline = _newline_of(src)
    chunks: List[str] = []
    last = 0
    failed = False

    for item in items:
        if item.duplicates:
            dup_start, dup_end = item.duplicates[0]
            handle_parse_exception(DuplicateFauxArray(), reporter, span=span_at(src, dup_start, dup_end))
            failed = True
            continue

        try:
            assembled = expand_declaration(item.args, item.skeleton,
                                           serialize_impls=serialize_impls,
                                           dump_parse=dump_parse)
        except ExpansionError as exc:
            handle_parse_exception(exc, reporter, span=_file_span(src, item, exc))
            failed = True
            continue

        if dump_ast:
            print(assembled)
            print()

        chunks.append(src[last:item.start])
        chunks.append(render_struct(assembled, indent=item.indent, newline=newline))
        last = item.end

    if failed:
        return None

    chunks.append(src[last:])
    return "".join(chunks)
