"""ASTBuilder: Lark parse trees to structurray AST nodes.

The builder is bound to the source text it was parsed from, because several
nodes (attributes, generics, types) keep their source text verbatim rather
than being re-rendered from the tree.

Declarations: semantics.ast_builder.declarations
Utilities:    semantics.ast_builder.tree_navigation
"""
from __future__ import annotations
from typing import List, Optional

from lark import Tree, UnexpectedInput

from structurray.internals.parse_errors import improve_parse_error
from structurray.internals.parser import parse_item_tree
from structurray.internals.report import Span, span_of
from structurray.semantics.ast import Attribute, StructSkeleton, TypeRef, Visibility
from structurray.semantics.ast_builder.declarations import (
    describe_other_item,
    parse_attribute,
    parse_structdef,
    parse_visibility,
    type_ref_from_tree,
)
from structurray.semantics.ast_builder.tree_navigation import source_slice
from structurray.semantics.exceptions import DeclarationSyntaxError, NotAStruct


class ASTBuilder:
    def __init__(self, source: str):
        self.source = source

    # ------------------------
    # Source text helpers
    # ------------------------

    def text_of(self, node: object) -> str:
        return source_slice(self.source, node)

    def normalized_text_of(self, node: object) -> str:
        return " ".join(self.text_of(node).split())

    def type_ref(self, t: Tree) -> TypeRef:
        return type_ref_from_tree(t, self.normalized_text_of(t))

    # ------------------------
    # Items
    # ------------------------

    def build(self, tree: Tree) -> StructSkeleton:
        """Build a StructSkeleton from an ``item`` tree.

        Raises:
            NotAStruct: the item is an enum, fn, union or other non-struct item.
        """
        assert tree.data == "item"

        attributes: List[Attribute] = []
        visibility: Optional[Visibility] = None
        for child in tree.children:
            if not isinstance(child, Tree):
                continue
            if child.data == "attribute":
                attributes.append(parse_attribute(child, self))
            elif child.data == "visibility":
                visibility = parse_visibility(child, self)
            elif child.data == "struct_def":
                return parse_structdef(child, attributes, visibility, self)
            else:
                kind, name = describe_other_item(child)
                raise NotAStruct(kind, name, span=span_of(child))

        raise NotImplementedError("item: missing declaration")


def parse_skeleton(source: str, dump_parse: bool = False) -> StructSkeleton:
    """Parse a declaration's source text into a StructSkeleton.

    Raises:
        DeclarationSyntaxError: the text is not a declaration we can read.
        NotAStruct: the declaration is not a struct.
    """
    try:
        tree = parse_item_tree(source, dump_parse=dump_parse)
    except UnexpectedInput as e:
        span = None
        line, column = getattr(e, "line", -1), getattr(e, "column", -1)
        # lark reports "?" or -1 when the position is unknown
        if isinstance(line, int) and isinstance(column, int) and line > 0:
            span = Span(line, column, line, column)
        raise DeclarationSyntaxError(improve_parse_error(e), span=span) from e
    return ASTBuilder(source).build(tree)
