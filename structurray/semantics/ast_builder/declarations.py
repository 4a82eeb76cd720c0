"""Struct skeleton, attribute and generics parsing."""
from __future__ import annotations
import re
from typing import TYPE_CHECKING, List, Optional, Tuple

from lark import Tree, Token

from structurray.semantics.ast import (
    Attribute,
    FieldDescriptor,
    GenericParam,
    StructSkeleton,
    TypeRef,
    Visibility,
)
from structurray.semantics.ast_builder.tree_navigation import (
    first_name,
    first_token,
    first_tree,
    trees,
)
from structurray.internals.report import span_of
from structurray.semantics.arguments import normalize, split_top_level

if TYPE_CHECKING:
    from structurray.semantics.ast_builder.builder import ASTBuilder


_BODY_STYLES = {
    "braced_body": "braced",
    "tuple_body": "tuple",
    "unit_body": "unit",
}

_GENERIC_KINDS = {
    "lifetime_param": "lifetime",
    "type_param": "type",
    "const_param": "const",
}

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_GATED_ATTR_RE = re.compile(r"\s*((?:[A-Za-z_]\w*\s*::\s*)*[A-Za-z_]\w*)([\s\S]*)")


def parse_structdef(t: Tree, attributes: List[Attribute], visibility: Optional[Visibility],
                    ast_builder: 'ASTBuilder') -> StructSkeleton:
    """Parse struct_def: "struct" NAME [generics] struct_body"""
    assert t.data == "struct_def"

    name_tok = first_name(t.children)
    if name_tok is None:
        raise NotImplementedError("struct_def: missing struct NAME")

    generics_node = first_tree(t.children, "generics")
    body = next(c for c in t.children if isinstance(c, Tree) and c.data in _BODY_STYLES)

    where_node = first_tree(body.children, "where_clause")

    return StructSkeleton(
        loc=span_of(t),
        name=str(name_tok),
        attributes=attributes,
        visibility=visibility,
        generics=parse_generics(generics_node, ast_builder) if generics_node else [],
        where_clause=parse_where_clause(where_node, ast_builder) if where_node else None,
        fields=parse_fields(body, ast_builder),
        style=_BODY_STYLES[body.data],
    )


def parse_fields(body: Tree, ast_builder: 'ASTBuilder') -> List[FieldDescriptor]:
    """Fields already written in the skeleton.

    Named fields keep their own name as key; tuple fields are keyed by position,
    as serde would.
    """
    fields: List[FieldDescriptor] = []

    named = first_tree(body.children, "named_fields")
    if named is not None:
        for field in trees(named.children, "named_field"):
            name = str(first_name(field.children))
            ty = ast_builder.type_ref(field.children[-1])
            fields.append(FieldDescriptor(identifier=name, external_key=name, ty=ty))

    positional = first_tree(body.children, "tuple_fields")
    if positional is not None:
        for position, field in enumerate(trees(positional.children, "tuple_field")):
            ty = ast_builder.type_ref(field.children[-1])
            fields.append(FieldDescriptor(identifier=str(position), external_key=str(position), ty=ty))

    return fields


def parse_attribute(t: Tree, ast_builder: 'ASTBuilder') -> Attribute:
    """Parse attribute: "#" "[" attr_path [attr_input] "]" | DOC_COMMENT"""
    assert t.data == "attribute"

    doc = first_token(t.children)
    if doc is not None and doc.type == "DOC_COMMENT":
        return Attribute(loc=span_of(doc), text=str(doc).rstrip(), path="doc")

    path_node = first_tree(t.children, "attr_path")
    path = "::".join(str(tok) for tok in path_node.children if isinstance(tok, Token))

    names: List[str] = []
    for child in t.children:
        if isinstance(child, Tree) and child is not path_node:
            names.extend(str(tok) for tok in child.scan_values(
                lambda v: isinstance(v, Token) and v.type == "NAME"))

    attribute = Attribute(loc=span_of(t), text=ast_builder.text_of(t), path=path, names=names)
    input_node = first_tree(t.children, "delim_tt")
    if path == "cfg_attr" and input_node is not None:
        attribute.cfg, attribute.gated = parse_cfg_attr(ast_builder.text_of(input_node)[1:-1])
    return attribute


def parse_cfg_attr(inner: str) -> Tuple[Optional[str], List[Attribute]]:
    """Split ``cfg_attr(predicate, attr, ...)`` input into the predicate and the gated attributes.

    Gated attributes are read from their text, one level deep.
    """
    segments = [s for s in split_top_level(inner) if s.strip()]
    if not segments:
        return None, []

    gated: List[Attribute] = []
    for segment in segments[1:]:
        m = _GATED_ATTR_RE.fullmatch(segment)
        if m is None:
            continue
        gated.append(Attribute(
            loc=None,
            text=normalize(segment),
            path="".join(m.group(1).split()),
            names=_IDENT_RE.findall(m.group(2)),
        ))
    return normalize(segments[0]), gated


def parse_visibility(t: Tree, ast_builder: 'ASTBuilder') -> Visibility:
    """Parse visibility: "pub" [vis_restriction]"""
    assert t.data == "visibility"
    return Visibility(loc=span_of(t), text=ast_builder.normalized_text_of(t).replace("pub (", "pub("))


def parse_generics(t: Tree, ast_builder: 'ASTBuilder') -> List[GenericParam]:
    """Parse generics: "<" [generic_params] ">"

    Each parameter keeps its bounds and default as written, e.g. ``T: Clone = u8``.
    """
    params_node = first_tree(t.children, "generic_params")
    if params_node is None:
        return []

    params: List[GenericParam] = []
    for param in params_node.children:
        if not isinstance(param, Tree) or param.data not in _GENERIC_KINDS:
            continue
        kind = _GENERIC_KINDS[param.data]
        if kind == "lifetime":
            name_tok = first_token(param.children)
        else:
            name_tok = first_name(param.children)
        params.append(GenericParam(
            loc=span_of(param),
            kind=kind,
            name=str(name_tok),
            text=ast_builder.normalized_text_of(param),
        ))
    return params


def parse_where_clause(t: Tree, ast_builder: 'ASTBuilder') -> str:
    """Parse where_clause into its normalized text, without a trailing comma."""
    assert t.data == "where_clause"
    return ast_builder.normalized_text_of(t).rstrip(",").rstrip()


def describe_other_item(t: Tree) -> tuple[str, str]:
    """Return (kind, name) for a non-struct item such as enum_item."""
    kind = t.data[:-len("_item")] if t.data.endswith("_item") else t.data
    name = next(t.scan_values(lambda v: isinstance(v, Token) and v.type == "NAME"), "?")
    return kind, str(name)


def type_ref_from_tree(t: Tree, text: str) -> TypeRef:
    return TypeRef(text=text, tree=t, loc=span_of(t))
