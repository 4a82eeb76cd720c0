"""Tree navigation utilities for traversing Lark parse trees."""
from __future__ import annotations
from typing import Callable, Iterator, List, Optional
from lark import Tree, Token


def first(children: List[object], pred: Callable) -> Optional[object]:
    """Find first child matching predicate."""
    for ch in children:
        if pred(ch):
            return ch
    return None


def first_name(children: List[object]) -> Optional[Token]:
    """Get first NAME token from children."""
    return first(children, lambda c: isinstance(c, Token) and c.type == "NAME")  # type: ignore[return-value]


def first_token(children: List[object]) -> Optional[Token]:
    """Get first token of any type from children."""
    return first(children, lambda c: isinstance(c, Token))  # type: ignore[return-value]


def first_tree(children: List[object], data: str) -> Optional[Tree]:
    """Get first Tree child with specific data tag."""
    return first(children, lambda c: isinstance(c, Tree) and c.data == data)  # type: ignore[return-value]


def trees(children: List[object], data: str) -> Iterator[Tree]:
    """Yield every Tree child with a specific data tag."""
    for ch in children:
        if isinstance(ch, Tree) and ch.data == data:
            yield ch


def source_slice(source: str, node: object) -> str:
    """Source text covered by a tree or token (propagate_positions required)."""
    if isinstance(node, Token):
        return str(node)
    meta = node.meta  # type: ignore[attr-defined]
    if meta.empty:
        return ""
    return source[meta.start_pos:meta.end_pos]
