"""Lark parser setup for type expressions and annotated declarations."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from lark import Lark, Tree

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"

START_RULES = ("item", "type")

_parser: Optional[Lark] = None


def get_parser() -> Lark:
    """Get or create the shared LALR parser.

    One parser serves both entry points; callers pick the start rule per call.
    """
    global _parser
    if _parser is None:
        _parser = Lark.open(
            str(GRAMMAR_PATH),
            start=list(START_RULES),
            parser="lalr",
            propagate_positions=True,
            maybe_placeholders=False,
            lexer="basic",
        )
    return _parser


def parse_type_tree(text: str) -> Tree:
    """Parse a type expression such as ``Vec<Option<u8>>``.

    Raises:
        lark.UnexpectedInput: if the text is not a type.
    """
    return get_parser().parse(text, start="type")


def parse_item_tree(text: str, dump_parse: bool = False) -> Tree:
    """Parse an annotated item (attributes, visibility, declaration)."""
    tree = get_parser().parse(text, start="item")
    if dump_parse:
        print(tree.pretty())
    return tree
